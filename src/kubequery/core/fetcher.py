"""
资源获取

每种资源类型一次列表调用，逐个解码返回的对象。
单个对象解码失败只跳过该对象并记录日志（PartialDecode），不影响同批其他对象；
集群不可达等错误直接向上抛出，整批对象都无法解码时整个调用失败。
"""

from typing import Any, Dict, List, Optional

from loguru import logger
from kubernetes.client.rest import ApiException

from .query import QueryContext
from .resources import ResourceKind
from ..errors import ClusterError, PartialDecode
from ..k8s_client import ClusterContext, decode_object, list_raw


def _describe(item: Any) -> str:
    metadata = item.get("metadata") if isinstance(item, dict) else None
    if not isinstance(metadata, dict):
        return "<unknown>"
    name = metadata.get("name", "<unknown>")
    namespace = metadata.get("namespace")
    return f"{namespace}/{name}" if namespace else str(name)

def decode_item(context: ClusterContext, kind: ResourceKind, item: Dict[str, Any], index: int) -> Any:
    """解码单个对象，对象本身的数据错误抛出PartialDecode

    ValueError来自模型的客户端校验（必需字段缺失、枚举值非法），ApiException来自时间等字段的解析。
    其他异常说明解码器本身有问题，直接向上抛出。
    """
    try:
        return decode_object(context, item, kind.model)
    except (ValueError, ApiException) as e:
        raise PartialDecode(
            f"{kind.name} 第 {index} 个对象 ({_describe(item)}) 解码失败: {e}",
            kind=kind.name,
            index=index,
            details=str(e),
        )


def fetch(kind: ResourceKind, context: ClusterContext, query: Optional[QueryContext] = None) -> List[Any]:
    """获取一种资源的全部对象

    Args:
        kind: 资源类型
        context: 集群上下文
        query: 查询约束，namespace等值约束用于缩小列表范围

    Returns:
        List[Any]: 解码后的kubernetes模型对象，保持API返回顺序

    Raises:
        ClusterError / ClusterUnreachable: 列表调用失败，或者返回的对象全部无法解码
    """
    if kind.loader is not None:
        return kind.loader(context)

    namespace = None
    if query is not None and kind.namespaced:
        namespace = query.equality("namespace")

    items = list_raw(context, kind, namespace)
    resources = []
    failures = []
    for index, item in enumerate(items):
        try:
            resources.append(decode_item(context, kind, item, index))
        except PartialDecode as e:
            logger.warning(f"跳过无法解码的对象: {e.message}")
            failures.append(e)

    # 整批失败按调用失败处理
    if items and len(failures) == len(items):
        raise ClusterError(
            f"{kind.name} 列表中的 {len(items)} 个对象全部无法解码",
            {"kind": kind.name, "errors": [e.details for e in failures[:3]]},
        )
    return resources

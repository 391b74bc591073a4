"""
Kubernetes客户端

负责集群连接引导，并提供只读的列表/解码/发现接口：
- K8sClient.connect(): 加载凭据、测试连接、读取集群UID，返回不可变的ClusterContext
- list_raw(): 执行列表调用（内部处理分页），返回未解码的原始对象
- decode_object(): 把单个原始对象反序列化为kubernetes模型
- list_api_resources() / get_version_info(): API发现和版本信息
"""

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Dict, List, NamedTuple, Optional

from loguru import logger
from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config import ConfigException
from urllib3.exceptions import HTTPError as TransportHTTPError

from .config import KubeQueryConfig
from .core.schema import ClusterIdentity
from .errors import ClusterError, ClusterUnreachable, ConfigurationError

# 这些状态码说明集群不可达或凭据无效
UNREACHABLE_STATUSES = (0, 401, 403)


@dataclass(frozen=True)
class ClusterContext:
    """一次连接的只读上下文，显式传入每个资源获取函数"""
    api_client: client.ApiClient
    identity: ClusterIdentity
    request_timeout: float = 10.0
    page_size: int = 500


class APIResourceEntry(NamedTuple):
    """API发现结果中的一项"""
    group_version: str
    resource: client.V1APIResource


class _RawResponse:
    """ApiClient.deserialize只读取response.data

    kubernetes 37起deserialize改为接收响应文本和content_type，pyproject.toml限定了客户端版本
    """
    def __init__(self, payload: Any):
        self.data = json.dumps(payload)


def translate_api_error(error: Exception, action: str) -> ClusterError:
    """把底层异常转换为ClusterError/ClusterUnreachable"""
    if isinstance(error, ApiException):
        if error.status in UNREACHABLE_STATUSES:
            return ClusterUnreachable(f"{action}失败: {error.reason}", {"status": error.status})
        return ClusterError(f"{action}失败: {error.reason}", {"status": error.status})
    if isinstance(error, (TransportHTTPError, OSError)):
        return ClusterUnreachable(f"{action}失败: {error}")
    return ClusterError(f"{action}时发生错误: {error}")


class K8sClient:
    """Kubernetes客户端（连接引导）"""

    def __init__(self, config_obj: KubeQueryConfig):
        """初始化K8s客户端

        Args:
            config_obj: kubequery配置对象
        """
        self.config = config_obj
        self.context: Optional[ClusterContext] = None
        self.connected = False

        logger.info("K8s客户端初始化完成")

    async def connect(self) -> ClusterContext:
        """连接到K8s集群并返回ClusterContext"""
        loop = asyncio.get_running_loop()
        try:
            configuration = self._load_configuration()
            api_client = client.ApiClient(configuration)

            identity = await loop.run_in_executor(None, self._identify_cluster, api_client)

            self.context = ClusterContext(
                api_client=api_client,
                identity=identity,
                request_timeout=self.config.request_timeout,
                page_size=self.config.page_size,
            )
            self.connected = True
            logger.info(f"K8s客户端连接成功: 集群 {identity.name} ({identity.uid})")
            return self.context

        except (ConfigurationError, ClusterError):
            self.connected = False
            raise
        except Exception as e:
            self.connected = False
            logger.error(f"K8s客户端连接失败: {e}")
            raise translate_api_error(e, "连接集群")

    def _load_configuration(self) -> client.Configuration:
        """加载K8s凭据到独立的Configuration对象，不修改全局默认配置"""
        configuration = client.Configuration()
        try:
            if self.config.in_cluster:
                config.load_incluster_config(client_configuration=configuration)
                logger.info("使用集群内ServiceAccount凭据")
            else:
                kubeconfig_path = self.config.get_kubeconfig_path()
                config.load_kube_config(
                    config_file=kubeconfig_path,
                    context=self.config.kube_context,
                    client_configuration=configuration,
                )
                logger.info(f"使用kubeconfig: {kubeconfig_path or '默认路径'}")
        except ConfigException as e:
            raise ConfigurationError(f"加载K8s配置失败: {str(e)}")
        return configuration

    def _identify_cluster(self, api_client: client.ApiClient) -> ClusterIdentity:
        """测试连接并确定集群名称和UID"""
        timeout = self.config.request_timeout
        try:
            version = client.VersionApi(api_client).get_code(_request_timeout=timeout)
            logger.info(f"集群版本: {version.git_version}")

            # kube-system命名空间的UID在集群生命周期内不变，用作集群UID
            kube_system = client.CoreV1Api(api_client).read_namespace("kube-system", _request_timeout=timeout)
        except Exception as e:
            raise translate_api_error(e, "连接测试")

        return ClusterIdentity(name=self._cluster_name(), uid=kube_system.metadata.uid)

    def _cluster_name(self) -> str:
        if self.config.cluster_name:
            return self.config.cluster_name
        if not self.config.in_cluster:
            try:
                contexts, selected = config.list_kube_config_contexts(config_file=self.config.get_kubeconfig_path())
                if self.config.kube_context:
                    selected = next((c for c in contexts if c.get("name") == self.config.kube_context), None)
                if selected and selected.get("context", {}).get("cluster"):
                    return selected["context"]["cluster"]
            except ConfigException as e:
                logger.debug(f"无法从kubeconfig读取集群名称: {e}")
        return "kubernetes"

    async def disconnect(self):
        """断开连接"""
        if self.context is not None:
            self.context.api_client.close()
        self.connected = False
        logger.info("K8s客户端已断开连接")


def list_raw(context: ClusterContext, kind, namespace: Optional[str] = None) -> List[Dict[str, Any]]:
    """执行列表调用，返回未解码的对象

    分页在这里完成，调用方看到的是一次完整的列表结果。
    """
    api = kind.api(context.api_client)
    if namespace and kind.namespaced:
        method = getattr(api, kind.list_namespaced)
        base_kwargs = {"namespace": namespace}
    else:
        method = getattr(api, kind.list_all)
        base_kwargs = {}

    items: List[Dict[str, Any]] = []
    continue_token = None
    while True:
        kwargs = dict(base_kwargs, limit=context.page_size, _preload_content=False,
                      _request_timeout=context.request_timeout)
        if continue_token:
            kwargs["_continue"] = continue_token
        try:
            response = method(**kwargs)
            payload = json.loads(response.data)
        except ValueError as e:
            raise ClusterError(f"{kind.name} 列表响应无法解析: {e}")
        except Exception as e:
            raise translate_api_error(e, f"获取{kind.name}列表")

        items.extend(payload.get("items") or [])
        continue_token = (payload.get("metadata") or {}).get("continue")
        if not continue_token:
            break

    logger.debug(f"获取 {kind.name}: {len(items)} 个对象")
    return items


def decode_object(context: ClusterContext, item: Dict[str, Any], model: str) -> Any:
    """把单个原始对象反序列化为kubernetes模型，失败时抛出原始异常"""
    return context.api_client.deserialize(_RawResponse(item), model)


def list_api_resources(context: ClusterContext) -> List[APIResourceEntry]:
    """列出核心组和所有API组（首选版本）中的资源"""
    api_client = context.api_client
    timeout = context.request_timeout
    entries: List[APIResourceEntry] = []
    try:
        core = client.CoreV1Api(api_client).get_api_resources(_request_timeout=timeout)
        entries.extend(APIResourceEntry("v1", resource) for resource in core.resources or [])

        groups = client.ApisApi(api_client).get_api_versions(_request_timeout=timeout)
        for group in groups.groups or []:
            if group.preferred_version is None:
                continue
            group_version = group.preferred_version.group_version
            resource_list = api_client.call_api(
                f"/apis/{group_version}", "GET",
                header_params={"Accept": "application/json"},
                response_type="V1APIResourceList",
                auth_settings=["BearerToken"],
                _return_http_data_only=True,
                _request_timeout=timeout,
            )
            entries.extend(APIResourceEntry(group_version, resource) for resource in resource_list.resources or [])
    except Exception as e:
        raise translate_api_error(e, "获取API资源列表")
    return entries


def get_version_info(context: ClusterContext) -> List[client.VersionInfo]:
    """获取集群版本信息"""
    try:
        return [client.VersionApi(context.api_client).get_code(_request_timeout=context.request_timeout)]
    except Exception as e:
        raise translate_api_error(e, "获取集群版本")

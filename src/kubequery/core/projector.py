"""
行投影

把一个kubernetes资源对象展开为一行或多行：
- 恒等展开：每个资源一行
- 一对多展开：资源中某个嵌套列表的每个元素一行，父对象的标识列在每行重复

列的取值由显式的访问函数完成（attr/entry等），访问kubernetes模型上真实存在的属性，
属性名写错会直接抛AttributeError，而不是静默得到null。
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from .coercion import coerce
from .schema import Column, ColumnType, ClusterIdentity, Row
from ..errors import SchemaContractViolation


Accessor = Callable[[Any], Any]


@dataclass(frozen=True)
class Field:
    """一列及其取值方式"""
    column: Column
    accessor: Accessor
    required: bool = False

    @property
    def name(self) -> str:
        return self.column.name


@dataclass(frozen=True)
class Expand:
    """一对多展开规则

    elements: 从资源中取出待展开的元素序列，返回None或空序列表示没有子行
    fields: 子元素自身的列
    """
    elements: Callable[[Any], Optional[Iterable[Any]]]
    fields: Tuple[Field, ...]


# ---------------------------------------------------------------------------
# 访问函数
# ---------------------------------------------------------------------------

def get_field(obj: Any, name: str) -> Any:
    """读取模型上的一个字段

    name可以是Python属性名，也可以是线上字段名（camelCase）。
    podIPs、nonResourceURLs这类含缩写的字段，不同版本的kubernetes客户端生成的属性名不同
    （pod_i_ps / pod_ips），这些字段应使用线上名，通过模型的attribute_map解析。
    两种名称都不存在时抛出AttributeError。
    """
    attribute_map = getattr(type(obj), "attribute_map", None)
    if attribute_map and name not in attribute_map:
        for attribute, wire_name in attribute_map.items():
            if wire_name == name:
                return getattr(obj, attribute)
    return getattr(obj, name)


def attr(*names: str, source: Optional[Accessor] = None) -> Accessor:
    """按属性链取值，中途遇到None直接返回None

    source: 先用该访问函数取出起点对象，再沿属性链继续
    """
    def resolve(obj):
        if source is not None:
            obj = source(obj)
        for name in names:
            if obj is None:
                return None
            obj = get_field(obj, name)
        return obj
    return resolve


def entry(source: Accessor, key: str) -> Accessor:
    """从字典类型的字段中取一个键，例如 resources.requests["cpu"]"""
    def resolve(obj):
        mapping = source(obj)
        if mapping is None:
            return None
        return mapping.get(key)
    return resolve


def sorted_keys(source: Accessor) -> Accessor:
    """只取字典的键（排序后），用于不应暴露值的字段"""
    def resolve(obj):
        mapping = source(obj)
        if mapping is None:
            return None
        return sorted(mapping.keys())
    return resolve


def first_set(obj: Any, candidates: Sequence[str]) -> Optional[str]:
    """返回第一个非空属性的名称，用于判断卷类型等"one-of"字段"""
    if obj is None:
        return None
    for name in candidates:
        if getattr(obj, name) is not None:
            return name
    return None


# ---------------------------------------------------------------------------
# 列构造
# ---------------------------------------------------------------------------

def text(name: str, accessor: Accessor, required: bool = False) -> Field:
    return Field(Column(name, ColumnType.TEXT), accessor, required)


def integer(name: str, accessor: Accessor) -> Field:
    return Field(Column(name, ColumnType.INTEGER), accessor)


def bigint(name: str, accessor: Accessor) -> Field:
    return Field(Column(name, ColumnType.BIGINT), accessor)


def boolean(name: str, accessor: Accessor) -> Field:
    return Field(Column(name, ColumnType.BOOLEAN), accessor)


def timestamp(name: str, accessor: Accessor) -> Field:
    return Field(Column(name, ColumnType.TIMESTAMP), accessor)


def structured(name: str, accessor: Accessor) -> Field:
    """没有独立展开表的嵌套对象/列表，序列化为JSON文本"""
    return Field(Column(name, ColumnType.JSON), accessor)


# ---------------------------------------------------------------------------
# 行构建
# ---------------------------------------------------------------------------

def build_row(obj: Any, fields: Sequence[Field], row: Optional[Row] = None) -> Row:
    """按列顺序取值并转换类型，结果追加到row中"""
    if row is None:
        row = {}
    for field in fields:
        value = field.accessor(obj)
        if value is None and field.required:
            raise SchemaContractViolation(f"必需的标识字段 {field.name} 为空", obj)
        row[field.name] = coerce(value, field.column.type, field.name)
    return row


def cluster_row(cluster: ClusterIdentity) -> Row:
    return {"cluster_name": cluster.name, "cluster_uid": cluster.uid}


def project(resource: Any, fields: Sequence[Field], expand: Optional[Expand],
            cluster: ClusterIdentity) -> List[Row]:
    """把一个资源投影为行

    Args:
        resource: kubernetes模型对象
        fields: 资源（父对象）列
        expand: 一对多展开规则，None表示恒等展开
        cluster: 集群标识

    Returns:
        List[Row]: 恒等展开时恰好一行；一对多展开时每个元素一行，没有元素时为空
    """
    parent = build_row(resource, fields, cluster_row(cluster))
    if expand is None:
        return [parent]

    rows = []
    for element in expand.elements(resource) or ():
        rows.append(build_row(element, expand.fields, dict(parent)))
    return rows

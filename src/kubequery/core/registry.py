"""
表注册模块

进程启动时一次性构建 表名 -> 表定义 的静态映射，之后只读。
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, List, Optional, Tuple

from loguru import logger

from .projector import Expand, Field, project
from .resources import ResourceKind
from .schema import CLUSTER_COLUMNS, Column, ClusterIdentity, Row
from ..errors import SchemaContractViolation, UnknownTableError


@dataclass(frozen=True)
class TableDefinition:
    """表定义：资源类型 + 有序列 + 展开规则"""
    name: str
    kind: ResourceKind
    fields: Tuple[Field, ...]
    expand: Optional[Expand] = None
    description: str = ""

    def __post_init__(self):
        names = [column.name for column in self.columns]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise SchemaContractViolation(f"表 {self.name} 存在重复列: {duplicates}")

    @property
    def columns(self) -> Tuple[Column, ...]:
        child = self.expand.fields if self.expand is not None else ()
        return CLUSTER_COLUMNS + tuple(field.column for field in self.fields + child)

    def project(self, resource: Any, cluster: ClusterIdentity) -> List[Row]:
        return project(resource, self.fields, self.expand, cluster)


class TableRegistry:
    """表注册表"""

    def __init__(self, definitions: Iterable[TableDefinition]):
        """初始化表注册表

        Args:
            definitions: 全部表定义，表名必须唯一
        """
        tables = {}
        for definition in definitions:
            if definition.name in tables:
                raise SchemaContractViolation(f"表 {definition.name} 重复注册")
            tables[definition.name] = definition
        self._tables = MappingProxyType(tables)
        logger.info(f"表注册表初始化完成，共 {len(self._tables)} 张表")

    def get(self, table_name: str) -> TableDefinition:
        try:
            return self._tables[table_name]
        except KeyError:
            raise UnknownTableError(table_name)

    def columns_for(self, table_name: str) -> Tuple[Column, ...]:
        """获取表的有序列定义"""
        return self.get(table_name).columns

    def names(self) -> List[str]:
        return list(self._tables.keys())

    def definitions(self) -> List[TableDefinition]:
        return list(self._tables.values())

    def __contains__(self, table_name: str) -> bool:
        return table_name in self._tables

    def __len__(self) -> int:
        return len(self._tables)

"""
kubequery核心模块

- schema: 列类型和列定义
- projector: 行投影（恒等展开 / 一对多展开）
- registry: 表定义和静态表注册表
- fetcher: 资源获取
- dispatcher: 表分发器
"""

from .schema import Column, ColumnType, ClusterIdentity, Row, check_row_shape
from .projector import Expand, Field, project
from .query import Constraint, QueryContext
from .registry import TableDefinition, TableRegistry

__all__ = [
    "Column",
    "ColumnType",
    "ClusterIdentity",
    "Row",
    "check_row_shape",
    "Expand",
    "Field",
    "project",
    "Constraint",
    "QueryContext",
    "TableDefinition",
    "TableRegistry",
]

"""
列定义

每张表由一组有序的列组成，列名和类型一旦注册即固定，
是宿主查询依赖的对外契约。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Sequence

from ..errors import SchemaContractViolation


Row = Dict[str, Any]


class ColumnType(str, Enum):
    """列的语义类型"""
    TEXT = "TEXT"
    INTEGER = "INTEGER"
    BIGINT = "BIGINT"
    BOOLEAN = "BOOLEAN"
    TIMESTAMP = "TIMESTAMP"
    JSON = "JSON"


@dataclass(frozen=True)
class Column:
    """列：名称 + 声明类型"""
    name: str
    type: ColumnType

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "type": self.type.value}


@dataclass(frozen=True)
class ClusterIdentity:
    """当前集群标识，每一行都会带上"""
    name: str
    uid: str


CLUSTER_COLUMNS = (
    Column("cluster_name", ColumnType.TEXT),
    Column("cluster_uid", ColumnType.TEXT),
)


def check_row_shape(table_name: str, row: Row, columns: Sequence[Column]):
    """检查一行的列名和顺序是否与表定义完全一致"""
    expected = [column.name for column in columns]
    actual = list(row.keys())
    if actual != expected:
        missing = [name for name in expected if name not in row]
        extra = [name for name in actual if name not in expected]
        raise SchemaContractViolation(
            f"表 {table_name} 的行结构与定义不一致",
            {"missing": missing, "extra": extra, "expected": expected, "actual": actual},
        )

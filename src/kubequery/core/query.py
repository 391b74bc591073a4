"""
查询上下文

宿主随generate请求下发的约束，仅作为优化提示：
宿主会对返回的行重新过滤，投影是否采纳这些约束不影响正确性。
"""

from typing import Dict, List, Optional, Sequence
from pydantic import BaseModel, Field

from .schema import Column, ColumnType, Row


class Constraint(BaseModel):
    """单个约束"""
    op: str = Field(..., description="比较运算符，例如 = != > <")
    expr: str = Field(..., description="比较值（文本形式）")


class QueryContext(BaseModel):
    """一次generate请求的约束集合"""
    constraints: Dict[str, List[Constraint]] = Field(default_factory=dict, description="列名 -> 约束列表")

    def equality(self, column: str) -> Optional[str]:
        """返回某列唯一的等值约束，不存在或存在多个不同值时返回None"""
        values = {c.expr for c in self.constraints.get(column, []) if c.op == "="}
        if len(values) == 1:
            return values.pop()
        return None

    def admits(self, row: Row, columns: Sequence[Column]) -> bool:
        """按TEXT列上的等值约束提前过滤，其他约束一律放行"""
        for column in columns:
            if column.type != ColumnType.TEXT or column.name not in self.constraints:
                continue
            expected = self.equality(column.name)
            if expected is None:
                continue
            value = row.get(column.name)
            if value is not None and value != expected:
                return False
        return True

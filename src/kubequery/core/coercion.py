"""
值类型转换

把kubernetes模型中的原生值转换为列声明的语义类型：
- TIMESTAMP: 统一为UTC的 YYYY-MM-DDTHH:MM:SSZ
- JSON: 转为K8s线上格式（camelCase）后按键排序序列化，保证结果稳定
- TEXT: 字符串原样输出，资源数量（Quantity）保持规范字符串，不转浮点
- BOOLEAN / INTEGER: 原样或int()
None 一律输出为 null。
"""

import json
import threading
from datetime import date, datetime, timezone
from typing import Any

from kubernetes import client

from .schema import ColumnType
from ..errors import SchemaContractViolation


TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_serializer = None
_serializer_lock = threading.Lock()


def _get_serializer() -> client.ApiClient:
    """复用一个ApiClient，只用它的sanitize_for_serialization，不发网络请求"""
    global _serializer
    if _serializer is None:
        with _serializer_lock:
            if _serializer is None:
                _serializer = client.ApiClient(client.Configuration())
    return _serializer


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def to_wire(value: Any) -> Any:
    """转换为K8s线上格式的纯Python结构"""
    return _get_serializer().sanitize_for_serialization(value)


def to_json_text(value: Any) -> str:
    return json.dumps(to_wire(value), sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def coerce(value: Any, column_type: ColumnType, column_name: str = "") -> Any:
    """按列类型转换单个值"""
    if value is None:
        return None

    if column_type == ColumnType.JSON:
        return to_json_text(value)

    if column_type == ColumnType.TIMESTAMP:
        if isinstance(value, datetime):
            return format_timestamp(value)
        if isinstance(value, date):
            return value.strftime("%Y-%m-%dT00:00:00Z")

    elif column_type == ColumnType.BOOLEAN:
        if isinstance(value, bool):
            return value

    elif column_type in (ColumnType.INTEGER, ColumnType.BIGINT):
        if isinstance(value, int) and not isinstance(value, bool):
            return value

    elif column_type == ColumnType.TEXT:
        if isinstance(value, str):
            return value
        # IntOrString类型的字段可能是整数
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)

    raise SchemaContractViolation(
        f"列 {column_name or '?'} 声明为 {column_type.value}，实际值类型为 {type(value).__name__}",
        value,
    )

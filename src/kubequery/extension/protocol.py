"""
扩展协议实现

宿主进程与kubequery扩展之间的消息格式，基于JSON-RPC 2.0：
- 扩展 -> 宿主: extensions/register, extensions/ping, extensions/deregister
- 宿主 -> 扩展: ping, tables/list, tables/generate, shutdown
"""

import json
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field
from loguru import logger

from ..core.query import QueryContext
from ..core.registry import TableDefinition


PROTOCOL_VERSION = "1.0"


class ExtensionErrorCode(Enum):
    """扩展错误代码"""
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    # 自定义错误代码
    TABLE_NOT_FOUND = -32001
    CLUSTER_ERROR = -32002
    CLUSTER_UNREACHABLE = -32003


class ExtensionMethod(Enum):
    """宿主调用扩展的方法"""
    PING = "ping"
    LIST_TABLES = "tables/list"
    GENERATE = "tables/generate"
    SHUTDOWN = "shutdown"


class ManagerMethod(Enum):
    """扩展调用宿主（扩展管理器）的方法"""
    REGISTER = "extensions/register"
    PING = "extensions/ping"
    DEREGISTER = "extensions/deregister"


class ExtensionRequest(BaseModel):
    """JSON-RPC请求"""
    jsonrpc: str = Field(default="2.0", description="JSON-RPC版本")
    method: str = Field(..., description="方法名")
    params: Optional[Dict[str, Any]] = Field(None, description="参数")
    id: Optional[Union[str, int]] = Field(None, description="请求ID")

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> "ExtensionRequest":
        """从JSON字符串创建请求"""
        try:
            return cls.model_validate_json(data)
        except Exception as e:
            logger.error(f"解析扩展请求失败: {e}")
            raise


class ExtensionResponse(BaseModel):
    """JSON-RPC响应"""
    jsonrpc: str = Field(default="2.0", description="JSON-RPC版本")
    result: Optional[Any] = Field(None, description="响应结果")
    error: Optional[Dict[str, Any]] = Field(None, description="错误信息")
    id: Optional[Union[str, int]] = Field(None, description="请求ID")

    def to_json(self) -> str:
        """转换为JSON字符串

        result和error只保留其一，行中的null值原样保留
        """
        data = self.model_dump(mode="json")
        data.pop("result" if self.error is not None else "error")
        return json.dumps(data, ensure_ascii=False)


class ColumnSchema(BaseModel):
    """列定义"""
    name: str = Field(..., description="列名")
    type: str = Field(..., description="列类型")


class TableSchema(BaseModel):
    """表定义（注册时发送给宿主）"""
    name: str = Field(..., description="表名")
    description: str = Field("", description="表描述")
    columns: List[ColumnSchema] = Field(..., description="有序的列定义")

    @classmethod
    def from_definition(cls, table: TableDefinition) -> "TableSchema":
        return cls(
            name=table.name,
            description=table.description,
            columns=[ColumnSchema(**column.to_dict()) for column in table.columns],
        )


class ExtensionInfo(BaseModel):
    """扩展信息"""
    name: str = Field(..., description="扩展名称")
    version: str = Field(..., description="扩展版本")
    protocol_version: str = Field(PROTOCOL_VERSION, description="协议版本")
    description: Optional[str] = Field(None, description="扩展描述")


class RegisterParams(BaseModel):
    """extensions/register 参数"""
    info: ExtensionInfo = Field(..., description="扩展信息")
    tables: List[TableSchema] = Field(..., description="扩展提供的全部表")


class RegisterResult(BaseModel):
    """extensions/register 结果"""
    uuid: int = Field(..., description="宿主分配的扩展ID")


class GenerateParams(BaseModel):
    """tables/generate 参数"""
    table: str = Field(..., description="表名")
    context: QueryContext = Field(default_factory=QueryContext, description="查询约束")


class GenerateResult(BaseModel):
    """tables/generate 结果"""
    table: str = Field(..., description="表名")
    rows: List[Dict[str, Any]] = Field(..., description="行")
    row_count: int = Field(..., description="行数")


class ListTablesResult(BaseModel):
    """tables/list 结果"""
    tables: List[TableSchema] = Field(..., description="表列表")


def create_request(method: ManagerMethod, params: Optional[Dict[str, Any]] = None,
                   request_id: Optional[Union[str, int]] = None) -> ExtensionRequest:
    """创建发往宿主的请求"""
    return ExtensionRequest(method=method.value, params=params, id=request_id)


def create_success_response(result: Any, request_id: Optional[Union[str, int]] = None) -> ExtensionResponse:
    """创建成功响应"""
    return ExtensionResponse(result=result, id=request_id)


def create_error_response(
    code: ExtensionErrorCode,
    message: str,
    data: Any = None,
    request_id: Optional[Union[str, int]] = None
) -> ExtensionResponse:
    """创建错误响应"""
    error = {
        "code": code.value,
        "message": message
    }
    if data is not None:
        error["data"] = data

    return ExtensionResponse(error=error, id=request_id)

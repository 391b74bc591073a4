"""
kubequery异常定义

- ConfigurationError: 启动参数缺失或非法，启动阶段致命
- ClusterError / ClusterUnreachable: 集群API调用失败，按请求上报给宿主
- PartialDecode: 列表中单个对象解码失败，跳过该对象
- UnknownTableError: 请求了未注册的表
- SchemaContractViolation: 投影结果与表定义不一致，属于程序缺陷
- TransportError: 与宿主进程的扩展通道握手或心跳失败
"""

from typing import Any


class KubeQueryError(Exception):
    """kubequery基础异常"""
    def __init__(self, message: str, details: Any = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ConfigurationError(KubeQueryError):
    """配置错误"""


class ClusterError(KubeQueryError):
    """集群API错误"""


class ClusterUnreachable(ClusterError):
    """集群不可达（网络或认证失败）"""


class PartialDecode(KubeQueryError):
    """单个对象解码失败"""
    def __init__(self, message: str, kind: str = None, index: int = None, details: Any = None):
        super().__init__(message, details)
        self.kind = kind
        self.index = index


class UnknownTableError(KubeQueryError):
    """未知表"""
    def __init__(self, table_name: str):
        super().__init__(f"未知的表: {table_name}")
        self.table_name = table_name


class SchemaContractViolation(KubeQueryError):
    """行结构与表定义不一致"""


class TransportError(KubeQueryError):
    """扩展通道错误"""

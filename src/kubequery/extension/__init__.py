"""
宿主扩展通道

- protocol: JSON-RPC消息模型
- manager_client: 调用宿主扩展管理器（注册、心跳、注销）
- server: KubeQueryExtension，在UNIX套接字上提供表服务
"""

from .manager_client import ExtensionManagerClient
from .server import KubeQueryExtension

__all__ = ["ExtensionManagerClient", "KubeQueryExtension"]

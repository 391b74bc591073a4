"""
kubequery配置管理

配置来源（优先级从低到高）：
- 默认值
- 环境变量（支持本地.env文件）
- 命令行参数

--socket 是唯一的必需参数，缺失时启动失败
"""

import argparse
import os
from typing import Optional, Sequence
from pydantic import BaseModel, Field
from loguru import logger
from dotenv import load_dotenv

from .errors import ConfigurationError


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_number(name: str, default: str, parse=int):
    """读取数值型环境变量，格式非法时抛出ConfigurationError"""
    value = os.getenv(name, default)
    try:
        return parse(value)
    except ValueError:
        raise ConfigurationError(f"环境变量 {name} 的值不是合法的数字: {value!r}", value)


class KubeQueryConfig(BaseModel):
    """kubequery扩展配置"""
    socket: Optional[str] = Field(None, description="宿主扩展管理器的UNIX套接字路径")
    timeout: int = Field(3, description="与宿主握手的超时时间（秒）")
    interval: int = Field(3, description="心跳间隔（秒）")
    extension_name: str = Field("kubequery", description="扩展名称")

    kubeconfig_path: Optional[str] = Field(None, description="Kubeconfig文件路径")
    kube_context: Optional[str] = Field(None, description="Kubeconfig上下文名称")
    in_cluster: bool = Field(False, description="使用Pod内ServiceAccount凭据")
    cluster_name: Optional[str] = Field(None, description="集群名称，写入每一行的cluster_name列")
    request_timeout: float = Field(10.0, description="单次K8s API调用超时时间（秒）")
    page_size: int = Field(500, description="列表请求分页大小")

    debug: bool = Field(False, description="调试模式")
    log_file: Optional[str] = Field(None, description="日志文件路径")

    @classmethod
    def from_env(cls) -> "KubeQueryConfig":
        """从环境变量加载配置"""
        # 加载本地的.env文件（如果存在）
        load_dotenv()

        # 获取kubeconfig路径
        kubeconfig_path = os.getenv("KUBECONFIG_PATH")
        if not kubeconfig_path:
            kubeconfig_path = os.getenv("KUBECONFIG")
        if not kubeconfig_path:
            default_path = os.path.expanduser("~/.kube/config")
            if os.path.exists(default_path):
                kubeconfig_path = default_path

        # 没有kubeconfig但运行在Pod内时使用集群内凭据
        in_cluster = _env_bool("KUBEQUERY_IN_CLUSTER")
        if not kubeconfig_path and os.getenv("KUBERNETES_SERVICE_HOST"):
            in_cluster = True

        return cls(
            socket=os.getenv("KUBEQUERY_SOCKET") or None,
            timeout=_env_number("KUBEQUERY_TIMEOUT", "3"),
            interval=_env_number("KUBEQUERY_INTERVAL", "3"),
            kubeconfig_path=kubeconfig_path,
            kube_context=os.getenv("K8S_CONTEXT") or None,
            in_cluster=in_cluster,
            cluster_name=os.getenv("KUBEQUERY_CLUSTER_NAME") or None,
            request_timeout=_env_number("K8S_REQUEST_TIMEOUT", "10", float),
            page_size=_env_number("K8S_PAGE_SIZE", "500"),
            debug=_env_bool("KUBEQUERY_DEBUG"),
            log_file=os.getenv("KUBEQUERY_LOG_FILE") or None,
        )

    @classmethod
    def from_args(cls, argv: Optional[Sequence[str]] = None) -> "KubeQueryConfig":
        """从环境变量加载配置，再用命令行参数覆盖"""
        parser = argparse.ArgumentParser(
            prog="kubequery",
            description="以只读关系表的形式向SQL宿主进程暴露Kubernetes集群对象",
        )
        parser.add_argument("--socket", help="Path to the extensions UNIX domain socket")
        parser.add_argument("--timeout", type=int, help="Seconds to wait for the extension manager")
        parser.add_argument("--interval", type=int, help="Seconds delay between connectivity checks")
        parser.add_argument("--kubeconfig", dest="kubeconfig_path", help="Path to a kubeconfig file")
        parser.add_argument("--context", dest="kube_context", help="Kubeconfig context to use")
        parser.add_argument("--in-cluster", dest="in_cluster", action="store_true", default=None,
                            help="Use in-cluster service account credentials")
        parser.add_argument("--cluster-name", dest="cluster_name", help="Value of the cluster_name column")
        parser.add_argument("--request-timeout", dest="request_timeout", type=float,
                            help="Seconds before a Kubernetes API call is abandoned")
        parser.add_argument("--log-file", dest="log_file", help="Also write logs to this file")
        parser.add_argument("--verbose", dest="debug", action="store_true", default=None,
                            help="Enable debug logging")

        args = parser.parse_args(argv)
        overrides = {key: value for key, value in vars(args).items() if value is not None}

        config = cls.from_env()
        if overrides:
            config = config.model_copy(update=overrides)
        return config

    def validate_config(self):
        """验证配置，非法时抛出ConfigurationError"""
        if not self.socket:
            raise ConfigurationError("缺少必需的 --socket 参数")

        for name in ("timeout", "interval", "request_timeout", "page_size"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} 必须为正数", getattr(self, name))

        if not self.in_cluster:
            kubeconfig_path = self.get_kubeconfig_path()
            if kubeconfig_path and not os.path.exists(kubeconfig_path):
                raise ConfigurationError(
                    f"Kubeconfig文件不存在: {kubeconfig_path} (原路径: {self.kubeconfig_path})"
                )
            if kubeconfig_path:
                logger.info(f"使用kubeconfig文件: {kubeconfig_path}")
            else:
                logger.warning("未指定kubeconfig文件路径，将由kubernetes客户端自行查找")
        else:
            logger.info("使用集群内ServiceAccount凭据")

        # 单次API调用不应超过宿主的存活检测窗口
        if self.request_timeout > self.timeout + self.interval:
            logger.warning(
                f"API调用超时({self.request_timeout}s)大于心跳窗口"
                f"({self.timeout + self.interval}s)，慢查询可能导致扩展被宿主移除"
            )

    def get_kubeconfig_path(self) -> Optional[str]:
        """获取kubeconfig路径"""
        if self.kubeconfig_path:
            return os.path.expanduser(self.kubeconfig_path)
        return self.kubeconfig_path

"""
kubequery命令行入口

    kubequery --socket /var/osquery/osquery.em [--timeout 3] [--interval 3]
"""

import asyncio
import sys
from typing import Optional, Sequence

from loguru import logger

from .config import KubeQueryConfig
from .errors import ClusterError, ConfigurationError, TransportError
from .extension import KubeQueryExtension


def main(argv: Optional[Sequence[str]] = None):
    """主函数"""
    try:
        config = KubeQueryConfig.from_args(argv)
        config.validate_config()
    except ConfigurationError as e:
        logger.error(f"配置错误: {e.message}")
        sys.exit(1)

    extension = KubeQueryExtension(config)
    try:
        asyncio.run(extension.start())
    except KeyboardInterrupt:
        logger.info("接收到中断信号，扩展已停止")
    except (ConfigurationError, ClusterError, TransportError) as e:
        logger.error(f"kubequery运行失败: {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()

"""
表分发器

generate(table, query):
1. 解析表定义
2. 调用资源获取函数（在线程池中执行同步的kubernetes客户端调用）
3. 对每个资源做行投影，按获取顺序拼接

获取失败时整个调用失败，不返回部分结果。
"""

import asyncio
import functools
import time
from typing import Any, Callable, List, Optional

from loguru import logger

from .fetcher import fetch
from .metrics_collector import MetricsCollector
from .query import QueryContext
from .registry import TableRegistry
from .resources import ResourceKind
from .schema import Row, check_row_shape
from ..k8s_client import ClusterContext


FetchFunc = Callable[[ResourceKind, ClusterContext, Optional[QueryContext]], List[Any]]


class TableDispatcher:
    """表分发器"""

    def __init__(self, registry: TableRegistry, context: ClusterContext,
                 fetcher: FetchFunc = fetch, metrics: Optional[MetricsCollector] = None,
                 check_rows: bool = False):
        """初始化分发器

        Args:
            registry: 表注册表
            context: 集群上下文
            fetcher: 资源获取函数
            metrics: 指标收集器
            check_rows: 是否逐行校验列结构（调试用）
        """
        self.registry = registry
        self.context = context
        self.fetcher = fetcher
        self.metrics = metrics
        self.check_rows = check_rows

    def generate_sync(self, table_name: str, query: Optional[QueryContext] = None) -> List[Row]:
        """同步生成一张表的全部行"""
        query = query or QueryContext()
        table = self.registry.get(table_name)
        columns = table.columns
        start_time = time.time()

        try:
            resources = self.fetcher(table.kind, self.context, query)

            rows: List[Row] = []
            for resource in resources:
                for row in table.project(resource, self.context.identity):
                    if self.check_rows:
                        check_row_shape(table_name, row, columns)
                    if query.admits(row, columns):
                        rows.append(row)
        except Exception as e:
            execution_time = time.time() - start_time
            logger.error(f"❌ 生成表 {table_name} 失败: {e}, 耗时: {execution_time:.3f}s")
            if self.metrics:
                self.metrics.record_generate(table_name, execution_time, is_error=True)
            raise

        execution_time = time.time() - start_time
        logger.info(f"✅ 生成表 {table_name}: {len(rows)} 行, 耗时={execution_time:.3f}s")
        if self.metrics:
            self.metrics.record_generate(table_name, execution_time, rows=len(rows))
        return rows

    async def generate(self, table_name: str, query: Optional[QueryContext] = None) -> List[Row]:
        """生成一张表的全部行（异步，不阻塞事件循环）"""
        # 先解析表名，未知表不必进入线程池
        self.registry.get(table_name)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(self.generate_sync, table_name, query))

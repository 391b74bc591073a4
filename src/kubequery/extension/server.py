"""
kubequery扩展服务器

启动流程：
1. 连接K8s集群，构建表分发器
2. 向宿主扩展管理器注册全部表，获得uuid
3. 在 <socket>.<uuid> 上提供JSON-RPC服务（FastAPI + uvicorn）
4. 按interval向宿主发送心跳，宿主消失时退出
"""

import asyncio
import contextlib
import json
import os
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse, Response
from pydantic import ValidationError
from loguru import logger

from .. import __version__
from ..config import KubeQueryConfig
from ..core.dispatcher import TableDispatcher
from ..core.metrics_collector import MetricsCollector
from ..core.registry import TableRegistry
from ..errors import ClusterError, ClusterUnreachable, TransportError, UnknownTableError
from ..k8s_client import K8sClient
from ..tables import build_registry
from .manager_client import ExtensionManagerClient
from .protocol import (
    ExtensionErrorCode, ExtensionInfo, ExtensionMethod, ExtensionRequest, ExtensionResponse,
    GenerateParams, GenerateResult, ListTablesResult, RegisterParams, TableSchema,
    create_error_response, create_success_response,
)


class KubeQueryExtension:
    """kubequery扩展

    以只读关系表的形式向宿主暴露集群对象：
    - tables/list: 列出全部表定义
    - tables/generate: 生成一张表的全部行
    """

    def __init__(self, config: KubeQueryConfig, registry: Optional[TableRegistry] = None,
                 k8s_client: Optional[K8sClient] = None, manager: Optional[ExtensionManagerClient] = None):
        """初始化扩展

        Args:
            config: kubequery配置
            registry: 表注册表，默认包含全部内置表
            k8s_client: K8s客户端
            manager: 宿主扩展管理器客户端
        """
        self.config = config
        self.registry = registry or build_registry()
        self.k8s_client = k8s_client or K8sClient(config)
        self.manager = manager or ExtensionManagerClient(config.socket, timeout=config.timeout)
        self.metrics = MetricsCollector()
        self.dispatcher: Optional[TableDispatcher] = None

        self.uuid: Optional[int] = None
        self.socket_path: Optional[str] = None
        self.server: Optional[uvicorn.Server] = None
        self.heartbeat_task: Optional[asyncio.Task] = None
        self.is_running = False
        self._stopped = False

        self.app = FastAPI(title="kubequery", version=__version__)

        # 设置日志
        self._setup_logging()

        # 设置路由
        self._setup_routes()

        logger.info(f"kubequery扩展初始化完成，共 {len(self.registry)} 张表")

    def _setup_logging(self):
        """设置日志配置"""
        logger.remove()  # 移除默认handler

        # 控制台日志，stdout留给宿主
        logger.add(
            sys.stderr,
            level="DEBUG" if self.config.debug else "INFO",
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
            colorize=True
        )

        # 文件日志
        if self.config.log_file:
            logger.add(
                self.config.log_file,
                rotation="1 day",
                retention="7 days",
                level="DEBUG" if self.config.debug else "INFO",
                format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
                encoding="utf-8"
            )

    def table_schemas(self) -> List[TableSchema]:
        return [TableSchema.from_definition(table) for table in self.registry.definitions()]

    def extension_info(self) -> ExtensionInfo:
        return ExtensionInfo(
            name=self.config.extension_name,
            version=__version__,
            description="Kubernetes集群对象只读关系表",
        )

    def _setup_routes(self):
        """设置API路由"""

        @self.app.post("/rpc")
        async def rpc(request: Request):
            """JSON-RPC入口"""
            body = await request.body()
            try:
                json.loads(body)
            except ValueError as e:
                response = create_error_response(ExtensionErrorCode.PARSE_ERROR, f"无法解析请求: {e}")
                return Response(content=response.to_json(), media_type="application/json")

            try:
                rpc_request = ExtensionRequest.from_json(body)
            except ValidationError as e:
                response = create_error_response(ExtensionErrorCode.INVALID_REQUEST, f"非法请求: {e}")
                return Response(content=response.to_json(), media_type="application/json")

            response = await self.handle_rpc(rpc_request)
            return Response(content=response.to_json(), media_type="application/json")

        @self.app.get("/health")
        async def health_check():
            """健康检查"""
            context = self.dispatcher.context if self.dispatcher else None
            return {
                "status": "healthy" if self.dispatcher else "starting",
                "timestamp": datetime.now().isoformat(),
                "uuid": self.uuid,
                "cluster": {
                    "name": context.identity.name,
                    "uid": context.identity.uid,
                } if context else None,
                "tables": len(self.registry),
                "metrics": self.metrics.get_health_status(),
            }

        @self.app.get("/tables")
        async def list_tables():
            """获取表列表"""
            return ListTablesResult(tables=self.table_schemas()).model_dump()

        @self.app.get("/tables/{table_name}")
        async def get_table(table_name: str):
            """获取单张表的列定义"""
            try:
                return TableSchema.from_definition(self.registry.get(table_name)).model_dump()
            except UnknownTableError as e:
                raise HTTPException(status_code=404, detail=e.message)

        @self.app.get("/metrics")
        async def get_prometheus_metrics():
            """获取Prometheus格式的指标"""
            return PlainTextResponse(self.metrics.export_prometheus_format(), media_type="text/plain")

        @self.app.get("/metrics/summary")
        async def get_metrics_summary():
            """获取指标汇总"""
            return self.metrics.get_summary_stats()

    async def handle_rpc(self, request: ExtensionRequest) -> ExtensionResponse:
        """处理一次宿主调用，任何错误都转换为错误响应"""
        logger.debug(f"📥 收到宿主调用: {request.method} (id={request.id})")
        try:
            if request.method == ExtensionMethod.PING.value:
                result: Any = {"status": "ok", "uuid": self.uuid}
            elif request.method == ExtensionMethod.LIST_TABLES.value:
                result = ListTablesResult(tables=self.table_schemas()).model_dump()
            elif request.method == ExtensionMethod.GENERATE.value:
                params = GenerateParams.model_validate(request.params or {})
                rows = await self.generate(params)
                result = GenerateResult(table=params.table, rows=rows, row_count=len(rows)).model_dump()
            elif request.method == ExtensionMethod.SHUTDOWN.value:
                self.request_shutdown("宿主请求关闭扩展")
                result = {"status": "shutting_down"}
            else:
                return create_error_response(
                    ExtensionErrorCode.METHOD_NOT_FOUND, f"未知方法: {request.method}", request_id=request.id
                )
            return create_success_response(result, request.id)

        except ValidationError as e:
            return create_error_response(
                ExtensionErrorCode.INVALID_PARAMS, f"参数错误: {e}", request_id=request.id
            )
        except UnknownTableError as e:
            return create_error_response(
                ExtensionErrorCode.TABLE_NOT_FOUND, e.message, {"table": e.table_name}, request.id
            )
        except ClusterUnreachable as e:
            return create_error_response(
                ExtensionErrorCode.CLUSTER_UNREACHABLE, e.message, e.details, request.id
            )
        except ClusterError as e:
            return create_error_response(ExtensionErrorCode.CLUSTER_ERROR, e.message, e.details, request.id)
        except Exception as e:
            logger.exception(f"🔍 处理宿主调用异常: {request.method}")
            return create_error_response(ExtensionErrorCode.INTERNAL_ERROR, str(e), request_id=request.id)

    async def generate(self, params: GenerateParams) -> List[Dict[str, Any]]:
        """生成一张表"""
        # 先校验表名，未连接集群时也能正确报告未知表
        self.registry.get(params.table)
        if self.dispatcher is None:
            raise ClusterUnreachable("尚未连接到K8s集群")
        return await self.dispatcher.generate(params.table, params.context)

    async def initialize(self):
        """连接集群并构建表分发器"""
        context = await self.k8s_client.connect()
        self.dispatcher = TableDispatcher(
            self.registry,
            context,
            metrics=self.metrics,
            check_rows=self.config.debug,
        )
        logger.info(f"✅ 表分发器就绪: 集群 {context.identity.name}")

    async def register(self):
        """向宿主注册"""
        params = RegisterParams(info=self.extension_info(), tables=self.table_schemas())
        self.uuid = await self.manager.register(params)
        self.socket_path = f"{self.config.socket}.{self.uuid}"

    async def _heartbeat(self):
        """定期检查宿主是否存活"""
        while self.is_running:
            await asyncio.sleep(self.config.interval)
            try:
                await self.manager.ping()
            except TransportError as e:
                logger.error(f"💔 宿主心跳失败，扩展即将退出: {e.message}")
                self.request_shutdown("宿主不可达")
                return

    def request_shutdown(self, reason: str):
        """通知uvicorn退出"""
        logger.info(f"正在停止kubequery扩展: {reason}")
        self.is_running = False
        if self.server is not None:
            self.server.should_exit = True

    async def start(self):
        """启动扩展，直到宿主消失或收到关闭请求"""
        try:
            await self.initialize()
            await self.register()

            # 上次异常退出可能遗留套接字文件
            if os.path.exists(self.socket_path):
                os.unlink(self.socket_path)

            config = uvicorn.Config(
                self.app,
                uds=self.socket_path,
                log_level="debug" if self.config.debug else "warning",
            )
            self.server = uvicorn.Server(config)
            self.is_running = True
            self.heartbeat_task = asyncio.create_task(self._heartbeat())

            logger.info(f"🚀 kubequery扩展已启动: {self.socket_path}")
            await self.server.serve()
        finally:
            await self.stop()

    async def stop(self):
        """停止扩展"""
        if self._stopped:
            return
        self._stopped = True
        self.is_running = False

        try:
            if self.heartbeat_task is not None and not self.heartbeat_task.done():
                self.heartbeat_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await self.heartbeat_task

            if self.uuid is not None:
                await self.manager.deregister(self.uuid)
            await self.manager.close()

            await self.k8s_client.disconnect()

            if self.socket_path and os.path.exists(self.socket_path):
                os.unlink(self.socket_path)

            logger.info("kubequery扩展已停止")

        except Exception as e:
            logger.error(f"停止扩展失败: {e}")

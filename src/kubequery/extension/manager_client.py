"""
扩展管理器客户端

通过宿主的UNIX套接字调用扩展管理器：注册、心跳、注销。
"""

import itertools
from typing import Any, Dict, Optional

import httpx
from loguru import logger
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_delay, wait_fixed

from .protocol import ExtensionResponse, ManagerMethod, RegisterParams, RegisterResult, create_request
from ..errors import TransportError


def _host_not_ready(error: BaseException) -> bool:
    # 套接字尚不存在或拒绝连接，超时不重试
    return isinstance(error, httpx.TransportError) and not isinstance(error, httpx.TimeoutException)


def _log_retry(state: RetryCallState):
    logger.debug(f"扩展管理器尚未就绪（第 {state.attempt_number} 次尝试）: {state.outcome.exception()}")


class ExtensionManagerClient:
    """宿主扩展管理器客户端"""

    def __init__(self, socket_path: str, timeout: float = 3.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None, retry_interval: float = 0.2):
        """初始化客户端

        Args:
            socket_path: 宿主扩展管理器的UNIX套接字路径
            timeout: 握手超时时间（秒），注册在此时间内重试
            transport: 自定义传输层（测试时替换为MockTransport）
            retry_interval: 注册重试间隔（秒）
        """
        self.socket_path = socket_path
        self.timeout = timeout
        self.retry_interval = retry_interval
        self._ids = itertools.count(1)
        self.client = httpx.AsyncClient(
            transport=transport or httpx.AsyncHTTPTransport(uds=socket_path),
            base_url="http://extension-manager",
            timeout=timeout,
        )

    async def _send(self, method: ManagerMethod, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        request = create_request(method, params, request_id=next(self._ids))
        return await self.client.post("/rpc", json=request.model_dump(exclude_none=True))

    def _parse(self, method: ManagerMethod, response: httpx.Response) -> Any:
        if response.status_code != 200:
            raise TransportError(f"{method.value} 失败: HTTP {response.status_code}", response.text)
        try:
            message = ExtensionResponse.model_validate(response.json())
        except ValueError as e:
            raise TransportError(f"{method.value} 响应无法解析: {e}")
        if message.error is not None:
            raise TransportError(f"{method.value} 被宿主拒绝: {message.error.get('message')}", message.error)
        return message.result

    async def call(self, method: ManagerMethod, params: Optional[Dict[str, Any]] = None) -> Any:
        """调用一次宿主方法"""
        try:
            response = await self._send(method, params)
        except httpx.TimeoutException as e:
            raise TransportError(f"{method.value} 超时", str(e))
        except httpx.RequestError as e:
            raise TransportError(f"{method.value} 请求失败: {e}", str(e))
        return self._parse(method, response)

    async def register(self, params: RegisterParams) -> int:
        """向宿主注册扩展，返回宿主分配的uuid

        宿主套接字尚未就绪时在超时时间内重试。
        """
        retrying = AsyncRetrying(
            retry=retry_if_exception(_host_not_ready),
            stop=stop_after_delay(self.timeout),
            wait=wait_fixed(self.retry_interval),
            before_sleep=_log_retry,
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    response = await self._send(ManagerMethod.REGISTER, params.model_dump())
        except httpx.TimeoutException as e:
            raise TransportError(f"注册扩展超时: {self.socket_path}", str(e))
        except httpx.TransportError as e:
            raise TransportError(f"在 {self.timeout}s 内无法连接扩展管理器: {self.socket_path}", str(e))

        try:
            result = RegisterResult.model_validate(self._parse(ManagerMethod.REGISTER, response))
        except ValueError as e:
            raise TransportError(f"注册结果无法解析: {e}")
        logger.info(f"🔗 扩展注册成功: uuid={result.uuid}, 共 {len(params.tables)} 张表")
        return result.uuid

    async def ping(self) -> Any:
        """心跳"""
        return await self.call(ManagerMethod.PING)

    async def deregister(self, uuid: int):
        """注销扩展，宿主已退出时忽略错误"""
        try:
            await self.call(ManagerMethod.DEREGISTER, {"uuid": uuid})
            logger.info(f"扩展已注销: uuid={uuid}")
        except TransportError as e:
            logger.warning(f"注销扩展失败: {e.message}")

    async def close(self):
        await self.client.aclose()

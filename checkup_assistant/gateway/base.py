"""远程对话网关抽象接口。

回复解析器不直接依赖具体的 HTTP 调用方式，而是依赖此协议：

- 每种后端实现一个 ChatGateway（如 SupabaseFunctionGateway）。
- 负责：将 GatewayRequest 发给远程函数，并把响应 JSON 解析为 GatewayResponse。

网关只做单次调用，不负责重试或退避；失败时抛出 BusinessError 子类。
"""

from typing import Protocol

from checkup_assistant.domain.models import GatewayRequest, GatewayResponse


class ChatGateway(Protocol):
    """远程对话网关协议。

    实现者需要提供：
    - name: 网关名称，用于日志。
    - invoke(req): 执行一次远程调用，返回统一的 GatewayResponse。
    """

    name: str

    async def invoke(self, req: GatewayRequest) -> GatewayResponse:
        ...

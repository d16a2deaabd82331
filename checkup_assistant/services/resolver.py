"""回复解析器。

给定一句用户输入，选择回复来源：

- demo: 本地关键词匹配预设回复（可配置的人为延迟，仅用于模拟体验）。
- remote: 委托给远程对话网关，并接管网关返回的会话关联 token。

远程调用失败不会向上抛出：错误写入日志，返回一条降级回复。
"""

import asyncio
import time
from typing import Optional

from checkup_assistant.domain.exceptions import BusinessError
from checkup_assistant.domain.models import GatewayRequest, ResolveContext, Resolution
from checkup_assistant.gateway.base import ChatGateway
from checkup_assistant.infrastructure.logging.logger import logger
from checkup_assistant.knowledge.responses import (
    NOT_UNDERSTOOD_REPLY,
    REMOTE_NOT_CONFIGURED_REPLY,
    get_demo_response,
    remote_error_reply,
)


class ResponseResolver:
    def __init__(self, gateway: Optional[ChatGateway] = None, demo_delay: float = 0.8):
        self._gateway = gateway
        self._demo_delay = max(0.0, demo_delay)

    async def resolve(self, utterance: str, context: ResolveContext) -> Resolution:
        if context.mode == "demo":
            return await self._resolve_demo(utterance, context)
        return await self._resolve_remote(utterance, context)

    async def _resolve_demo(self, utterance: str, context: ResolveContext) -> Resolution:
        if self._demo_delay:
            await asyncio.sleep(self._demo_delay)
        return Resolution(reply=get_demo_response(utterance), conversation_id=context.conversation_id)

    async def _resolve_remote(self, utterance: str, context: ResolveContext) -> Resolution:
        if self._gateway is None:
            return Resolution(
                reply=REMOTE_NOT_CONFIGURED_REPLY,
                conversation_id=context.conversation_id,
                degraded=True,
            )

        req = GatewayRequest(
            message=utterance,
            conversation_id=context.conversation_id,
            session_id=context.session_id or "",
            user_age=context.age,
        )
        start_time = time.time()
        try:
            resp = await self._gateway.invoke(req)
        except BusinessError as e:
            logger.error(
                f"Edge Function Error: {e.message}",
                extra={"extra": {
                    "gateway": self._gateway.name,
                    "code": e.code,
                    "http_status": e.http_status,
                    "conversation_id": context.conversation_id,
                }},
            )
            return Resolution(
                reply=remote_error_reply(e.message),
                conversation_id=context.conversation_id,
                degraded=True,
            )
        except Exception as e:
            logger.exception(
                f"Edge Function Error: {e}",
                extra={"extra": {"gateway": self._gateway.name, "conversation_id": context.conversation_id}},
            )
            return Resolution(
                reply=remote_error_reply(""),
                conversation_id=context.conversation_id,
                degraded=True,
            )

        logger.info(
            "Gateway replied",
            extra={"extra": {
                "gateway": self._gateway.name,
                "elapsed_seconds": round(time.time() - start_time, 2),
                "has_content": bool(resp.content),
            }},
        )
        # 网关是关联 token 的唯一来源：返回了新值就替换，否则保持原值
        return Resolution(
            reply=resp.content or NOT_UNDERSTOOD_REPLY,
            conversation_id=resp.conversation_id or context.conversation_id,
        )

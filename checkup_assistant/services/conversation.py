"""会话状态管理。

ConversationService 独占一份会话状态：有序消息历史、远程会话关联 token、
当前用户年龄以及回复模式，对外提供发送、重置与有界历史等操作。
"""

import asyncio
import time
from datetime import datetime, timezone
from typing import List, Optional

from checkup_assistant.domain.exceptions import ConversationBusyError, ValidationError
from checkup_assistant.domain.models import ChatMessage, ChatMode, ConversationPhase, ResolveContext
from checkup_assistant.infrastructure.logging.logger import logger
from checkup_assistant.infrastructure.storage.session_identity import SessionIdentityProvider
from checkup_assistant.knowledge.terms import term_question
from checkup_assistant.services.resolver import ResponseResolver


DEFAULT_USER_AGE = 29
MAX_HISTORY_MESSAGES = 20


class ConversationService:
    """单个会话的状态管理器。

    状态机只有两个状态：idle 与 awaiting_reply。send_message 在单飞锁内执行，
    重叠调用按调用顺序排队，因此历史总是 user/assistant 成对、按调用顺序追加。
    等待回复期间调用 reset() 会被拒绝（ConversationBusyError）。
    """

    def __init__(
        self,
        resolver: ResponseResolver,
        session_provider: SessionIdentityProvider,
        demo_mode: bool = True,
        user_age: int = DEFAULT_USER_AGE,
        max_history: int = MAX_HISTORY_MESSAGES,
    ):
        if max_history < 1:
            raise ValidationError(code="INVALID_HISTORY_LIMIT", message="max_history must be >= 1")
        self._resolver = resolver
        self._sessions = session_provider
        self._mode: ChatMode = "demo" if demo_mode else "remote"
        self._user_age = user_age
        self._max_history = max_history
        self._history: List[ChatMessage] = []
        self._conversation_id: Optional[str] = None
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None
        self._in_flight = 0

    # ---- 状态查询 ----

    @property
    def phase(self) -> ConversationPhase:
        return "awaiting_reply" if self._in_flight else "idle"

    @property
    def conversation_id(self) -> Optional[str]:
        return self._conversation_id

    @property
    def user_age(self) -> int:
        return self._user_age

    @property
    def mode(self) -> ChatMode:
        return self._mode

    def is_demo_mode(self) -> bool:
        return self._mode == "demo"

    def get_history(self) -> List[ChatMessage]:
        """返回历史消息副本，不包含 system 消息。"""

        return [m for m in self._history if m.role != "system"]

    # ---- 状态修改 ----

    def set_user_age(self, age: int) -> None:
        """更新用户年龄，从下一次 send_message 起生效。"""

        self._user_age = age

    def update_config(self, demo_mode: Optional[bool] = None) -> None:
        if demo_mode is not None:
            self._mode = "demo" if demo_mode else "remote"

    def add_system_message(self, content: str) -> ChatMessage:
        """追加一条 system 消息（预留给提示词注入，不会出现在 get_history 中）。"""

        msg = ChatMessage(role="system", content=content, timestamp=self._now())
        self._append(msg)
        return msg

    def reset(self) -> None:
        """清空历史与关联 token，保留年龄与模式。"""

        if self._in_flight:
            raise ConversationBusyError(
                code="CONVERSATION_BUSY",
                message="Cannot reset while a reply is pending",
                http_status=409,
            )
        self._history = []
        self._conversation_id = None
        logger.info("Conversation reset", extra={"extra": {"mode": self._mode}})

    async def send_message(self, text: str) -> Optional[ChatMessage]:
        """发送一条用户消息并返回助手回复。

        空白输入直接忽略（返回 None，不修改状态）。解析失败会被转换为一条
        降级回复，因此除空白输入外总会返回一条 assistant 消息。
        """

        content = (text or "").strip()
        if not content:
            return None

        self._in_flight += 1
        try:
            async with self._loop_lock():
                return await self._exchange(content)
        finally:
            self._in_flight -= 1

    async def ask_term(self, term: str) -> str:
        """请助手详细解释某个医学术语，返回回复文本。"""

        reply = await self.send_message(term_question(term))
        return reply.content if reply else ""

    # ---- 内部实现 ----

    async def _exchange(self, content: str) -> ChatMessage:
        start_time = time.time()
        session_id = self._sessions.get_session_id() if self._mode == "remote" else None
        self._append(ChatMessage(role="user", content=content, timestamp=self._now()))

        context = ResolveContext(
            age=self._user_age,
            mode=self._mode,
            conversation_id=self._conversation_id,
            session_id=session_id,
        )
        resolution = await self._resolver.resolve(content, context)

        if resolution.conversation_id:
            self._conversation_id = resolution.conversation_id

        reply = ChatMessage(role="assistant", content=resolution.reply, timestamp=self._now())
        self._append(reply)
        logger.info(
            "Reply resolved",
            extra={"extra": {
                "mode": context.mode,
                "degraded": resolution.degraded,
                "elapsed_seconds": round(time.time() - start_time, 2),
                "history_len": len(self._history),
            }},
        )
        return reply

    def _loop_lock(self) -> asyncio.Lock:
        # 锁绑定到首次发生等待的事件循环；换了循环（如每次 asyncio.run）就重建
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    def _append(self, msg: ChatMessage) -> None:
        self._history.append(msg)
        overflow = len(self._history) - self._max_history
        if overflow > 0:
            # 先进先出：丢弃最旧的消息，保留最近 max_history 条
            self._history = self._history[overflow:]
            logger.info(
                "Pruned history",
                extra={"extra": {"max_history": self._max_history, "trimmed": overflow}},
            )

    def _now(self) -> datetime:
        now = datetime.now(timezone.utc)
        if self._history and self._history[-1].timestamp and now < self._history[-1].timestamp:
            return self._history[-1].timestamp
        return now

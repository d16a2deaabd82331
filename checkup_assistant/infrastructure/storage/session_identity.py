from uuid import uuid4

from checkup_assistant.domain.exceptions import StorageError
from checkup_assistant.infrastructure.logging.logger import logger
from checkup_assistant.infrastructure.storage.json_store import KeyValueStore


SESSION_KEY = "health_agent_session_id"


class SessionIdentityProvider:
    """匿名会话标识。

    同一存储作用域内首次调用时生成并持久化一个 UUID，此后始终返回同一个值，
    不过期也不轮换。存储不可用时每次返回新的 UUID（远程会话关联随之失效）。
    """

    def __init__(self, store: KeyValueStore, key: str = SESSION_KEY):
        self._store = store
        self._key = key

    def get_session_id(self) -> str:
        try:
            session_id = self._store.get(self._key)
            if session_id:
                return session_id
            session_id = self._store.set_if_absent(self._key, str(uuid4()))
        except StorageError as e:
            logger.warning(
                f"Session store unavailable: {e.message}",
                extra={"extra": {"code": e.code, "key": self._key}},
            )
            return str(uuid4())
        except Exception as e:
            logger.exception(
                f"Session store failed: {e}",
                extra={"extra": {"key": self._key}},
            )
            return str(uuid4())
        logger.info("Session id ready", extra={"extra": {"key": self._key}})
        return session_id

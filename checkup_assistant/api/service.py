"""对外 API 服务模块。

提供简化的函数接口供页面/UI 层调用。每个页面会话显式持有自己的
AssistantSession，而不是共享一个隐藏的全局实例。
"""

from typing import Any, Dict, List, Optional

from checkup_assistant.config.settings import settings
from checkup_assistant.gateway import ChatGateway, create_gateway
from checkup_assistant.infrastructure.logging.logger import logger
from checkup_assistant.infrastructure.storage.json_store import JsonKeyValueStore, KeyValueStore
from checkup_assistant.infrastructure.storage.session_identity import SessionIdentityProvider
from checkup_assistant.knowledge.age_groups import get_age_group
from checkup_assistant.knowledge.packages import recommend_package
from checkup_assistant.knowledge.responses import QUICK_QUESTIONS
from checkup_assistant.knowledge.terms import explain_term
from checkup_assistant.services.conversation import ConversationService
from checkup_assistant.services.resolver import ResponseResolver


def build_conversation_service(
    cfg=None,
    gateway: Optional[ChatGateway] = None,
    store: Optional[KeyValueStore] = None,
    user_age: Optional[int] = None,
) -> ConversationService:
    """按配置组装一个 ConversationService。

    Args:
        cfg: 配置对象（默认使用全局 settings）
        gateway: 远程网关（可选，不提供则按配置创建；未配置时为 None）
        store: 会话标识的键值存储（可选，默认 JSON 文件存储）
        user_age: 初始年龄（可选，默认取配置）

    Returns:
        新的 ConversationService 实例
    """
    cfg = cfg or settings
    if gateway is None:
        gateway = create_gateway(cfg)
    if store is None:
        store = JsonKeyValueStore(root=cfg.storage_root)
    resolver = ResponseResolver(gateway=gateway, demo_delay=cfg.demo_delay_seconds)
    return ConversationService(
        resolver=resolver,
        session_provider=SessionIdentityProvider(store),
        demo_mode=cfg.demo_mode,
        user_age=cfg.default_user_age if user_age is None else user_age,
        max_history=cfg.max_history_messages,
    )


class AssistantSession:
    """一个页面会话内的助手入口。

    new_conversation() 通过重新创建服务来开始新对话（保留年龄与模式），
    对应“新对话”按钮。
    """

    def __init__(self, service: ConversationService, cfg=None, **build_kwargs: Any):
        self._service = service
        self._cfg = cfg
        self._build_kwargs = build_kwargs

    @classmethod
    def create(cls, cfg=None, **build_kwargs: Any) -> "AssistantSession":
        service = build_conversation_service(cfg, **build_kwargs)
        return cls(service, cfg=cfg, **build_kwargs)

    @property
    def service(self) -> ConversationService:
        return self._service

    def new_conversation(self) -> ConversationService:
        old = self._service
        build_kwargs = dict(self._build_kwargs)
        build_kwargs["user_age"] = old.user_age
        fresh = build_conversation_service(self._cfg, **build_kwargs)
        fresh.update_config(demo_mode=old.is_demo_mode())
        self._service = fresh
        logger.info("Started new conversation", extra={"extra": {"mode": fresh.mode}})
        return fresh

    def set_age(self, age: int) -> None:
        self._service.set_user_age(age)

    async def chat(self, user_input: str) -> Optional[Dict[str, Any]]:
        """发送消息并返回 UI 可直接渲染的字典；空白输入返回 None。

        Returns:
            包含助手消息、是否演示模式与关联 token 的字典
        """
        reply = await self._service.send_message(user_input)
        if reply is None:
            return None
        return {
            "assistant_message": reply.to_dict(),
            "demo_mode": self._service.is_demo_mode(),
            "conversation_id": self._service.conversation_id,
        }

    def history(self) -> List[Dict[str, Any]]:
        return [m.to_dict() for m in self._service.get_history()]

    def age_profile(self) -> Dict[str, Any]:
        """当前年龄对应的年龄段与推荐套餐。"""
        age = self._service.user_age
        group = get_age_group(age)
        package = recommend_package(age)
        return {
            "age": age,
            "name": group.name,
            "title": group.title,
            "description": group.description,
            "focus_points": list(group.focus_points),
            "amh_range": group.amh_range,
            "recommended_package": {"id": package.id, "name": package.name, "price": package.price},
        }

    @staticmethod
    def quick_questions() -> List[str]:
        return list(QUICK_QUESTIONS)

    @staticmethod
    def explain(term: str) -> Optional[str]:
        """术语的预设解释（不经过对话历史）。"""
        return explain_term(term)

    async def ask_term(self, term: str) -> str:
        return await self._service.ask_term(term)

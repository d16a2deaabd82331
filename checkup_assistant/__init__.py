"""Checkup Assistant 顶层包。

该包提供备孕体检指南页面内嵌助手的核心实现，
包括配置加载、领域模型、只读知识库、回复解析、
会话状态管理、匿名会话标识与远程对话网关。
"""

from checkup_assistant.api.service import AssistantSession, build_conversation_service
from checkup_assistant.services.conversation import ConversationService

__all__ = ["AssistantSession", "ConversationService", "build_conversation_service"]

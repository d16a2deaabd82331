"""统一的对话与配置数据模型。

本模块定义了助手内部在各层之间共享的标准数据结构：

- ChatMessage: 一条对话消息（user/assistant/system）。
- ResolveContext / Resolution: 回复解析器的输入上下文与输出结果。
- GatewayRequest / GatewayResponse: 与远程 Edge Function 交互的请求/响应。
- AgeBracketProfile / CheckupPackage: 只读的年龄段与体检套餐配置。

远程网关适配器只依赖这些模型，并负责在 JSON 与模型之间做转换。
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Tuple


# 消息角色；system 预留给提示词注入，不会展示给 UI
Role = Literal["user", "assistant", "system"]

# 回复来源：本地关键词匹配 或 远程 Edge Function
ChatMode = Literal["demo", "remote"]

PackageId = Literal["basic", "comprehensive", "premium"]

# 会话状态机：空闲 / 等待回复
ConversationPhase = Literal["idle", "awaiting_reply"]


@dataclass
class ChatMessage:
    """一条对话消息。

    - role: 消息角色。
    - content: 纯文本内容（可能包含简单 markdown）。
    - timestamp: 消息追加到历史时的 UTC 时间，可为空。
    """

    role: Role
    content: str
    timestamp: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "role": self.role,
            "content": self.content,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


@dataclass
class ResolveContext:
    """一次回复解析所需的上下文，由会话管理器在每次发送时构造。"""

    age: int
    mode: ChatMode
    conversation_id: Optional[str] = None
    session_id: Optional[str] = None


@dataclass
class Resolution:
    """回复解析结果。

    conversation_id 为解析后应持有的关联 token：远程返回了新 token 时为新值，
    否则保持传入时的值。degraded 表示这是一条降级回复（远程调用失败等）。
    """

    reply: str
    conversation_id: Optional[str] = None
    degraded: bool = False


@dataclass
class GatewayRequest:
    """发给远程对话函数的请求体。"""

    message: str
    conversation_id: Optional[str]
    session_id: str
    user_age: int

    def to_payload(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "conversationId": self.conversation_id,
            "sessionId": self.session_id,
            "userAge": self.user_age,
        }


@dataclass
class GatewayResponse:
    """远程对话函数的响应，content 缺失时由上层替换为兜底文本。"""

    content: Optional[str]
    conversation_id: Optional[str] = None
    raw: Optional[dict] = None

    @classmethod
    def from_payload(cls, data: Any) -> "GatewayResponse":
        if not isinstance(data, dict):
            return cls(content=None, conversation_id=None, raw=None)
        content = data.get("content")
        conv_id = data.get("conversationId")
        return cls(
            content=str(content) if content else None,
            conversation_id=str(conv_id) if conv_id else None,
            raw=data,
        )


@dataclass(frozen=True)
class AgeBracketProfile:
    """某个年龄段的备孕建议（只读配置）。"""

    min_age: int
    max_age: int
    name: str
    title: str
    description: str
    focus_points: Tuple[str, ...]
    recommended_package: PackageId
    amh_range: str

    def contains(self, age: int) -> bool:
        return self.min_age <= age <= self.max_age


@dataclass(frozen=True)
class PackageFeature:
    text: str
    term: Optional[str] = None  # 对应的医学术语，可用于术语解释


@dataclass(frozen=True)
class CheckupPackage:
    """体检套餐（只读配置）。"""

    id: PackageId
    name: str
    price: str
    price_range: Tuple[int, int]
    description: str
    recommended_for: Tuple[str, ...]
    features: Tuple[PackageFeature, ...] = field(default_factory=tuple)

    @property
    def medical_terms(self) -> List[str]:
        return [f.term for f in self.features if f.term]

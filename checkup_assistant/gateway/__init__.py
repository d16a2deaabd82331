"""远程对话网关集成层。

该包下的模块负责：
- 定义网关抽象接口 (base)。
- 提供具体实现 (supabase_client)。
"""

from typing import Optional

from checkup_assistant.config.settings import settings
from checkup_assistant.gateway.base import ChatGateway
from checkup_assistant.gateway.supabase_client import SupabaseFunctionGateway


def create_gateway(cfg=None) -> Optional[ChatGateway]:
    """根据配置创建网关实例；地址或 key 缺失时返回 None，远程模式随之不可用。"""

    cfg = cfg or settings
    if not (getattr(cfg, "supabase_url", None) and getattr(cfg, "supabase_anon_key", None)):
        return None
    return SupabaseFunctionGateway(cfg)


__all__ = ["ChatGateway", "SupabaseFunctionGateway", "create_gateway"]

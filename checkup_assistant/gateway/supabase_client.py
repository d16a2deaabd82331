"""Supabase Edge Function 网关适配器。

本模块负责：

1. 接收统一的 GatewayRequest。
2. 将其转换为 Edge Function 的 HTTP 调用（POST /functions/v1/<name>）。
3. 调用 HTTP 接口并处理网络/API 异常。
4. 将响应 JSON 解析为统一的 GatewayResponse。

AI 的真实 API Key 只在 Edge Function 服务端配置，这里只携带匿名 key。
"""

import json
from typing import Any, Dict

import httpx

from checkup_assistant.domain.exceptions import ApiError, ConfigurationError, NetworkError
from checkup_assistant.domain.models import GatewayRequest, GatewayResponse


class SupabaseFunctionGateway:
    """Supabase Edge Function 客户端实现。"""

    name = "supabase"

    def __init__(self, settings):
        # Settings 里包含 supabase_url、anon key、函数名与超时等配置
        self._settings = settings

    @property
    def function_url(self) -> str:
        base = (getattr(self._settings, "supabase_url", None) or "").rstrip("/")
        return f"{base}/functions/v1/{self._settings.chat_function_name}"

    async def invoke(self, req: GatewayRequest) -> GatewayResponse:
        """执行一次远程对话调用。

        步骤：
        1. 校验地址与 key 已配置。
        2. 发送请求并捕获网络错误/服务端错误。
        3. 解析 JSON 响应为 GatewayResponse。
        """

        anon_key = getattr(self._settings, "supabase_anon_key", None)
        if not getattr(self._settings, "supabase_url", None) or not anon_key:
            raise ConfigurationError(
                code="MISSING_SUPABASE_CONFIG",
                message="SUPABASE_URL / SUPABASE_ANON_KEY not set",
            )
        try:
            async with httpx.AsyncClient(timeout=self._settings.http_timeout, trust_env=False) as client:
                resp = await client.post(
                    self.function_url,
                    json=req.to_payload(),
                    headers={
                        "Authorization": f"Bearer {anon_key}",
                        "apikey": anon_key,
                        "Content-Type": "application/json",
                    },
                )
        except httpx.RequestError as e:
            # 网络错误：DNS 失败、连接超时等
            raise NetworkError(code="NETWORK_ERROR", message=str(e) or type(e).__name__)
        if resp.status_code >= 400:
            raise ApiError(
                code="API_ERROR",
                message=self._error_message(resp),
                http_status=resp.status_code,
                function=self._settings.chat_function_name,
            )
        try:
            data = resp.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise ApiError(code="INVALID_RESPONSE", message=f"Invalid JSON from edge function: {e}")
        return GatewayResponse.from_payload(data)

    @staticmethod
    def _error_message(resp: Any) -> str:
        """优先使用函数返回的 error/message 字段，否则退回原始响应文本。"""

        try:
            body: Dict[str, Any] = resp.json()
        except (json.JSONDecodeError, ValueError):
            body = {}
        if isinstance(body, dict):
            for key in ("error", "message"):
                if body.get(key):
                    return str(body[key])
        text = getattr(resp, "text", "") or ""
        return text or f"Edge Function returned status {resp.status_code}"

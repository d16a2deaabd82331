import asyncio
import json

import httpx
import pytest

from checkup_assistant.domain.exceptions import ApiError, ConfigurationError, NetworkError
from checkup_assistant.domain.models import GatewayRequest
from checkup_assistant.gateway import create_gateway
from checkup_assistant.gateway.supabase_client import SupabaseFunctionGateway


class SettingsStub:
    supabase_url = "https://demo.supabase.co"
    supabase_anon_key = "anon-key-123"
    chat_function_name = "health-chat"
    http_timeout = 1.0


class Resp:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise json.JSONDecodeError("Expecting value", self.text or "", 0)
        return self._payload


def make_client(resp=None, error=None, captured=None):
    class Client:
        def __init__(self, *a, **kw):
            if captured is not None:
                captured["client_kwargs"] = kw

        async def __aenter__(self):
            return self

        async def __aexit__(self, *a):
            return False

        async def post(self, url, json=None, headers=None, **_):
            if captured is not None:
                captured["url"] = url
                captured["payload"] = json
                captured["headers"] = headers
            if error:
                raise error
            return resp

    return Client


def _request(conversation_id=None):
    return GatewayRequest(message="AMH是什么？", conversation_id=conversation_id, session_id="s-1", user_age=31)


def test_invoke_success(monkeypatch):
    captured = {}
    resp = Resp(payload={"content": "AMH 是……", "conversationId": "conv-9"})
    monkeypatch.setattr("httpx.AsyncClient", make_client(resp, captured=captured))
    gw = SupabaseFunctionGateway(SettingsStub())
    out = asyncio.run(gw.invoke(_request("conv-1")))
    assert out.content == "AMH 是……"
    assert out.conversation_id == "conv-9"
    assert captured["url"] == "https://demo.supabase.co/functions/v1/health-chat"
    assert captured["payload"] == {
        "message": "AMH是什么？",
        "conversationId": "conv-1",
        "sessionId": "s-1",
        "userAge": 31,
    }
    assert captured["headers"]["Authorization"] == "Bearer anon-key-123"
    assert captured["headers"]["apikey"] == "anon-key-123"
    assert captured["client_kwargs"]["timeout"] == 1.0


def test_invoke_without_conversation_id(monkeypatch):
    monkeypatch.setattr("httpx.AsyncClient", make_client(Resp(payload={"content": "ok"})))
    out = asyncio.run(SupabaseFunctionGateway(SettingsStub()).invoke(_request()))
    assert out.content == "ok"
    assert out.conversation_id is None


def test_invoke_network_error(monkeypatch):
    err = httpx.ConnectError("connection refused")
    monkeypatch.setattr("httpx.AsyncClient", make_client(error=err))
    with pytest.raises(NetworkError) as exc:
        asyncio.run(SupabaseFunctionGateway(SettingsStub()).invoke(_request()))
    assert "connection refused" in exc.value.message


def test_invoke_http_error_uses_body_message(monkeypatch):
    resp = Resp(status_code=500, payload={"error": "AI provider unavailable"})
    monkeypatch.setattr("httpx.AsyncClient", make_client(resp))
    with pytest.raises(ApiError) as exc:
        asyncio.run(SupabaseFunctionGateway(SettingsStub()).invoke(_request()))
    assert exc.value.http_status == 500
    assert exc.value.message == "AI provider unavailable"


def test_invoke_http_error_plain_text(monkeypatch):
    resp = Resp(status_code=404, payload=None, text="Function not found")
    monkeypatch.setattr("httpx.AsyncClient", make_client(resp))
    with pytest.raises(ApiError) as exc:
        asyncio.run(SupabaseFunctionGateway(SettingsStub()).invoke(_request()))
    assert exc.value.message == "Function not found"


def test_invoke_invalid_json(monkeypatch):
    resp = Resp(status_code=200, payload=None, text="<html>")
    monkeypatch.setattr("httpx.AsyncClient", make_client(resp))
    with pytest.raises(ApiError) as exc:
        asyncio.run(SupabaseFunctionGateway(SettingsStub()).invoke(_request()))
    assert exc.value.code == "INVALID_RESPONSE"


def test_invoke_missing_config():
    class NoKey(SettingsStub):
        supabase_anon_key = None

    with pytest.raises(ConfigurationError):
        asyncio.run(SupabaseFunctionGateway(NoKey()).invoke(_request()))


def test_create_gateway_requires_both_values():
    class NoUrl(SettingsStub):
        supabase_url = None

    assert create_gateway(NoUrl()) is None
    assert isinstance(create_gateway(SettingsStub()), SupabaseFunctionGateway)

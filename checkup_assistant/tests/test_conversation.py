import asyncio

import pytest

from checkup_assistant.domain.exceptions import ConversationBusyError
from checkup_assistant.domain.models import GatewayResponse
from checkup_assistant.infrastructure.storage.json_store import MemoryKeyValueStore
from checkup_assistant.infrastructure.storage.session_identity import SessionIdentityProvider
from checkup_assistant.knowledge.responses import AMH_EXPLANATION, DEFAULT_GREETING, SYSTEM_PROMPT
from checkup_assistant.services.conversation import ConversationService
from checkup_assistant.services.resolver import ResponseResolver


class FakeGateway:
    """按顺序返回预设响应，并记录每次请求。"""

    name = "fake"

    def __init__(self, responses=None, delays=None):
        self.responses = list(responses or [])
        self.delays = list(delays or [])
        self.requests = []

    async def invoke(self, req):
        self.requests.append(req)
        if self.delays:
            await asyncio.sleep(self.delays.pop(0))
        if self.responses:
            return self.responses.pop(0)
        return GatewayResponse(content=f"reply to {req.message}")


def make_service(demo_mode=True, gateway=None, demo_delay=0, **kw):
    resolver = ResponseResolver(gateway=gateway, demo_delay=demo_delay)
    sessions = SessionIdentityProvider(MemoryKeyValueStore())
    return ConversationService(resolver=resolver, session_provider=sessions, demo_mode=demo_mode, **kw)


def test_send_message_demo_end_to_end():
    svc = make_service()
    reply = asyncio.run(svc.send_message("AMH是什么？"))
    assert reply.role == "assistant"
    assert reply.content == AMH_EXPLANATION
    history = svc.get_history()
    assert [m.role for m in history] == ["user", "assistant"]
    assert history[0].content == "AMH是什么？"
    assert history[1] is reply
    assert history[0].timestamp <= history[1].timestamp
    assert svc.phase == "idle"


def test_blank_input_is_noop():
    svc = make_service()
    assert asyncio.run(svc.send_message("   ")) is None
    assert asyncio.run(svc.send_message("")) is None
    assert svc.get_history() == []


def test_input_is_trimmed():
    svc = make_service()
    asyncio.run(svc.send_message("  你好  "))
    assert svc.get_history()[0].content == "你好"
    assert svc.get_history()[1].content == DEFAULT_GREETING


def test_history_retention_keeps_most_recent():
    svc = make_service()

    async def run():
        for i in range(15):
            await svc.send_message(f"问题{i}")

    asyncio.run(run())
    history = svc.get_history()
    assert len(history) == 20
    # 保留的是最后 10 轮，顺序不变
    users = [m.content for m in history if m.role == "user"]
    assert users == [f"问题{i}" for i in range(5, 15)]
    assert history[0].role == "user"


def test_history_below_cap_is_complete():
    svc = make_service()

    async def run():
        for i in range(7):
            await svc.send_message(f"q{i}")

    asyncio.run(run())
    assert len(svc.get_history()) == 14


def test_custom_history_limit():
    svc = make_service(max_history=4)

    async def run():
        for i in range(3):
            await svc.send_message(f"q{i}")

    asyncio.run(run())
    assert [m.content for m in svc.get_history() if m.role == "user"] == ["q1", "q2"]


def test_reset_clears_history_and_token():
    gateway = FakeGateway(responses=[
        GatewayResponse(content="X", conversation_id="abc"),
        GatewayResponse(content="Y"),
    ])
    svc = make_service(demo_mode=False, gateway=gateway, user_age=33)
    asyncio.run(svc.send_message("first"))
    assert svc.conversation_id == "abc"

    svc.reset()
    assert svc.get_history() == []
    assert svc.conversation_id is None
    assert svc.user_age == 33
    assert not svc.is_demo_mode()

    asyncio.run(svc.send_message("second"))
    assert gateway.requests[1].conversation_id is None


def test_remote_token_propagates_and_is_preserved():
    gateway = FakeGateway(responses=[
        GatewayResponse(content="X", conversation_id="abc"),
        GatewayResponse(content="Y"),
        GatewayResponse(content="Z"),
    ])
    svc = make_service(demo_mode=False, gateway=gateway)

    async def run():
        await svc.send_message("one")
        await svc.send_message("two")
        await svc.send_message("three")

    asyncio.run(run())
    assert gateway.requests[0].conversation_id is None
    assert gateway.requests[1].conversation_id == "abc"
    # 第二次响应没有 conversationId，沿用之前的 token
    assert gateway.requests[2].conversation_id == "abc"
    assert svc.conversation_id == "abc"


def test_session_id_is_stable_across_calls():
    gateway = FakeGateway()
    svc = make_service(demo_mode=False, gateway=gateway)

    async def run():
        await svc.send_message("a")
        await svc.send_message("b")

    asyncio.run(run())
    ids = {r.session_id for r in gateway.requests}
    assert len(ids) == 1
    assert ids.pop()


def test_set_user_age_applies_to_next_call():
    gateway = FakeGateway()
    svc = make_service(demo_mode=False, gateway=gateway)

    async def run():
        await svc.send_message("a")
        svc.set_user_age(37)
        await svc.send_message("b")

    asyncio.run(run())
    assert gateway.requests[0].user_age == 29
    assert gateway.requests[1].user_age == 37


def test_remote_failure_keeps_user_message():
    class BrokenGateway:
        name = "broken"

        async def invoke(self, req):
            raise RuntimeError("socket closed")

    svc = make_service(demo_mode=False, gateway=BrokenGateway())
    reply = asyncio.run(svc.send_message("还在吗"))
    assert reply.role == "assistant"
    assert reply.content.startswith("⚠️")
    history = svc.get_history()
    assert [m.role for m in history] == ["user", "assistant"]
    assert history[0].content == "还在吗"


def test_system_messages_are_hidden():
    svc = make_service()
    svc.add_system_message(SYSTEM_PROMPT)
    asyncio.run(svc.send_message("叶酸"))
    roles = [m.role for m in svc.get_history()]
    assert "system" not in roles
    assert len(roles) == 2


def test_update_config_switches_mode():
    svc = make_service(demo_mode=True)
    assert svc.is_demo_mode()
    svc.update_config(demo_mode=False)
    assert not svc.is_demo_mode()
    assert svc.mode == "remote"
    svc.update_config()
    assert svc.mode == "remote"


def test_overlapping_sends_are_serialized():
    # 第一次调用比第二次慢，但回复仍按调用顺序追加
    gateway = FakeGateway(delays=[0.05, 0.0])
    svc = make_service(demo_mode=False, gateway=gateway)

    async def run():
        return await asyncio.gather(svc.send_message("slow"), svc.send_message("fast"))

    first, second = asyncio.run(run())
    assert first.content == "reply to slow"
    assert second.content == "reply to fast"
    assert [m.content for m in svc.get_history()] == ["slow", "reply to slow", "fast", "reply to fast"]


def test_reset_rejected_while_awaiting_reply():
    gateway = FakeGateway(delays=[0.05])
    svc = make_service(demo_mode=False, gateway=gateway)

    async def run():
        task = asyncio.create_task(svc.send_message("pending"))
        await asyncio.sleep(0.01)
        assert svc.phase == "awaiting_reply"
        with pytest.raises(ConversationBusyError):
            svc.reset()
        await task

    asyncio.run(run())
    assert svc.phase == "idle"
    assert len(svc.get_history()) == 2
    svc.reset()
    assert svc.get_history() == []


def test_ask_term_returns_reply_text():
    svc = make_service()
    text = asyncio.run(svc.ask_term("AMH"))
    assert text == AMH_EXPLANATION
    assert svc.get_history()[0].content.startswith('请用通俗易懂的语言解释"AMH"')


def test_overlapping_sends_across_event_loops():
    # 同一个服务先后在两个 asyncio.run 中处理重叠请求
    gateway = FakeGateway(delays=[0.02, 0.0, 0.02, 0.0])
    svc = make_service(demo_mode=False, gateway=gateway)

    async def run(a, b):
        return await asyncio.gather(svc.send_message(a), svc.send_message(b))

    asyncio.run(run("a", "b"))
    first, second = asyncio.run(run("c", "d"))
    assert first.content == "reply to c"
    assert second.content == "reply to d"
    assert [m.content for m in svc.get_history()] == [
        "a", "reply to a", "b", "reply to b",
        "c", "reply to c", "d", "reply to d",
    ]
    assert svc.phase == "idle"


def test_session_store_error_does_not_escape_send():
    class DeniedStore:
        def get(self, key):
            raise PermissionError("EACCES")

        def set(self, key, value):
            raise PermissionError("EACCES")

        def set_if_absent(self, key, value):
            raise PermissionError("EACCES")

    gateway = FakeGateway()
    resolver = ResponseResolver(gateway=gateway, demo_delay=0)
    svc = ConversationService(
        resolver=resolver,
        session_provider=SessionIdentityProvider(DeniedStore()),
        demo_mode=False,
    )
    reply = asyncio.run(svc.send_message("hi"))
    assert reply.role == "assistant"
    assert reply.content == "reply to hi"
    assert [m.role for m in svc.get_history()] == ["user", "assistant"]
    assert gateway.requests[0].session_id

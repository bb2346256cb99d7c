"""
Tests for the event router: authentication, chat messages and queries.
"""

import asyncio

import pytest

from chatboard.realtime.connection_models import CLOSE_CODE_POLICY_VIOLATION
from chatboard.realtime.event_router import EventRouter
from chatboard.schemas.websocket_messages import INBOUND_EVENT_TYPES
from chatboard.tests.fakes import RealtimeHarness, parse_event


class TestAuthenticate:
    """The authenticate event."""

    @pytest.mark.asyncio
    async def test_successful_authentication_sequence(self, harness: RealtimeHarness):
        """Test that a new session sees authenticated, history, then presence."""
        harness.store.messages.extend(
            [
                {"id": 1, "username": "bob", "content": "first", "timestamp": "2024-01-01T00:00:00.000Z"},
                {"id": 2, "username": "bob", "content": "second", "timestamp": "2024-01-01T00:00:01.000Z"},
            ]
        )

        session, alice = await harness.login("alice")

        assert session.identity == "alice"
        assert alice.event_types() == [
            "authenticated",
            "message_history",
            "user_list",
            "connected_users",
            "user_joined",
        ]
        assert alice.events("authenticated") == [{"success": True, "username": "alice"}]
        history = alice.events("message_history")[0]["messages"]
        assert [m["content"] for m in history] == ["first", "second"]
        assert harness.store.connection_logs == [("alice", "connect")]
        assert harness.counters.active_connections == 1

    @pytest.mark.asyncio
    async def test_history_is_limited_to_most_recent(self, harness: RealtimeHarness):
        """Test that only the latest history_limit messages are sent, oldest first."""
        harness.router.history_limit = 3
        for n in range(1, 6):
            harness.store.messages.append({"id": n, "username": "bob", "content": f"m{n}", "timestamp": None})

        _, alice = await harness.login("alice")

        history = alice.events("message_history")[0]["messages"]
        assert [m["id"] for m in history] == [3, 4, 5]

    @pytest.mark.asyncio
    async def test_invalid_token_fails_and_terminates(self, harness: RealtimeHarness):
        """Test that a bad token gets a failure event and the connection is closed with 1008."""
        session, connection = harness.connect()
        _, watcher = harness.connect()

        await harness.send(session, "authenticate", {"token": "nope"})

        assert connection.events("authenticated") == [{"success": False, "error": "Invalid token"}]
        assert connection.closed_with == CLOSE_CODE_POLICY_VIOLATION
        assert session.closed
        assert session.identity is None
        assert harness.registry.list_identities() == set()
        assert watcher.sent == []

    @pytest.mark.asyncio
    async def test_missing_token_fails(self, harness: RealtimeHarness):
        """Test that an authenticate event without a token is refused."""
        session, connection = harness.connect()

        await harness.send(session, "authenticate", {})

        assert connection.events("authenticated")[0]["success"] is False
        assert session.closed

    @pytest.mark.asyncio
    async def test_store_failure_during_authentication_is_auth_failure(self, harness: RealtimeHarness):
        """Test that a token lookup failure is reported as an invalid token."""
        harness.store.add_user("alice", "token-alice")
        harness.store.fail_operations.add("find_user_by_token")
        session, connection = harness.connect()

        await harness.send(session, "authenticate", {"token": "token-alice"})

        assert connection.events("authenticated") == [{"success": False, "error": "Invalid token"}]
        assert session.closed

    @pytest.mark.asyncio
    async def test_history_failure_sends_empty_history(self, harness: RealtimeHarness):
        """Test that authentication still succeeds when history cannot be loaded."""
        harness.store.fail_operations.add("list_recent_messages")

        session, alice = await harness.login("alice")

        assert session.is_authenticated
        assert alice.events("message_history") == [{"messages": []}]

    @pytest.mark.asyncio
    async def test_second_authenticate_is_rejected(self, harness: RealtimeHarness):
        """Test that an authenticated session cannot authenticate again."""
        session, alice = await harness.login("alice")
        harness.store.add_user("bob", "token-bob")
        alice.clear()

        await harness.send(session, "authenticate", {"token": "token-bob"})

        assert alice.events("error") == [{"message": "Already authenticated"}]
        assert session.identity == "alice"
        assert not session.closed
        assert harness.registry.list_identities() == {"alice"}

    @pytest.mark.asyncio
    async def test_broadcast_during_history_load_arrives_after_history(self, harness: RealtimeHarness):
        """Test that a message published while history loads is not duplicated or reordered."""
        sender, _ = await harness.login("bob")
        original_list = harness.store.list_recent_messages

        async def list_then_race(limit: int):
            history = await original_list(limit)
            # Another session's message lands between the history read and its delivery
            await harness.router.dispatch(sender, parse_event("send_message", {"content": "racing"}))
            return history

        harness.store.list_recent_messages = list_then_race  # type: ignore[method-assign]
        _, alice = await harness.login("alice")

        types = alice.event_types()
        assert types.index("message_history") < types.index("new_message")
        assert [m["content"] for m in alice.events("new_message")] == ["racing"]

    @pytest.mark.asyncio
    async def test_message_already_in_history_is_not_repeated(self, harness: RealtimeHarness):
        """Test that a held new_message whose id is in the history is dropped."""
        sender, _ = await harness.login("bob")
        original_list = harness.store.list_recent_messages

        async def race_then_list(limit: int):
            await harness.router.dispatch(sender, parse_event("send_message", {"content": "early"}))
            return await original_list(limit)

        harness.store.list_recent_messages = race_then_list  # type: ignore[method-assign]
        _, alice = await harness.login("alice")

        assert [m["content"] for m in alice.events("message_history")[0]["messages"]] == ["early"]
        assert alice.events("new_message") == []

    @pytest.mark.asyncio
    async def test_message_published_after_history_release_is_not_repeated(self, harness: RealtimeHarness):
        """Test that a message stored before the history read but published after release is sent once."""
        sender, bob = await harness.login("bob")
        stored = asyncio.Event()
        resume = asyncio.Event()
        original_insert = harness.store.insert_message

        async def insert_then_wait(username, content, timestamp):
            message = await original_insert(username, content, timestamp)
            stored.set()
            await resume.wait()
            return message

        harness.store.insert_message = insert_then_wait  # type: ignore[method-assign]
        sending = asyncio.create_task(harness.router.dispatch(sender, parse_event("send_message", {"content": "dup"})))
        await stored.wait()

        _, alice = await harness.login("alice")
        resume.set()
        await sending
        await harness.settle()

        assert [m["content"] for m in alice.events("message_history")[0]["messages"]] == ["dup"]
        assert alice.events("new_message") == []
        assert [m["content"] for m in bob.events("new_message")] == ["dup"]


class TestSendMessage:
    """The send_message event."""

    @pytest.mark.asyncio
    async def test_unauthenticated_send_never_stores_or_broadcasts(self, harness: RealtimeHarness):
        """Test that an anonymous session's message is refused without touching the store."""
        session, connection = harness.connect()
        _, watcher = harness.connect()

        await harness.send(session, "send_message", {"content": "hi"})

        assert connection.events("error") == [{"message": "Not authenticated"}]
        assert "insert_message" not in harness.store.calls
        assert watcher.sent == []
        assert harness.counters.messages_count == 0

    @pytest.mark.asyncio
    async def test_hello_reaches_every_session_once(self, harness: RealtimeHarness):
        """Test that alice's 'hello' is delivered exactly once to all sessions, hers included."""
        session, alice = await harness.login("alice")
        _, bob = await harness.login("bob")
        _, anonymous = harness.connect()

        await harness.send(session, "send_message", {"content": "hello"})

        for connection in (alice, bob, anonymous):
            messages = connection.events("new_message")
            assert len(messages) == 1
            assert messages[0]["username"] == "alice"
            assert messages[0]["content"] == "hello"
            assert messages[0]["id"] == 1
            assert messages[0]["timestamp"].endswith("Z")
        assert harness.counters.messages_count == 1

    @pytest.mark.asyncio
    async def test_messages_from_one_sender_arrive_in_order(self, harness: RealtimeHarness):
        """Test that successive messages from one identity keep their order everywhere."""
        session, _ = await harness.login("alice")
        _, bob = await harness.login("bob")

        for text in ("one", "two", "three"):
            await harness.send(session, "send_message", {"content": text})

        assert [m["content"] for m in bob.events("new_message")] == ["one", "two", "three"]

    @pytest.mark.asyncio
    async def test_content_is_sanitized_and_truncated(self, harness: RealtimeHarness):
        """Test that markup is escaped and content is cut at 500 characters."""
        session, alice = await harness.login("alice")

        await harness.send(session, "send_message", {"content": "<i>hi</i>"})
        await harness.send(session, "send_message", {"content": "x" * 600})

        contents = [m["content"] for m in alice.events("new_message")]
        assert contents[0] == "&lt;i&gt;hi&lt;/i&gt;"
        assert len(contents[1]) == 500

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["", "   ", None, 42])
    async def test_empty_message_rejected(self, harness: RealtimeHarness, content):
        """Test that blank or non-text content is refused for the sender only."""
        session, alice = await harness.login("alice")
        _, bob = await harness.login("bob")
        alice.clear()
        bob.clear()

        await harness.send(session, "send_message", {"content": content})

        assert alice.events("error") == [{"message": "Empty message"}]
        assert bob.sent == []
        assert "insert_message" not in harness.store.calls

    @pytest.mark.asyncio
    async def test_sixth_message_in_window_is_rate_limited(self, harness: RealtimeHarness):
        """Test that the sixth message within a second is refused and not stored."""
        session, alice = await harness.login("alice")
        harness.rate_limiter.window_ms = 60_000

        for n in range(6):
            await harness.send(session, "send_message", {"content": f"m{n}"})

        assert len(alice.events("new_message")) == 5
        assert alice.events("error") == [{"message": "Too many messages. Slow down!"}]
        assert len(harness.store.messages) == 5
        assert not session.closed

    @pytest.mark.asyncio
    async def test_tabs_share_rate_budget(self, harness: RealtimeHarness):
        """Test that two sessions of one identity draw from the same budget."""
        first, _ = await harness.login("alice")
        second, second_conn = await harness.login("alice")
        harness.rate_limiter.window_ms = 60_000

        for n in range(5):
            await harness.send(first, "send_message", {"content": f"m{n}"})
        await harness.send(second, "send_message", {"content": "over"})

        assert second_conn.events("error") == [{"message": "Too many messages. Slow down!"}]

    @pytest.mark.asyncio
    async def test_store_failure_drops_message_silently(self, harness: RealtimeHarness):
        """Test that a failed insert is not broadcast, counted or reported."""
        session, alice = await harness.login("alice")
        alice.clear()
        harness.store.fail_operations.add("insert_message")

        await harness.send(session, "send_message", {"content": "lost"})

        assert alice.sent == []
        assert harness.counters.messages_count == 0
        assert not session.closed


class TestQueries:
    """Monitoring, latency and presence queries."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "kind,data",
        [
            ("get_monitoring", {}),
            ("ping_latency", {"ts": 1}),
            ("get_connected_users", {}),
            ("get_board_items", {}),
            ("create_board_item", {"title": "x"}),
            ("update_board_item", {"id": 1}),
            ("delete_board_item", {"id": 1}),
        ],
    )
    async def test_every_non_authenticate_event_requires_authentication(self, harness: RealtimeHarness, kind, data):
        """Test that anonymous sessions get Not authenticated for every other event kind."""
        session, connection = harness.connect()

        await harness.send(session, kind, data)

        assert connection.event_types() == ["error"]
        assert connection.events("error") == [{"message": "Not authenticated"}]
        assert harness.store.calls == []

    @pytest.mark.asyncio
    async def test_get_monitoring_returns_counters(self, harness: RealtimeHarness):
        """Test that monitoring_data carries the process counters."""
        session, alice = await harness.login("alice")
        harness.connect()
        await harness.send(session, "send_message", {"content": "hi"})
        alice.clear()

        await harness.send(session, "get_monitoring")

        assert alice.events("monitoring_data") == [
            {"activeConnections": 1, "totalConnections": 2, "messagesCount": 1}
        ]

    @pytest.mark.asyncio
    async def test_ping_latency_echoes_timestamp(self, harness: RealtimeHarness):
        """Test that pong_latency returns the client's ts unchanged."""
        session, alice = await harness.login("alice")
        alice.clear()

        await harness.send(session, "ping_latency", {"ts": 1700000000123})

        assert alice.events("pong_latency") == [{"ts": 1700000000123}]

    @pytest.mark.asyncio
    async def test_get_connected_users_lists_distinct_identities(self, harness: RealtimeHarness):
        """Test that connected_users lists each online identity once, sorted."""
        session, alice = await harness.login("alice")
        await harness.login("bob")
        await harness.login("alice")
        alice.clear()

        await harness.send(session, "get_connected_users")

        assert alice.events("connected_users") == [{"users": ["alice", "bob"]}]


class TestRouterConstruction:
    """Handler coverage."""

    def test_every_inbound_event_has_a_handler(self, harness: RealtimeHarness):
        """Test that the router maps every inbound event model."""
        assert set(harness.router._handlers) == set(INBOUND_EVENT_TYPES)

    def test_router_is_the_event_router_class(self, harness: RealtimeHarness):
        """Test that the harness uses the production router."""
        assert isinstance(harness.router, EventRouter)

"""Tests for the event system."""

from __future__ import annotations

import logging

import pytest

from agent_rewind_engine.events import (
    BEFORE_TOOL_CALL,
    CONFIRM_TOOL_CALL,
    BeforeToolCallEvent,
    ConfirmationDecision,
    ConfirmationRequest,
    EventBus,
    ToolCallEventResult,
)


class TestEventBus:
    """Tests for EventBus."""

    async def test_on_and_emit(self) -> None:
        bus = EventBus()
        received: list[str] = []

        bus.on("test", lambda data: received.append(data))
        await bus.emit("test", "hello")

        assert received == ["hello"]

    async def test_decorator(self) -> None:
        bus = EventBus()

        @bus.on("test")
        def handler(data):
            return data * 2

        assert await bus.emit("test", 21) == [42]
        assert handler(1) == 2

    async def test_async_handlers(self) -> None:
        bus = EventBus()

        async def handler(data):
            return ToolCallEventResult(block=True, reason=data.tool_name)

        bus.on(BEFORE_TOOL_CALL, handler)
        results = await bus.emit(BEFORE_TOOL_CALL, BeforeToolCallEvent("bash", {}))

        assert results == [ToolCallEventResult(block=True, reason="bash")]

    async def test_priority_order(self) -> None:
        bus = EventBus()
        order: list[str] = []

        bus.on("e", lambda d: order.append("late"), priority=10)
        bus.on("e", lambda d: order.append("early"), priority=-1)
        await bus.emit("e")

        assert order == ["early", "late"]

    async def test_none_results_dropped(self) -> None:
        bus = EventBus()
        bus.on("e", lambda d: None)
        bus.on("e", lambda d: "x")

        assert await bus.emit("e") == ["x"]

    async def test_handler_error_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Should log a failing handler and keep going."""
        bus = EventBus()

        def broken(data):
            raise RuntimeError("boom")

        bus.on(CONFIRM_TOOL_CALL, broken, source="ui")
        bus.on(CONFIRM_TOOL_CALL, lambda r: ConfirmationDecision(approved=True))

        with caplog.at_level(logging.WARNING, logger="agent_rewind_engine"):
            results = await bus.emit(
                CONFIRM_TOOL_CALL, ConfirmationRequest("bash", {}, "normal"),
            )

        assert results == [ConfirmationDecision(approved=True)]
        assert "boom" in caplog.text

    async def test_unsubscribe(self) -> None:
        bus = EventBus()
        unsubscribe = bus.on("e", lambda d: 1)

        unsubscribe()
        unsubscribe()

        assert await bus.emit("e") == []
        assert bus.handler_count == 0

    def test_off_and_clear(self) -> None:
        bus = EventBus()

        def handler(data):
            return None

        bus.on("a", handler)
        bus.on("b", handler)
        bus.off("a", handler)

        assert not bus.has_handlers("a")
        assert bus.has_handlers("b")

        bus.clear()
        assert bus.handler_count == 0

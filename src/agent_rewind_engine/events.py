"""
Event system for tool execution.

The :class:`ToolExecutor` emits lifecycle events on an :class:`EventBus`.
Handlers can observe calls, block them, or resolve the confirmation
required for dangerous tools by returning result objects.

Example:
    from agent_rewind_engine.events import EventBus, ConfirmationDecision

    bus = EventBus()

    @bus.on("confirm_tool_call")
    async def ask_user(request):
        answer = await ui.prompt(f"Run {request.tool_name}?")
        return ConfirmationDecision(approved=answer == "yes")
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from agent_rewind_engine.logging import get_logger

logger = get_logger("events")


# ---------------------------------------------------------------------------
# Event types
# ---------------------------------------------------------------------------

BEFORE_TOOL_CALL = "before_tool_call"
CONFIRM_TOOL_CALL = "confirm_tool_call"
AFTER_TOOL_RESULT = "after_tool_result"


@dataclass
class BeforeToolCallEvent:
    """Emitted after validation and permission checks. Handler can block or modify args."""

    tool_name: str
    args: dict[str, Any]
    session_id: str | None = None


@dataclass
class ToolCallEventResult:
    """Result returned by a before_tool_call handler."""

    block: bool = False
    reason: str = ""
    modified_args: dict[str, Any] | None = None  # None = no modification


@dataclass
class ConfirmationRequest:
    """Emitted when a dangerous tool needs explicit approval."""

    tool_name: str
    args: dict[str, Any]
    mode: str
    session_id: str | None = None


@dataclass
class ConfirmationDecision:
    """Result returned by a confirm_tool_call handler."""

    approved: bool = False
    reason: str = ""


@dataclass
class AfterToolResultEvent:
    """Emitted after a tool call has been executed and recorded."""

    tool_name: str
    args: dict[str, Any]
    result: Any  # ToolCallResult, avoid circular import
    session_id: str | None = None


# ---------------------------------------------------------------------------
# EventBus
# ---------------------------------------------------------------------------

# Handlers can be sync or async, and optionally return a result object.
EventHandler = Callable[..., Any]


@dataclass
class _Subscription:
    handler: EventHandler
    priority: int = 0  # lower runs first
    source: str = ""


class EventBus:
    """
    A small event bus for tool lifecycle events.

    Handlers are called in priority order (lower first, then registration
    order) and may be sync or async. A handler that raises is logged and
    skipped; it never aborts the emit.
    """

    def __init__(self) -> None:
        self._subscriptions: dict[str, list[_Subscription]] = {}

    def on(
        self,
        event: str,
        handler: EventHandler | None = None,
        priority: int = 0,
        source: str = "",
    ) -> Callable[[], None] | Callable[[EventHandler], EventHandler]:
        """
        Register an event handler.

        Used as a method call it returns an unsubscribe function; used as a
        decorator it returns the original function.
        """
        if handler is None:
            def decorator(fn: EventHandler) -> EventHandler:
                self.on(event, fn, priority=priority, source=source)
                return fn

            return decorator

        subscription = _Subscription(handler=handler, priority=priority, source=source)
        queue = self._subscriptions.setdefault(event, [])
        index = len(queue)
        while index and queue[index - 1].priority > priority:
            index -= 1
        queue.insert(index, subscription)

        def unsubscribe() -> None:
            current = self._subscriptions.get(event, [])
            if subscription in current:
                current.remove(subscription)
                self._prune(event)

        return unsubscribe

    def off(self, event: str, handler: EventHandler) -> None:
        """Remove a specific handler for an event."""
        queue = self._subscriptions.get(event)
        if queue is not None:
            queue[:] = [s for s in queue if s.handler is not handler]
            self._prune(event)

    def clear(self, event: str | None = None) -> None:
        """Remove all handlers, or all handlers for a specific event."""
        if event is None:
            self._subscriptions.clear()
        else:
            self._subscriptions.pop(event, None)

    def _prune(self, event: str) -> None:
        if not self._subscriptions.get(event):
            self._subscriptions.pop(event, None)

    async def emit(self, event: str, data: Any = None) -> list[Any]:
        """
        Emit an event and collect handler results.

        Returns:
            List of non-None results from handlers, in call order.
        """
        results: list[Any] = []
        # Copy so handlers may unsubscribe while the event is running
        for subscription in list(self._subscriptions.get(event, ())):
            try:
                outcome = subscription.handler(data)
                if inspect.isawaitable(outcome):
                    outcome = await outcome
            except Exception as e:
                logger.warning(
                    "Handler for %s from %s failed: %s",
                    event, subscription.source or "<anonymous>", e,
                )
                continue
            if outcome is not None:
                results.append(outcome)
        return results

    @property
    def handler_count(self) -> int:
        return sum(len(queue) for queue in self._subscriptions.values())

    def has_handlers(self, event: str) -> bool:
        return bool(self._subscriptions.get(event))

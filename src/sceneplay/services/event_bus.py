"""
Event Bus - playback event routing

Pub-sub between the engine (frame loop, session) and whatever consumes its
output (UI bindings, SSE streams, tests):
- Publishers: await publish(event)
- Subscribers: subscribe(event_type, handler, priority, filter_fn, once)
- Middleware: add_middleware(fn) may rewrite or drop events
- Awaiting: await wait_for(event_type, predicate) for the next match
"""

import asyncio
import inspect
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from sceneplay.models.events import Event, EventType
from sceneplay.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)

Handler = Callable[[Event], None]
Predicate = Callable[[Event], bool]


@dataclass
class EventHandler:
    """Event handler registration"""
    handler: Handler
    priority: int
    filter_fn: Optional[Predicate]
    once: bool = False

    def accepts(self, event: Event) -> bool:
        return self.filter_fn is None or self.filter_fn(event)


def _name(fn) -> str:
    return getattr(fn, "__name__", type(fn).__name__)


class EventBus:
    """
    Event bus for one playback session

    - Handlers run highest priority first; sync and async handlers both work
    - A failing handler is logged and the remaining handlers still run
    - once=True handlers are removed after their first delivery
    - The last history_limit published events are kept for inspection

    Example:
        bus = EventBus()

        bus.subscribe(
            EventType.PLAYBACK_TICK,
            on_tick,
            priority=10,
            filter_fn=lambda e: e.generation == current_generation
        )

        done = await bus.wait_for(EventType.PLAYBACK_COMPLETED, timeout=10)
    """

    def __init__(self, history_limit: int = 100):
        self._handlers: Dict[EventType, List[EventHandler]] = {}
        self._middleware: List[Callable[[Event], Optional[Event]]] = []
        self._event_history: List[Event] = []
        self._history_limit = history_limit

    # ===== Registration =====

    def subscribe(
        self,
        event_type: EventType,
        handler: Handler,
        priority: int = 0,
        filter_fn: Optional[Predicate] = None,
        once: bool = False,
    ) -> None:
        """
        Subscribe to event type

        Args:
            event_type: Which events to listen for
            handler: Function to call (can be async or sync)
            priority: Execution priority (higher = called first, default: 0)
            filter_fn: Optional filter (return True = handle, False = skip)
            once: Drop the registration after the first delivered event
        """
        entries = self._handlers.setdefault(event_type, [])
        entries.append(EventHandler(handler, priority, filter_fn, once))
        # stable sort: equal priorities keep subscription order
        entries.sort(key=lambda h: h.priority, reverse=True)

        log.debug(
            "Event handler subscribed",
            event_type=event_type.name,
            handler=_name(handler),
            priority=priority,
        )

    def unsubscribe(self, event_type: EventType, handler: Handler) -> bool:
        """Remove every registration of handler for event_type; True if any was removed"""
        entries = self._handlers.get(event_type, [])
        kept = [h for h in entries if h.handler != handler]
        self._handlers[event_type] = kept
        return len(kept) != len(entries)

    def add_middleware(self, middleware: Callable[[Event], Optional[Event]]) -> None:
        """
        Add a middleware step (runs in registration order).

        Return the event (possibly replaced) to continue, None to drop it.
        """
        self._middleware.append(middleware)
        log.debug("Middleware registered", middleware=_name(middleware))

    def handler_count(self, event_type: EventType) -> int:
        return len(self._handlers.get(event_type, []))

    # ===== Delivery =====

    async def publish(self, event: Event) -> None:
        """
        Deliver event to its subscribers.

        Middleware first (may drop it), then history, then handlers by
        priority. Handler exceptions are logged, never raised.
        """
        for middleware in self._middleware:
            event = middleware(event)
            if event is None:
                return

        self._event_history.append(event)
        if len(self._event_history) > self._history_limit:
            del self._event_history[0]

        entries = self._handlers.get(event.type)
        if not entries:
            return

        for entry in list(entries):
            if not entry.accepts(event):
                continue
            if entry.once:
                self._discard(event.type, entry)
            await self._call(entry.handler, event)

    async def _call(self, handler: Handler, event: Event) -> None:
        try:
            if inspect.iscoroutinefunction(handler):
                await handler(event)
            else:
                handler(event)
        except Exception as e:
            log.error(f"Event handler failed: {_name(handler)} for {event.type.name}", exception=e)

    def _discard(self, event_type: EventType, entry: EventHandler) -> None:
        entries = self._handlers.get(event_type, [])
        if entry in entries:
            entries.remove(entry)

    async def wait_for(
        self,
        event_type: EventType,
        predicate: Optional[Predicate] = None,
        timeout: Optional[float] = None,
    ) -> Event:
        """
        Wait for the next published event of event_type matching predicate.

        Raises:
            asyncio.TimeoutError: nothing matched within timeout seconds
        """
        future = asyncio.get_running_loop().create_future()

        def resolve(event: Event) -> None:
            if not future.done():
                future.set_result(event)

        self.subscribe(event_type, resolve, filter_fn=predicate, once=True)
        try:
            return await asyncio.wait_for(future, timeout)
        finally:
            self.unsubscribe(event_type, resolve)

    # ===== History =====

    def get_event_history(self, limit: int = 10) -> List[Event]:
        """Recent events, newest last"""
        return self._event_history[-limit:]

    def clear_history(self) -> None:
        self._event_history.clear()

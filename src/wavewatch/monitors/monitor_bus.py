"""Event bus delivering monitor outputs to subscribers."""

from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Deque, Dict, List, Optional
import asyncio
import logging

from wavewatch.core import MonitorType, MonitorOutput


logger = logging.getLogger(__name__)


@dataclass
class MonitorEvent:
    """An event published by a monitor."""
    monitor_type: MonitorType
    output: MonitorOutput
    timestamp: datetime = field(default_factory=datetime.now)


# Handlers may be plain functions or coroutines
EventHandler = Callable[[MonitorEvent], Any]


class MonitorEventBus:
    """Fan-out of monitor outputs.

    Monitors publish every output here; the runner script, log sinks and
    tests subscribe either to one monitor type or to everything. A
    failing handler is logged and does not stop delivery to the others.
    """

    def __init__(self, history_size: int = 100):
        self._handlers: Dict[MonitorType, List[EventHandler]] = defaultdict(list)
        self._global_handlers: List[EventHandler] = []
        self._monitors: Dict[MonitorType, "BaseMonitor"] = {}
        self._history: Deque[MonitorEvent] = deque(maxlen=history_size)

    def register_monitor(self, monitor: "BaseMonitor"):
        """Register a monitor with the bus."""
        self._monitors[monitor.monitor_type] = monitor
        logger.info(f"Registered monitor: {monitor.monitor_type.name}")

    def subscribe(self, monitor_type: MonitorType, handler: EventHandler):
        """Subscribe to events from a specific monitor type."""
        self._handlers[monitor_type].append(handler)
        logger.debug(f"Added subscriber for {monitor_type.name}")

    def subscribe_all(self, handler: EventHandler):
        """Subscribe to events from all monitors."""
        self._global_handlers.append(handler)
        logger.debug("Added global subscriber")

    def unsubscribe(self, handler: EventHandler):
        """Remove a handler from every subscription list it appears in."""
        for handlers in self._handlers.values():
            if handler in handlers:
                handlers.remove(handler)
        if handler in self._global_handlers:
            self._global_handlers.remove(handler)

    async def publish(self, monitor_type: MonitorType, output: MonitorOutput):
        """Publish an event from a monitor.

        Args:
            monitor_type: Source monitor type
            output: The monitor output
        """
        event = MonitorEvent(monitor_type=monitor_type, output=output)
        self._history.append(event)

        for handler in list(self._handlers[monitor_type]) + list(self._global_handlers):
            try:
                result = handler(event)
                if asyncio.iscoroutine(result):
                    await result
            except Exception as e:
                logger.error(f"Handler error for {monitor_type.name}: {e}", exc_info=True)

    def get_latest(self, monitor_type: MonitorType) -> Optional[MonitorOutput]:
        """Latest output of a registered monitor, or None."""
        if monitor_type in self._monitors:
            return self._monitors[monitor_type].last_output
        return None

    def get_history(
        self,
        monitor_type: Optional[MonitorType] = None,
        limit: int = 10
    ) -> List[MonitorEvent]:
        """Get recent event history, newest first.

        Args:
            monitor_type: Filter by type, or None for all
            limit: Maximum events to return
        """
        events = list(reversed(self._history))
        if monitor_type:
            events = [e for e in events if e.monitor_type == monitor_type]
        return events[:limit]

    async def wait_for(
        self,
        monitor_type: MonitorType,
        timeout: float = 5.0
    ) -> Optional[MonitorOutput]:
        """Wait for the next event from a monitor.

        Returns:
            MonitorOutput from next event, or None if timeout
        """
        future = asyncio.get_running_loop().create_future()

        def handler(event: MonitorEvent):
            if not future.done():
                future.set_result(event.output)

        self.subscribe(monitor_type, handler)
        try:
            return await asyncio.wait_for(future, timeout=timeout)
        except asyncio.TimeoutError:
            return None
        finally:
            self.unsubscribe(handler)

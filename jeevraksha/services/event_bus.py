import asyncio
import logging

logger = logging.getLogger(__name__)


class ReportEventBus:
    """Simple in-memory pub/sub for broadcasting rescue report changes."""

    def __init__(self, maxsize: int = 100) -> None:
        self._maxsize = maxsize
        self._subscribers: dict[str, set[asyncio.Queue]] = {}
        self._global_subscribers: set[asyncio.Queue] = set()

    def subscribe_all(self) -> asyncio.Queue:
        """Subscribe to all report events. Returns a queue to await events from."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._maxsize)
        self._global_subscribers.add(queue)
        return queue

    def unsubscribe_all(self, queue: asyncio.Queue) -> None:
        self._global_subscribers.discard(queue)

    def subscribe(self, report_id: str) -> asyncio.Queue:
        """Subscribe to events for a specific report."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._maxsize)
        self._subscribers.setdefault(report_id, set()).add(queue)
        return queue

    def unsubscribe(self, report_id: str, queue: asyncio.Queue) -> None:
        if report_id in self._subscribers:
            self._subscribers[report_id].discard(queue)
            if not self._subscribers[report_id]:
                del self._subscribers[report_id]

    @property
    def subscriber_count(self) -> int:
        return len(self._global_subscribers) + sum(len(s) for s in self._subscribers.values())

    async def publish(self, report_id: str, event: dict) -> None:
        """Publish an event for a report to all subscribers."""
        event = {**event, "report_id": report_id}

        for queue in self._subscribers.get(report_id, set()):
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning("Event queue full for report %s subscriber", report_id)

        for queue in self._global_subscribers:
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning("Global event queue full")


event_bus = ReportEventBus()

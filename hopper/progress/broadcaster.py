# hopper/progress/broadcaster.py
"""
Per-operation progress pub/sub.

Each operation id is a topic with zero or more subscriber queues.
Delivery is at-most-once to whoever is subscribed at publish time: there
is no event log, so late subscribers never see earlier events. A topic is
dropped when its last subscriber leaves.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Set

from hopper.logging.logger import get_logger
from hopper.logging.tags import PROGRESS

logger = get_logger(__name__)

OPEN = "open"
PROGRESS_EVENT = "progress"
DONE = "done"

HEARTBEAT = ": heartbeat\n\n"


@dataclass(frozen=True)
class ProgressEvent:
    event: str
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_done(self) -> bool:
        return self.event == DONE

    def to_sse(self) -> str:
        return format_sse(self.event, self.data)


def format_sse(event: str, data: Any) -> str:
    payload = data if isinstance(data, str) else json.dumps(data, default=str)
    return f"event: {event}\ndata: {payload}\n\n"


class Subscription:
    """One subscriber's view of a topic."""

    def __init__(self, operation_id: str, maxsize: int) -> None:
        self.operation_id = operation_id
        self.queue: asyncio.Queue[ProgressEvent] = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0

    def offer(self, event: ProgressEvent) -> bool:
        try:
            self.queue.put_nowait(event)
            return True
        except asyncio.QueueFull:
            self.dropped += 1
            return False

    async def get(self, timeout: Optional[float] = None) -> Optional[ProgressEvent]:
        """Next event, or None if `timeout` elapses first."""
        if timeout is None:
            return await self.queue.get()
        try:
            return await asyncio.wait_for(self.queue.get(), timeout)
        except asyncio.TimeoutError:
            return None


class ProgressBroadcaster:
    """
    Usage:
        sub = broadcaster.subscribe(op_id)
        try:
            event = await sub.get()
        finally:
            broadcaster.unsubscribe(sub)
    """

    def __init__(self, max_queue: int = 1000) -> None:
        self._topics: Dict[str, Set[Subscription]] = {}
        self._max_queue = max_queue

    @property
    def topics(self) -> Set[str]:
        return set(self._topics)

    def subscriber_count(self, operation_id: str) -> int:
        return len(self._topics.get(operation_id, ()))

    def subscribe(self, operation_id: str) -> Subscription:
        sub = Subscription(operation_id, self._max_queue)
        self._topics.setdefault(operation_id, set()).add(sub)
        sub.offer(ProgressEvent(OPEN, {"opId": operation_id}))
        logger.debug(f"{PROGRESS} subscriber joined {operation_id}")
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        subs = self._topics.get(sub.operation_id)
        if subs is None:
            return
        subs.discard(sub)
        if not subs:
            del self._topics[sub.operation_id]
            logger.debug(f"{PROGRESS} topic {sub.operation_id} closed")

    def publish(self, operation_id: Optional[str], event: str, data: Dict[str, Any]) -> int:
        """Fan out to current subscribers. Returns the number reached."""
        if not operation_id:
            return 0
        subs = self._topics.get(operation_id)
        if not subs:
            return 0

        message = ProgressEvent(event, data)
        delivered = 0
        for sub in list(subs):
            if sub.offer(message):
                delivered += 1
            else:
                logger.warning(f"{PROGRESS} subscriber queue full for {operation_id}, event dropped")
        return delivered

    def progress(self, operation_id: Optional[str], message: Optional[str] = None, **fields: Any) -> int:
        data = dict(fields)
        if message is not None:
            data = {"message": message, **data}
        return self.publish(operation_id, PROGRESS_EVENT, data)

    def done(self, operation_id: Optional[str], **summary: Any) -> int:
        return self.publish(operation_id, DONE, {"done": True, **summary})


__all__ = [
    "DONE",
    "HEARTBEAT",
    "OPEN",
    "PROGRESS_EVENT",
    "ProgressBroadcaster",
    "ProgressEvent",
    "Subscription",
    "format_sse",
]

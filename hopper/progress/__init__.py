# hopper/progress/__init__.py
from .broadcaster import (
    DONE,
    HEARTBEAT,
    OPEN,
    PROGRESS_EVENT,
    ProgressBroadcaster,
    ProgressEvent,
    Subscription,
    format_sse,
)

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

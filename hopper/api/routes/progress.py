# hopper/api/routes/progress.py
"""Server-sent events for live operation progress."""

from __future__ import annotations

from typing import AsyncIterator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from hopper.api.dependencies import get_service
from hopper.progress.broadcaster import HEARTBEAT, ProgressBroadcaster
from hopper.service import HopperService

router = APIRouter(prefix="/api/progress", tags=["progress"])


async def event_stream(
    broadcaster: ProgressBroadcaster,
    operation_id: str,
    heartbeat_seconds: float,
) -> AsyncIterator[str]:
    """
    Yield SSE frames until the operation's `done` event.

    Only events published while subscribed are delivered.
    """
    sub = broadcaster.subscribe(operation_id)
    try:
        while True:
            event = await sub.get(timeout=heartbeat_seconds)
            if event is None:
                yield HEARTBEAT
                continue
            yield event.to_sse()
            if event.is_done:
                return
    finally:
        broadcaster.unsubscribe(sub)


@router.get("/{operation_id}")
async def progress(operation_id: str, service: HopperService = Depends(get_service)) -> StreamingResponse:
    return StreamingResponse(
        event_stream(
            service.broadcaster, operation_id, service.config.progress.heartbeat_seconds
        ),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )

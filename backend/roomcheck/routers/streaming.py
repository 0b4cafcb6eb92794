"""Server-sent event streams over document store subscriptions."""

import asyncio
import json
import logging
from typing import Any, AsyncIterator, Callable

from fastapi import Request

from roomcheck.services.document_store import Unsubscribe

logger = logging.getLogger(__name__)

KEEPALIVE_SECONDS = 15.0

SSE_HEADERS = {"Cache-Control": "no-cache", "X-Accel-Buffering": "no"}


def format_event(event: str, data: Any) -> str:
    return f"event: {event}\ndata: {json.dumps(data)}\n\n"


async def snapshot_events(
    request: Request,
    subscribe: Callable[[Callable[[list], None], Callable[[Exception], None]], Unsubscribe],
    serialize: Callable[[list], Any],
    keepalive: float = KEEPALIVE_SECONDS,
) -> AsyncIterator[str]:
    """Yield one ``snapshot`` event per store change until the client leaves.

    Store callbacks arrive on the watch thread and are handed to the event
    loop. The subscription is released when the stream ends for any reason.
    """
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    def on_change(docs: list) -> None:
        loop.call_soon_threadsafe(queue.put_nowait, ("snapshot", docs))

    def on_error(exc: Exception) -> None:
        loop.call_soon_threadsafe(queue.put_nowait, ("error", exc))

    unsubscribe = subscribe(on_change, on_error)
    try:
        while not await request.is_disconnected():
            try:
                kind, payload = await asyncio.wait_for(queue.get(), timeout=keepalive)
            except asyncio.TimeoutError:
                yield ": keepalive\n\n"
                continue

            if kind == "error":
                logger.error(f"[STREAM] Subscription failed: {payload}")
                yield format_event("error", {"detail": str(payload)})
                break
            yield format_event("snapshot", serialize(payload))
    finally:
        unsubscribe()
        logger.info("[STREAM] Subscription closed")

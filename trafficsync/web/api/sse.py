"""Server-Sent Events (SSE) API endpoints."""

import asyncio
import json
from typing import AsyncGenerator

from fastapi import APIRouter, Request
from sse_starlette.sse import EventSourceResponse

from ...core.bus import Connection, FanoutBus
from ...core.rooms import ADMIN_ROOM
from ..auth import StreamUser
from ..deps import RuntimeDep

router = APIRouter()

HEARTBEAT_SECONDS = 30


async def event_generator(
    bus: FanoutBus,
    conn: Connection,
    request: Request,
) -> AsyncGenerator[dict, None]:
    """
    Generate SSE events from the admin group.

    Yields:
        SSE event dictionaries
    """
    async with bus.session(conn):
        bus.join(conn, ADMIN_ROOM)

        # Send connection confirmation
        yield {
            "event": "connected",
            "data": json.dumps({"status": "connected"}),
        }

        try:
            while True:
                # Check if client disconnected
                if await request.is_disconnected():
                    break

                try:
                    event, data = await asyncio.wait_for(conn.receive(), timeout=HEARTBEAT_SECONDS)
                except asyncio.TimeoutError:
                    yield {
                        "event": "heartbeat",
                        "data": json.dumps({"status": "ok"}),
                    }
                    continue

                yield {
                    "event": event,
                    "data": json.dumps(data),
                }

        except asyncio.CancelledError:
            pass


@router.get("/sse/events")
async def sse_events(request: Request, auth: StreamUser, runtime: RuntimeDep):
    """
    Subscribe to admin-group updates via Server-Sent Events.

    Read-only mirror of what an authenticated live-channel client receives.
    Accepts the token as a Bearer header or `?token=`.

    Event types:
    - connected: Connection established
    - cameraUpdate / signalUpdate / cameraDeleted / signalRemoved
    - analyticsUpdate: Trailing-window rollup
    - heartbeat: Keep-alive ping
    """
    conn = runtime.new_connection(label="sse")

    return EventSourceResponse(
        event_generator(runtime.bus, conn, request),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        },
    )

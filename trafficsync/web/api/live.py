"""Live channel WebSocket endpoint."""

import asyncio
import json
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ...core.bus import Connection
from ...core.runtime import Runtime
from ...shared.logging import setup_logger
from ..auth import decode_token

logger = setup_logger(__name__)

router = APIRouter()

ACK_EVENT = "ack"


def encode_frame(event: str, data: Any) -> dict:
    """Outbound frame: `{event, data}`, or `{event: "ack", ack, data}` for acks."""
    if event == ACK_EVENT:
        return {"event": ACK_EVENT, **data}
    return {"event": event, "data": data}


async def _writer_loop(websocket: WebSocket, conn: Connection) -> None:
    """Drain the connection's outbox onto the socket."""
    while True:
        event, data = await conn.receive()
        await websocket.send_json(encode_frame(event, data))


@router.websocket("/ws")
async def live_channel(websocket: WebSocket):
    """
    Bidirectional live channel.

    Frames are JSON `{"event": str, "data": any}`. A client frame may carry
    `"ack": <id>`; a successful handler result is then echoed back as
    `{"event": "ack", "ack": <id>, "data": <result>}`.
    """
    runtime: Runtime = websocket.app.state.runtime
    await websocket.accept()

    conn = runtime.new_connection()
    session = runtime.new_session(conn, decode_token)

    async with runtime.bus.session(conn):
        writer = asyncio.create_task(_writer_loop(websocket, conn))
        try:
            await session.open()
            while True:
                raw = await websocket.receive_text()
                try:
                    frame = json.loads(raw)
                    event = frame["event"]
                    if not isinstance(event, str):
                        raise TypeError("event must be a string")
                except (ValueError, KeyError, TypeError):
                    conn.deliver("error", {"message": "Invalid frame"})
                    continue

                result = await session.handle(event, frame.get("data"))
                if result is not None and "ack" in frame:
                    conn.deliver(ACK_EVENT, {"ack": frame["ack"], "data": result})

        except WebSocketDisconnect:
            pass
        finally:
            await session.close()
            writer.cancel()
            try:
                await writer
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.debug(f"Writer for {conn.id} ended: {e}")

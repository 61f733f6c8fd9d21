"""Redis pub/sub relay carrying fan-out publishes between processes."""

import asyncio
import json
from typing import Any, Callable, Optional

import redis.asyncio as redis

from ...core.rooms import RoomKey
from ..logging import setup_logger
from .client import RedisClient

logger = setup_logger(__name__)

FANOUT_CHANNEL = "trafficsync:fanout"

Deliver = Callable[[RoomKey, str, Any], int]


def encode_envelope(room: RoomKey, event: str, data: Any) -> str:
    return json.dumps({"room": room.to_wire(), "event": event, "data": data})


def decode_envelope(raw: Any) -> tuple[RoomKey, str, Any]:
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    message = json.loads(raw)
    return RoomKey.from_wire(message["room"]), message["event"], message.get("data")


class RedisFanoutRelay:
    """
    Relays publishes through a single Redis channel.

    Every process subscribes once and hands each envelope to its local
    bus. The room travels as structured data inside the envelope. Delivery
    stays at-most-once: a process that is not subscribed at publish time
    misses the message.
    """

    def __init__(
        self,
        client: Optional[RedisClient] = None,
        channel: str = FANOUT_CHANNEL,
    ):
        self.client = client or RedisClient()
        self.channel = channel
        self._pubsub: Optional[redis.client.PubSub] = None
        self._task: Optional[asyncio.Task] = None
        self._deliver: Optional[Deliver] = None

    async def start(self, deliver: Deliver) -> None:
        """Subscribe and start the listener task."""
        self._deliver = deliver
        conn = await self.client.connect()
        self._pubsub = conn.pubsub()
        await self._pubsub.subscribe(self.channel)
        self._task = asyncio.create_task(self._listener_loop(self._pubsub))
        logger.info(f"Fan-out relay subscribed to {self.channel}")

    async def publish(self, room: RoomKey, event: str, data: Any) -> int:
        """
        Publish an envelope to every process.

        Returns the number of subscribed processes.
        """
        conn = await self.client.connect()
        return await conn.publish(self.channel, encode_envelope(room, event, data))

    async def _listener_loop(self, pubsub: redis.client.PubSub) -> None:
        """Listen for envelopes and deliver them locally."""
        try:
            async for message in pubsub.listen():
                if message["type"] == "message":
                    self._dispatch(message["data"])
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error(f"Fan-out relay listener error: {e}")

    def _dispatch(self, raw: Any) -> int:
        try:
            room, event, data = decode_envelope(raw)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Dropping malformed relay envelope: {e}")
            return 0
        if self._deliver is None:
            return 0
        return self._deliver(room, event, data)

    async def stop(self) -> None:
        """Cancel the listener and close the subscription."""
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if self._pubsub is not None:
            await self._pubsub.unsubscribe(self.channel)
            await self._pubsub.aclose()
            self._pubsub = None

        await self.client.close()
        logger.info("Fan-out relay stopped")

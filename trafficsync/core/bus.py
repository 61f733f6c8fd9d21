"""In-memory publish/subscribe with named groups."""

import asyncio
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional, Protocol, Set, Tuple

from ..shared.logging import setup_logger
from .rooms import RoomKey

logger = setup_logger(__name__)


class Connection:
    """
    One live subscriber.

    Messages are queued in a bounded outbox and drained by the transport
    (WebSocket writer, SSE generator). A full outbox drops the message.
    """

    def __init__(
        self,
        connection_id: Optional[str] = None,
        outbox_size: int = 100,
        label: str = "client",
    ):
        self.id = connection_id or uuid.uuid4().hex
        self.label = label
        self.outbox: asyncio.Queue = asyncio.Queue(maxsize=outbox_size)
        self.closed = False

    def deliver(self, event: str, data: Any) -> bool:
        """Queue a message without blocking. Returns False if dropped."""
        if self.closed:
            return False
        try:
            self.outbox.put_nowait((event, data))
            return True
        except asyncio.QueueFull:
            logger.warning(f"Outbox full, dropping '{event}' for {self.label} {self.id}")
            return False

    async def receive(self) -> Tuple[str, Any]:
        """Wait for the next outbound message."""
        return await self.outbox.get()

    def close(self) -> None:
        self.closed = True

    def __repr__(self) -> str:
        return f"<Connection {self.label} {self.id}>"


class FanoutRelay(Protocol):
    """Cross-process transport for publishes (see `shared.redis.relay`)."""

    async def publish(self, room: RoomKey, event: str, data: Any) -> int: ...

    async def start(self, deliver) -> None: ...

    async def stop(self) -> None: ...


class FanoutBus:
    """
    Registry of live connections and the groups they belong to.

    Groups are created on first join and dropped when their last member
    leaves. Delivery is at-most-once and best-effort: a connection that is
    not a member at publish time receives nothing, and nothing is replayed.

    With a relay, publishes travel through it and come back to every
    process (this one included) via `deliver_local`.
    """

    def __init__(self, relay: Optional[FanoutRelay] = None):
        self.relay = relay
        self._connections: Dict[str, Connection] = {}
        self._rooms: Dict[RoomKey, Set[Connection]] = {}
        self._memberships: Dict[str, Set[RoomKey]] = {}

    async def start(self) -> None:
        if self.relay is not None:
            await self.relay.start(self.deliver_local)

    async def stop(self) -> None:
        if self.relay is not None:
            await self.relay.stop()

    # Connection lifecycle

    def register(self, conn: Connection) -> None:
        """Track a connection for the lifetime of its session."""
        self._connections[conn.id] = conn
        self._memberships.setdefault(conn.id, set())

    def unregister(self, conn: Connection) -> None:
        """Remove a connection from every group. Safe to call more than once."""
        for room in self._memberships.pop(conn.id, set()):
            self._discard(room, conn)
        self._connections.pop(conn.id, None)
        conn.close()

    @asynccontextmanager
    async def session(self, conn: Connection) -> AsyncGenerator[Connection, None]:
        """Register a connection and unregister it however the session ends."""
        self.register(conn)
        logger.info(f"Connection opened: {conn.label} {conn.id}")
        try:
            yield conn
        finally:
            self.unregister(conn)
            logger.info(f"Connection closed: {conn.label} {conn.id}")

    # Membership

    def join(self, conn: Connection, room: RoomKey) -> None:
        if conn.id not in self._connections:
            self.register(conn)
        self._rooms.setdefault(room, set()).add(conn)
        self._memberships[conn.id].add(room)

    def leave(self, conn: Connection, room: RoomKey) -> None:
        memberships = self._memberships.get(conn.id)
        if memberships is not None:
            memberships.discard(room)
        self._discard(room, conn)

    def _discard(self, room: RoomKey, conn: Connection) -> None:
        members = self._rooms.get(room)
        if members is None:
            return
        members.discard(conn)
        if not members:
            del self._rooms[room]

    def members(self, room: RoomKey) -> Set[Connection]:
        return set(self._rooms.get(room, ()))

    def rooms_of(self, conn: Connection) -> Set[RoomKey]:
        return set(self._memberships.get(conn.id, ()))

    def is_member(self, conn: Connection, room: RoomKey) -> bool:
        return room in self._memberships.get(conn.id, ())

    @property
    def rooms(self) -> Set[RoomKey]:
        return set(self._rooms)

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    # Delivery

    async def publish(self, room: RoomKey, event: str, data: Any) -> int:
        """
        Publish a message to every member of a group.

        Returns the number of local deliveries, or the relay's subscriber
        count when a relay is configured.
        """
        if self.relay is not None:
            return await self.relay.publish(room, event, data)
        return self.deliver_local(room, event, data)

    def deliver_local(self, room: RoomKey, event: str, data: Any) -> int:
        """Queue a message on every local member of a group."""
        delivered = 0
        for conn in list(self._rooms.get(room, ())):
            if conn.deliver(event, data):
                delivered += 1
        return delivered

import asyncio
import json
import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

from trafficsync.core.bus import Connection, FanoutBus
from trafficsync.core.rooms import ADMIN_ROOM, DeviceKind, RoomKey
from trafficsync.shared.redis.relay import (
    FANOUT_CHANNEL,
    RedisFanoutRelay,
    decode_envelope,
    encode_envelope,
)


def test_envelope_keeps_room_structure():
    room = RoomKey.for_device(DeviceKind.signal, uuid.uuid4())

    raw = encode_envelope(room, "configUpdate", {"mode": "Manual"})

    assert json.loads(raw)["room"]["deviceKind"] == "signal"
    assert decode_envelope(raw) == (room, "configUpdate", {"mode": "Manual"})
    assert decode_envelope(raw.encode())[0] == room


def test_admin_envelope():
    room, event, data = decode_envelope(encode_envelope(ADMIN_ROOM, "analyticsUpdate", None))
    assert room is ADMIN_ROOM
    assert event == "analyticsUpdate"
    assert data is None


def test_dispatch_delivers_to_local_bus():
    bus = FanoutBus()
    conn = Connection()
    bus.join(conn, ADMIN_ROOM)
    relay = RedisFanoutRelay(client=MagicMock())
    relay._deliver = bus.deliver_local

    assert relay._dispatch(encode_envelope(ADMIN_ROOM, "cameraUpdate", {"id": "x"})) == 1
    assert conn.outbox.get_nowait() == ("cameraUpdate", {"id": "x"})


@pytest.mark.parametrize("raw", ["not json", "{}", json.dumps({"room": {"kind": "lobby"}, "event": "x"})])
def test_dispatch_drops_malformed_envelopes(raw):
    deliver = MagicMock()
    relay = RedisFanoutRelay(client=MagicMock())
    relay._deliver = deliver

    assert relay._dispatch(raw) == 0
    deliver.assert_not_called()


def make_client():
    redis_conn = MagicMock()
    redis_conn.publish = AsyncMock(return_value=2)
    pubsub = MagicMock()
    pubsub.subscribe = AsyncMock()
    pubsub.unsubscribe = AsyncMock()
    pubsub.aclose = AsyncMock()

    async def listen():
        yield {"type": "subscribe", "data": 1}
        yield {"type": "message", "data": encode_envelope(ADMIN_ROOM, "signalUpdate", {"id": "s"})}
        await asyncio.Event().wait()

    pubsub.listen = listen
    redis_conn.pubsub.return_value = pubsub

    client = MagicMock()
    client.connect = AsyncMock(return_value=redis_conn)
    client.close = AsyncMock()
    return client, redis_conn, pubsub


@pytest.mark.asyncio
async def test_publish_goes_through_channel():
    client, redis_conn, _ = make_client()
    bus = FanoutBus(relay=RedisFanoutRelay(client=client))

    assert await bus.publish(ADMIN_ROOM, "cameraUpdate", {"id": "c"}) == 2

    channel, payload = redis_conn.publish.call_args.args
    assert channel == FANOUT_CHANNEL
    assert decode_envelope(payload) == (ADMIN_ROOM, "cameraUpdate", {"id": "c"})


@pytest.mark.asyncio
async def test_listener_delivers_and_stop_cleans_up():
    client, _, pubsub = make_client()
    relay = RedisFanoutRelay(client=client)
    bus = FanoutBus(relay=relay)
    conn = Connection()
    bus.join(conn, ADMIN_ROOM)

    await bus.start()
    event, data = await asyncio.wait_for(conn.receive(), timeout=1)
    await bus.stop()

    assert (event, data) == ("signalUpdate", {"id": "s"})
    pubsub.subscribe.assert_awaited_once_with(FANOUT_CHANNEL)
    pubsub.unsubscribe.assert_awaited_once_with(FANOUT_CHANNEL)
    pubsub.aclose.assert_awaited_once()
    client.close.assert_awaited_once()

"""Redis client and fan-out relay."""

from .client import RedisClient, REDIS_URL
from .relay import (
    FANOUT_CHANNEL,
    RedisFanoutRelay,
    decode_envelope,
    encode_envelope,
)

__all__ = [
    "RedisClient",
    "REDIS_URL",
    "FANOUT_CHANNEL",
    "RedisFanoutRelay",
    "decode_envelope",
    "encode_envelope",
]

"""Bearer tokens for dashboard users (REST, live channel and SSE)."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from jose import jwt, JWTError

from ...shared.db.models import UserRole
from ..config import config

_ROLES = frozenset(role.value for role in UserRole)


@dataclass(frozen=True)
class TokenData:
    """Identity carried by a verified token."""
    user_id: UUID
    email: str
    role: str
    exp: datetime


def token_ttl_seconds() -> int:
    return config.JWT_EXPIRE_MINUTES * 60


def create_access_token(
    user_id: UUID,
    email: str,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign `sub`/`email`/`role` claims; lifetime defaults to JWT_EXPIRE_MINUTES."""
    issued = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "iat": issued,
        "exp": issued + (expires_delta or timedelta(seconds=token_ttl_seconds())),
    }
    return jwt.encode(claims, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_token(token: str) -> Optional[TokenData]:
    """
    Verify a token and return its identity.

    Returns None for a bad signature, an expired token, missing claims or
    a role this service does not know.
    """
    try:
        claims = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
        role = claims["role"]
        if role not in _ROLES or not claims.get("email"):
            return None
        return TokenData(
            user_id=UUID(claims["sub"]),
            email=claims["email"],
            role=role,
            exp=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
        )
    except (JWTError, KeyError, TypeError, ValueError):
        return None

"""FastAPI authentication dependencies."""

from typing import Annotated, Optional
from uuid import UUID

from fastapi import Depends, Query, Request

from ...shared.db.models import UserRole
from ...shared.exceptions import AuthenticationError, AuthorizationError
from .jwt import decode_token, TokenData


class AuthContext:
    """Authenticated identity taken from the bearer token."""

    def __init__(self, token_data: TokenData):
        self.token_data = token_data

    @property
    def user_id(self) -> UUID:
        return self.token_data.user_id

    @property
    def email(self) -> str:
        return self.token_data.email

    @property
    def role(self) -> str:
        return self.token_data.role

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @property
    def is_operator(self) -> bool:
        return self.role in (UserRole.ADMIN.value, UserRole.OPERATOR.value)


def get_bearer_token(request: Request) -> Optional[str]:
    """Extract the token from an `Authorization: Bearer` header."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


def _authenticate(token: Optional[str]) -> AuthContext:
    if not token:
        raise AuthenticationError("Authentication token required")

    token_data = decode_token(token)
    if token_data is None:
        raise AuthenticationError("Invalid token")

    return AuthContext(token_data)


async def get_current_user(request: Request) -> AuthContext:
    """
    Get the current identity from the bearer token.

    This is the main authentication dependency for protected routes.

    Raises:
        AuthenticationError: If the token is missing, invalid or expired
    """
    return _authenticate(get_bearer_token(request))


async def get_stream_user(
    request: Request,
    token: Optional[str] = Query(None),
) -> AuthContext:
    """Like get_current_user, also accepting `?token=` for EventSource clients."""
    return _authenticate(get_bearer_token(request) or token)


async def require_operator(
    auth: AuthContext = Depends(get_current_user),
) -> AuthContext:
    """
    Require operator or admin role.

    Raises:
        AuthorizationError: If the user is a viewer
    """
    if not auth.is_operator:
        raise AuthorizationError("Access denied: operator role required")
    return auth


async def require_admin(
    auth: AuthContext = Depends(get_current_user),
) -> AuthContext:
    """
    Require admin role.

    Raises:
        AuthorizationError: If the user is not an admin
    """
    if not auth.is_admin:
        raise AuthorizationError("Access denied: admin role required")
    return auth


# Type aliases for cleaner route signatures
CurrentUser = Annotated[AuthContext, Depends(get_current_user)]
StreamUser = Annotated[AuthContext, Depends(get_stream_user)]
OperatorUser = Annotated[AuthContext, Depends(require_operator)]
AdminUser = Annotated[AuthContext, Depends(require_admin)]

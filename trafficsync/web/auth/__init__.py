"""Authentication module."""

from .jwt import create_access_token, decode_token, TokenData
from .password import hash_password, verify_password
from .dependencies import (
    AuthContext,
    CurrentUser,
    StreamUser,
    OperatorUser,
    AdminUser,
    get_current_user,
    require_operator,
    require_admin,
)

__all__ = [
    "create_access_token",
    "decode_token",
    "TokenData",
    "hash_password",
    "verify_password",
    "AuthContext",
    "CurrentUser",
    "StreamUser",
    "OperatorUser",
    "AdminUser",
    "get_current_user",
    "require_operator",
    "require_admin",
]

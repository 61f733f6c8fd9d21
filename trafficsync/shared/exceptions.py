"""Error taxonomy shared by the REST layer and the live channel."""


class TrafficSyncError(Exception):
    """Base exception for all service errors."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationError(TrafficSyncError):
    """Missing, invalid or expired credential."""

    status_code = 401
    default_message = "Authentication required"


class AuthorizationError(TrafficSyncError):
    """Valid credential with an insufficient role."""

    status_code = 403
    default_message = "Insufficient permissions"


class NotFoundError(TrafficSyncError):
    """Read or mutation target does not exist."""

    status_code = 404
    default_message = "Not found"


class ValidationFailure(TrafficSyncError):
    """Malformed input, rejected before any store access."""

    status_code = 400
    default_message = "Invalid request"


class StoreError(TrafficSyncError):
    """Persistence layer failure."""

    status_code = 500
    default_message = "Server error"

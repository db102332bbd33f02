"""
Error taxonomy for the verification broker.

Every failure a client can see is one of these classes. Each carries the
HTTP status it maps to, a short machine-readable code, and a message that
is safe to show to the caller. The exception handler in main.py turns them
into {"error": message, "code": code} responses -- nothing else (no
provider response bodies, no secrets, no tracebacks) ever reaches a client.
"""


class ServiceError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    code = "internal_error"
    message = "Server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# 400 -- bad or missing input
# ---------------------------------------------------------------------------

class ValidationError(ServiceError):
    status_code = 400
    code = "validation_error"
    message = "Invalid request"


class MissingCredentials(ValidationError):
    code = "missing_credentials"
    message = "Missing credentials"


class UnknownSession(ValidationError):
    """Demo submission for a session id the store has never seen."""

    code = "unknown_session"
    message = "Bad session"


# ---------------------------------------------------------------------------
# 401 / 403 -- admin auth gate
# ---------------------------------------------------------------------------

class Unauthorized(ServiceError):
    status_code = 401
    code = "unauthorized"
    message = "Unauthorized"


class InvalidCredentials(Unauthorized):
    code = "invalid_credentials"
    message = "Invalid credentials"


class Forbidden(ServiceError):
    status_code = 403
    code = "forbidden"
    message = "Forbidden"


# ---------------------------------------------------------------------------
# 404 / 500
# ---------------------------------------------------------------------------

class NotFound(ServiceError):
    status_code = 404
    code = "not_found"
    message = "Not found"


class ProviderError(ServiceError):
    """The verification provider failed or answered with an unexpected shape."""

    status_code = 500
    code = "provider_error"
    message = "Create session failed"


class InternalError(ServiceError):
    pass


class ConfigError(Exception):
    """Raised at startup for settings the service cannot run with."""

"""
Admin authentication.

There is exactly one admin identity, configured through ADMIN_EMAIL and
ADMIN_PASSWORD. Logging in issues a signed token (see tokens.py) holding
the email and the issue time; the token is returned in the JSON body and
set as the admin_token cookie. Every admin route then runs require_admin,
which accepts the token from either an "Authorization: Bearer" header or
the cookie.

A token is good for 12 hours. An expired token gets the same 401 as a
missing one.
"""

import hmac
import logging
import time
from typing import Callable

from fastapi import Request

from verifyhub.config import Settings
from verifyhub.errors import Forbidden, InvalidCredentials, MissingCredentials, Unauthorized
from verifyhub.tokens import TokenCodec

logger = logging.getLogger(__name__)

COOKIE_NAME = "admin_token"
TOKEN_TTL_MS = 12 * 60 * 60 * 1000


def now_millis() -> int:
    return int(time.time() * 1000)


def extract_token(authorization: str | None, cookie_value: str | None) -> str | None:
    """Bearer header wins over the cookie."""
    if authorization and authorization.startswith("Bearer "):
        return authorization[len("Bearer "):].strip() or None
    return cookie_value or None


class AdminGate:
    def __init__(
        self,
        settings: Settings,
        codec: TokenCodec | None = None,
        clock: Callable[[], int] = now_millis,
    ):
        self.admin_email = settings.admin_email
        self.admin_password = settings.admin_password
        self.codec = codec or TokenCodec(settings.signing_secret)
        self.clock = clock

    def login(self, email, password) -> str:
        """Check credentials and return a freshly signed token."""
        email = str(email or "").strip().lower()
        password = str(password or "")

        if not email or not password:
            raise MissingCredentials()
        if self.admin_email and email != self.admin_email:
            logger.warning("Admin login refused: email not allowed")
            raise Forbidden("Not allowed")
        if not self.admin_password or not hmac.compare_digest(
            password.encode("utf-8"), self.admin_password.encode("utf-8")
        ):
            logger.warning("Admin login refused: invalid credentials")
            raise InvalidCredentials()

        logger.info("Admin login succeeded")
        return self.codec.sign({"email": email, "iat": self.clock()})

    def authenticate(self, token: str | None) -> str:
        """Return the admin email for a valid token, or raise Unauthorized/Forbidden."""
        claims = self.codec.verify(token) if token else None
        if not claims:
            raise Unauthorized()

        email = claims.get("email")
        if not isinstance(email, str) or not email:
            raise Unauthorized()
        email = email.lower()

        if self.admin_email and email != self.admin_email:
            raise Forbidden()

        issued_at = claims.get("iat")
        if isinstance(issued_at, bool) or not isinstance(issued_at, (int, float)):
            raise Unauthorized()
        if self.clock() - issued_at > TOKEN_TTL_MS:
            raise Unauthorized()

        return email


async def require_admin(request: Request) -> str:
    """FastAPI dependency for admin-only routes. Returns the admin's email."""
    gate: AdminGate = request.app.state.admin_gate
    token = extract_token(
        request.headers.get("authorization"),
        request.cookies.get(COOKIE_NAME),
    )
    email = gate.authenticate(token)
    request.state.admin_email = email
    return email

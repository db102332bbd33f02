"""
Admin token codec.

A token is   base64url(json(claims)) + "." + base64url(hmac_sha256(secret, payload))

Nothing is kept server-side: whoever holds a token with a valid tag holds
the claims inside it. Expiry and identity checks live in auth.py -- this
module only answers "was this signed with our secret, and what does it say".
"""

import base64
import binascii
import hashlib
import hmac
import json
from typing import Any


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(text: str) -> bytes:
    padded = text + "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


class TokenCodec:
    """Signs and verifies compact HMAC-SHA256 bearer tokens."""

    separator = "."

    def __init__(self, secret: str):
        self._key = secret.encode("utf-8")

    def _tag(self, payload: str) -> str:
        digest = hmac.new(self._key, payload.encode("ascii"), hashlib.sha256).digest()
        return _b64encode(digest)

    def sign(self, claims: dict[str, Any]) -> str:
        serialized = json.dumps(claims, separators=(",", ":"), sort_keys=True)
        payload = _b64encode(serialized.encode("utf-8"))
        return f"{payload}{self.separator}{self._tag(payload)}"

    def verify(self, token: Any) -> dict[str, Any] | None:
        """Return the claims if the tag checks out, otherwise None. Never raises."""
        if not isinstance(token, str) or token.count(self.separator) != 1:
            return None

        payload, tag = token.split(self.separator)
        if not payload or not tag:
            return None

        try:
            expected = self._tag(payload)
        except UnicodeEncodeError:
            return None

        # compare_digest wants matching types; encode both so non-ASCII tags
        # fail the comparison instead of raising
        if not hmac.compare_digest(tag.encode("utf-8"), expected.encode("utf-8")):
            return None

        try:
            claims = json.loads(_b64decode(payload).decode("utf-8"))
        except (binascii.Error, UnicodeDecodeError, ValueError):
            return None

        return claims if isinstance(claims, dict) else None

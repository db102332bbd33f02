"""
Runtime configuration.

Settings are read from the environment (and an optional .env file in the
working directory) exactly once, when the app is built, and then passed
to whatever needs them. Tests build Settings directly instead of patching
os.environ.

Environment variables:
    PORT                  -- listen port, also used for the default base URL (3000)
    PUBLIC_BASE_URL       -- externally reachable URL of this service
    PROVIDER_MODE         -- "demo" (local simulated provider) or "veriff"
    VERIFF_BASE_URL       -- provider station API (https://stationapi.veriff.com)
    VERIFF_API_KEY        -- sent as X-AUTH-CLIENT on session creation
    VERIFF_TIMEOUT        -- provider request timeout in seconds (30)
    ADMIN_EMAIL           -- the single admin identity; empty accepts any email
    ADMIN_PASSWORD        -- admin password; empty disables login
    ADMIN_SESSION_SECRET  -- HMAC key for admin tokens
"""

import logging
import os
from typing import Literal

from dotenv import dotenv_values
from pydantic import BaseModel, Field, field_validator

from verifyhub.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_SIGNING_SECRET = "dev_secret_change_me"
PROVIDER_MODES = ("demo", "veriff")


class Settings(BaseModel):
    """Everything the broker needs to know before it serves its first request."""

    port: int = 3000
    public_base_url: str = "http://localhost:3000"
    provider_mode: Literal["demo", "veriff"] = "demo"
    provider_base_url: str = "https://stationapi.veriff.com"
    provider_api_key: str = ""
    provider_timeout: float = Field(default=30.0, gt=0)
    admin_email: str = ""
    admin_password: str = ""
    signing_secret: str = DEFAULT_SIGNING_SECRET

    @field_validator("admin_email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("public_base_url", "provider_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @classmethod
    def from_env(cls, env_file: str | os.PathLike | None = ".env") -> "Settings":
        """Build Settings from the process environment, falling back to `env_file`.

        Real environment variables win over the .env file; a missing file is fine.
        """
        env = {**dotenv_values(env_file), **os.environ} if env_file else dict(os.environ)

        def get(name: str, default: str = "") -> str:
            return env.get(name) or default

        mode = get("PROVIDER_MODE", "demo").strip().lower()
        if mode not in PROVIDER_MODES:
            raise ConfigError(f"PROVIDER_MODE must be one of {PROVIDER_MODES}, got {mode!r}")

        try:
            port = int(get("PORT", "3000"))
            settings = cls(
                port=port,
                public_base_url=get("PUBLIC_BASE_URL", f"http://localhost:{port}"),
                provider_mode=mode,
                provider_base_url=get("VERIFF_BASE_URL", "https://stationapi.veriff.com"),
                provider_api_key=get("VERIFF_API_KEY"),
                provider_timeout=float(get("VERIFF_TIMEOUT", "30")),
                admin_email=get("ADMIN_EMAIL"),
                admin_password=get("ADMIN_PASSWORD"),
                signing_secret=get("ADMIN_SESSION_SECRET", DEFAULT_SIGNING_SECRET),
            )
        except ValueError as e:
            # pydantic's ValidationError is a ValueError too
            raise ConfigError(f"Invalid configuration: {e}") from e

        if settings.signing_secret == DEFAULT_SIGNING_SECRET:
            logger.warning("ADMIN_SESSION_SECRET is not set; admin tokens use the development secret")
        if not settings.admin_password:
            logger.warning("ADMIN_PASSWORD is not set; admin login is disabled")

        return settings

"""
Verification provider client (Veriff station API).

Only one call is made to the provider: create a verification session and
get back its id and the URL the end user should be sent to. Results come
back later, asynchronously, through POST /api/provider/webhook.

There is no retry and no fallback. If the provider is down, answers with a
non-2xx status, or returns JSON without verification.id / verification.url,
create_session() raises ProviderError and the caller stores nothing.
"""

import logging
from dataclasses import dataclass

import httpx

from verifyhub.errors import ProviderError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderSession:
    session_id: str
    url: str


class ProviderClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        # Tests swap in httpx.MockTransport here
        self._transport = transport

    async def create_session(
        self,
        callback_url: str,
        person_id: str,
        vendor_data: str,
        timestamp: str,
    ) -> ProviderSession:
        url = f"{self.base_url}/v1/sessions"
        payload = {
            "verification": {
                "callback": callback_url,
                "person": {"id": person_id},
                "vendorData": vendor_data,
                "timestamp": timestamp,
            },
        }
        headers = {
            "Content-Type": "application/json",
            "X-AUTH-CLIENT": self.api_key,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error("Provider unreachable at %s: %s", url, e)
            raise ProviderError("Create session failed") from e

        if not resp.is_success:
            logger.error(
                "Provider rejected session creation: %d %s",
                resp.status_code, resp.text[:500],
            )
            raise ProviderError("Create session failed")

        try:
            data = resp.json()
        except ValueError as e:
            logger.error("Provider returned a non-JSON body: %s", resp.text[:500])
            raise ProviderError("Invalid provider response") from e

        verification = data.get("verification") if isinstance(data, dict) else None
        if not isinstance(verification, dict):
            verification = {}

        session_id = verification.get("id")
        redirect_url = verification.get("url")
        if not session_id or not redirect_url:
            logger.error("Provider response is missing verification id or url")
            raise ProviderError("Invalid provider response")

        return ProviderSession(session_id=str(session_id), url=str(redirect_url))

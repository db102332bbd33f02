"""
Session lifecycle: create a verification session, then apply decisions to it.

A session starts out "pending" and moves to "passed" or "failed" when a
decision arrives -- either from the real provider's webhook or from the
local demo page. Decisions can arrive more than once (the provider may
send several callbacks); each one is merged into the existing record, so a
callback that omits the date of birth never erases one we already have.

    create()                  -- demo: local id + demo page URL
                                 veriff: provider call, provider's id + URL
    apply_provider_decision() -- webhook payload; unknown ids are ignored
    apply_demo_decision()     -- demo page; unknown ids are an error
"""

import logging
import secrets
from datetime import date, datetime, timezone
from typing import Callable
from urllib.parse import urlencode

from verifyhub.config import Settings
from verifyhub.errors import ProviderError, UnknownSession, ValidationError
from verifyhub.provider import ProviderClient
from verifyhub.store import SessionStore

logger = logging.getLogger(__name__)

# Provider decision values that count as a pass. Everything else is a fail.
PASSING_DECISIONS = frozenset({"approved", "accept"})

DEFAULT_PERSON_ID = "discord_user"
MAX_PERSON_ID_LENGTH = 80
REF_CODE_PREFIX = "VHC-"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def timestamp(moment: datetime) -> str:
    """ISO-8601 with fixed millisecond precision, so timestamps sort as strings."""
    return moment.isoformat(timespec="milliseconds")


def make_session_id(prefix: str, moment: datetime) -> str:
    """<prefix>_<epoch millis>_<80 random bits as hex>"""
    millis = int(moment.timestamp() * 1000)
    return f"{prefix}_{millis}_{secrets.token_hex(10)}"


def make_ref_code() -> str:
    """Short code a user can read out to support. Not unique, not a lookup key."""
    return REF_CODE_PREFIX + secrets.token_hex(3).upper()


def calc_age(dob, today: date) -> int | None:
    """Whole years between a YYYY-MM-DD date of birth and `today`.

    Anything that isn't a real calendar date gives None instead of raising.
    """
    if not dob or not isinstance(dob, str):
        return None

    parts = dob.strip().split("-")
    if len(parts) != 3:
        return None
    try:
        birth = date(int(parts[0]), int(parts[1]), int(parts[2]))
    except ValueError:
        return None

    age = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        age -= 1
    return age


def normalize_person_id(person_id) -> str:
    if person_id is None or person_id == "":
        return DEFAULT_PERSON_ID
    return str(person_id)[:MAX_PERSON_ID_LENGTH]


class SessionManager:
    """Owns the rules for creating sessions and recording their outcome."""

    def __init__(
        self,
        store: SessionStore,
        settings: Settings,
        provider: ProviderClient | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.settings = settings
        self.provider = provider
        self.clock = clock

    @property
    def mode(self) -> str:
        return self.settings.provider_mode

    # -----------------------------------------------------------------------
    # Create
    # -----------------------------------------------------------------------

    async def create(self, person_id=None) -> dict:
        person_id = normalize_person_id(person_id)
        ref_code = make_ref_code()
        now = self.clock()

        if self.mode == "veriff":
            if self.provider is None:
                raise ProviderError("Provider is not configured")
            created = await self.provider.create_session(
                callback_url=f"{self.settings.public_base_url}/api/provider/webhook",
                person_id=person_id,
                vendor_data=f"{person_id}|{ref_code}",
                timestamp=timestamp(now),
            )
            session_id, url = created.session_id, created.url
        else:
            session_id = make_session_id("demo", now)
            query = urlencode({"sessionId": session_id, "ref": ref_code})
            url = f"{self.settings.public_base_url}/provider-demo.html?{query}"

        self.store.upsert(session_id, {
            "status": "pending",
            "decision": "pending",
            "age": None,
            "dob": None,
            "updatedAt": timestamp(now),
            "vendorData": person_id,
            "refCode": ref_code,
        })
        logger.info("Created %s session %s (ref %s)", self.mode, session_id, ref_code)

        return {"sessionId": session_id, "url": url, "mode": self.mode, "refCode": ref_code}

    # -----------------------------------------------------------------------
    # Decisions
    # -----------------------------------------------------------------------

    def _decision_changes(self, status: str, decision: str, dob) -> dict:
        """Fields to merge for a decision.

        dob and age travel together: a new dob always replaces the age (even
        with None, if it doesn't parse), and no dob leaves both untouched.
        """
        now = self.clock()
        changes = {
            "status": status,
            "decision": decision,
            "updatedAt": timestamp(now),
        }
        if isinstance(dob, str) and dob.strip():
            changes["dob"] = dob.strip()
            changes["age"] = calc_age(dob, now.date())
        return changes

    def apply_provider_decision(self, payload) -> dict | None:
        """Record a provider webhook. Returns the updated record, or None if
        the session is unknown (the webhook is still acknowledged)."""
        if not isinstance(payload, dict):
            raise ValidationError("Webhook body must be a JSON object")

        verification = payload.get("verification")
        if not isinstance(verification, dict):
            verification = {}

        session_id = verification.get("id")
        decision = str(verification.get("decision") or "unknown")
        person = verification.get("person")
        dob = person.get("dateOfBirth") if isinstance(person, dict) else None

        if not session_id:
            logger.info("Webhook without a session id ignored (decision=%s)", decision)
            return None

        status = "passed" if decision in PASSING_DECISIONS else "failed"
        updated = self.store.merge(str(session_id), self._decision_changes(status, decision, dob))
        if updated is None:
            logger.info("Webhook for unknown session %s ignored", session_id)
            return None

        logger.info("Webhook decision for %s: %s -> %s", session_id, decision, status)
        return updated

    def apply_demo_decision(self, session_id, decision, dob=None) -> dict:
        """Record a submission from the demo page. The session must exist."""
        if not session_id or session_id not in self.store:
            raise UnknownSession()

        passed = decision == "approved"
        changes = self._decision_changes(
            "passed" if passed else "failed",
            "approved" if passed else "rejected",
            dob,
        )
        updated = self.store.merge(session_id, changes)
        if updated is None:
            raise UnknownSession()

        logger.info("Demo decision for %s: %s", session_id, changes["decision"])
        return updated

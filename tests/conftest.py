from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from verifyhub.auth import AdminGate
from verifyhub.config import Settings
from verifyhub.main import create_app
from verifyhub.sessions import SessionManager
from verifyhub.store import SessionStore

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct horse battery staple"


class FakeClock:
    """Settable UTC clock shared by the session manager and the admin gate."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def millis(self) -> int:
        return int(self.now.timestamp() * 1000)

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def settings():
    return Settings(
        public_base_url="http://testserver",
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
        signing_secret="test-signing-secret",
    )


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def manager(store, settings, clock):
    return SessionManager(store, settings, clock=clock)


@pytest.fixture
def gate(settings, clock):
    return AdminGate(settings, clock=clock.millis)


@pytest.fixture
def client(settings, store, manager, gate):
    app = create_app(settings=settings, store=store, session_manager=manager, admin_gate=gate)
    return TestClient(app)


@pytest.fixture
def admin_headers(gate):
    token = gate.login(ADMIN_EMAIL, ADMIN_PASSWORD)
    return {"Authorization": f"Bearer {token}"}

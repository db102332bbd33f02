"""
Tests for the admin gate: login rules, token checks, and the 12 hour expiry.
"""

import pytest

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD
from verifyhub.auth import AdminGate, extract_token
from verifyhub.errors import Forbidden, InvalidCredentials, MissingCredentials, Unauthorized
from verifyhub.tokens import TokenCodec


class TestLogin:

    def test_valid_login_issues_token_for_lowercased_email(self, gate, clock):
        token = gate.login("  Admin@Example.COM ", ADMIN_PASSWORD)
        assert gate.codec.verify(token) == {"email": ADMIN_EMAIL, "iat": clock.millis()}

    @pytest.mark.parametrize("email, password", [("", ADMIN_PASSWORD), (ADMIN_EMAIL, ""), (None, None)])
    def test_missing_credentials(self, gate, email, password):
        with pytest.raises(MissingCredentials):
            gate.login(email, password)

    def test_wrong_email_is_forbidden(self, gate):
        with pytest.raises(Forbidden):
            gate.login("someone@example.com", ADMIN_PASSWORD)

    def test_wrong_password(self, gate):
        with pytest.raises(InvalidCredentials):
            gate.login(ADMIN_EMAIL, "wrong")

    def test_no_configured_password_rejects_everything(self, settings, clock):
        gate = AdminGate(settings.model_copy(update={"admin_password": ""}), clock=clock.millis)
        with pytest.raises(InvalidCredentials):
            gate.login(ADMIN_EMAIL, "anything")

    def test_no_configured_email_accepts_any_email(self, settings, clock):
        gate = AdminGate(settings.model_copy(update={"admin_email": ""}), clock=clock.millis)
        token = gate.login("whoever@example.com", ADMIN_PASSWORD)
        assert gate.authenticate(token) == "whoever@example.com"


class TestAuthenticate:

    def test_fresh_token_is_accepted(self, gate):
        token = gate.login(ADMIN_EMAIL, ADMIN_PASSWORD)
        assert gate.authenticate(token) == ADMIN_EMAIL

    @pytest.mark.parametrize("token", [None, "", "junk", "a.b"])
    def test_missing_or_invalid_token(self, gate, token):
        with pytest.raises(Unauthorized):
            gate.authenticate(token)

    def test_email_comparison_ignores_case(self, gate, clock):
        token = gate.codec.sign({"email": "ADMIN@example.com", "iat": clock.millis()})
        assert gate.authenticate(token) == ADMIN_EMAIL

    def test_token_for_another_email_is_forbidden(self, gate, clock):
        token = gate.codec.sign({"email": "intruder@example.com", "iat": clock.millis()})
        with pytest.raises(Forbidden):
            gate.authenticate(token)

    def test_token_signed_with_another_secret(self, gate, clock):
        token = TokenCodec("not-our-secret").sign({"email": ADMIN_EMAIL, "iat": clock.millis()})
        with pytest.raises(Unauthorized):
            gate.authenticate(token)

    @pytest.mark.parametrize("claims", [
        {"iat": 0},
        {"email": "", "iat": 0},
        {"email": ADMIN_EMAIL},
        {"email": ADMIN_EMAIL, "iat": "yesterday"},
        {"email": ADMIN_EMAIL, "iat": True},
    ])
    def test_incomplete_claims(self, gate, claims):
        with pytest.raises(Unauthorized):
            gate.authenticate(gate.codec.sign(claims))


class TestExpiry:

    def test_valid_at_exactly_twelve_hours(self, gate, clock):
        token = gate.login(ADMIN_EMAIL, ADMIN_PASSWORD)
        clock.advance(hours=12)
        assert gate.authenticate(token) == ADMIN_EMAIL

    def test_rejected_after_twelve_hours(self, gate, clock):
        token = gate.login(ADMIN_EMAIL, ADMIN_PASSWORD)
        clock.advance(hours=12, milliseconds=1)
        with pytest.raises(Unauthorized):
            gate.authenticate(token)


class TestExtractToken:

    def test_bearer_header(self):
        assert extract_token("Bearer abc.def", None) == "abc.def"

    def test_header_wins_over_cookie(self):
        assert extract_token("Bearer from-header", "from-cookie") == "from-header"

    def test_cookie_fallback(self):
        assert extract_token(None, "from-cookie") == "from-cookie"
        assert extract_token("Basic dXNlcjpwYXNz", "from-cookie") == "from-cookie"

    def test_nothing(self):
        assert extract_token(None, None) is None
        assert extract_token("Bearer ", None) is None

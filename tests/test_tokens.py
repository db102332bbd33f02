"""
Tests for the admin token codec: round trips, tampering, and junk input.
verify() must return None for anything it can't vouch for -- never raise.
"""

import pytest

from verifyhub.tokens import TokenCodec


@pytest.fixture
def codec():
    return TokenCodec("unit-test-secret")


class TestRoundTrip:

    @pytest.mark.parametrize("claims", [
        {"email": "admin@example.com", "iat": 1718452800000},
        {},
        {"nested": {"list": [1, 2, 3]}, "unicode": "héllo ✓", "flag": True, "none": None},
    ])
    def test_verify_returns_signed_claims(self, codec, claims):
        assert codec.verify(codec.sign(claims)) == claims

    def test_token_has_payload_and_tag(self, codec):
        token = codec.sign({"email": "a@b.c"})
        payload, tag = token.split(".")
        assert payload and tag
        assert "=" not in token  # unpadded base64url, safe in cookies and headers


class TestTampering:

    def test_one_changed_tag_character_is_rejected(self, codec):
        token = codec.sign({"email": "admin@example.com", "iat": 1})
        payload, tag = token.split(".")
        flipped = ("A" if tag[0] != "A" else "B") + tag[1:]
        assert codec.verify(f"{payload}.{flipped}") is None

    def test_changed_payload_is_rejected(self, codec):
        token = codec.sign({"email": "admin@example.com"})
        _, tag = token.split(".")
        forged_payload = codec.sign({"email": "attacker@example.com"}).split(".")[0]
        assert codec.verify(f"{forged_payload}.{tag}") is None

    def test_token_from_another_secret_is_rejected(self, codec):
        other = TokenCodec("some-other-secret")
        assert codec.verify(other.sign({"email": "admin@example.com"})) is None

    def test_truncated_tag_is_rejected(self, codec):
        token = codec.sign({"email": "admin@example.com"})
        assert codec.verify(token[:-3]) is None


class TestMalformedInput:

    @pytest.mark.parametrize("token", [
        None,
        "",
        "no-separator",
        ".",
        "a.b.c",
        "payload.",
        ".tag",
        "ünïcode.tåg",
        12345,
    ])
    def test_garbage_returns_none(self, codec, token):
        assert codec.verify(token) is None

    def test_validly_signed_non_json_payload_is_rejected(self, codec):
        payload = "bm90LWpzb24"  # base64url("not-json")
        token = f"{payload}.{codec._tag(payload)}"
        assert codec.verify(token) is None

    def test_validly_signed_non_object_payload_is_rejected(self, codec):
        payload = "WzEsMiwzXQ"  # base64url("[1,2,3]")
        token = f"{payload}.{codec._tag(payload)}"
        assert codec.verify(token) is None

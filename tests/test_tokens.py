"""
TokenCodec: issuance, decoding, expiry and the renewal discriminator.
"""

from datetime import timedelta

import jwt
import pytest

from sessiongate.auth.results import MalformedCredentialError
from sessiongate.auth.tokens import REFRESH_CLAIM, TokenCodec

from conftest import TEST_SECRET


# ── issuance ──

class TestIssue:
    def test_access_token_carries_subject_and_roles(self, codec):
        token = codec.issue_access("acc-1", ["USER"])
        claims = codec.decode(token)
        assert claims["sub"] == "acc-1"
        assert claims["roles"] == ["USER"]
        assert REFRESH_CLAIM not in claims

    def test_renewal_token_carries_refresh_flag(self, codec):
        token = codec.issue_renewal("acc-1")
        assert codec.decode(token)[REFRESH_CLAIM] is True
        assert codec.is_renewal_token(token)

    def test_renewal_flag_cannot_be_overridden(self, codec):
        token = codec.issue_renewal("acc-1", extra_claims={REFRESH_CLAIM: False})
        assert codec.is_renewal_token(token)

    def test_lifetimes_follow_configuration(self, codec, clock):
        access = codec.issue_access("acc-1", [])
        renewal = codec.issue_renewal("acc-1")
        assert codec.expires_at(access) == clock() + timedelta(minutes=24)
        assert codec.expires_at(renewal) == clock() + timedelta(days=7)

    def test_tokens_issued_in_same_second_differ(self, codec):
        assert codec.issue_renewal("acc-1") != codec.issue_renewal("acc-1")

    def test_empty_secret_rejected(self):
        with pytest.raises(ValueError):
            TokenCodec("")


# ── decoding ──

class TestDecode:
    def test_foreign_signature_is_malformed(self, codec, clock):
        other = TokenCodec("another-secret-key-that-is-also-32-bytes-long", clock=clock)
        token = other.issue_access("acc-1", ["USER"])
        with pytest.raises(MalformedCredentialError):
            codec.decode(token)

    @pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
    def test_garbage_is_malformed(self, codec, token):
        with pytest.raises(MalformedCredentialError):
            codec.subject_of(token)

    def test_missing_expiry_is_malformed(self, codec):
        token = jwt.encode({"sub": "acc-1", "iat": 0}, TEST_SECRET, algorithm="HS256")
        with pytest.raises(MalformedCredentialError):
            codec.decode(token)

    def test_expired_token_still_decodes(self, codec, clock):
        token = codec.issue_access("acc-1", ["USER"])
        clock.advance(days=1)
        assert codec.subject_of(token) == "acc-1"
        assert codec.is_expired(token)

    def test_roles_of_tolerates_missing_claim(self, codec):
        assert codec.roles_of(codec.issue_renewal("acc-1")) == []


# ── expiry ──

class TestExpiry:
    def test_not_expired_before_exp(self, codec, clock):
        token = codec.issue_access("acc-1", [])
        clock.advance(minutes=23, seconds=59)
        assert not codec.is_expired(token)

    def test_expired_exactly_at_exp(self, codec, clock):
        token = codec.issue_access("acc-1", [])
        clock.advance(minutes=24)
        assert codec.is_expired(token)

    def test_is_expired_raises_on_malformed(self, codec):
        with pytest.raises(MalformedCredentialError):
            codec.is_expired("garbage")

    def test_is_token_valid_checks_subject_and_expiry(self, codec, clock):
        token = codec.issue_access("acc-1", [])
        assert codec.is_token_valid(token, "acc-1")
        assert not codec.is_token_valid(token, "acc-2")
        assert not codec.is_token_valid("garbage", "acc-1")
        clock.advance(minutes=24)
        assert not codec.is_token_valid(token, "acc-1")

"""
RequestAuthenticator: establishing (or declining to establish) an identity per request.
"""

from sessiongate.auth.middleware import AuthContext, extract_bearer_token
from sessiongate.auth.results import AuthFailure
from sessiongate.auth.roles import Capability, Role


def _bearer(token: str) -> str:
    return f"Bearer {token}"


class TestExtractBearer:
    def test_prefix_required(self):
        assert extract_bearer_token("Bearer abc") == "abc"
        assert extract_bearer_token("Basic abc") is None
        assert extract_bearer_token("bearer abc") is None
        assert extract_bearer_token(None) is None
        assert extract_bearer_token("Bearer   ") is None


# ── pass-through cases ──

class TestAnonymous:
    def test_no_header_is_anonymous(self, authenticator):
        result = authenticator.authenticate(None)
        assert result.ok and result.value is None

    def test_other_scheme_is_anonymous(self, authenticator):
        result = authenticator.authenticate("Basic dXNlcjpwYXNz")
        assert result.ok and result.value is None


# ── successful verification ──

class TestAuthenticated:
    def test_access_token_establishes_identity(self, authenticator, alice):
        result = authenticator.authenticate(_bearer(alice.access_token))
        assert result.ok
        identity = result.value
        assert identity.account_id == alice.account_id
        assert identity.username == "alice"
        assert identity.roles == (Role.USER,)
        assert identity.role is Role.USER
        assert identity.has(Capability.USER_ACCESS)
        assert not identity.has(Capability.ADMIN_ACCESS)

    def test_existing_identity_is_kept(self, authenticator, alice):
        current = AuthContext(account_id="someone", username="else", roles=(Role.ADMIN,))
        result = authenticator.authenticate(_bearer(alice.access_token), current)
        assert result.value is current

    def test_admin_gets_both_capabilities(self, service, authenticator):
        service.register("root", "Admin123!", "ADMIN")
        session = service.login("root", "Admin123!").value
        identity = authenticator.authenticate(_bearer(session.access_token)).value
        assert identity.capabilities == {Capability.USER_ACCESS, Capability.ADMIN_ACCESS}


# ── rejections ──

class TestRejected:
    def test_renewal_token_rejected(self, authenticator, alice):
        result = authenticator.authenticate(_bearer(alice.refresh_token))
        assert result.failure is AuthFailure.RENEWAL_TOKEN_REJECTED

    def test_renewal_token_rejected_even_with_identity(self, authenticator, alice):
        current = AuthContext(account_id=alice.account_id, username="alice", roles=(Role.USER,))
        result = authenticator.authenticate(_bearer(alice.refresh_token), current)
        assert result.failure is AuthFailure.RENEWAL_TOKEN_REJECTED

    def test_malformed_token(self, authenticator):
        result = authenticator.authenticate(_bearer("garbage"))
        assert result.failure is AuthFailure.MALFORMED_CREDENTIAL

    def test_unknown_subject(self, authenticator, codec):
        token = codec.issue_access("no-such-account", ["USER"])
        result = authenticator.authenticate(_bearer(token))
        assert result.failure is AuthFailure.UNKNOWN_ACCOUNT

    def test_expired_access_token(self, authenticator, clock, alice):
        clock.advance(minutes=24)
        result = authenticator.authenticate(_bearer(alice.access_token))
        assert result.failure is AuthFailure.ACCESS_TOKEN_INVALID

    def test_access_token_after_logout(self, service, authenticator, codec, alice):
        service.logout(alice.refresh_token)
        # still decodes, but no renewal credential backs it any more
        assert codec.is_token_valid(alice.access_token, alice.account_id)
        result = authenticator.authenticate(_bearer(alice.access_token))
        assert result.failure is AuthFailure.REFRESH_TOKEN_NOT_FOUND

    def test_verification_does_not_mutate_store(self, service, authenticator, clock, alice):
        clock.advance(days=7)
        authenticator.authenticate(_bearer(alice.access_token))
        assert service.refresh_tokens.find_by_token(alice.refresh_token) is not None

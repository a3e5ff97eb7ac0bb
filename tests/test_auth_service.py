"""
AuthenticationService: register / login / refresh / logout.
"""

import pytest
from sqlalchemy import text
from sqlmodel import Session, select

from sessiongate.auth.factory import build_auth_service
from sessiongate.auth.results import AuthFailure
from sessiongate.auth.roles import Role
from sessiongate.db.models import Account, RefreshToken


def _count(db_engine, model, *where):
    with Session(db_engine) as session:
        return len(session.exec(select(model).where(*where)).all())


# ── register ──

class TestRegister:
    def test_register_returns_summary(self, service):
        result = service.register("alice", "Secret1!", "user")
        assert result.ok
        assert result.value.username == "alice"
        assert result.value.role == "USER"
        assert result.value.enabled is True

    def test_password_is_stored_hashed(self, service, db_engine, hasher):
        service.register("alice", "Secret1!", Role.USER)
        account = service.accounts.find_by_username("alice")
        assert account.password_hash != "Secret1!"
        assert hasher.verify("Secret1!", account.password_hash)

    def test_duplicate_username_rejected(self, service, db_engine):
        assert service.register("alice", "Secret1!", "USER").ok
        second = service.register("alice", "Other1!x", "ADMIN")
        assert not second.ok
        assert second.failure is AuthFailure.USERNAME_TAKEN
        assert _count(db_engine, Account, Account.username == "alice") == 1

    def test_register_issues_no_credential(self, service, db_engine):
        service.register("alice", "Secret1!", "USER")
        assert _count(db_engine, RefreshToken) == 0

    def test_unknown_role_rejected(self, service):
        with pytest.raises(ValueError, match="Allowed values: USER, ADMIN"):
            service.register("alice", "Secret1!", "ROOT")


# ── login ──

class TestLogin:
    def test_login_issues_token_pair(self, service, codec, alice):
        assert codec.subject_of(alice.access_token) == alice.account_id
        assert codec.subject_of(alice.refresh_token) == alice.account_id
        assert not codec.is_renewal_token(alice.access_token)
        assert codec.is_renewal_token(alice.refresh_token)
        assert codec.roles_of(alice.access_token) == ["USER"]

    def test_refresh_token_is_persisted(self, service, alice):
        stored = service.refresh_tokens.find_by_token(alice.refresh_token)
        assert stored is not None
        assert stored.account_id == alice.account_id

    @pytest.mark.parametrize("username,password", [
        ("alice", "Wrong1!x"),
        ("nobody", "Secret1!"),
    ])
    def test_bad_credentials_are_indistinguishable(self, service, username, password):
        service.register("alice", "Secret1!", "USER")
        result = service.login(username, password)
        assert not result.ok
        assert result.failure is AuthFailure.INVALID_CREDENTIALS
        assert result.message == "Invalid credentials"

    def test_disabled_account_cannot_login(self, service):
        service.register("alice", "Secret1!", "USER")
        account = service.accounts.find_by_username("alice")
        account.enabled = 0
        service.accounts.save(account)

        result = service.login("alice", "Secret1!")
        assert result.failure is AuthFailure.INVALID_CREDENTIALS

    def test_second_login_revokes_first(self, service, db_engine, clock, alice):
        clock.advance(seconds=5)
        second = service.login("alice", "Secret1!").value

        assert service.refresh_tokens.find_by_token(alice.refresh_token) is None
        assert service.refresh_tokens.find_by_token(second.refresh_token) is not None
        assert _count(db_engine, RefreshToken, RefreshToken.account_id == alice.account_id) == 1

        revoked = service.refresh(alice.refresh_token)
        assert revoked.failure is AuthFailure.REFRESH_TOKEN_NOT_FOUND
        assert service.refresh(second.refresh_token).ok


# ── refresh ──

class TestRefresh:
    def test_refresh_mints_access_for_stored_account(self, service, codec, clock, alice):
        clock.advance(minutes=5)
        result = service.refresh(alice.refresh_token)
        assert result.ok
        token = result.value.access_token
        assert codec.subject_of(token) == alice.account_id
        assert not codec.is_renewal_token(token)
        assert codec.roles_of(token) == ["USER"]

    def test_refresh_does_not_rotate(self, service, alice):
        service.refresh(alice.refresh_token)
        assert service.refresh_tokens.find_by_token(alice.refresh_token) is not None

    def test_access_token_cannot_refresh(self, service, alice):
        result = service.refresh(alice.access_token)
        assert result.failure is AuthFailure.REFRESH_TOKEN_NOT_FOUND

    def test_token_signed_for_other_account_is_not_found(self, service, codec, alice):
        forged = codec.issue_renewal("someone-else")
        assert service.refresh(forged).failure is AuthFailure.REFRESH_TOKEN_NOT_FOUND

    def test_each_live_session_refreshes_when_multi_session(self, db_engine, codec, hasher, clock):
        multi = build_auth_service(db_engine, codec=codec, hasher=hasher, clock=clock)
        multi.refresh_tokens.single_session = False
        multi.register("alice", "Secret1!", "USER")
        first = multi.login("alice", "Secret1!").value
        second = multi.login("alice", "Secret1!").value

        assert multi.refresh(first.refresh_token).ok
        assert multi.refresh(second.refresh_token).ok
        assert multi.logout(first.refresh_token).ok
        assert multi.refresh(first.refresh_token).failure is AuthFailure.REFRESH_TOKEN_NOT_FOUND
        assert multi.refresh(second.refresh_token).ok

    def test_malformed_token_reports_not_found(self, service, alice):
        result = service.refresh("garbage")
        assert result.failure is AuthFailure.REFRESH_TOKEN_NOT_FOUND

    def test_expired_credential_is_tombstoned(self, service, clock, alice):
        clock.advance(days=7)

        first = service.refresh(alice.refresh_token)
        assert first.failure is AuthFailure.TOKEN_INVALID
        assert service.refresh_tokens.find_by_token(alice.refresh_token) is None

        second = service.refresh(alice.refresh_token)
        assert second.failure is AuthFailure.REFRESH_TOKEN_NOT_FOUND

    def test_deleted_account_reports_unknown(self, service, db_engine, alice):
        # remove the account row only, leaving its credential behind
        with Session(db_engine) as session:
            session.execute(text("DELETE FROM accounts"))
            session.commit()

        result = service.refresh(alice.refresh_token)
        assert result.failure is AuthFailure.UNKNOWN_ACCOUNT


# ── logout ──

class TestLogout:
    def test_logout_then_refresh_fails(self, service, alice):
        assert service.logout(alice.refresh_token).ok
        result = service.refresh(alice.refresh_token)
        assert result.failure is AuthFailure.REFRESH_TOKEN_NOT_FOUND

    def test_second_logout_fails(self, service, alice):
        assert service.logout(alice.refresh_token).value.message == "Successfully logout"
        again = service.logout(alice.refresh_token)
        assert again.failure is AuthFailure.REFRESH_TOKEN_NOT_FOUND

    def test_access_token_outlives_logout_but_still_decodes(self, service, codec, alice):
        service.logout(alice.refresh_token)
        assert codec.is_token_valid(alice.access_token, alice.account_id)

    def test_logout_with_unknown_token(self, service):
        assert service.logout("never-issued").failure is AuthFailure.REFRESH_TOKEN_NOT_FOUND


def test_end_to_end_session(service, codec):
    assert service.register("alice", "Secret1!", "USER").ok

    login = service.login("alice", "Secret1!")
    assert login.ok
    session = login.value
    assert session.access_token and session.refresh_token and session.account_id

    refreshed = service.refresh(session.refresh_token)
    assert refreshed.ok
    assert codec.subject_of(refreshed.value.access_token) == session.account_id

    assert service.logout(session.refresh_token).ok
    assert service.logout(session.refresh_token).failure is AuthFailure.REFRESH_TOKEN_NOT_FOUND

"""
Failure taxonomy and result types returned by the session operations.

Every operation of the orchestrator and the request authenticator returns
either ``Ok(value)`` or ``Err(failure, message)``; callers branch on
``result.ok``. The HTTP layer maps each ``AuthFailure`` to a status code.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class AuthFailure(str, Enum):
    USERNAME_TAKEN = "username_taken"
    INVALID_CREDENTIALS = "invalid_credentials"
    MALFORMED_CREDENTIAL = "malformed_credential"
    REFRESH_TOKEN_NOT_FOUND = "refresh_token_not_found"
    TOKEN_INVALID = "token_invalid"
    UNKNOWN_ACCOUNT = "unknown_account"
    DUPLICATE_TOKEN = "duplicate_token"
    RENEWAL_TOKEN_REJECTED = "renewal_token_rejected"
    ACCESS_TOKEN_INVALID = "access_token_invalid"
    INTERNAL = "internal"


class MalformedCredentialError(Exception):
    """A presented token failed signature verification or could not be decoded."""


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    failure: AuthFailure
    message: str = ""

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]

"""
API request/response Pydantic models
"""

import re

from pydantic import BaseModel, Field, field_validator

from sessiongate.auth.roles import Role

_PASSWORD_PATTERN = re.compile(r"^(?=.*[A-Z])(?=.*[a-z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]+$")


class RegisterRequest(BaseModel):
    username: str = Field(..., description="Unique username")
    # bcrypt only looks at the first 72 bytes
    password: str = Field(..., max_length=72, description="At least 8 chars: upper, lower, digit and one of @$!%*?&")
    role: Role = Field(..., description="USER | ADMIN (case-insensitive)")

    @field_validator("username")
    @classmethod
    def _username_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Username cannot be blank")
        return v.strip()

    @field_validator("password")
    @classmethod
    def _password_strength(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Password cannot be blank")
        if len(v) < 8:
            raise ValueError("Password must have 8 characters minimum")
        if not _PASSWORD_PATTERN.match(v):
            raise ValueError("Password must be a combination of alphabetic, numeric, and symbols")
        return v

    @field_validator("role", mode="before")
    @classmethod
    def _parse_role(cls, v):
        if v is None:
            raise ValueError("Role cannot be null")
        return Role.parse(v)


class RegisterResponse(BaseModel):
    id: str
    username: str
    role: str
    enabled: bool = True
    account_non_expired: bool = True
    account_non_locked: bool = True
    credentials_non_expired: bool = True


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, description="Username")
    password: str = Field(..., min_length=1, description="Password")


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    user_id: str


class TokenRequest(BaseModel):
    """Body of /refresh and /logout"""
    token: str = Field(..., min_length=1, description="Refresh token")


class RefreshResponse(BaseModel):
    access_token: str

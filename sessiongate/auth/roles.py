"""Role tags and the capabilities each one grants."""

from __future__ import annotations

from enum import Enum
from typing import FrozenSet


class Capability(str, Enum):
    USER_ACCESS = "user:access"
    ADMIN_ACCESS = "admin:access"


class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"

    @classmethod
    def parse(cls, value: "str | Role") -> "Role":
        """Case-insensitive lookup; raises ValueError naming the allowed values."""
        if isinstance(value, Role):
            return value
        try:
            return cls(str(value or "").strip().upper())
        except ValueError:
            allowed = ", ".join(r.value for r in cls)
            raise ValueError(f"Invalid role: {value}. Allowed values: {allowed}") from None

    @property
    def capabilities(self) -> FrozenSet[Capability]:
        return ROLE_CAPABILITIES[self]

    def grants(self, capability: Capability) -> bool:
        return capability in ROLE_CAPABILITIES[self]


ROLE_CAPABILITIES: dict[Role, FrozenSet[Capability]] = {
    Role.USER: frozenset({Capability.USER_ACCESS}),
    Role.ADMIN: frozenset({Capability.USER_ACCESS, Capability.ADMIN_ACCESS}),
}

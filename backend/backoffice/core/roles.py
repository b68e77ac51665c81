"""Closed role vocabulary and the capability facts attached to each role."""

from __future__ import annotations

from enum import Enum

from backoffice.core.errors import InvalidOperation


class Role(str, Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    SUB_ADMIN = "SUB_ADMIN"
    DEVELOPER = "DEVELOPER"
    CUSTOMER = "CUSTOMER"

    @property
    def authority(self) -> str:
        return f"ROLE_{self.value}"

    @property
    def is_staff(self) -> bool:
        return self in STAFF_ROLES

    @property
    def is_assignable(self) -> bool:
        """Whether accounts with this role can be linked to a project."""
        return self in ASSIGNABLE_ROLES


STAFF_ROLES = frozenset({Role.SUB_ADMIN, Role.DEVELOPER})
ASSIGNABLE_ROLES = frozenset({Role.SUB_ADMIN, Role.DEVELOPER})
# Roles a sub-admin may manage and move accounts between.
SUB_ADMIN_MANAGEABLE = frozenset({Role.DEVELOPER, Role.CUSTOMER})


def parse_role(value: str | Role) -> Role:
    if isinstance(value, Role):
        return value
    try:
        return Role((value or "").strip().upper())
    except ValueError:
        raise InvalidOperation(f"Unknown role: {value!r}", reason="role.unknown") from None

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class UserRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    MEMBER = "member"
    PARTNER = "partner"


# Roles that see every project and task regardless of ownership
PRIVILEGED_ROLES = frozenset({UserRole.ADMIN, UserRole.MANAGER})


def is_privileged(role: Optional[Union[str, UserRole]]) -> bool:
    if role is None:
        return False
    try:
        return UserRole(str(getattr(role, "value", role)).lower()) in PRIVILEGED_ROLES
    except ValueError:
        return False


@dataclass(frozen=True)
class Caller:
    """Identity the search and reporting paths are scoped by."""
    user_id: str
    role: str
    organization_id: Optional[str] = None

    @property
    def is_privileged(self) -> bool:
        return is_privileged(self.role)

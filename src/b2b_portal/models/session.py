"""Authenticated request context passed explicitly into services."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Role(str, Enum):
    CUSTOMER = "customer"
    ACCOUNTING = "accounting"
    ADMIN = "admin"
    PRESIDENT = "president"


STAFF_ROLES = frozenset({Role.ACCOUNTING, Role.ADMIN, Role.PRESIDENT})


@dataclass(slots=True, frozen=True)
class Session:
    """Identity and role of the caller.

    ``customer_id`` is only meaningful for customer sessions and names the
    customer record the user is allowed to order for.
    """

    user_id: str
    role: Role
    customer_id: Optional[str] = None

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

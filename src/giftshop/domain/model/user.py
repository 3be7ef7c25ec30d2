"""User profiles and the explicit caller identity.

Authentication itself is delegated to an external provider; the core
only sees the resulting user ID plus the profile it keeps per user.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class UserRole(Enum):
    CLIENT = "client"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"

    @property
    def is_admin(self) -> bool:
        return self in (UserRole.ADMIN, UserRole.SUPER_ADMIN)


@dataclass
class UserProfile:
    id: str
    email: str
    role: UserRole = UserRole.CLIENT
    display_name: str = ""
    is_blocked: bool = False


@dataclass(frozen=True)
class CallerContext:
    """Who is calling a use case.

    Passed explicitly into every handler instead of being read from an
    ambient session.  ``user_id`` is None for anonymous callers.
    """

    user_id: str | None
    role: UserRole = UserRole.CLIENT
    is_blocked: bool = False

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)

    @property
    def is_admin(self) -> bool:
        return self.is_authenticated and not self.is_blocked and self.role.is_admin

    @staticmethod
    def anonymous() -> CallerContext:
        return CallerContext(user_id=None)

    @staticmethod
    def for_profile(profile: UserProfile) -> CallerContext:
        return CallerContext(
            user_id=profile.id, role=profile.role, is_blocked=profile.is_blocked
        )

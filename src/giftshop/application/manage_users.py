"""Application services: user administration.

Rules:
- nobody can block or unblock their own account
- regular admins cannot touch admin or super admin accounts
- only super admins can change roles
"""

from __future__ import annotations

import logging

from giftshop.application.access import require_admin, require_super_admin
from giftshop.application.dto import UserDTO
from giftshop.domain.exceptions import EntityNotFoundError, UnauthorizedError, ValidationError
from giftshop.domain.model.user import CallerContext, UserProfile, UserRole
from giftshop.domain.repository.user_repository import UserRepository

logger = logging.getLogger(__name__)


def _load(user_repo: UserRepository, user_id: str) -> UserProfile:
    profile = user_repo.get_by_id(user_id)
    if profile is None:
        raise EntityNotFoundError(f"User '{user_id}' not found")
    return profile


class SetUserBlockedHandler:

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    def handle(self, caller: CallerContext, user_id: str, blocked: bool) -> UserDTO:
        require_admin(caller)
        if user_id == caller.user_id:
            raise ValidationError("You cannot block your own account")

        profile = _load(self._user_repo, user_id)
        if caller.role is UserRole.ADMIN and profile.role.is_admin:
            raise UnauthorizedError("Regular admins cannot modify admin or super admin accounts")

        profile.is_blocked = blocked
        self._user_repo.save(profile)
        logger.info(
            "User %s %s by %s", user_id, "blocked" if blocked else "unblocked", caller.user_id
        )
        return UserDTO.from_profile(profile)


class ChangeUserRoleHandler:

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    def handle(self, caller: CallerContext, user_id: str, role: str) -> UserDTO:
        require_super_admin(caller)
        try:
            new_role = UserRole(role)
        except ValueError:
            allowed = ", ".join(r.value for r in UserRole)
            raise ValidationError(f"Unknown role '{role}' (expected one of: {allowed})")

        profile = _load(self._user_repo, user_id)
        profile.role = new_role
        self._user_repo.save(profile)
        logger.info("User %s role set to %s by %s", user_id, new_role.value, caller.user_id)
        return UserDTO.from_profile(profile)


class RegisterUserHandler:
    """Record the profile for a user the identity provider has signed up."""

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    def handle(
        self,
        user_id: str,
        email: str,
        display_name: str = "",
        role: UserRole = UserRole.CLIENT,
    ) -> UserDTO:
        if not user_id or not email or "@" not in email:
            raise ValidationError("User ID and a valid email are required")
        if self._user_repo.get_by_id(user_id) is not None:
            raise ValidationError(f"User '{user_id}' already exists")
        profile = UserProfile(id=user_id, email=email, role=role, display_name=display_name)
        self._user_repo.save(profile)
        return UserDTO.from_profile(profile)

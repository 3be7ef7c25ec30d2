"""Abstract repository for user profiles."""

from __future__ import annotations

from abc import ABC, abstractmethod

from giftshop.domain.model.user import UserProfile


class UserRepository(ABC):

    @abstractmethod
    def get_by_id(self, user_id: str) -> UserProfile | None:
        """Return a profile by user ID, or None."""

    @abstractmethod
    def list_all(self) -> list[UserProfile]:
        """Return every profile."""

    @abstractmethod
    def save(self, profile: UserProfile) -> None:
        """Persist a new or updated profile."""

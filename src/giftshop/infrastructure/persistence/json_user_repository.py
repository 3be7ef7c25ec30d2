"""JSON-file-backed implementation of UserRepository."""

from __future__ import annotations

from pathlib import Path

from giftshop.domain.exceptions import ValidationError
from giftshop.domain.model.user import UserProfile, UserRole
from giftshop.domain.repository.user_repository import UserRepository
from giftshop.infrastructure.persistence.json_file import (
    ensure_file,
    load_raw,
    lock_for,
    persist_raw,
)


class JsonUserRepository(UserRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = lock_for(file_path)
        ensure_file(file_path, self._lock)

    def get_by_id(self, user_id: str) -> UserProfile | None:
        for raw in load_raw(self._file_path):
            if raw["id"] == user_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[UserProfile]:
        return [self._to_domain(raw) for raw in load_raw(self._file_path)]

    def save(self, profile: UserProfile) -> None:
        with self._lock:
            records = load_raw(self._file_path)
            for i, raw in enumerate(records):
                if raw["id"] == profile.id:
                    records[i] = self._to_raw(profile)
                    break
            else:
                records.append(self._to_raw(profile))
            persist_raw(self._file_path, records)

    @staticmethod
    def _to_raw(profile: UserProfile) -> dict:
        return {
            "id": profile.id,
            "email": profile.email,
            "role": profile.role.value,
            "display_name": profile.display_name,
            "is_blocked": profile.is_blocked,
        }

    @staticmethod
    def _to_domain(raw: dict) -> UserProfile:
        try:
            return UserProfile(
                id=raw["id"],
                email=raw["email"],
                role=UserRole(raw.get("role", "client")),
                display_name=raw.get("display_name", ""),
                is_blocked=bool(raw.get("is_blocked", False)),
            )
        except (KeyError, ValueError) as exc:
            raise ValidationError(f"Malformed user record {raw.get('id')!r}: {exc}") from exc

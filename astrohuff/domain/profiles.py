"""Service de profils utilisateur (lecture, création, mise à jour)."""

from __future__ import annotations

from typing import Any

import structlog

from astrohuff.domain.entities import UserProfile
from astrohuff.domain.errors import PersistenceError

log = structlog.get_logger(__name__)


class ProfileService:
    """Encapsule le dépôt de profils et convertit ses échecs d'écriture en `PersistenceError`."""

    def __init__(self, repo):
        self.repo = repo

    def get(self, user_id: str) -> UserProfile | None:
        raw = self.repo.get(user_id)
        return UserProfile.model_validate(raw) if raw else None

    def save(self, user_id: str, data: dict[str, Any]) -> UserProfile:
        """Crée le profil s'il est absent, sinon le met à jour."""
        try:
            if self.repo.get(user_id):
                raw = self.repo.update(user_id, data)
            else:
                raw = self.repo.create(user_id, data)
        except Exception as exc:
            log.error("profile_write_failed", user_id=user_id, error=type(exc).__name__)
            raise PersistenceError("profile write failed") from exc
        return UserProfile.model_validate(raw)

    def complete_onboarding(self, user_id: str, data: dict[str, Any]) -> UserProfile:
        return self.save(user_id, {**data, "onboardingCompleted": True})

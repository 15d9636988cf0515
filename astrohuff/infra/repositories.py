"""
Repositories pour la gestion des données.

Ce module fournit les dépôts d'identités et de profils utilisateur, avec des versions en mémoire et
Redis. Les profils sont des documents indexés par identifiant utilisateur; ils ne sont jamais
supprimés par l'application.
"""

import json
from datetime import UTC, datetime
from typing import Any

import redis

from astrohuff.domain.entities import UserProfile


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _new_profile(user_id: str, data: dict[str, Any]) -> dict[str, Any]:
    """Profil par défaut complété par `data` (horodatages à l'instant présent)."""
    now = _now()
    base = {
        "id": user_id,
        "name": "",
        "birthDate": "",
        "birthTime": "",
        "birthPlace": "",
        "latitude": 0.0,
        "longitude": 0.0,
        "gender": "other",
        "onboardingCompleted": False,
        "createdAt": now,
        "updatedAt": now,
    }
    base.update({k: v for k, v in data.items() if k not in {"id", "createdAt"}})
    return UserProfile.model_validate(base).model_dump()


class InMemoryProfileRepo:
    """
    Dépôt de profils en mémoire (utilisé pour dev/tests).

    Stocke les documents dans un dict local, non persistant.
    """

    def __init__(self):
        """Initialise une base mémoire vide."""
        self._db: dict[str, dict[str, Any]] = {}

    def get(self, user_id: str) -> dict[str, Any] | None:
        """Retourne un profil par id utilisateur, ou None s'il est absent."""
        return self._db.get(user_id)

    def create(self, user_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Crée le profil (valeurs par défaut + `data`)."""
        profile = _new_profile(user_id, data)
        self._db[user_id] = profile
        return profile

    def update(self, user_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Met à jour partiellement un profil existant (KeyError si absent)."""
        current = self._db[user_id]
        merged = {**current, **data, "id": user_id, "updatedAt": _now()}
        profile = UserProfile.model_validate(merged).model_dump()
        self._db[user_id] = profile
        return profile


class RedisProfileRepo:
    """Dépôt de profils adossé à Redis (clé: `profile:{user_id}`)."""

    def __init__(self, url: str):
        """Crée un client Redis à partir de l'URL fournie."""
        self.client = redis.Redis.from_url(url, decode_responses=True)

    def get(self, user_id: str) -> dict[str, Any] | None:
        """Charge et désérialise le profil, si présent."""
        raw = self.client.get(f"profile:{user_id}")
        return json.loads(raw) if raw else None

    def create(self, user_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Crée et sérialise le profil en JSON."""
        profile = _new_profile(user_id, data)
        self.client.set(f"profile:{user_id}", json.dumps(profile))
        return profile

    def update(self, user_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Met à jour partiellement le profil (KeyError si absent)."""
        current = self.get(user_id)
        if current is None:
            raise KeyError(user_id)
        merged = {**current, **data, "id": user_id, "updatedAt": _now()}
        profile = UserProfile.model_validate(merged).model_dump()
        self.client.set(f"profile:{user_id}", json.dumps(profile))
        return profile


class InMemoryUserRepo:
    """Dépôt d'identités en mémoire (email indexée par scan simple)."""

    def __init__(self):
        """Initialise une base mémoire vide."""
        self._db: dict[str, dict[str, Any]] = {}

    def get(self, user_id: str) -> dict[str, Any] | None:
        return self._db.get(user_id)

    def get_by_email(self, email: str) -> dict[str, Any] | None:
        """Recherche un utilisateur par email."""
        return next((u for u in self._db.values() if u.get("email") == email), None)

    def save(self, user: dict[str, Any]) -> dict[str, Any]:
        """Sauvegarde un utilisateur."""
        self._db[user["id"]] = user
        return user


class RedisUserRepo:
    """Dépôt d'identités via Redis avec index email->id (hash)."""

    def __init__(self, url: str):
        """Crée un client Redis à partir de l'URL fournie."""
        self.client = redis.Redis.from_url(url, decode_responses=True)
        self.idx_key = "user:idx:email"

    def get(self, user_id: str) -> dict[str, Any] | None:
        raw = self.client.get(f"user:{user_id}")
        return json.loads(raw) if raw else None

    def get_by_email(self, email: str) -> dict[str, Any] | None:
        """Recherche un utilisateur par email via l'index Redis."""
        user_id = self.client.hget(self.idx_key, email)
        if not user_id:
            return None
        return self.get(user_id)

    def save(self, user: dict[str, Any]) -> dict[str, Any]:
        """Sauvegarde un utilisateur et met à jour l'index email."""
        pipe = self.client.pipeline()
        pipe.set(f"user:{user['id']}", json.dumps(user))
        pipe.hset(self.idx_key, user["email"], user["id"])
        pipe.execute()
        return user

"""Stockage clé-valeur typé côté client (état de l'aperçu IA).

Chaque client anonyme (identifié par `X-Client-ID`) possède un enregistrement versionné
`PreviewState`. Un enregistrement d'une autre version ou mal formé est écarté et remplacé par un
état vierge. Aucune coordination entre onglets: deux écritures concurrentes peuvent se chevaucher.
"""

from __future__ import annotations

import json

import redis
import structlog
from pydantic import BaseModel, ValidationError

from astrohuff.domain.entities import BirthInfo

log = structlog.get_logger(__name__)

SCHEMA_VERSION = 1
KEY_PREFIX = "astrohuff_preview"


class PreviewState(BaseModel):
    """Schéma persistant de l'aperçu IA (instantané de naissance + compteur)."""

    version: int = SCHEMA_VERSION
    birth_info: BirthInfo | None = None
    question_count: int = 0


def _decode(client_id: str, raw: str | None) -> PreviewState:
    if not raw:
        return PreviewState()
    try:
        state = PreviewState.model_validate_json(raw)
    except (ValidationError, ValueError):
        log.warning("local_store_malformed_record", client_id=client_id)
        return PreviewState()
    if state.version != SCHEMA_VERSION:
        log.warning("local_store_version_mismatch", client_id=client_id, version=state.version)
        return PreviewState()
    return state


class InMemoryLocalStore:
    """Backend mémoire (dev/tests)."""

    def __init__(self) -> None:
        self._db: dict[str, str] = {}

    def load(self, client_id: str) -> PreviewState:
        return _decode(client_id, self._db.get(client_id))

    def save(self, client_id: str, state: PreviewState) -> PreviewState:
        self._db[client_id] = state.model_dump_json()
        return state

    def put_raw(self, client_id: str, payload: dict) -> None:
        """Écrit un document brut (utile pour simuler une dérive de schéma)."""
        self._db[client_id] = json.dumps(payload)


class RedisLocalStore:
    """Backend Redis (clé: `astrohuff_preview:{client_id}`)."""

    def __init__(self, url: str) -> None:
        self.client = redis.Redis.from_url(url, decode_responses=True)

    def load(self, client_id: str) -> PreviewState:
        return _decode(client_id, self.client.get(f"{KEY_PREFIX}:{client_id}"))

    def save(self, client_id: str, state: PreviewState) -> PreviewState:
        self.client.set(f"{KEY_PREFIX}:{client_id}", state.model_dump_json())
        return state

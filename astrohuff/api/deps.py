"""Dépendances partagées pour les routes de l'API.

- `get_session`: résout la session depuis `Authorization: Bearer <token>` (401 sinon).
- `require_onboarded`: garde des pages protégées; un profil sans onboarding terminé est renvoyé
  vers l'assistant (409 `onboarding_required`).
- `get_client_id`: identifiant du client anonyme de l'aperçu IA (`X-Client-ID`).
"""

from fastapi import Depends, Header

from astrohuff.api.errors import APIError, conflict, unauthorized
from astrohuff.core.container import container
from astrohuff.core.http_constants import HTTP_BAD_REQUEST
from astrohuff.domain.session import SessionContext


def get_session(authorization: str = Header(None)) -> SessionContext:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise unauthorized("missing_token")
    token = authorization.split(" ", 1)[1]
    session = container.sessions.resolve(token)
    if session is None:
        raise unauthorized("invalid_token")
    return session


def require_onboarded(session: SessionContext = Depends(get_session)) -> SessionContext:
    if not session.onboarding_completed:
        raise conflict("onboarding_required", "/onboarding")
    return session


def get_client_id(x_client_id: str = Header(None)) -> str:
    client_id = (x_client_id or "").strip()
    if not client_id:
        raise APIError(HTTP_BAD_REQUEST, "BAD_REQUEST", "missing X-Client-ID header")
    return client_id

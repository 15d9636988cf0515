"""Fournisseur d'identité et contexte de session.

Le `SessionContext` (utilisateur + profil) est construit à la connexion ou à la résolution d'un
token, puis passé explicitement aux routes via l'injection de dépendances FastAPI. La déconnexion
révoque le token (son `jti`) et met fin au contexte.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace

import structlog

from astrohuff.domain.auth import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from astrohuff.domain.entities import User, UserProfile
from astrohuff.domain.errors import AuthError
from astrohuff.domain.profiles import ProfileService

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SessionContext:
    token: str
    token_id: str
    user: User
    profile: UserProfile | None

    @property
    def onboarding_completed(self) -> bool:
        return bool(self.profile and self.profile.onboardingCompleted)


class SessionProvider:
    """Gère le cycle de vie des sessions: inscription, connexion, résolution, déconnexion."""

    def __init__(
        self,
        user_repo,
        profiles: ProfileService,
        secret: str,
        alg: str = "HS256",
        expires_min: int = 60,
    ) -> None:
        self.users = user_repo
        self.profiles = profiles
        self.secret = secret
        self.alg = alg
        self.expires_min = expires_min
        self._revoked: set[str] = set()

    def sign_up(self, email: str, password: str, display_name: str | None = None) -> User:
        if self.users.get_by_email(email):
            raise AuthError("email_exists")
        record = {
            "id": uuid.uuid4().hex,
            "email": email,
            "display_name": display_name,
            "password_hash": hash_password(password),
        }
        self.users.save(record)
        log.info("user_signed_up", user_id=record["id"])
        return User(**record)

    def sign_in(self, email: str, password: str) -> SessionContext:
        record = self.users.get_by_email(email)
        if not record or not verify_password(password, record.get("password_hash", "")):
            raise AuthError("invalid_credentials")
        token = create_access_token(
            secret=self.secret,
            alg=self.alg,
            expires_min=self.expires_min,
            payload={"sub": record["id"], "email": record["email"]},
        )
        session = self.resolve(token)
        if session is None:
            raise AuthError("invalid_token")
        log.info("user_signed_in", user_id=record["id"])
        return session

    def resolve(self, token: str) -> SessionContext | None:
        """Reconstruit le contexte de session depuis un token valide et non révoqué."""
        data = decode_token(token, self.secret, self.alg)
        if not data or data.jti in self._revoked:
            return None
        record = self.users.get(data.sub)
        if not record:
            return None
        return SessionContext(
            token=token,
            token_id=data.jti,
            user=User(**record),
            profile=self.profiles.get(data.sub),
        )

    def sign_out(self, session: SessionContext) -> None:
        self._revoked.add(session.token_id)
        log.info("user_signed_out", user_id=session.user.id)

    def refresh_profile(self, session: SessionContext) -> SessionContext:
        return replace(session, profile=self.profiles.get(session.user.id))

    def update_display_name(self, session: SessionContext, display_name: str) -> User:
        record = self.users.get(session.user.id)
        if not record:
            raise AuthError("user_not_found")
        record = {**record, "display_name": display_name}
        self.users.save(record)
        return User(**record)

"""
Routes d'authentification pour l'API.

Inscription, connexion, déconnexion et lecture de la session courante. Le token porte un `jti`
révoqué à la déconnexion.
"""

from fastapi import APIRouter, Depends

from astrohuff.api.deps import get_session
from astrohuff.api.errors import conflict, unauthorized
from astrohuff.api.schemas import LoginPayload, SignupPayload, TokenResponse
from astrohuff.core.container import container
from astrohuff.domain.errors import AuthError
from astrohuff.domain.session import SessionContext

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup")
def signup(p: SignupPayload):
    """Inscrit un nouvel utilisateur."""
    try:
        user = container.sessions.sign_up(str(p.email), p.password, p.display_name)
    except AuthError as exc:
        raise conflict(exc.code, "An account with this email already exists") from exc
    return user.model_dump()


@router.post("/login", response_model=TokenResponse)
def login(p: LoginPayload):
    """Authentifie l'utilisateur; le client est redirigé vers l'onboarding s'il n'est pas terminé."""
    try:
        session = container.sessions.sign_in(str(p.email), p.password)
    except AuthError as exc:
        raise unauthorized(exc.code) from exc
    return TokenResponse(
        access_token=session.token,
        onboarding_completed=session.onboarding_completed,
    )


@router.post("/logout")
def logout(session: SessionContext = Depends(get_session)):
    container.sessions.sign_out(session)
    container.onboarding.discard(session.user.id)
    return {"status": "signed_out"}


@router.get("/me")
def me(session: SessionContext = Depends(get_session)):
    return {
        "user": session.user.model_dump(),
        "profile": session.profile.model_dump() if session.profile else None,
        "onboarding_completed": session.onboarding_completed,
    }

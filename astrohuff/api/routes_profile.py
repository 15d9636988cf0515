"""Page profil: lecture et mise à jour du nom d'affichage."""

from fastapi import APIRouter, Depends

from astrohuff.api.deps import require_onboarded
from astrohuff.api.errors import validation_failed
from astrohuff.api.schemas import ProfileUpdate
from astrohuff.core.container import container
from astrohuff.domain.session import SessionContext

router = APIRouter(prefix="/profile", tags=["profile"])

DISPLAY_NAME_ERROR = "Display name must be at least 2 characters"


@router.get("")
def get_profile(session: SessionContext = Depends(require_onboarded)):
    return {
        "user": session.user.model_dump(),
        "profile": session.profile.model_dump() if session.profile else None,
    }


@router.put("")
def update_profile(p: ProfileUpdate, session: SessionContext = Depends(require_onboarded)):
    name = p.display_name.strip()
    if len(name) < 2:
        raise validation_failed({"display_name": DISPLAY_NAME_ERROR})
    user = container.sessions.update_display_name(session, name)
    return {"user": user.model_dump(), "message": "Profile updated successfully"}

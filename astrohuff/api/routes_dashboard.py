"""Tableau de bord (protégé) et catalogue public des fonctionnalités."""

from fastapi import APIRouter, Depends

from astrohuff.api.deps import require_onboarded
from astrohuff.domain.dashboard import build_dashboard, feature_catalogue
from astrohuff.domain.session import SessionContext

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard")
def dashboard(session: SessionContext = Depends(require_onboarded)):
    return build_dashboard(session.user, session.profile)


@router.get("/features")
def features():
    return {"features": feature_catalogue()}

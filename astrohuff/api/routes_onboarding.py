"""
Routes de l'assistant d'onboarding.

Chaque route renvoie l'instantané de l'assistant (étape courante, valeurs, erreurs par champ). Un
utilisateur dont l'onboarding est terminé est directement renvoyé vers le tableau de bord.
"""

from fastapi import APIRouter, Depends

from astrohuff.api.deps import get_session
from astrohuff.api.schemas import OnboardingInput, PlaceSelection, PlaceText
from astrohuff.core.container import container
from astrohuff.domain.onboarding import DASHBOARD_PATH
from astrohuff.domain.session import SessionContext

router = APIRouter(prefix="/onboarding", tags=["onboarding"])


def _state(session: SessionContext) -> dict:
    wizard = container.onboarding.get(session.user.id)
    if session.onboarding_completed and wizard.redirect is None:
        wizard.redirect = DASHBOARD_PATH
    return wizard.snapshot()


@router.get("")
def get_state(session: SessionContext = Depends(get_session)):
    return _state(session)


@router.post("/next")
def next_step(p: OnboardingInput, session: SessionContext = Depends(get_session)):
    """Valide l'étape courante puis avance (ou soumet le profil sur la dernière étape)."""
    wizard = container.onboarding.get(session.user.id)
    wizard.next(p.model_dump(exclude_none=True))
    return wizard.snapshot()


@router.post("/previous")
def previous_step(session: SessionContext = Depends(get_session)):
    wizard = container.onboarding.get(session.user.id)
    wizard.previous()
    return wizard.snapshot()


@router.post("/place/type")
def type_place(p: PlaceText, session: SessionContext = Depends(get_session)):
    wizard = container.onboarding.get(session.user.id)
    wizard.type_place(p.text)
    return wizard.snapshot()


@router.post("/place/select")
async def select_place(p: PlaceSelection, session: SessionContext = Depends(get_session)):
    wizard = container.onboarding.get(session.user.id)
    await wizard.select_place(p.description)
    return wizard.snapshot()

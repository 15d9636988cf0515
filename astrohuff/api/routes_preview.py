"""
Routes de l'aperçu « Ask the AI Astrologer » (anonyme, identifié par `X-Client-ID`).

`/preview/ask` renvoie `outcome` (`answered`, `needs_birth_info`, `limit_reached`, `failed`,
`empty`) ainsi que l'état complet du widget.
"""

from fastapi import APIRouter, Depends

from astrohuff.api.deps import get_client_id
from astrohuff.api.schemas import AskPayload, BirthInfoPayload
from astrohuff.core.container import container
from astrohuff.domain.entities import BirthInfo

router = APIRouter(prefix="/preview", tags=["preview"])


@router.get("")
def get_preview(client_id: str = Depends(get_client_id)):
    return container.preview.open(client_id).snapshot()


@router.post("/ask")
async def ask(p: AskPayload, client_id: str = Depends(get_client_id)):
    preview = container.preview.open(client_id)
    outcome = await preview.ask(p.question)
    return {"outcome": outcome, **preview.snapshot()}


@router.post("/birth-info")
async def birth_info(p: BirthInfoPayload, client_id: str = Depends(get_client_id)):
    """Enregistre l'instantané de naissance et rejoue la question en attente, s'il y en a une."""
    preview = container.preview.open(client_id)
    outcome = await preview.provide_birth_info(BirthInfo(**p.model_dump()))
    return {"outcome": outcome, **preview.snapshot()}

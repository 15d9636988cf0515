"""Proxy d'autocomplétion de lieux: renvoie toujours `{"predictions": [...]}` (liste vide en cas d'erreur)."""

from fastapi import APIRouter, Query

from astrohuff.core.container import container

router = APIRouter(prefix="/api/places", tags=["places"])


@router.get("/autocomplete")
async def autocomplete(input: str | None = Query(None)):
    predictions = await container.places.autocomplete(input)
    return {"predictions": [p.model_dump() for p in predictions]}

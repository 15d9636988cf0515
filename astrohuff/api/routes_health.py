"""
Endpoint de santé pour vérifier la disponibilité de l'API et du backend.

Expose `/health` pour signaler l'état général de l'application, du stockage et du fournisseur de
texte génératif configuré.
"""

from fastapi import APIRouter

from astrohuff.core.container import container

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Vérifie la disponibilité de l'API et le backend de stockage."""
    return {
        "status": "ok",
        "storage": container.storage_backend,
        "redis_url": bool(container.settings.REDIS_URL),
        "llm_provider": container.llm.provider,
    }

"""Interface de base pour les modèles de langage."""

from __future__ import annotations

from abc import ABC, abstractmethod


class LLM(ABC):
    """Interface abstraite pour les modèles de langage.

    Les implémentations lèvent `LLMError` en cas d'échec du fournisseur; l'appelant décide du
    message de repli présenté à l'utilisateur.
    """

    provider: str = "unknown"
    model: str = "unknown"

    @abstractmethod
    def generate(self, messages: list[dict[str, str]]) -> str:
        """Génère une réponse (texte/markdown) à partir d'une liste de messages."""
        ...


def offline_response(messages: list[dict[str, str]]) -> str:
    """Réponse déterministe utilisée sans clé API (dev/tests)."""
    last = messages[-1]["content"] if messages else ""
    question = last.rsplit("Question:", 1)[-1].split("\n", 1)[0].strip()
    return f"**Offline reading**: {question[:80]}".strip()

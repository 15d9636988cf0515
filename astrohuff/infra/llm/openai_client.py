"""
Client LLM basé sur l'API OpenAI (chat.completions).

Sans clé API, renvoie une réponse déterministe (dev/tests).
"""

from __future__ import annotations

import structlog
from openai import OpenAI

from astrohuff.domain.errors import LLMError
from astrohuff.infra.llm.base import LLM, offline_response

log = structlog.get_logger(__name__)


class OpenAILLM(LLM):
    """LLM basé sur OpenAI."""

    provider = "openai"

    def __init__(self, api_key: str | None = None, model: str = "gpt-4o-mini") -> None:
        self.model = model
        self.client = OpenAI(api_key=api_key) if api_key else None

    def generate(self, messages: list[dict[str, str]]) -> str:
        if not self.client:
            return offline_response(messages)
        try:
            resp = self.client.chat.completions.create(model=self.model, messages=messages)
            content = resp.choices[0].message.content
        except Exception as exc:
            log.error("llm_generation_failed", provider=self.provider, error=type(exc).__name__)
            raise LLMError("openai generation failed") from exc
        if not content:
            raise LLMError("openai returned an empty answer")
        return str(content)

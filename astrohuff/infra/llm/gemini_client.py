"""
Client LLM basé sur Google Gemini (google-generativeai).

Sans clé API, renvoie une réponse déterministe (dev/tests).
"""

from __future__ import annotations

import google.generativeai as genai
import structlog

from astrohuff.domain.errors import LLMError
from astrohuff.infra.llm.base import LLM, offline_response

log = structlog.get_logger(__name__)


class GeminiLLM(LLM):
    """LLM Gemini: concatène les messages en un prompt unique pour `generate_content`."""

    provider = "gemini"

    def __init__(self, api_key: str | None = None, model: str = "gemini-pro") -> None:
        self.model = model
        self._model = None
        if api_key:
            genai.configure(api_key=api_key)
            self._model = genai.GenerativeModel(model)

    def generate(self, messages: list[dict[str, str]]) -> str:
        if self._model is None:
            return offline_response(messages)
        prompt = "\n\n".join(m["content"] for m in messages if m.get("content"))
        try:
            resp = self._model.generate_content(prompt)
            text = (resp.text or "").strip()
        except Exception as exc:
            log.error("llm_generation_failed", provider=self.provider, error=type(exc).__name__)
            raise LLMError("gemini generation failed") from exc
        if not text:
            raise LLMError("gemini returned an empty answer")
        return text

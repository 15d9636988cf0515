"""Aperçu « Ask the AI Astrologer »: questions gratuites plafonnées.

Flux d'une question:
1. Sans instantané de naissance: la question est mise en attente et les données sont demandées;
   elle est rejouée dès que les données sont fournies.
2. Plafond atteint: message fixe d'incitation à l'inscription, sans appel au backend.
3. Sinon: appel au backend génératif; le succès incrémente le compteur persistant et ajoute la
   paire question/réponse; l'échec ajoute un message de repli sans incrémenter.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Literal

import markdown
import structlog
from starlette.concurrency import run_in_threadpool

from astrohuff.app.metrics import LLM_LATENCY, PREVIEW_QUESTIONS
from astrohuff.domain.entities import BirthInfo, ChatMessage
from astrohuff.domain.errors import LLMError
from astrohuff.infra.llm.base import LLM
from astrohuff.infra.llm.prompts import build_astrologer_prompt
from astrohuff.infra.local_store import PreviewState

log = structlog.get_logger(__name__)

LIMIT_MESSAGE = (
    "You've reached the limit of free questions. "
    "Please sign up to continue your astrological journey!"
)
FALLBACK_MESSAGE = (
    "I apologize, but I couldn't process your request at the moment. Please try again."
)
COMMON_QUESTIONS = (
    "What does my career path look like?",
    "When will I find love?",
    "What are my strengths and weaknesses?",
    "What does this year hold for me?",
    "How can I improve my relationships?",
)

Outcome = Literal["answered", "needs_birth_info", "limit_reached", "failed", "empty"]


def render_markdown(text: str) -> str:
    """Rendu HTML léger des réponses (markdown)."""
    return markdown.markdown(text, extensions=["sane_lists"])


def _message(role: str, content: str) -> ChatMessage:
    html = render_markdown(content) if role == "assistant" else ""
    return ChatMessage(role=role, content=content, html=html)


@dataclass
class Conversation:
    """Transcription propre à la « page » (mémoire du processus, jamais persistée)."""

    messages: list[ChatMessage] = field(default_factory=list)
    pending_question: str | None = None


class AstrologerPreview:
    """Widget d'aperçu pour un client donné."""

    def __init__(
        self,
        client_id: str,
        store,
        llm: LLM,
        conversation: Conversation,
        limit: int = 5,
    ) -> None:
        self.client_id = client_id
        self.store = store
        self.llm = llm
        self.conversation = conversation
        self.limit = limit
        # lu une fois au montage, réécrit à chaque changement
        self.state: PreviewState = store.load(client_id)

    @property
    def question_count(self) -> int:
        return self.state.question_count

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.state.question_count)

    @property
    def messages(self) -> list[ChatMessage]:
        return self.conversation.messages

    def _append_pair(self, question: str, answer: str) -> None:
        self.conversation.messages.extend([_message("user", question), _message("assistant", answer)])

    async def ask(self, question: str) -> Outcome:
        question = (question or "").strip()
        if not question:
            return "empty"
        if self.state.birth_info is None:
            self.conversation.pending_question = question
            PREVIEW_QUESTIONS.labels(outcome="needs_birth_info").inc()
            return "needs_birth_info"
        if self.state.question_count >= self.limit:
            self._append_pair(question, LIMIT_MESSAGE)
            PREVIEW_QUESTIONS.labels(outcome="limit_reached").inc()
            return "limit_reached"

        messages = build_astrologer_prompt(self.state.birth_info, question)
        start = time.perf_counter()
        try:
            answer = await run_in_threadpool(self.llm.generate, messages)
        except LLMError:
            log.warning("preview_answer_failed", client_id=self.client_id)
            self._append_pair(question, FALLBACK_MESSAGE)
            PREVIEW_QUESTIONS.labels(outcome="failed").inc()
            return "failed"
        finally:
            LLM_LATENCY.labels(provider=self.llm.provider).observe(time.perf_counter() - start)

        self.state = self.store.save(
            self.client_id,
            self.state.model_copy(update={"question_count": self.state.question_count + 1}),
        )
        self._append_pair(question, answer)
        PREVIEW_QUESTIONS.labels(outcome="answered").inc()
        return "answered"

    async def provide_birth_info(self, info: BirthInfo) -> Outcome | None:
        """Enregistre l'instantané de naissance puis rejoue la question en attente."""
        self.state = self.store.save(
            self.client_id, self.state.model_copy(update={"birth_info": info})
        )
        pending = self.conversation.pending_question
        self.conversation.pending_question = None
        if pending:
            return await self.ask(pending)
        return None

    def snapshot(self) -> dict:
        return {
            "birth_info": self.state.birth_info.model_dump() if self.state.birth_info else None,
            "question_count": self.state.question_count,
            "remaining": self.remaining,
            "limit_reached": self.remaining == 0,
            "pending_question": self.conversation.pending_question,
            "messages": [m.model_dump() for m in self.conversation.messages],
            "common_questions": list(COMMON_QUESTIONS),
        }


class PreviewSessions:
    """Conversations en mémoire par client; l'état persistant vit dans le `LocalStore`."""

    def __init__(self, store, llm: LLM, limit: int = 5) -> None:
        self.store = store
        self.llm = llm
        self.limit = limit
        self._conversations: dict[str, Conversation] = {}

    def open(self, client_id: str) -> AstrologerPreview:
        conversation = self._conversations.setdefault(client_id, Conversation())
        return AstrologerPreview(
            client_id=client_id,
            store=self.store,
            llm=self.llm,
            conversation=conversation,
            limit=self.limit,
        )

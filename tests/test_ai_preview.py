"""Tests de l'aperçu IA: plafond de questions, question différée, repli, stockage versionné."""

from __future__ import annotations

import pytest

from astrohuff.domain.ai_preview import (
    FALLBACK_MESSAGE,
    LIMIT_MESSAGE,
    AstrologerPreview,
    Conversation,
    PreviewSessions,
)
from astrohuff.domain.entities import BirthInfo
from astrohuff.infra.local_store import SCHEMA_VERSION, InMemoryLocalStore, PreviewState
from tests.fakes import FAKE_ANSWER, FailingLLM, FakeLLM

LIMIT = 5

INFO = BirthInfo(
    name="Jane",
    birthDate="1990-05-15",
    birthTime="10:30",
    birthPlace="New Delhi, Delhi, India",
    latitude=28.6139,
    longitude=77.209,
)


def _preview(llm=None, store=None, client_id="c1") -> AstrologerPreview:
    store = store or InMemoryLocalStore()
    return AstrologerPreview(client_id, store, llm or FakeLLM(), Conversation(), limit=LIMIT)


@pytest.mark.asyncio
async def test_question_without_birth_info_is_deferred_then_replayed():
    llm = FakeLLM()
    preview = _preview(llm)

    assert await preview.ask("When will I find love?") == "needs_birth_info"
    assert llm.calls == []
    assert preview.conversation.pending_question == "When will I find love?"

    assert await preview.provide_birth_info(INFO) == "answered"
    assert preview.conversation.pending_question is None
    assert len(llm.calls) == 1
    assert "Question: When will I find love?" in llm.calls[0][-1]["content"]
    assert "New Delhi, Delhi, India" in llm.calls[0][-1]["content"]
    assert [m.role for m in preview.messages] == ["user", "assistant"]
    assert preview.messages[1].content == FAKE_ANSWER
    assert preview.question_count == 1


@pytest.mark.asyncio
async def test_sixth_question_never_reaches_backend():
    llm = FakeLLM()
    preview = _preview(llm)
    await preview.provide_birth_info(INFO)
    for i in range(LIMIT):
        assert await preview.ask(f"question {i}") == "answered"
    assert preview.remaining == 0

    assert await preview.ask("one more?") == "limit_reached"
    assert len(llm.calls) == LIMIT
    assert preview.messages[-1].content == LIMIT_MESSAGE
    assert preview.question_count == LIMIT


@pytest.mark.asyncio
async def test_backend_failure_appends_fallback_without_counting():
    store = InMemoryLocalStore()
    preview = _preview(FailingLLM(), store)
    await preview.provide_birth_info(INFO)

    assert await preview.ask("What does this year hold for me?") == "failed"
    assert preview.messages[-1].content == FALLBACK_MESSAGE
    assert preview.question_count == 0
    assert store.load("c1").question_count == 0


@pytest.mark.asyncio
async def test_blank_question_is_ignored():
    llm = FakeLLM()
    preview = _preview(llm)
    assert await preview.ask("   ") == "empty"
    assert preview.messages == []


@pytest.mark.asyncio
async def test_count_survives_a_new_page():
    store = InMemoryLocalStore()
    first = _preview(store=store)
    await first.provide_birth_info(INFO)
    await first.ask("question")

    reloaded = _preview(store=store)
    assert reloaded.question_count == 1
    assert reloaded.state.birth_info == INFO
    # la transcription n'est pas persistée
    assert reloaded.messages == []


def test_assistant_messages_are_rendered_as_markdown():
    preview = _preview()
    preview._append_pair("q", "**Mars** is strong")
    assert "<strong>Mars</strong>" in preview.messages[1].html
    assert preview.messages[0].html == ""


def test_stale_or_malformed_records_are_discarded():
    store = InMemoryLocalStore()
    store.put_raw("old", {"version": SCHEMA_VERSION + 1, "question_count": 3})
    store.put_raw("bad", {"version": SCHEMA_VERSION, "question_count": "lots"})

    assert store.load("old") == PreviewState()
    assert store.load("bad") == PreviewState()
    assert store.load("missing").question_count == 0


def test_sessions_share_conversation_per_client():
    sessions = PreviewSessions(InMemoryLocalStore(), FakeLLM(), limit=LIMIT)
    a = sessions.open("c1")
    a.conversation.pending_question = "pending"
    assert sessions.open("c1").conversation.pending_question == "pending"
    assert sessions.open("c2").conversation.pending_question is None

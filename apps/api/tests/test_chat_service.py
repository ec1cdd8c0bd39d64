import pytest
from sqlalchemy import select

from conftest import FakeChatProvider, text_message
from intake.core.constants import MISSING_PROFILE, MISSING_PROJECTS, MISSING_WORK_EXPERIENCE
from intake.db.models import Project
from intake.providers import ChatServiceError
from intake.schemas import ChatMessage
from intake.services import chat as chat_service
from intake.services.chat import (
    compute_missing_suggestions,
    finish_exchange,
    stream_exchange,
    to_model_messages,
)
from intake.services.extraction import apply_records, classify_payload
from intake.services.session import start_session
from intake.services.transcript import list_turns

PROJECT_REPLY = 'Nice! ```resume-json\n{"title":"Widget","technologies":["TS"]}\n``` Let\'s continue.'


def _messages(*pairs):
    return [ChatMessage.model_validate(text_message(role, text)) for role, text in pairs]


def test_to_model_messages_drops_system_and_blank():
    messages = _messages(("system", "ignore"), ("user", "Hi"), ("assistant", " "), ("assistant", "Hello"))
    assert to_model_messages(messages) == [
        {"role": "user", "content": "Hi"},
        {"role": "assistant", "content": "Hello"},
    ]


async def test_stream_exchange_finishes_after_last_delta():
    provider = FakeChatProvider(chunks=["Hel", "lo"])
    finished = []

    async def on_finish(text):
        finished.append(text)

    deltas = [d async for d in stream_exchange(provider, "system", _messages(("user", "Hi")), on_finish)]

    assert deltas == ["Hel", "lo"]
    assert finished == ["Hello"]
    assert provider.calls == [("system", [{"role": "user", "content": "Hi"}])]


async def test_abandoned_stream_skips_finish():
    finished = []

    async def on_finish(text):
        finished.append(text)

    stream = stream_exchange(FakeChatProvider(chunks=["a", "b"]), "system", [], on_finish)
    assert await stream.__anext__() == "a"
    await stream.aclose()

    assert finished == []


async def test_provider_failure_skips_finish():
    finished = []

    async def on_finish(text):
        finished.append(text)

    provider = FakeChatProvider(chunks=["partial"], fail_with=ChatServiceError("down"))
    with pytest.raises(ChatServiceError):
        async for _ in stream_exchange(provider, "system", [], on_finish):
            pass

    assert finished == []


async def test_finish_exchange_saves_transcript_and_notes(db, user_id):
    session = await start_session(db, user_id)

    applied = await finish_exchange(
        db,
        user_id=user_id,
        session_id=session.id,
        messages=_messages(("user", "I built a widget")),
        reply_text=PROJECT_REPLY,
    )

    assert applied == 1
    assert [t.role for t in await list_turns(db, session.id)] == ["user", "assistant"]
    project = (await db.execute(select(Project).where(Project.user_id == user_id))).scalar_one()
    assert project.title == "Widget"
    assert project.technologies == ["TS"]


async def test_finish_exchange_with_malformed_block_saves_transcript_only(db, user_id):
    session = await start_session(db, user_id)

    applied = await finish_exchange(
        db,
        user_id=user_id,
        session_id=session.id,
        messages=_messages(("user", "Hi")),
        reply_text="```resume-json\n{not valid json\n```",
    )

    assert applied == 0
    assert len(await list_turns(db, session.id)) == 2


async def test_transcript_failure_aborts_note_saving(db, user_id, monkeypatch):
    session = await start_session(db, user_id)

    async def broken_replace(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(chat_service, "replace_transcript", broken_replace)
    with pytest.raises(RuntimeError):
        await finish_exchange(
            db, user_id=user_id, session_id=session.id, messages=[], reply_text=PROJECT_REPLY
        )

    assert (await db.execute(select(Project).where(Project.user_id == user_id))).first() is None


async def test_missing_suggestions_track_notes(db, user_id):
    assert await compute_missing_suggestions(db, user_id) == [
        MISSING_PROFILE,
        MISSING_WORK_EXPERIENCE,
        MISSING_PROJECTS,
    ]

    await apply_records(
        db,
        user_id,
        [classify_payload({"skills": ["Go"]}), classify_payload({"title": "Widget"})],
    )

    assert await compute_missing_suggestions(db, user_id) == [MISSING_WORK_EXPERIENCE]


async def test_empty_profile_still_counts_as_missing(db, user_id):
    await apply_records(db, user_id, [classify_payload({"bio": ""})])

    assert MISSING_PROFILE in await compute_missing_suggestions(db, user_id)

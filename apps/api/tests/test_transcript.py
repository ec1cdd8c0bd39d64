from intake.schemas import ChatMessage
from intake.services.session import start_session
from intake.services.transcript import list_turns, message_text, replace_transcript


def _msg(role, *texts):
    return ChatMessage(role=role, parts=[{"type": "text", "text": t} for t in texts])


def test_message_text_joins_text_parts_only():
    message = ChatMessage(
        role="user",
        parts=[
            {"type": "text", "text": "Hello "},
            {"type": "file", "url": "https://example.com/cv.pdf"},
            {"type": "text", "text": "world"},
        ],
    )
    assert message_text(message) == "Hello world"


async def test_replace_transcript_writes_messages_then_reply(db, user_id):
    session = await start_session(db, user_id)

    written = await replace_transcript(
        db, session.id, [_msg("user", "Hi"), _msg("assistant", "Hey!"), _msg("user", "I build things")], "Tell me more."
    )

    turns = await list_turns(db, session.id)
    assert written == 4
    assert [(t.position, t.role, t.content) for t in turns] == [
        (0, "user", "Hi"),
        (1, "assistant", "Hey!"),
        (2, "user", "I build things"),
        (3, "assistant", "Tell me more."),
    ]


async def test_replace_transcript_replaces_previous_turns(db, user_id):
    session = await start_session(db, user_id)
    await replace_transcript(db, session.id, [_msg("user", "Hi")], "Hello!")

    await replace_transcript(db, session.id, [_msg("user", "Hi"), _msg("assistant", "Hello!"), _msg("user", "Bye")], "See you")

    turns = await list_turns(db, session.id)
    assert [t.content for t in turns] == ["Hi", "Hello!", "Bye", "See you"]
    assert [t.position for t in turns] == [0, 1, 2, 3]


async def test_blank_messages_and_reply_are_skipped(db, user_id):
    session = await start_session(db, user_id)

    written = await replace_transcript(db, session.id, [_msg("user", "  "), _msg("user", "Hi")], "   ")

    assert written == 1
    assert [t.content for t in await list_turns(db, session.id)] == ["Hi"]


async def test_other_sessions_are_untouched(db, user_id):
    first = await start_session(db, user_id)
    await replace_transcript(db, first.id, [_msg("user", "first")], "reply")
    second = await start_session(db, user_id)

    await replace_transcript(db, second.id, [_msg("user", "second")], None)

    assert [t.content for t in await list_turns(db, first.id)] == ["first", "reply"]
    assert [t.content for t in await list_turns(db, second.id)] == ["second"]

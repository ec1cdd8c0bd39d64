"""Stored conversation transcript: full replace at the end of every exchange."""

import logging
from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from intake.db.models import ConversationTurn
from intake.schemas import ChatMessage

logger = logging.getLogger(__name__)


def message_text(message: ChatMessage) -> str:
    """Concatenate the text parts of a UI message; other part types are ignored."""
    return "".join(
        part.text or ""
        for part in message.parts
        if part.type == "text"
    )


async def replace_transcript(
    db: AsyncSession,
    session_id: str,
    messages: Sequence[ChatMessage],
    reply_text: str | None,
) -> int:
    """
    Replace the session's stored turns with messages + the new assistant reply.

    Runs in the caller's transaction, so the delete and the inserts commit or
    roll back together. Blank messages are skipped. Returns the number of turns written.
    """
    await db.execute(delete(ConversationTurn).where(ConversationTurn.session_id == session_id))

    turns: list[ConversationTurn] = []
    for message in messages:
        content = message_text(message)
        if not content.strip():
            continue
        turns.append(ConversationTurn(role=message.role, content=content))
    if reply_text and reply_text.strip():
        turns.append(ConversationTurn(role="assistant", content=reply_text))

    for position, turn in enumerate(turns):
        turn.session_id = session_id
        turn.position = position
        db.add(turn)
    await db.flush()
    logger.debug("Transcript replaced: session_id=%s turns=%d", session_id, len(turns))
    return len(turns)


async def list_turns(db: AsyncSession, session_id: str) -> list[ConversationTurn]:
    result = await db.execute(
        select(ConversationTurn)
        .where(ConversationTurn.session_id == session_id)
        .order_by(ConversationTurn.position)
    )
    return list(result.scalars().all())

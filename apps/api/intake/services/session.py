"""
Chat session lifecycle.

States: active -> ended (end) and ended -> active (resume). A user has at most
one active session: starting or resuming a session ends the others, and the
partial unique index on (user_id) WHERE status = 'active' backs this up when two
requests race through get-or-create.
"""

import logging
import uuid
from typing import Sequence

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from intake.core.constants import FALLBACK_SESSION_SUMMARY, SESSION_LIST_LIMIT
from intake.db.models import ChatSession, ConversationTurn, utcnow
from intake.prompts import PROMPT_SESSION_SUMMARY, fill_summary_request
from intake.providers import ChatProvider, ChatServiceError

logger = logging.getLogger(__name__)


class SessionStateError(Exception):
    """Raised when a session is missing or the requested transition is not allowed."""


async def get_session_for_user(
    db: AsyncSession,
    session_id: str,
    user_id: str,
) -> ChatSession | None:
    try:
        uuid.UUID(str(session_id))
    except ValueError:
        return None
    result = await db.execute(
        select(ChatSession).where(
            ChatSession.id == session_id,
            ChatSession.user_id == user_id,
        )
    )
    return result.scalar_one_or_none()


async def get_active_session(db: AsyncSession, user_id: str) -> ChatSession | None:
    result = await db.execute(
        select(ChatSession)
        .where(ChatSession.user_id == user_id, ChatSession.status == ChatSession.ACTIVE)
        .order_by(ChatSession.start_time.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def _end_other_active_sessions(db: AsyncSession, user_id: str, keep_id: str | None = None) -> None:
    stmt = (
        update(ChatSession)
        .where(ChatSession.user_id == user_id, ChatSession.status == ChatSession.ACTIVE)
        .values(status=ChatSession.ENDED, end_time=utcnow(), updated_at=utcnow())
        .execution_options(synchronize_session="fetch")
    )
    if keep_id is not None:
        stmt = stmt.where(ChatSession.id != keep_id)
    await db.execute(stmt)


async def start_session(db: AsyncSession, user_id: str, life_story_mode: bool = False) -> ChatSession:
    """Open a fresh active session, ending whichever one was active."""
    await _end_other_active_sessions(db, user_id)
    session = ChatSession(
        user_id=user_id,
        status=ChatSession.ACTIVE,
        life_story_mode=life_story_mode,
        start_time=utcnow(),
    )
    db.add(session)
    await db.flush()
    logger.info("Chat session started: session_id=%s user_id=%s", session.id, user_id)
    return session


async def get_or_create_active(db: AsyncSession, user_id: str) -> ChatSession:
    active = await get_active_session(db, user_id)
    if active is not None:
        return active
    try:
        async with db.begin_nested():
            return await start_session(db, user_id)
    except IntegrityError:
        # A concurrent request created the active session first.
        active = await get_active_session(db, user_id)
        if active is None:
            raise
        return active


async def set_life_story_mode(db: AsyncSession, session: ChatSession, life_story_mode: bool) -> None:
    if session.life_story_mode != life_story_mode:
        session.life_story_mode = life_story_mode
        session.updated_at = utcnow()
        await db.flush()


async def end_session(db: AsyncSession, session: ChatSession, summary: str | None) -> ChatSession:
    if session.status != ChatSession.ACTIVE:
        raise SessionStateError("Session not found or already ended")
    now = utcnow()
    session.status = ChatSession.ENDED
    session.end_time = now
    session.summary = summary
    session.updated_at = now
    await db.flush()
    logger.info("Chat session ended: session_id=%s", session.id)
    return session


async def resume_session(db: AsyncSession, session: ChatSession) -> ChatSession:
    """Reactivate an ended session; a session that is already active is left as is."""
    if session.status == ChatSession.ACTIVE:
        return session
    await _end_other_active_sessions(db, session.user_id, keep_id=session.id)
    await db.flush()
    session.status = ChatSession.ACTIVE
    session.end_time = None
    session.summary = None
    session.updated_at = utcnow()
    await db.flush()
    logger.info("Chat session resumed: session_id=%s", session.id)
    return session


async def list_sessions(db: AsyncSession, user_id: str) -> list[ChatSession]:
    result = await db.execute(
        select(ChatSession)
        .where(ChatSession.user_id == user_id)
        .order_by(ChatSession.start_time.desc())
        .limit(SESSION_LIST_LIMIT)
    )
    return list(result.scalars().all())


async def summarize_session(
    provider: ChatProvider,
    turns: Sequence[ConversationTurn],
    missing: Sequence[str],
) -> str:
    """Ask the model for a short wrap-up; falls back to a fixed summary if the call fails."""
    conversation_text = "\n\n".join(f"{t.role}: {t.content}" for t in turns)
    try:
        summary = await provider.complete(
            PROMPT_SESSION_SUMMARY,
            [{"role": "user", "content": fill_summary_request(conversation_text, missing)}],
            max_tokens=500,
        )
    except ChatServiceError as e:
        logger.warning("Summary generation failed: %s", e)
        return FALLBACK_SESSION_SUMMARY
    return summary.strip() or FALLBACK_SESSION_SUMMARY

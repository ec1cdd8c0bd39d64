"""Chat session lifecycle: get/start, end (with summary), resume, list, stored messages."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from intake.db.models import ChatSession
from intake.dependencies import get_current_user_id, get_db, get_session_from_query_or_404
from intake.providers import ChatConfigError, get_chat_provider
from intake.core.constants import FALLBACK_SESSION_SUMMARY
from intake.schemas import (
    EndSessionResponse,
    MessagesResponse,
    ResumeSessionResponse,
    SessionIdRequest,
    SessionListResponse,
    SessionResponse,
    StartSessionRequest,
)
from intake.serializers import session_to_list_item, turn_to_message
from intake.services.chat import compute_missing_suggestions
from intake.services.session import (
    SessionStateError,
    end_session,
    get_or_create_active,
    get_session_for_user,
    list_sessions,
    resume_session,
    start_session,
    summarize_session,
)
from intake.services.transcript import list_turns

logger = logging.getLogger(__name__)

router = APIRouter(tags=["session"])


def _session_response(session: ChatSession) -> SessionResponse:
    return SessionResponse(session_id=session.id, life_story_mode=bool(session.life_story_mode))


@router.get("/session", response_model=SessionResponse)
async def get_session(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Active session for the current user, created if there is none."""
    return _session_response(await get_or_create_active(db, user_id))


@router.post("/session", response_model=SessionResponse)
async def create_session(
    body: StartSessionRequest | None = None,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Start fresh (e.g. "New chat"); the previously active session is ended."""
    life_story_mode = body.life_story_mode if body else False
    return _session_response(await start_session(db, user_id, life_story_mode))


async def _owned_session(db: AsyncSession, body: SessionIdRequest, user_id: str) -> ChatSession:
    if not body.session_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="sessionId required")
    session = await get_session_for_user(db, body.session_id, user_id)
    if not session:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return session


@router.post("/session/end", response_model=EndSessionResponse)
async def end_current_session(
    body: SessionIdRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """End the session with a summary of what was captured and what is still missing."""
    session = await _owned_session(db, body, user_id)
    if session.status != ChatSession.ACTIVE:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found or already ended")

    missing = await compute_missing_suggestions(db, user_id)
    try:
        provider = get_chat_provider()
    except ChatConfigError as e:
        logger.warning("Session summary skipped: %s", e)
        summary = FALLBACK_SESSION_SUMMARY
    else:
        turns = await list_turns(db, session.id)
        summary = await summarize_session(provider, turns, missing)

    try:
        await end_session(db, session, summary)
    except SessionStateError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return EndSessionResponse(summary=summary, missing=missing)


@router.post("/session/resume", response_model=ResumeSessionResponse)
async def resume_ended_session(
    body: SessionIdRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    session = await _owned_session(db, body, user_id)
    await resume_session(db, session)
    return ResumeSessionResponse(ok=True, session_id=session.id)


@router.get("/sessions", response_model=SessionListResponse)
async def get_sessions(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Current user's sessions (active and ended), newest first."""
    sessions = await list_sessions(db, user_id)
    return SessionListResponse(sessions=[session_to_list_item(s) for s in sessions])


@router.get("/messages", response_model=MessagesResponse)
async def get_messages(
    session: ChatSession = Depends(get_session_from_query_or_404),
    db: AsyncSession = Depends(get_db),
):
    """Stored transcript for a session, for resuming the chat UI."""
    turns = await list_turns(db, session.id)
    return MessagesResponse(messages=[turn_to_message(t) for t in turns])

"""
Interview chat.

- POST /chat: stream the assistant reply as SSE; persist transcript + notes after the last delta
- GET /chat/check: validate the configured model credentials
"""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from intake.core import get_settings, limiter
from intake.db.models import ChatSession
from intake.dependencies import (
    get_chat_provider_or_503,
    get_current_user_id,
    get_db,
    get_session_factory,
)
from intake.prompts import build_system_prompt
from intake.providers import ChatConfigError, ChatProvider, ChatServiceError, get_chat_provider
from intake.schemas import ChatCheckResponse, ChatRequest
from intake.services.chat import compute_missing_suggestions, finish_exchange, stream_exchange
from intake.services.session import get_session_for_user, set_life_story_mode

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


def _sse_event(payload: dict) -> str:
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


@router.post("/chat")
@limiter.limit(get_settings().chat_rate_limit)
async def chat(
    request: Request,
    body: ChatRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    provider: ChatProvider = Depends(get_chat_provider_or_503),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    if not body.session_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Session id required")
    session = await get_session_for_user(db, body.session_id, user_id)
    if not session:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    if session.status != ChatSession.ACTIVE:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Session has ended. Resume it to keep chatting.",
        )

    await set_life_story_mode(db, session, body.life_story_mode)
    missing = await compute_missing_suggestions(db, user_id)
    system_prompt = build_system_prompt(body.life_story_mode, missing)
    # Release the request transaction before streaming; finish-time work uses its own session.
    await db.commit()

    session_id = session.id
    messages = list(body.messages)

    async def persist(reply_text: str) -> None:
        async with session_factory() as finish_db:
            await finish_exchange(
                finish_db,
                user_id=user_id,
                session_id=session_id,
                messages=messages,
                reply_text=reply_text,
            )
            await finish_db.commit()

    async def event_stream():
        try:
            async for delta in stream_exchange(provider, system_prompt, messages, persist):
                yield _sse_event({"type": "text-delta", "delta": delta})
        except ChatServiceError as e:
            logger.warning("Chat stream failed: session_id=%s: %s", session_id, e)
            yield _sse_event({"type": "error", "message": str(e)})
            return
        except Exception:
            logger.exception("Saving chat exchange failed: session_id=%s", session_id)
            yield _sse_event({"type": "error", "message": "Could not save this exchange. Please try again."})
            return
        yield "data: [DONE]\n\n"

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        },
    )


@router.get("/chat/check", response_model=ChatCheckResponse)
async def check_chat_provider():
    """Always 200; ok=false with an error code when the model cannot be reached."""
    try:
        provider = get_chat_provider()
    except ChatConfigError as e:
        return ChatCheckResponse(ok=False, error="NO_KEY", message=str(e))
    result = await provider.check()
    return ChatCheckResponse(**result)

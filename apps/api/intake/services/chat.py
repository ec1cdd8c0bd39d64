"""
One chat exchange: prompt, stream the model reply, then persist.

Finish-time work (transcript replace, then note extraction) runs only once the
reply stream is exhausted. If the caller stops consuming the stream (client
disconnect, cancellation) nothing is persisted for that exchange.
"""

import logging
from typing import AsyncIterator, Awaitable, Callable, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from intake.core.constants import MISSING_PROFILE, MISSING_PROJECTS, MISSING_WORK_EXPERIENCE
from intake.db.models import Profile, Project, WorkExperience
from intake.providers import ChatProvider
from intake.schemas import ChatMessage
from intake.services.extraction import apply_records, extract_records
from intake.services.notes import get_profile
from intake.services.transcript import message_text, replace_transcript

logger = logging.getLogger(__name__)


def profile_has_content(profile: Profile | None) -> bool:
    if profile is None:
        return False
    return bool(
        profile.bio
        or profile.current_job_role
        or profile.career_summary
        or (profile.skills or [])
    )


async def compute_missing_suggestions(db: AsyncSession, user_id: str) -> list[str]:
    """Gap labels for the user's notes, in prompt order (profile, work, projects)."""
    profile = await get_profile(db, user_id)
    work_count = (
        await db.execute(select(func.count()).select_from(WorkExperience).where(WorkExperience.user_id == user_id))
    ).scalar_one()
    project_count = (
        await db.execute(select(func.count()).select_from(Project).where(Project.user_id == user_id))
    ).scalar_one()

    missing: list[str] = []
    if not profile_has_content(profile):
        missing.append(MISSING_PROFILE)
    if not work_count:
        missing.append(MISSING_WORK_EXPERIENCE)
    if not project_count:
        missing.append(MISSING_PROJECTS)
    return missing


def to_model_messages(messages: Sequence[ChatMessage]) -> list[dict[str, str]]:
    """UI messages -> chat API messages (system turns and blank messages dropped)."""
    out: list[dict[str, str]] = []
    for message in messages:
        if message.role == "system":
            continue
        content = message_text(message)
        if content.strip():
            out.append({"role": message.role, "content": content})
    return out


async def stream_exchange(
    provider: ChatProvider,
    system_prompt: str,
    messages: Sequence[ChatMessage],
    on_finish: Callable[[str], Awaitable[None]],
) -> AsyncIterator[str]:
    """Relay reply deltas; await on_finish(full_reply) only after the last delta."""
    parts: list[str] = []
    async for delta in provider.stream_reply(system_prompt, to_model_messages(messages)):
        parts.append(delta)
        yield delta
    await on_finish("".join(parts))


async def finish_exchange(
    db: AsyncSession,
    *,
    user_id: str,
    session_id: str,
    messages: Sequence[ChatMessage],
    reply_text: str,
) -> int:
    """
    Persist a completed exchange: replace the transcript, then save extracted notes.

    A transcript failure propagates (the exchange is not saved). Per-record note
    failures are contained in apply_records. Returns the number of notes saved.
    """
    await replace_transcript(db, session_id, messages, reply_text)
    records = extract_records(reply_text)
    if not records:
        return 0
    applied = await apply_records(db, user_id, records)
    logger.info(
        "Saved %d/%d extracted notes: session_id=%s user_id=%s",
        applied,
        len(records),
        session_id,
        user_id,
    )
    return applied

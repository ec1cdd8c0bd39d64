"""
Apply extracted records to the user's notes.

profile          -> upsert keyed by user_id; only keys present in the block are
                    written, skills are unioned into the stored list.
work_experience  -> new row every time (no entity resolution across mentions).
project          -> new row every time.

Each record of a batch runs in its own SAVEPOINT, so one failing record is
logged and skipped without losing the others or the surrounding transaction.
"""

import logging
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from intake.db.models import Profile, Project, WorkExperience, utcnow
from .records import (
    ExtractedProfile,
    ExtractedProject,
    ExtractedRecord,
    ExtractedWorkExperience,
    PROFILE,
    PROJECT,
    WORK_EXPERIENCE,
)

logger = logging.getLogger(__name__)

_PROFILE_TEXT_FIELDS = ("bio", "current_job_role", "career_summary")


def union_skills(existing: Iterable[str] | None, incoming: Iterable[str]) -> list[str]:
    """Existing skills first, then unseen incoming ones; exact-match uniqueness."""
    merged: list[str] = []
    seen: set[str] = set()
    for skill in list(existing or []) + list(incoming):
        if not isinstance(skill, str) or skill in seen:
            continue
        seen.add(skill)
        merged.append(skill)
    return merged


async def _select_profile(db: AsyncSession, user_id: str) -> Profile | None:
    # FOR UPDATE closes the read-modify-write window on skills (no-op on SQLite)
    result = await db.execute(
        select(Profile).where(Profile.user_id == user_id).with_for_update()
    )
    return result.scalar_one_or_none()


async def _get_or_create_profile(db: AsyncSession, user_id: str) -> Profile:
    profile = await _select_profile(db, user_id)
    if profile is not None:
        return profile
    profile = Profile(user_id=user_id, skills=[])
    try:
        async with db.begin_nested():
            db.add(profile)
            await db.flush()
    except IntegrityError:
        # Concurrent exchange created the profile; re-load it.
        profile = await _select_profile(db, user_id)
        if profile is None:
            raise
    return profile


async def merge_profile(db: AsyncSession, user_id: str, data: ExtractedProfile) -> Profile:
    profile = await _get_or_create_profile(db, user_id)
    present = data.model_fields_set
    for field in _PROFILE_TEXT_FIELDS:
        if field in present:
            setattr(profile, field, getattr(data, field))
    if data.skills:
        # New list object so the JSON column is flagged dirty
        profile.skills = union_skills(profile.skills, data.skills)
    profile.updated_at = utcnow()
    await db.flush()
    return profile


async def insert_work_experience(
    db: AsyncSession,
    user_id: str,
    data: ExtractedWorkExperience,
) -> WorkExperience:
    row = WorkExperience(
        user_id=user_id,
        company=data.company or "",
        role=data.role or "",
        start_date=data.start_date,
        end_date=data.end_date,
        responsibilities=list(data.responsibilities),
        achievements=list(data.achievements),
    )
    db.add(row)
    await db.flush()
    return row


async def insert_project(
    db: AsyncSession,
    user_id: str,
    data: ExtractedProject,
) -> Project:
    row = Project(
        user_id=user_id,
        title=data.title or "",
        description=data.description,
        impact=data.impact,
        technologies=list(data.technologies),
    )
    db.add(row)
    await db.flush()
    return row


async def apply_record(db: AsyncSession, user_id: str, record: ExtractedRecord) -> None:
    """Persist one extracted record for the user. Errors propagate to the caller."""
    if record.kind == PROFILE:
        await merge_profile(db, user_id, record.data)
    elif record.kind == WORK_EXPERIENCE:
        await insert_work_experience(db, user_id, record.data)
    elif record.kind == PROJECT:
        await insert_project(db, user_id, record.data)
    else:
        raise ValueError(f"Unknown record kind: {record.kind}")


async def apply_records(
    db: AsyncSession,
    user_id: str,
    records: Iterable[ExtractedRecord],
) -> int:
    """Apply records in order; a failing record is logged and skipped. Returns how many were saved."""
    applied = 0
    for record in records:
        try:
            async with db.begin_nested():
                await apply_record(db, user_id, record)
            applied += 1
        except Exception:
            logger.exception(
                "Failed to save extracted %s for user_id=%s", record.kind, user_id
            )
    return applied

"""Read side of the user's notes (profile, work experience, projects)."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from intake.db.models import Profile, Project, WorkExperience


async def get_profile(db: AsyncSession, user_id: str) -> Profile | None:
    result = await db.execute(select(Profile).where(Profile.user_id == user_id))
    return result.scalar_one_or_none()


async def list_work_experience(db: AsyncSession, user_id: str) -> list[WorkExperience]:
    result = await db.execute(
        select(WorkExperience)
        .where(WorkExperience.user_id == user_id)
        .order_by(WorkExperience.created_at.desc())
    )
    return list(result.scalars().all())


async def list_projects(db: AsyncSession, user_id: str) -> list[Project]:
    result = await db.execute(
        select(Project)
        .where(Project.user_id == user_id)
        .order_by(Project.created_at.desc())
    )
    return list(result.scalars().all())

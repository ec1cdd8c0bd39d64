from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from intake.dependencies import get_current_user_id, get_db
from intake.schemas import NotesResponse
from intake.serializers import profile_to_response, project_to_response, work_experience_to_response
from intake.services.chat import compute_missing_suggestions
from intake.services.notes import get_profile, list_projects, list_work_experience

router = APIRouter(prefix="/me", tags=["notes"])


@router.get("/notes", response_model=NotesResponse)
async def get_notes(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Profile, jobs and projects captured so far (newest first)."""
    profile = await get_profile(db, user_id)
    work = await list_work_experience(db, user_id)
    projects = await list_projects(db, user_id)
    return NotesResponse(
        profile=profile_to_response(profile) if profile else None,
        work_experience=[work_experience_to_response(w) for w in work],
        projects=[project_to_response(p) for p in projects],
        missing=await compute_missing_suggestions(db, user_id),
    )

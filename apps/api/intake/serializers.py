"""Shared model-to-response serializers."""

from intake.db.models import ChatSession, ConversationTurn, Profile, Project, WorkExperience
from intake.schemas import (
    ProfileResponse,
    ProjectResponse,
    SessionListItem,
    StoredMessage,
    StoredMessagePart,
    WorkExperienceResponse,
)


def profile_to_response(profile: Profile) -> ProfileResponse:
    return ProfileResponse(
        bio=profile.bio,
        current_job_role=profile.current_job_role,
        career_summary=profile.career_summary,
        skills=list(profile.skills or []),
        updated_at=profile.updated_at,
    )


def work_experience_to_response(row: WorkExperience) -> WorkExperienceResponse:
    return WorkExperienceResponse(
        id=row.id,
        company=row.company or "",
        role=row.role or "",
        start_date=row.start_date,
        end_date=row.end_date,
        responsibilities=list(row.responsibilities or []),
        achievements=list(row.achievements or []),
        created_at=row.created_at,
    )


def project_to_response(row: Project) -> ProjectResponse:
    return ProjectResponse(
        id=row.id,
        title=row.title or "",
        description=row.description,
        impact=row.impact,
        technologies=list(row.technologies or []),
        created_at=row.created_at,
    )


def session_to_list_item(session: ChatSession) -> SessionListItem:
    return SessionListItem(
        id=session.id,
        start_time=session.start_time,
        end_time=session.end_time,
        summary=session.summary,
        status=session.status,
        life_story_mode=bool(session.life_story_mode),
    )


def turn_to_message(turn: ConversationTurn) -> StoredMessage:
    """Stored turn -> UI message shape (one text part) for resuming a chat."""
    return StoredMessage(
        id=turn.id,
        role=turn.role,
        parts=[StoredMessagePart(text=turn.content)],
    )

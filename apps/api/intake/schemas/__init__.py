"""Pydantic request/response schemas."""

from intake.schemas.chat import MessagePart, ChatMessage, ChatRequest, ChatCheckResponse
from intake.schemas.session import (
    SessionResponse,
    StartSessionRequest,
    SessionIdRequest,
    EndSessionResponse,
    ResumeSessionResponse,
    SessionListItem,
    SessionListResponse,
    StoredMessagePart,
    StoredMessage,
    MessagesResponse,
)
from intake.schemas.notes import (
    ProfileResponse,
    WorkExperienceResponse,
    ProjectResponse,
    NotesResponse,
)

__all__ = [
    "MessagePart",
    "ChatMessage",
    "ChatRequest",
    "ChatCheckResponse",
    "SessionResponse",
    "StartSessionRequest",
    "SessionIdRequest",
    "EndSessionResponse",
    "ResumeSessionResponse",
    "SessionListItem",
    "SessionListResponse",
    "StoredMessagePart",
    "StoredMessage",
    "MessagesResponse",
    "ProfileResponse",
    "WorkExperienceResponse",
    "ProjectResponse",
    "NotesResponse",
]

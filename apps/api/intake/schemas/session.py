from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SessionResponse(_CamelModel):
    session_id: str = Field(alias="sessionId")
    life_story_mode: bool = Field(False, alias="lifeStoryMode")


class StartSessionRequest(_CamelModel):
    life_story_mode: bool = Field(False, alias="lifeStoryMode")


class SessionIdRequest(_CamelModel):
    session_id: Optional[str] = Field(None, alias="sessionId")


class EndSessionResponse(BaseModel):
    summary: str
    missing: list[str] = []


class ResumeSessionResponse(_CamelModel):
    ok: bool = True
    session_id: str = Field(alias="sessionId")


class SessionListItem(BaseModel):
    id: str
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    summary: Optional[str] = None
    status: Literal["active", "ended"]
    life_story_mode: bool = False


class SessionListResponse(BaseModel):
    sessions: list[SessionListItem] = []


class StoredMessagePart(BaseModel):
    type: Literal["text"] = "text"
    text: str


class StoredMessage(BaseModel):
    id: str
    role: Literal["user", "assistant", "system"]
    parts: list[StoredMessagePart]


class MessagesResponse(BaseModel):
    messages: list[StoredMessage] = []

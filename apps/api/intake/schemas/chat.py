from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class MessagePart(BaseModel):
    """One part of a UI message; only type == "text" parts carry transcript text."""

    model_config = ConfigDict(extra="allow")

    type: str
    text: Optional[str] = None


class ChatMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    role: Literal["user", "assistant", "system"]
    parts: list[MessagePart] = []


class ChatRequest(BaseModel):
    """Body of POST /chat: full transcript so far plus the session it belongs to."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(None, alias="id")
    messages: list[ChatMessage] = []
    life_story_mode: bool = Field(False, alias="lifeStoryMode")


class ChatCheckResponse(BaseModel):
    ok: bool
    error: Optional[str] = None
    message: Optional[str] = None

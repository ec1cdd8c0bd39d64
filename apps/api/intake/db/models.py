import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Column,
    String,
    Text,
    Boolean,
    Integer,
    DateTime,
    ForeignKey,
    Index,
    Uuid,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from .session import Base

# String arrays: JSONB on Postgres, plain JSON elsewhere (SQLite in tests)
JSONList = JSON().with_variant(JSONB(), "postgresql")


def uuid4_str():
    return str(uuid.uuid4())


def utcnow():
    return datetime.now(timezone.utc)


class Profile(Base):
    """One row per user; created lazily on the first profile write."""
    __tablename__ = "profiles"

    id = Column(Uuid(as_uuid=False), primary_key=True, default=uuid4_str)
    user_id = Column(String(255), nullable=False, unique=True, index=True)

    bio = Column(Text, nullable=True)
    current_job_role = Column(Text, nullable=True)
    career_summary = Column(Text, nullable=True)
    skills = Column(JSONList, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class WorkExperience(Base):
    """Append-only: every extracted job becomes a new row."""
    __tablename__ = "work_experience"

    id = Column(Uuid(as_uuid=False), primary_key=True, default=uuid4_str)
    user_id = Column(String(255), nullable=False)

    company = Column(Text, nullable=False, default="")
    role = Column(Text, nullable=False, default="")
    start_date = Column(String(20), nullable=True)  # YYYY-MM
    end_date = Column(String(20), nullable=True)
    responsibilities = Column(JSONList, nullable=False, default=list)
    achievements = Column(JSONList, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (Index("ix_work_experience_user_id", "user_id"),)


class Project(Base):
    """Append-only: every extracted project becomes a new row."""
    __tablename__ = "projects"

    id = Column(Uuid(as_uuid=False), primary_key=True, default=uuid4_str)
    user_id = Column(String(255), nullable=False)

    title = Column(Text, nullable=False, default="")
    description = Column(Text, nullable=True)
    impact = Column(Text, nullable=True)
    technologies = Column(JSONList, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (Index("ix_projects_user_id", "user_id"),)


class ChatSession(Base):
    __tablename__ = "chat_sessions"

    ACTIVE = "active"
    ENDED = "ended"

    id = Column(Uuid(as_uuid=False), primary_key=True, default=uuid4_str)
    user_id = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default=ACTIVE)
    life_story_mode = Column(Boolean, nullable=False, default=False)
    summary = Column(Text, nullable=True)

    start_time = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    end_time = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    turns = relationship(
        "ConversationTurn",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="ConversationTurn.position",
    )

    __table_args__ = (
        Index("ix_chat_sessions_user_status", "user_id", "status"),
        # At most one active session per user
        Index(
            "uq_chat_sessions_one_active",
            "user_id",
            unique=True,
            postgresql_where=text("status = 'active'"),
            sqlite_where=text("status = 'active'"),
        ),
    )


class ConversationTurn(Base):
    __tablename__ = "conversation_turns"

    id = Column(Uuid(as_uuid=False), primary_key=True, default=uuid4_str)
    session_id = Column(Uuid(as_uuid=False), ForeignKey("chat_sessions.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)  # order within the transcript
    role = Column(String(20), nullable=False)  # user | assistant | system
    content = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    session = relationship("ChatSession", back_populates="turns")

    __table_args__ = (
        Index("uq_conversation_turns_session_position", "session_id", "position", unique=True),
    )

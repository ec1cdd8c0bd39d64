"""
Extracted record types and the payload classifier.

A fenced block's JSON body becomes one of three records, chosen by which keys
are present (first match wins):

  1. "company" and "role"                                   -> work_experience
  2. "title" with a string value                            -> project
  3. any of "bio", "current_job_role", "career_summary",
     "skills"                                               -> profile

Key presence is the only gate. Values are coerced leniently (models are not
strict about types) and extra keys are ignored.
"""

from __future__ import annotations

import json
import logging
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

WORK_EXPERIENCE = "work_experience"
PROJECT = "project"
PROFILE = "profile"

PROFILE_KEYS = ("bio", "current_job_role", "career_summary", "skills")


def _coerce_text(value: Any) -> Optional[str]:
    """Strings pass through; other scalars are stringified; containers become None."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return str(value)
    return None


def _coerce_str_list(value: Any) -> list[str]:
    """Accept a list (non-blank scalars kept as strings) or a single string."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if not isinstance(value, list):
        return []
    out: list[str] = []
    for item in value:
        text = _coerce_text(item)
        if text is not None and text.strip():
            out.append(text)
    return out


class _ExtractedModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class ExtractedWorkExperience(_ExtractedModel):
    company: str = ""
    role: str = ""
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    responsibilities: list[str] = Field(default_factory=list)
    achievements: list[str] = Field(default_factory=list)

    @field_validator("company", "role", mode="before")
    @classmethod
    def _required_text(cls, v: Any) -> str:
        return _coerce_text(v) or ""

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _optional_text(cls, v: Any) -> Optional[str]:
        return _coerce_text(v)

    @field_validator("responsibilities", "achievements", mode="before")
    @classmethod
    def _lists(cls, v: Any) -> list[str]:
        return _coerce_str_list(v)


class ExtractedProject(_ExtractedModel):
    title: str = ""
    description: Optional[str] = None
    impact: Optional[str] = None
    technologies: list[str] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def _required_text(cls, v: Any) -> str:
        return _coerce_text(v) or ""

    @field_validator("description", "impact", mode="before")
    @classmethod
    def _optional_text(cls, v: Any) -> Optional[str]:
        return _coerce_text(v)

    @field_validator("technologies", mode="before")
    @classmethod
    def _lists(cls, v: Any) -> list[str]:
        return _coerce_str_list(v)


class ExtractedProfile(_ExtractedModel):
    """Only fields present in the payload are merged; see model_fields_set."""

    bio: Optional[str] = None
    current_job_role: Optional[str] = None
    career_summary: Optional[str] = None
    skills: Optional[list[str]] = None

    @field_validator("bio", "current_job_role", "career_summary", mode="before")
    @classmethod
    def _optional_text(cls, v: Any) -> Optional[str]:
        return _coerce_text(v)

    @field_validator("skills", mode="before")
    @classmethod
    def _skills(cls, v: Any) -> list[str]:
        return _coerce_str_list(v)


class WorkExperienceRecord(_ExtractedModel):
    kind: Literal["work_experience"] = WORK_EXPERIENCE
    data: ExtractedWorkExperience


class ProjectRecord(_ExtractedModel):
    kind: Literal["project"] = PROJECT
    data: ExtractedProject


class ProfileRecord(_ExtractedModel):
    kind: Literal["profile"] = PROFILE
    data: ExtractedProfile


ExtractedRecord = Annotated[
    Union[WorkExperienceRecord, ProjectRecord, ProfileRecord],
    Field(discriminator="kind"),
]


def parse_payload(raw: str) -> Optional[dict]:
    """Parse a fenced block body; None unless it is a JSON object."""
    try:
        value = json.loads((raw or "").strip())
    except (ValueError, json.JSONDecodeError):
        logger.debug("Dropping fenced block with invalid JSON: %s", (raw or "")[:200])
        return None
    if not isinstance(value, dict):
        return None
    return value


def classify_payload(payload: dict) -> Optional[ExtractedRecord]:
    """Route a parsed JSON object to a record kind by key presence, or None."""
    if not isinstance(payload, dict):
        return None
    if "company" in payload and "role" in payload:
        return WorkExperienceRecord(data=ExtractedWorkExperience.model_validate(payload))
    if "title" in payload and isinstance(payload["title"], str):
        return ProjectRecord(data=ExtractedProject.model_validate(payload))
    if any(key in payload for key in PROFILE_KEYS):
        return ProfileRecord(data=ExtractedProfile.model_validate(payload))
    logger.debug("Dropping unclassifiable payload with keys: %s", sorted(payload)[:20])
    return None


def record_identity(record: ExtractedRecord) -> str:
    """Canonical text of (kind, present fields), used for exact-match deduplication."""
    return json.dumps(
        {"kind": record.kind, "data": record.data.model_dump(exclude_unset=True)},
        sort_keys=True,
        ensure_ascii=False,
    )

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ProfileResponse(BaseModel):
    bio: Optional[str] = None
    current_job_role: Optional[str] = None
    career_summary: Optional[str] = None
    skills: list[str] = []
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class WorkExperienceResponse(BaseModel):
    id: str
    company: str
    role: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    responsibilities: list[str] = []
    achievements: list[str] = []
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProjectResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    impact: Optional[str] = None
    technologies: list[str] = []
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class NotesResponse(BaseModel):
    """Everything captured so far, for the live notes panel."""

    profile: Optional[ProfileResponse] = None
    work_experience: list[WorkExperienceResponse] = []
    projects: list[ProjectResponse] = []
    missing: list[str] = []

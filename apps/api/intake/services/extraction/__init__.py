"""Structured note extraction: fenced blocks in assistant text -> profile, jobs, projects."""

from .scanner import iter_fenced_payloads
from .records import (
    PROFILE,
    PROJECT,
    WORK_EXPERIENCE,
    ExtractedRecord,
    ExtractedWorkExperience,
    ExtractedProject,
    ExtractedProfile,
    WorkExperienceRecord,
    ProjectRecord,
    ProfileRecord,
    parse_payload,
    classify_payload,
    record_identity,
)
from .pipeline import iter_records, dedupe_records, extract_records
from .merge import apply_record, apply_records, merge_profile, union_skills

__all__ = [
    "PROFILE",
    "PROJECT",
    "WORK_EXPERIENCE",
    "iter_fenced_payloads",
    "ExtractedRecord",
    "ExtractedWorkExperience",
    "ExtractedProject",
    "ExtractedProfile",
    "WorkExperienceRecord",
    "ProjectRecord",
    "ProfileRecord",
    "parse_payload",
    "classify_payload",
    "record_identity",
    "iter_records",
    "dedupe_records",
    "extract_records",
    "apply_record",
    "apply_records",
    "merge_profile",
    "union_skills",
]

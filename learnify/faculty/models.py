from datetime import datetime
from enum import Enum
from typing import Tuple

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

from learnify.common.timeutils import utcnow

# ==================== ENUMS ====================

class MenteeStatus(str, Enum):
    ACTIVE = "active"
    MEETING_SOON = "meeting_soon"
    ARCHIVED = "archived"


class SuggestionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    NEEDS_FOLLOW_UP = "needs_follow_up"
    REVIEWED = "reviewed"
    ESCALATED = "escalated"
    DISMISSED = "dismissed"


class CourseStatus(str, Enum):
    PUBLISHED = "published"
    DRAFT = "draft"
    ARCHIVED = "archived"


def _normalize(value, allowed, default) -> str:
    value = (value or "").strip().lower()
    if value in {member.value for member in allowed}:
        return value
    return default.value


def normalize_mentee_status(value) -> str:
    return _normalize(value, MenteeStatus, MenteeStatus.ACTIVE)


def normalize_suggestion_status(value) -> str:
    return _normalize(value, SuggestionStatus, SuggestionStatus.REVIEWED)


def normalize_course_status(value) -> str:
    return _normalize(value, CourseStatus, CourseStatus.DRAFT)


STATUS_META = {
    "published": ("Published", "emerald"),
    "draft": ("Draft", "amber"),
    "archived": ("Archived", "slate"),
    "meeting_soon": ("Meeting Soon", "amber"),
}


def title_case(value: str) -> str:
    """Upper-case letters that start a word, words are split on anything but letters, digits and _"""
    chars = []
    previous = " "
    for char in value:
        starts_word = not (previous.isalnum() or previous == "_")
        chars.append(char.upper() if starts_word else char)
        previous = char
    return "".join(chars)


def status_meta(status: str) -> Tuple[str, str]:
    """Display label and tone for a status, unknown values are echoed title-cased"""
    status = status or ""
    if status.lower() in STATUS_META:
        return STATUS_META[status.lower()]
    return title_case(status), "indigo"

# ==================== EMBEDDED DOCUMENTS ====================

class EmbeddedDocument(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    id: ObjectId = Field(default_factory=ObjectId, alias="_id")

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)


class Mentee(EmbeddedDocument):
    name: str
    status: str = MenteeStatus.ACTIVE.value
    next_session: str = ""
    note: str = ""
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class FacultyCourse(EmbeddedDocument):
    title: str
    status: str = CourseStatus.DRAFT.value
    code: str = ""
    last_updated: datetime = Field(default_factory=utcnow)


class AISuggestion(EmbeddedDocument):
    title: str
    course: str = ""
    summary: str = ""
    recommendation: str = ""
    grade_suggestion: str = ""
    status: str = SuggestionStatus.PENDING.value
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

# ==================== DASHBOARD DOCUMENT ====================

def dashboard_defaults(now: datetime, *touched: str) -> dict:
    """
    Fields of an empty dashboard for $setOnInsert

    Paths listed in touched are written by the caller's own operators and are
    left out so the update has no conflicting paths.
    """
    defaults = {
        "overview.courses_taught": 0,
        "overview.students_mentored": 0,
        "overview.average_grade": 0.0,
        "overview.pending_reviews": 0,
        "ai_suggestions": [],
        "mentorship.mentees": [],
        "mentorship.last_updated": now,
        "courses": [],
        "analytics": {"labels": [], "students": [], "avg_grade": []},
        "created_at": now,
        "updated_at": now,
    }
    return {
        path: value for path, value in defaults.items()
        if not any(path == t or path.startswith(t + ".") or t.startswith(path + ".") for t in touched)
    }

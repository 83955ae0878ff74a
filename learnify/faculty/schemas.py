from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from learnify.common.schemas import APIModel, LeaderboardEntry

# ==================== REQUEST SCHEMAS ====================

class SuggestionReview(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = ""
    recommendation: str = ""
    grade_suggestion: str = Field("", alias="gradeSuggestion")


class MenteeCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    status: str = ""
    next_session: str = Field("", alias="nextSession")
    note: str = ""


class MenteeUpdate(BaseModel):
    """Fields left out are not changed"""
    model_config = ConfigDict(populate_by_name=True)

    status: Optional[str] = None
    next_session: Optional[str] = Field(None, alias="nextSession")
    note: Optional[str] = None


class CourseCreate(BaseModel):
    title: str = ""
    status: str = ""
    code: str = ""


class CourseUpdate(BaseModel):
    """Fields left out are not changed"""
    title: Optional[str] = None
    status: Optional[str] = None
    code: Optional[str] = None

# ==================== RESPONSE SCHEMAS ====================

class OverviewStats(APIModel):
    courses_taught: int = 0
    students_mentored: int = 0
    average_grade: float = 0.0
    pending_reviews: int = 0


class SuggestionView(APIModel):
    id: str
    title: str = ""
    course: str = ""
    summary: str = ""
    recommendation: str = ""
    grade_suggestion: str = ""
    status: str = ""
    created_at: str
    updated_at: str


class AIGrading(APIModel):
    suggestions: List[SuggestionView] = []
    pending_count: int = 0
    last_updated: str = "Recently"


class MenteeView(APIModel):
    id: str
    name: str
    status: str
    next_session: Optional[str] = None
    note: Optional[str] = None
    updated_at: str


class Mentorship(APIModel):
    mentees: List[MenteeView] = []
    active_count: int = 0
    last_updated: str = "Recently"


class CourseCard(APIModel):
    id: str
    title: str
    status: str
    status_label: str
    status_tone: str
    code: Optional[str] = None
    last_updated: str


class Analytics(APIModel):
    labels: List[str] = []
    students: List[int] = []
    avg_grade: List[int] = []


class CourseProgress(APIModel):
    course_id: int
    title: str
    average_progress: float = 0.0
    students: int = 0
    due_next: Optional[str] = None


class FacultyDashboard(APIModel):
    overview: OverviewStats
    ai_grading: AIGrading
    mentorship: Mentorship
    courses: List[CourseCard] = []
    analytics: Analytics
    course_progress: List[CourseProgress] = []
    top_performers: List[LeaderboardEntry] = []

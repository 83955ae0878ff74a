from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """Response base, fields are snake_case in Python and camelCase on the wire"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ActiveCourseView(APIModel):
    course_id: int
    title: str
    progress: int = 0
    instructor: Optional[str] = None
    due_next: Optional[str] = None


class PublicUser(APIModel):
    id: int
    name: str
    email: str
    coins: int = 0
    streak: int = 0
    role: str
    academic_standing: int = 0
    gamification_level: int = 0
    course_progress: int = 0
    active_courses: List[ActiveCourseView] = []


class LeaderboardEntry(APIModel):
    id: int
    name: str
    completed_quests: int = 0
    streak: int = 0
    coins: int = 0


def to_public_user(doc: dict) -> PublicUser:
    """Strip credentials and map a stored user onto its public shape"""
    courses = []
    for course in doc.get("active_courses") or []:
        courses.append(ActiveCourseView(
            course_id=course.get("course_id", 0),
            title=course.get("title", ""),
            progress=course.get("progress", 0),
            instructor=course.get("instructor") or None,
            due_next=course.get("due_next") or None,
        ))
    return PublicUser(
        id=doc.get("user_id", 0),
        name=doc.get("name", ""),
        email=doc.get("email", ""),
        coins=doc.get("coins", 0),
        streak=doc.get("streak", 0),
        role=doc.get("role", ""),
        academic_standing=doc.get("academic_standing", 0),
        gamification_level=doc.get("gamification_level", 0),
        course_progress=doc.get("course_progress", 0),
        active_courses=courses,
    )

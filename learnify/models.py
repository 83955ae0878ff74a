from datetime import datetime
from enum import Enum
from typing import List, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

from learnify.common.timeutils import utcnow

# ==================== ENUMS ====================

class Role(str, Enum):
    STUDENT = "student"
    FACULTY = "faculty"
    ADMIN = "admin"

# ==================== DATABASE MODELS ====================

class ActiveCourse(BaseModel):
    course_id: int
    title: str
    progress: int = 0
    instructor: Optional[str] = None
    due_next: Optional[str] = None


class User(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    user_id: int
    name: str
    email: str  # stored lower-cased
    password_hash: str
    role: Role = Role.STUDENT
    coins: int = 0
    streak: int = 0
    academic_standing: int = 0
    gamification_level: int = 0
    course_progress: int = 0
    active_courses: List[ActiveCourse] = Field(default_factory=list)


class Quest(BaseModel):
    quest_id: int
    title: str
    question: str
    answer: str = ""  # never leaves the server
    icon: str = ""
    difficulty: str = "Easy"
    coins: int = 0


class UserQuest(BaseModel):
    user_id: int
    quest_id: int
    completed: bool = True
    completed_at: datetime = Field(default_factory=utcnow)


class PollOption(BaseModel):
    text: str
    votes: int = 0


class Poll(BaseModel):
    poll_id: int
    question: str
    time_left: str = ""
    options: List[PollOption] = Field(default_factory=list)


class Vote(BaseModel):
    user_id: int
    poll_id: int
    option_index: int
    voted_at: datetime = Field(default_factory=utcnow)


class ResearchPost(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    id: ObjectId = Field(default_factory=ObjectId, alias="_id")
    title: str
    summary: str
    body: str
    category: str
    tags: List[str] = Field(default_factory=list)
    link: str = ""
    image_url: str = ""
    author_id: int
    author_name: str
    author_role: str
    is_collaboration: bool = False
    likes: int = 0
    comments: int = 0
    collaborations: int = 0
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

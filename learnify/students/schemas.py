from typing import List

from pydantic import BaseModel

from learnify.common.schemas import APIModel, ActiveCourseView, LeaderboardEntry, PublicUser
from learnify.research.schemas import ResearchPostResponse

# ==================== REQUEST SCHEMAS ====================

class QuestCompletionRequest(BaseModel):
    user_id: int = 0


class PollVoteRequest(BaseModel):
    option_index: int

# ==================== RESPONSE SCHEMAS ====================

class QuestView(APIModel):
    """Quest as shown to players, the answer is never included"""
    id: int
    title: str
    question: str
    icon: str = ""
    difficulty: str = ""
    coins: int = 0
    completed: bool = False


class QuestCompletionResult(APIModel):
    success: bool = True
    coins: int = 0


class PollOptionView(APIModel):
    text: str
    votes: int = 0


class PollView(APIModel):
    id: int
    question: str
    time_left: str = ""
    options: List[PollOptionView] = []


class VoteResult(APIModel):
    success: bool = True


class StudentMetrics(APIModel):
    course_progress: int = 0
    academic_standing: int = 0
    gamification_level: int = 0
    current_streak: int = 0


class DailyQuestItem(APIModel):
    id: int
    title: str
    description: str
    xp: int = 0
    completed: bool = False


class StudentDashboard(APIModel):
    user: PublicUser
    metrics: StudentMetrics
    daily_quests: List[DailyQuestItem] = []
    leaderboard: List[LeaderboardEntry] = []
    active_courses: List[ActiveCourseView] = []
    research_feed: List[ResearchPostResponse] = []

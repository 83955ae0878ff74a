from typing import List

from learnify.common.schemas import APIModel, LeaderboardEntry


class Totals(APIModel):
    users: int = 0
    students: int = 0
    faculty: int = 0
    active_quests: int = 0


class Activity(APIModel):
    user_name: str = ""
    quest_title: str = ""
    completed_at: str


class AdminOverview(APIModel):
    totals: Totals
    average_coins: float = 0.0
    leaderboard: List[LeaderboardEntry] = []
    recent_activity: List[Activity] = []

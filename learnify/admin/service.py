import logging
from typing import List

from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from learnify.admin.schemas import Activity, AdminOverview, Totals
from learnify.common.leaderboard import collect_leaderboard
from learnify.common.timeutils import to_rfc3339
from learnify.database import Database
from learnify.errors import InternalError
from learnify.models import Role

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_SIZE = 5
LEADERBOARD_SIZE = 5


async def collect_recent_activity(db: Database, limit: int = RECENT_ACTIVITY_SIZE) -> List[Activity]:
    """
    Latest quest completions with user and quest names resolved
    Names are cached for the duration of one call
    """
    user_names = {}
    quest_titles = {}
    activities = []

    cursor = db.user_quests.find({}).sort("completed_at", DESCENDING).limit(limit)
    async for record in cursor:
        user_id = record.get("user_id")
        quest_id = record.get("quest_id")
        if user_id not in user_names:
            user = await db.users.find_one({"user_id": user_id})
            user_names[user_id] = user.get("name", "") if user else ""
        if quest_id not in quest_titles:
            quest = await db.quests.find_one({"quest_id": quest_id})
            quest_titles[quest_id] = quest.get("title", "") if quest else ""
        activities.append(Activity(
            user_name=user_names[user_id],
            quest_title=quest_titles[quest_id],
            completed_at=to_rfc3339(record.get("completed_at")),
        ))
    return activities


async def get_overview(db: Database) -> AdminOverview:
    try:
        total_users = await db.users.count_documents({})
        students = await db.users.count_documents({"role": Role.STUDENT.value})
        faculty = await db.users.count_documents({"role": Role.FACULTY.value})
        quests = await db.quests.count_documents({})

        coin_sum = 0
        async for user in db.users.find({}, {"coins": 1}):
            coin_sum += user.get("coins", 0)

        activity = await collect_recent_activity(db)
    except PyMongoError:
        logger.exception("Failed to build admin overview")
        raise InternalError("failed to load users")

    return AdminOverview(
        totals=Totals(users=total_users, students=students, faculty=faculty, active_quests=quests),
        average_coins=coin_sum / total_users if total_users else 0.0,
        leaderboard=await collect_leaderboard(db, LEADERBOARD_SIZE),
        recent_activity=activity,
    )

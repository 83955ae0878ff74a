import logging
from typing import List

from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from learnify.common.schemas import LeaderboardEntry
from learnify.database import Database
from learnify.errors import InternalError

logger = logging.getLogger(__name__)

# ==================== LEADERBOARD QUERIES ====================

async def collect_leaderboard(db: Database, limit: int = 0) -> List[LeaderboardEntry]:
    """
    Users ordered by coin balance, highest first
    limit <= 0 returns every user
    """
    try:
        cursor = db.users.find({}).sort("coins", DESCENDING)
        if limit > 0:
            cursor = cursor.limit(limit)

        entries = []
        async for user in cursor:
            completed = await db.user_quests.count_documents(
                {"user_id": user.get("user_id"), "completed": True}
            )
            entries.append(LeaderboardEntry(
                id=user.get("user_id", 0),
                name=user.get("name", ""),
                completed_quests=completed,
                streak=user.get("streak", 0),
                coins=user.get("coins", 0),
            ))
        return entries
    except PyMongoError:
        logger.exception("Failed to load leaderboard")
        raise InternalError("failed to load leaderboard")

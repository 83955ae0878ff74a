import logging
from typing import Optional

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient

from learnify.config import Settings

logger = logging.getLogger(__name__)


class Database:
    """
    Collection handles shared by every route package
    Built once per app and kept on app.state
    """
    def __init__(self, db, client: Optional[AsyncIOMotorClient] = None):
        self.db = db
        self.client = client
        self.users = db["users"]
        self.quests = db["quests"]
        self.polls = db["polls"]
        self.votes = db["votes"]
        self.user_quests = db["user_quests"]
        self.research_posts = db["research_posts"]
        self.faculty_dashboards = db["faculty_dashboards"]

    def close(self):
        if self.client is not None:
            self.client.close()


def connect(settings: Settings) -> Database:
    client = AsyncIOMotorClient(settings.mongodb_uri)
    logger.info("Connected to MongoDB database %s", settings.database_name)
    return Database(client[settings.database_name], client=client)


# ==================== DEPENDENCY FUNCTIONS ====================

async def get_db(request: Request) -> Database:
    """Database dependency"""
    return request.app.state.db


async def create_indexes(db: Database):
    """
    Create database indexes
    Called during application startup
    """
    # Users
    await db.users.create_index("user_id", unique=True)
    await db.users.create_index("email", unique=True)
    await db.users.create_index([("role", 1), ("coins", -1)])

    # Catalog
    await db.quests.create_index("quest_id")
    await db.polls.create_index("poll_id")

    # Completions and votes are guarded by lookups, not by uniqueness
    await db.user_quests.create_index([("user_id", 1), ("quest_id", 1)])
    await db.user_quests.create_index("completed_at")
    await db.votes.create_index([("user_id", 1), ("poll_id", 1)])

    # Research feed
    await db.research_posts.create_index("created_at")

    # Faculty dashboards
    await db.faculty_dashboards.create_index("faculty_id", unique=True)

    logger.info("Database indexes ensured")

import logging
from typing import List

from pymongo.errors import PyMongoError

from learnify.auth.permissions import Identity
from learnify.common.leaderboard import collect_leaderboard
from learnify.common.schemas import PublicUser, to_public_user
from learnify.common.timeutils import utcnow
from learnify.database import Database
from learnify.errors import ForbiddenError, InternalError, NotFoundError, ValidationError
from learnify.models import UserQuest, Vote
from learnify.research.service import collect_feed
from learnify.students.schemas import (
    DailyQuestItem, PollOptionView, PollView, QuestCompletionResult, QuestView,
    StudentDashboard, StudentMetrics, VoteResult,
)

logger = logging.getLogger(__name__)

DASHBOARD_LEADERBOARD_SIZE = 5
DASHBOARD_FEED_SIZE = 25

# ==================== PROFILE ====================

async def get_user_profile(db: Database, identity: Identity, user_id: int) -> PublicUser:
    try:
        user = await db.users.find_one({"user_id": user_id})
    except PyMongoError:
        logger.exception("Failed to load user %s", user_id)
        raise InternalError("failed to load user")
    if not user:
        raise NotFoundError("user not found")
    if identity.is_student and identity.user_id != user_id:
        raise ForbiddenError("students may only view their own profile")
    return to_public_user(user)

# ==================== QUESTS ====================

async def collect_quests(db: Database, user_id: int) -> List[QuestView]:
    """Quest catalog with the user's completion flag on each entry"""
    try:
        quests = []
        async for quest in db.quests.find({}).sort("quest_id", 1):
            record = await db.user_quests.find_one({"user_id": user_id, "quest_id": quest["quest_id"]})
            quests.append(QuestView(
                id=quest["quest_id"],
                title=quest.get("title", ""),
                question=quest.get("question", ""),
                icon=quest.get("icon", ""),
                difficulty=quest.get("difficulty", ""),
                coins=quest.get("coins", 0),
                completed=bool(record and record.get("completed")),
            ))
        return quests
    except PyMongoError:
        logger.exception("Failed to fetch quests for %s", user_id)
        raise InternalError("failed to fetch quests")


async def list_quests(db: Database, identity: Identity, requested_user_id: int = 0) -> List[QuestView]:
    target_id = requested_user_id
    if identity.is_student or target_id == 0:
        target_id = identity.user_id
    return await collect_quests(db, target_id)


async def complete_quest(db: Database, identity: Identity, quest_id: int, requested_user_id: int = 0) -> QuestCompletionResult:
    """
    Mark a quest complete and credit its coins once

    A repeated completion is a no-op that still reports success.
    """
    target_id = requested_user_id
    if identity.is_student or target_id == 0:
        target_id = identity.user_id
    if identity.is_faculty and target_id != identity.user_id:
        raise ForbiddenError("faculty cannot complete quests for students")

    try:
        quest = await db.quests.find_one({"quest_id": quest_id})
    except PyMongoError:
        logger.exception("Failed to load quest %s", quest_id)
        raise InternalError("failed to update")
    if not quest:
        raise NotFoundError("quest not found")

    coins = quest.get("coins", 0)
    try:
        existing = await db.user_quests.count_documents({"user_id": target_id, "quest_id": quest_id})
        if existing == 0:
            record = UserQuest(user_id=target_id, quest_id=quest_id, completed_at=utcnow())
            await db.user_quests.insert_one(record.model_dump())
            await db.users.update_one({"user_id": target_id}, {"$inc": {"coins": coins}})
            logger.info("User %s completed quest %s (+%s coins)", target_id, quest_id, coins)
    except PyMongoError:
        logger.exception("Failed to record quest %s for %s", quest_id, target_id)
        raise InternalError("failed to update")

    return QuestCompletionResult(success=True, coins=coins)

# ==================== POLLS ====================

async def list_polls(db: Database) -> List[PollView]:
    try:
        polls = []
        async for poll in db.polls.find({}).sort("poll_id", 1):
            polls.append(PollView(
                id=poll["poll_id"],
                question=poll.get("question", ""),
                time_left=poll.get("time_left", ""),
                options=[PollOptionView(text=o.get("text", ""), votes=o.get("votes", 0)) for o in poll.get("options") or []],
            ))
        return polls
    except PyMongoError:
        logger.exception("Failed to fetch polls")
        raise InternalError("failed to fetch polls")


async def vote(db: Database, identity: Identity, poll_id: int, option_index: int) -> VoteResult:
    """One vote per user and poll, a repeat vote is ignored"""
    if option_index < 0:
        raise ValidationError("invalid option index")
    try:
        poll = await db.polls.find_one({"poll_id": poll_id})
        if not poll:
            raise NotFoundError("poll not found")
        if option_index >= len(poll.get("options") or []):
            raise ValidationError("invalid option index")

        existing = await db.votes.count_documents({"user_id": identity.user_id, "poll_id": poll_id})
        if existing == 0:
            ballot = Vote(user_id=identity.user_id, poll_id=poll_id, option_index=option_index, voted_at=utcnow())
            await db.votes.insert_one(ballot.model_dump())
            await db.polls.update_one(
                {"poll_id": poll_id},
                {"$inc": {f"options.{option_index}.votes": 1}},
            )
    except PyMongoError:
        logger.exception("Failed to record vote on poll %s", poll_id)
        raise InternalError("failed to record vote")
    return VoteResult(success=True)

# ==================== DASHBOARD ====================

async def get_dashboard(db: Database, identity: Identity, requested_user_id: int = 0) -> StudentDashboard:
    target_id = identity.user_id
    if identity.is_admin and requested_user_id > 0:
        target_id = requested_user_id

    try:
        user = await db.users.find_one({"user_id": target_id})
    except PyMongoError:
        logger.exception("Failed to load student %s", target_id)
        raise InternalError("failed to load student")
    if not user:
        raise NotFoundError("student not found")

    quests = await collect_quests(db, target_id)
    leaders = await collect_leaderboard(db, DASHBOARD_LEADERBOARD_SIZE)
    feed = await collect_feed(db, target_id, DASHBOARD_FEED_SIZE)
    profile = to_public_user(user)

    return StudentDashboard(
        user=profile,
        metrics=StudentMetrics(
            course_progress=user.get("course_progress", 0),
            academic_standing=user.get("academic_standing", 0),
            gamification_level=user.get("gamification_level", 0),
            current_streak=user.get("streak", 0),
        ),
        daily_quests=[
            DailyQuestItem(id=q.id, title=q.title, description=q.question, xp=q.coins, completed=q.completed)
            for q in quests
        ],
        leaderboard=leaders,
        active_courses=profile.active_courses,
        research_feed=feed,
    )

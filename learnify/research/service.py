import logging
from datetime import datetime, timedelta
from typing import List, Optional

from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from learnify.common.timeutils import format_relative, to_rfc3339, utcnow
from learnify.database import Database
from learnify.errors import InternalError, NotFoundError, ValidationError
from learnify.models import ResearchPost, Role
from learnify.research import utils
from learnify.research.schemas import (
    ResearchAuthor, ResearchPostCreate, ResearchPostResponse, ResearchStats,
)

logger = logging.getLogger(__name__)

FALLBACK_SUMMARY = "An exciting research update from our community."
TRENDING_SCORE = 30
RECENT_TRENDING_SCORE = 12
RECENT_WINDOW = timedelta(hours=72)


def is_trending(post: dict, now: Optional[datetime] = None) -> bool:
    score = post.get("likes", 0) + post.get("comments", 0) + 3 * post.get("collaborations", 0)
    if score >= TRENDING_SCORE:
        return True
    created_at = post.get("created_at")
    if created_at is None or score < RECENT_TRENDING_SCORE:
        return False
    now = now or utcnow()
    return now - created_at.replace(tzinfo=None) <= RECENT_WINDOW


def build_post_response(post: dict, viewer_id: int) -> ResearchPostResponse:
    body = post.get("body", "")
    title = (post.get("title") or "").strip() or utils.derive_title(body)
    summary = (post.get("summary") or "").strip() or utils.truncate_text(body, utils.SUMMARY_LIMIT)
    created_at = post.get("created_at")

    if post.get("_id") is not None:
        post_id = str(post["_id"])
    else:
        post_id = f"research-{int(created_at.timestamp() * 1e9) if created_at else 0}"

    return ResearchPostResponse(
        id=post_id,
        title=title,
        summary=summary or FALLBACK_SUMMARY,
        category=utils.normalize_category(post.get("category", ""), post.get("is_collaboration", False)),
        tags=utils.sanitize_tags(post.get("tags")),
        author=ResearchAuthor(name=post.get("author_name", ""), role=post.get("author_role", "")),
        timestamp=format_relative(created_at),
        created_at=to_rfc3339(created_at) if created_at else "",
        image=(post.get("image_url") or "").strip() or None,
        link=(post.get("link") or "").strip() or None,
        stats=ResearchStats(
            likes=post.get("likes", 0),
            comments=post.get("comments", 0),
            collaborations=post.get("collaborations", 0),
        ),
        is_collaboration=post.get("is_collaboration", False),
        is_mine=post.get("author_id") == viewer_id,
        trending=is_trending(post),
    )

# ==================== FEED ====================

async def collect_feed(db: Database, viewer_id: int, limit: int = 0) -> List[ResearchPostResponse]:
    """
    Research posts, newest first
    Shared by the research routes and the student dashboard
    """
    try:
        cursor = db.research_posts.find({}).sort("created_at", DESCENDING)
        if limit > 0:
            cursor = cursor.limit(limit)
        return [build_post_response(post, viewer_id) async for post in cursor]
    except PyMongoError:
        logger.exception("Failed to load research posts")
        raise InternalError("failed to load research posts")


def author_role_label(user: dict, override: str = "") -> str:
    override = (override or "").strip()
    if override:
        return override
    role = user.get("role")
    if role == Role.FACULTY.value:
        return "Faculty Mentor"
    if role == Role.ADMIN.value:
        return "Administrator"
    courses = user.get("active_courses") or []
    if courses:
        return f"Student · {courses[0].get('title', '')}"
    return "Student Researcher"

# ==================== CREATE ====================

async def create_post(db: Database, author_id: int, data: ResearchPostCreate) -> ResearchPostResponse:
    try:
        user = await db.users.find_one({"user_id": author_id})
    except PyMongoError:
        logger.exception("Failed to load author %s", author_id)
        raise InternalError("failed to load user")
    if not user:
        raise NotFoundError("user not found")

    body = data.body.strip()
    summary = data.summary.strip()
    title = data.title.strip()
    body = body or summary or title
    if not body:
        raise ValidationError("content is required")

    summary = utils.truncate_text(summary or body, utils.SUMMARY_LIMIT)
    title = utils.truncate_text(title, utils.TITLE_LIMIT) if title else utils.derive_title(body)

    if data.is_collaboration is not None:
        is_collaboration = data.is_collaboration
    else:
        is_collaboration = data.category.strip().lower() == "collaboration"

    now = utcnow()
    post = ResearchPost(
        title=title,
        summary=summary,
        body=body,
        category=utils.normalize_category(data.category, is_collaboration),
        tags=utils.merge_unique(utils.sanitize_tags(data.tags), utils.extract_hashtags(body), utils.MAX_TAGS),
        link=utils.ensure_scheme(data.link),
        image_url=utils.ensure_scheme(data.image),
        author_id=author_id,
        author_name=user.get("name", ""),
        author_role=author_role_label(user, data.author_role),
        is_collaboration=is_collaboration,
        created_at=now,
        updated_at=now,
    )
    document = post.model_dump(by_alias=True)

    try:
        await db.research_posts.insert_one(document)
    except PyMongoError:
        logger.exception("Failed to save research post for %s", author_id)
        raise InternalError("failed to save post")

    logger.info("Research post %s created by %s", document["_id"], author_id)
    return build_post_response(document, author_id)

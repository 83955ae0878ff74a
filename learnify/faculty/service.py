"""
Faculty dashboard service

One document per faculty member in faculty_dashboards holds the overview
counters, AI grading suggestions, mentees, owned courses and analytics.
Embedded entries are addressed by their ObjectId through positional updates.
"""

import logging
from typing import List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from learnify.auth.permissions import Identity
from learnify.common.leaderboard import collect_leaderboard
from learnify.common.timeutils import format_relative, to_rfc3339, utcnow
from learnify.database import Database
from learnify.errors import ForbiddenError, InternalError, NotFoundError, ValidationError
from learnify.faculty.models import (
    FacultyCourse, Mentee, MenteeStatus, dashboard_defaults, normalize_course_status,
    normalize_mentee_status, normalize_suggestion_status, status_meta,
)
from learnify.faculty.schemas import (
    AIGrading, Analytics, CourseCard, CourseCreate, CourseProgress, CourseUpdate,
    FacultyDashboard, MenteeCreate, MenteeUpdate, MenteeView, Mentorship,
    OverviewStats, SuggestionReview, SuggestionView,
)
from learnify.models import Role

logger = logging.getLogger(__name__)

TOP_PERFORMERS = 5

# ==================== TARGET RESOLUTION ====================

def resolve_faculty_id(identity: Identity, faculty_id: Optional[str] = None) -> int:
    """
    The dashboard owner for this request

    Faculty always act on their own dashboard. Admins act on their own id
    unless a positive faculty_id is supplied.
    """
    if not (identity.is_faculty or identity.is_admin):
        raise ForbiddenError("faculty access required")

    target_id = identity.user_id
    if identity.is_admin and faculty_id:
        try:
            override = int(faculty_id.strip())
        except ValueError:
            override = 0
        if override > 0:
            target_id = override
    return target_id


def _parse_object_id(value: str, message: str) -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationError(message)

# ==================== AGGREGATES ====================

async def collect_course_progress(db: Database) -> List[CourseProgress]:
    """
    Average progress per course across every student's active courses

    Sorted by average progress, highest first. Ties keep first-seen order.
    """
    totals = {}
    async for student in db.users.find({"role": Role.STUDENT.value}):
        for course in student.get("active_courses") or []:
            course_id = course.get("course_id")
            if course_id is None:
                continue
            entry = totals.setdefault(course_id, {"title": "", "progress": 0, "students": 0, "due_next": ""})
            entry["title"] = course.get("title", "")
            entry["progress"] += course.get("progress", 0)
            entry["students"] += 1
            if course.get("due_next"):
                entry["due_next"] = course["due_next"]

    courses = [
        CourseProgress(
            course_id=course_id,
            title=entry["title"],
            average_progress=entry["progress"] / entry["students"] if entry["students"] else 0.0,
            students=entry["students"],
            due_next=entry["due_next"] or None,
        )
        for course_id, entry in totals.items()
    ]
    courses.sort(key=lambda c: c.average_progress, reverse=True)
    return courses


def count_pending(suggestions: List[dict]) -> int:
    return sum(1 for s in suggestions if (s.get("status") or "").strip().lower() == "pending")

# ==================== RESPONSE MAPPING ====================

def build_dashboard(doc: Optional[dict], course_progress: List[CourseProgress], top_performers) -> FacultyDashboard:
    """Map a stored dashboard (or None) onto the API shape, arrays are never null"""
    doc = doc or {}
    overview = doc.get("overview") or {}
    suggestions = doc.get("ai_suggestions") or []
    mentorship = doc.get("mentorship") or {}
    mentees = mentorship.get("mentees") or []
    analytics = doc.get("analytics") or {}
    pending = count_pending(suggestions)

    suggestion_views = [
        SuggestionView(
            id=str(s.get("_id", "")),
            title=s.get("title", ""),
            course=s.get("course", ""),
            summary=s.get("summary", ""),
            recommendation=s.get("recommendation", ""),
            grade_suggestion=s.get("grade_suggestion", ""),
            status=s.get("status", ""),
            created_at=to_rfc3339(s.get("created_at")),
            updated_at=to_rfc3339(s.get("updated_at")),
        )
        for s in suggestions
    ]

    mentee_views = []
    for m in mentees:
        status = normalize_mentee_status(m.get("status"))
        mentee_views.append(MenteeView(
            id=str(m.get("_id", "")),
            name=m.get("name", ""),
            status=status,
            next_session=m.get("next_session") or None,
            note=m.get("note") or None,
            updated_at=to_rfc3339(m.get("updated_at")),
        ))
    active_count = sum(1 for m in mentee_views if m.status != MenteeStatus.ARCHIVED.value)

    course_cards = []
    for c in doc.get("courses") or []:
        label, tone = status_meta(c.get("status", ""))
        course_cards.append(CourseCard(
            id=str(c.get("_id", "")),
            title=c.get("title", ""),
            status=c.get("status", ""),
            status_label=label,
            status_tone=tone,
            code=c.get("code") or None,
            last_updated=to_rfc3339(c.get("last_updated")),
        ))

    return FacultyDashboard(
        overview=OverviewStats(
            courses_taught=overview.get("courses_taught", 0),
            students_mentored=overview.get("students_mentored", 0),
            average_grade=overview.get("average_grade", 0.0),
            pending_reviews=pending,
        ),
        ai_grading=AIGrading(
            suggestions=suggestion_views,
            pending_count=pending,
            last_updated=format_relative(doc.get("updated_at")),
        ),
        mentorship=Mentorship(
            mentees=mentee_views,
            active_count=active_count,
            last_updated=format_relative(mentorship.get("last_updated")),
        ),
        courses=course_cards,
        analytics=Analytics(
            labels=analytics.get("labels") or [],
            students=analytics.get("students") or [],
            avg_grade=analytics.get("avg_grade") or [],
        ),
        course_progress=course_progress,
        top_performers=top_performers,
    )


async def render_dashboard(db: Database, doc: Optional[dict]) -> FacultyDashboard:
    """
    Persist the recomputed pending count and attach the aggregates
    """
    try:
        if doc is not None:
            pending = count_pending(doc.get("ai_suggestions") or [])
            await db.faculty_dashboards.update_one(
                {"_id": doc["_id"]},
                {"$set": {"overview.pending_reviews": pending}},
            )
            doc.setdefault("overview", {})["pending_reviews"] = pending
        course_progress = await collect_course_progress(db)
    except PyMongoError:
        logger.exception("Failed to build faculty dashboard aggregates")
        raise InternalError("failed to load faculty dashboard")

    top_performers = await collect_leaderboard(db, TOP_PERFORMERS)
    return build_dashboard(doc, course_progress, top_performers)

# ==================== DASHBOARD OPERATIONS ====================

async def get_dashboard(db: Database, faculty_id: int) -> FacultyDashboard:
    try:
        doc = await db.faculty_dashboards.find_one({"faculty_id": faculty_id})
    except PyMongoError:
        logger.exception("Failed to load dashboard for faculty %s", faculty_id)
        raise InternalError("failed to load faculty dashboard")
    return await render_dashboard(db, doc)


async def _update_embedded(db: Database, faculty_id: int, array: str, entry_id: ObjectId,
                           fields: dict, extra: Optional[dict] = None) -> Optional[dict]:
    """
    Positional $set on the embedded entry whose _id is entry_id

    Returns the dashboard as stored after the update, or None when the
    faculty has no such entry.
    """
    now = utcnow()
    updates = {f"{array}.$.{name}": value for name, value in fields.items()}
    updates.update(extra or {})
    updates["updated_at"] = now
    result = await db.faculty_dashboards.update_one(
        {"faculty_id": faculty_id, f"{array}._id": entry_id},
        {"$set": updates},
    )
    if result.matched_count == 0:
        return None
    return await db.faculty_dashboards.find_one({"faculty_id": faculty_id})


async def _append_embedded(db: Database, faculty_id: int, push: dict, sets: dict, inc: dict) -> Optional[dict]:
    """
    Append to a dashboard, creating it in the same operation when missing
    """
    touched = list(push) + list(sets) + list(inc)
    update = {
        "$push": push,
        "$set": sets,
        "$inc": inc,
        "$setOnInsert": dashboard_defaults(utcnow(), *touched),
    }
    try:
        return await db.faculty_dashboards.find_one_and_update(
            {"faculty_id": faculty_id},
            update,
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
    except DuplicateKeyError:
        # A concurrent first write created the dashboard, append to it instead
        return await db.faculty_dashboards.find_one_and_update(
            {"faculty_id": faculty_id},
            update,
            return_document=ReturnDocument.AFTER,
        )


async def review_suggestion(db: Database, faculty_id: int, suggestion_id: str, data: SuggestionReview) -> FacultyDashboard:
    oid = _parse_object_id(suggestion_id, "invalid suggestion id")

    fields = {
        "status": normalize_suggestion_status(data.status),
        "updated_at": utcnow(),
    }
    if data.recommendation.strip():
        fields["recommendation"] = data.recommendation.strip()
    if data.grade_suggestion.strip():
        fields["grade_suggestion"] = data.grade_suggestion.strip()

    try:
        doc = await _update_embedded(db, faculty_id, "ai_suggestions", oid, fields)
    except PyMongoError:
        logger.exception("Failed to review suggestion %s", suggestion_id)
        raise InternalError("failed to update suggestion")
    if doc is None:
        raise NotFoundError("suggestion not found")

    logger.info("Faculty %s set suggestion %s to %s", faculty_id, suggestion_id, fields["status"])
    return await render_dashboard(db, doc)


async def add_mentee(db: Database, faculty_id: int, data: MenteeCreate) -> FacultyDashboard:
    name = data.name.strip()
    if not name:
        raise ValidationError("name is required")

    now = utcnow()
    mentee = Mentee(
        name=name,
        status=normalize_mentee_status(data.status),
        next_session=data.next_session.strip(),
        note=data.note.strip(),
        created_at=now,
        updated_at=now,
    )
    try:
        doc = await _append_embedded(
            db,
            faculty_id,
            push={"mentorship.mentees": mentee.to_document()},
            sets={"mentorship.last_updated": now, "updated_at": now},
            inc={"overview.students_mentored": 1},
        )
    except PyMongoError:
        logger.exception("Failed to add mentee for faculty %s", faculty_id)
        raise InternalError("failed to add mentee")

    logger.info("Faculty %s added mentee %s", faculty_id, mentee.id)
    return await render_dashboard(db, doc)


async def update_mentee(db: Database, faculty_id: int, mentee_id: str, data: MenteeUpdate) -> FacultyDashboard:
    oid = _parse_object_id(mentee_id, "invalid mentee id")

    now = utcnow()
    fields = {"updated_at": now}
    if data.status is not None:
        fields["status"] = normalize_mentee_status(data.status)
    if data.next_session is not None:
        fields["next_session"] = data.next_session.strip()
    if data.note is not None:
        fields["note"] = data.note.strip()

    try:
        doc = await _update_embedded(
            db, faculty_id, "mentorship.mentees", oid, fields,
            extra={"mentorship.last_updated": now},
        )
    except PyMongoError:
        logger.exception("Failed to update mentee %s", mentee_id)
        raise InternalError("failed to update mentee")
    if doc is None:
        raise NotFoundError("mentee not found")

    return await render_dashboard(db, doc)


async def add_course(db: Database, faculty_id: int, data: CourseCreate) -> FacultyDashboard:
    title = data.title.strip()
    if not title:
        raise ValidationError("title is required")

    now = utcnow()
    course = FacultyCourse(
        title=title,
        status=normalize_course_status(data.status),
        code=data.code.strip(),
        last_updated=now,
    )
    try:
        doc = await _append_embedded(
            db,
            faculty_id,
            push={"courses": course.to_document()},
            sets={"updated_at": now},
            inc={"overview.courses_taught": 1},
        )
    except PyMongoError:
        logger.exception("Failed to add course for faculty %s", faculty_id)
        raise InternalError("failed to add course")

    logger.info("Faculty %s added course %s", faculty_id, course.id)
    return await render_dashboard(db, doc)


async def update_course(db: Database, faculty_id: int, course_id: str, data: CourseUpdate) -> FacultyDashboard:
    oid = _parse_object_id(course_id, "invalid course id")

    fields = {"last_updated": utcnow()}
    if data.status is not None:
        fields["status"] = normalize_course_status(data.status)
    if data.title is not None:
        fields["title"] = data.title.strip()
    if data.code is not None:
        fields["code"] = data.code.strip()

    try:
        doc = await _update_embedded(db, faculty_id, "courses", oid, fields)
    except PyMongoError:
        logger.exception("Failed to update course %s", course_id)
        raise InternalError("failed to update course")
    if doc is None:
        raise NotFoundError("course not found")

    return await render_dashboard(db, doc)

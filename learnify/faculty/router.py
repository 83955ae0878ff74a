from typing import Optional

from fastapi import APIRouter, Depends, Query

from learnify.auth.permissions import Identity, require_roles
from learnify.database import Database, get_db
from learnify.faculty import service
from learnify.faculty.schemas import (
    CourseCreate, CourseUpdate, FacultyDashboard, MenteeCreate, MenteeUpdate, SuggestionReview,
)
from learnify.models import Role

router = APIRouter(prefix="/faculty", tags=["Faculty Dashboard"])

faculty_or_admin = require_roles(Role.FACULTY, Role.ADMIN)

# ==================== DASHBOARD ====================

@router.get("/dashboard", response_model=FacultyDashboard, response_model_exclude_none=True)
@router.get("/overview", response_model=FacultyDashboard, response_model_exclude_none=True)
async def get_dashboard(
    faculty_id: Optional[str] = Query(None),
    identity: Identity = Depends(faculty_or_admin),
    db: Database = Depends(get_db),
):
    """
    Faculty dashboard with course progress and top performers
    Admins may pass faculty_id to inspect another faculty member
    """
    target_id = service.resolve_faculty_id(identity, faculty_id)
    return await service.get_dashboard(db, target_id)

# ==================== AI GRADING ====================

@router.post("/dashboard/ai/{suggestion_id}/review", response_model=FacultyDashboard, response_model_exclude_none=True)
async def review_suggestion(
    suggestion_id: str,
    data: SuggestionReview,
    faculty_id: Optional[str] = Query(None),
    identity: Identity = Depends(faculty_or_admin),
    db: Database = Depends(get_db),
):
    target_id = service.resolve_faculty_id(identity, faculty_id)
    return await service.review_suggestion(db, target_id, suggestion_id, data)

# ==================== MENTORSHIP ====================

@router.post("/dashboard/mentorship", response_model=FacultyDashboard, response_model_exclude_none=True)
async def add_mentee(
    data: MenteeCreate,
    faculty_id: Optional[str] = Query(None),
    identity: Identity = Depends(faculty_or_admin),
    db: Database = Depends(get_db),
):
    """
    Add a mentee, creating the dashboard on first use
    """
    target_id = service.resolve_faculty_id(identity, faculty_id)
    return await service.add_mentee(db, target_id, data)


@router.post("/dashboard/mentorship/{mentee_id}/status", response_model=FacultyDashboard, response_model_exclude_none=True)
async def update_mentee(
    mentee_id: str,
    data: MenteeUpdate,
    faculty_id: Optional[str] = Query(None),
    identity: Identity = Depends(faculty_or_admin),
    db: Database = Depends(get_db),
):
    target_id = service.resolve_faculty_id(identity, faculty_id)
    return await service.update_mentee(db, target_id, mentee_id, data)

# ==================== COURSES ====================

@router.post("/dashboard/courses", response_model=FacultyDashboard, response_model_exclude_none=True)
async def add_course(
    data: CourseCreate,
    faculty_id: Optional[str] = Query(None),
    identity: Identity = Depends(faculty_or_admin),
    db: Database = Depends(get_db),
):
    target_id = service.resolve_faculty_id(identity, faculty_id)
    return await service.add_course(db, target_id, data)


@router.post("/dashboard/courses/{course_id}/status", response_model=FacultyDashboard, response_model_exclude_none=True)
async def update_course(
    course_id: str,
    data: CourseUpdate,
    faculty_id: Optional[str] = Query(None),
    identity: Identity = Depends(faculty_or_admin),
    db: Database = Depends(get_db),
):
    target_id = service.resolve_faculty_id(identity, faculty_id)
    return await service.update_course(db, target_id, course_id, data)

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query

from learnify.auth.permissions import Identity, get_current_identity, require_roles
from learnify.common.leaderboard import collect_leaderboard
from learnify.common.schemas import LeaderboardEntry, PublicUser
from learnify.database import Database, get_db
from learnify.models import Role
from learnify.students import service
from learnify.students.schemas import (
    PollView, PollVoteRequest, QuestCompletionRequest, QuestCompletionResult,
    QuestView, StudentDashboard, VoteResult,
)

router = APIRouter(tags=["Students"])

# ==================== PROFILE ====================

@router.get("/user/{user_id}", response_model=PublicUser, response_model_exclude_none=True)
async def get_user(
    user_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Database = Depends(get_db),
):
    """
    Public profile, students may only read their own
    """
    return await service.get_user_profile(db, identity, user_id)

# ==================== QUESTS ====================

@router.get("/quests", response_model=List[QuestView])
async def get_quests(
    user_id: int = Query(0),
    identity: Identity = Depends(get_current_identity),
    db: Database = Depends(get_db),
):
    return await service.list_quests(db, identity, user_id)


@router.post("/quests/{quest_id}/complete", response_model=QuestCompletionResult)
async def complete_quest(
    quest_id: int,
    data: Optional[QuestCompletionRequest] = Body(None),
    identity: Identity = Depends(get_current_identity),
    db: Database = Depends(get_db),
):
    """
    Complete a quest, coins are credited on the first completion only
    """
    requested = data.user_id if data else 0
    return await service.complete_quest(db, identity, quest_id, requested)

# ==================== LEADERBOARD ====================

@router.get("/leaderboard", response_model=List[LeaderboardEntry])
async def get_leaderboard(
    limit: int = Query(0),
    identity: Identity = Depends(get_current_identity),
    db: Database = Depends(get_db),
):
    return await collect_leaderboard(db, limit)

# ==================== POLLS ====================

@router.get("/polls", response_model=List[PollView])
async def get_polls(
    identity: Identity = Depends(get_current_identity),
    db: Database = Depends(get_db),
):
    return await service.list_polls(db)


@router.post("/polls/{poll_id}/vote", response_model=VoteResult)
async def vote_on_poll(
    poll_id: int,
    data: PollVoteRequest,
    identity: Identity = Depends(get_current_identity),
    db: Database = Depends(get_db),
):
    return await service.vote(db, identity, poll_id, data.option_index)

# ==================== DASHBOARD ====================

@router.get("/student/dashboard", response_model=StudentDashboard, response_model_exclude_none=True)
async def get_student_dashboard(
    user_id: int = Query(0),
    identity: Identity = Depends(require_roles(Role.STUDENT, Role.ADMIN)),
    db: Database = Depends(get_db),
):
    """
    Aggregated student view: metrics, quests, leaderboard, courses and research feed
    Admins may pass user_id to inspect a student
    """
    return await service.get_dashboard(db, identity, user_id)

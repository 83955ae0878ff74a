from fastapi import APIRouter, Depends, Query

from learnify.auth.permissions import Identity, get_current_identity
from learnify.database import Database, get_db
from learnify.research import service
from learnify.research.schemas import ResearchFeed, ResearchPostCreate, ResearchPostResponse

router = APIRouter(prefix="/research", tags=["Research"])


@router.get("/posts", response_model=ResearchFeed, response_model_exclude_none=True)
async def get_posts(
    limit: int = Query(0),
    identity: Identity = Depends(get_current_identity),
    db: Database = Depends(get_db),
):
    """
    Research feed, newest first
    """
    items = await service.collect_feed(db, identity.user_id, limit)
    return ResearchFeed(items=items)


@router.post("/posts", response_model=ResearchPostResponse, response_model_exclude_none=True, status_code=201)
async def create_post(
    data: ResearchPostCreate,
    identity: Identity = Depends(get_current_identity),
    db: Database = Depends(get_db),
):
    return await service.create_post(db, identity.user_id, data)

from fastapi import APIRouter, Depends

from learnify.admin import service
from learnify.admin.schemas import AdminOverview
from learnify.auth.permissions import Identity, require_roles
from learnify.database import Database, get_db
from learnify.models import Role

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/overview", response_model=AdminOverview)
async def get_overview(
    identity: Identity = Depends(require_roles(Role.ADMIN)),
    db: Database = Depends(get_db),
):
    """
    Platform totals, average coins, top players and recent quest completions
    """
    return await service.get_overview(db)

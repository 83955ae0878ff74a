from fastapi import APIRouter, Depends

from learnify.auth import service
from learnify.auth.permissions import Identity, get_current_identity
from learnify.auth.schemas import LoginRequest, LoginResponse
from learnify.common.schemas import PublicUser
from learnify.config import Settings, get_settings
from learnify.database import Database, get_db

router = APIRouter(tags=["Auth"])


@router.post("/auth/login", response_model=LoginResponse, response_model_exclude_none=True)
async def login(
    data: LoginRequest,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Exchange email and password for a session token
    """
    return await service.login(db, settings, data.email, data.password)


@router.get("/me", response_model=PublicUser, response_model_exclude_none=True)
async def get_me(
    identity: Identity = Depends(get_current_identity),
    db: Database = Depends(get_db),
):
    return await service.get_profile(db, identity.user_id)

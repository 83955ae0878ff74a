import logging
from datetime import timedelta

from pymongo.errors import PyMongoError

from learnify.auth.schemas import LoginResponse
from learnify.auth.security import issue_token, verify_password
from learnify.common.schemas import PublicUser, to_public_user
from learnify.config import Settings
from learnify.database import Database
from learnify.errors import ConfigError, InternalError, NotFoundError

logger = logging.getLogger(__name__)


async def login(db: Database, settings: Settings, email: str, password: str) -> LoginResponse:
    email = email.strip().lower()
    try:
        user = await db.users.find_one({"email": email})
    except PyMongoError:
        logger.exception("Failed to look up user %s", email)
        raise InternalError("failed to load user")

    # Unknown email and wrong password look the same to the caller
    verify_password(user.get("password_hash", "") if user else "", password)

    try:
        token, expires_at = issue_token(
            user["user_id"],
            user.get("role", ""),
            settings.jwt_secret,
            ttl=timedelta(hours=settings.token_ttl_hours),
        )
    except ConfigError:
        logger.exception("Token signing is not configured")
        raise InternalError("failed to generate token")

    logger.info("User %s logged in", user["user_id"])
    return LoginResponse(token=token, expires_at=expires_at, user=to_public_user(user))


async def get_profile(db: Database, user_id: int) -> PublicUser:
    try:
        user = await db.users.find_one({"user_id": user_id})
    except PyMongoError:
        logger.exception("Failed to load user %s", user_id)
        raise InternalError("failed to load user")
    if not user:
        raise NotFoundError("user not found")
    return to_public_user(user)

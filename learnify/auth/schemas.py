from datetime import datetime

from pydantic import BaseModel

from learnify.common.schemas import APIModel, PublicUser


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class LoginResponse(APIModel):
    token: str
    expires_at: datetime
    user: PublicUser

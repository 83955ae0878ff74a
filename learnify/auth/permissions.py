from fastapi import Depends, Header

from learnify.auth.security import validate_token
from learnify.config import Settings, get_settings
from learnify.errors import AuthError, ForbiddenError
from learnify.models import Role


class Identity:
    """
    Authenticated caller, valid for the current request only
    """
    def __init__(self, user_id: int, role: str):
        self.user_id = user_id
        self.role = role

    @property
    def is_student(self) -> bool:
        return self.role.lower() == Role.STUDENT.value

    @property
    def is_faculty(self) -> bool:
        return self.role.lower() == Role.FACULTY.value

    @property
    def is_admin(self) -> bool:
        return self.role.lower() == Role.ADMIN.value

    def has_role(self, *allowed) -> bool:
        """An empty allow-list admits every role"""
        if not allowed:
            return True
        wanted = {str(getattr(r, "value", r)).lower() for r in allowed}
        return self.role.lower() in wanted


async def get_current_identity(
    authorization: str = Header(None),
    settings: Settings = Depends(get_settings),
) -> Identity:
    """
    Dependency: Validates the bearer token and returns the caller

    Raises:
        401: Missing or invalid token
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthError("missing bearer token")

    token = authorization[len("Bearer "):].strip()
    user_id, role = validate_token(token, settings.jwt_secret)
    return Identity(user_id, role)


def require_roles(*roles):
    """
    Dependency factory: admits callers whose role is in roles

    Raises:
        403: Role not allowed
    """
    async def role_gate(identity: Identity = Depends(get_current_identity)) -> Identity:
        if not identity.has_role(*roles):
            raise ForbiddenError("forbidden")
        return identity

    return role_gate

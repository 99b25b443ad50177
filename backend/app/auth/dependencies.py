import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from ..database import SessionDep

from ..errors import ForbiddenError, UnauthorizedError
from ..users.models import User
from ..auth import service as auth_service
from .permissions import is_admin, is_super_admin
from .schema import SessionClaims

logger = logging.getLogger(__name__)

# auto_error=False: public routes accept anonymous callers and decide themselves.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

def get_session_claims(token: Optional[str] = Depends(oauth2_scheme)) -> Optional[SessionClaims]:
    """Claims from the bearer token, or None for anonymous / invalid tokens.

    Only used for read gating; anything that mutates loads the user from the
    store instead.
    """
    return auth_service.get_claims_from_access_token(token)

async def get_current_user_from_access_token(
    db: SessionDep,
    token: Optional[str] = Depends(oauth2_scheme),
) -> User:
    user = await auth_service.get_user_from_access_token(token=token, db=db) if token else None
    if user is None:
        raise UnauthorizedError("Unauthorized")
    return user

OptionalClaims = Depends(get_session_claims)
CurrentUser = Depends(get_current_user_from_access_token)

def require_admin(
    current_user: User = CurrentUser
) -> User:
    """
    Gate for admin routes, checked against the role stored in the database.
    Raises 403 for anyone below admin.
    """
    if not is_admin(current_user.role):
        logger.warning(f"Admin access denied for {current_user.email}")
        raise ForbiddenError()
    return current_user

def require_super_admin(
    current_user: User = CurrentUser
) -> User:
    if not is_super_admin(current_user.role):
        logger.warning(f"Superadmin access denied for {current_user.email}")
        raise ForbiddenError("Forbidden - Only superadmins can manage users")
    return current_user

AdminUser = Depends(require_admin)
SuperAdminUser = Depends(require_super_admin)

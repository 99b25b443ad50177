import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict

from jose import jwt, JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..errors import UnauthorizedError
from ..users import service as user_service
from ..users.models import User, UserRole
from .schema import SessionClaims

logger = logging.getLogger(__name__)


def create_access_token(user: User) -> str:
    """
    Build an access token for `user`.
    The token carries the role so read-only gating can skip a DB lookup.
    """
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": user.email,
        "role": UserRole.parse(user.role).value,
        "type": "access",
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

def create_refresh_token(user: User) -> str:
    expire = datetime.now(timezone.utc) + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    to_encode = {
        "sub": user.email,
        "type": "refresh",
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

def _decode_token(token: str) -> Optional[Dict]:
    """Verify signature and expiry. Returns None for any invalid token."""
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None

def get_claims_from_access_token(token: Optional[str]) -> Optional[SessionClaims]:
    if not token:
        return None
    payload = _decode_token(token)
    if payload is None or payload.get("type") != "access":
        return None
    email = payload.get("sub")
    if email is None:
        return None
    return SessionClaims(email=email, role=UserRole.parse(payload.get("role")))

async def get_user_from_access_token(token: str, db: AsyncSession) -> Optional[User]:
    """Resolve the token to the stored user record; the stored role is what counts."""
    claims = get_claims_from_access_token(token)
    if claims is None:
        return None
    return await user_service.get_user_by_email(claims.email, db)

async def get_user_from_refresh_token(token: str, db: AsyncSession) -> User:
    payload = _decode_token(token)

    # An access token must not be usable as a refresh token.
    if payload is None or payload.get("type") != "refresh":
        raise UnauthorizedError("Invalid token type or invalid token")

    email = payload.get("sub")
    if email is None:
        raise UnauthorizedError("Could not find user from token")

    user = await user_service.get_user_by_email(email, db)
    if user is None:
        raise UnauthorizedError("User associated with this token not found")
    return user

async def authenticate_user(
    db: AsyncSession, email: str, password: str
) -> Optional[User]:
    """Return the user on valid credentials, otherwise None."""
    user = await user_service.get_user_by_email(email, db)
    if not user or not user_service.verify_password(password, user.password_hash):
        logger.info(f"Failed login attempt for {email}")
        return None
    return user

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from passlib.context import CryptContext

from ..errors import ConflictError, ForbiddenError, InvalidInputError, NotFoundError
from ..auth.permissions import is_super_admin
from .models import User as UserModel, UserRole
from .schema import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


async def create_user(user_data: UserCreate, db: AsyncSession, role: UserRole = UserRole.USER) -> UserModel:
    existing_user = await get_user_by_email(user_data.email, db)
    if existing_user:
        raise ConflictError("Email already registered", status_code=409)

    db_user = UserModel(
        name=user_data.name,
        email=user_data.email,
        password_hash=pwd_context.hash(user_data.password),
        role=UserRole.parse(role).value,
    )
    db.add(db_user)
    await db.commit()
    await db.refresh(db_user)
    logger.info(f"User registered: {db_user.email} ({db_user.role})")
    return db_user

async def update_user(db: AsyncSession, db_user: UserModel, user_in: UserUpdate) -> UserModel:
    """Update profile fields; only fields present in the request are written."""
    update_data = user_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_user, field, value)

    await db.commit()
    await db.refresh(db_user)
    return db_user

async def get_user_by_id(user_id: str, db: AsyncSession) -> Optional[UserModel]:
    result = await db.execute(select(UserModel).where(UserModel.id == user_id))
    return result.scalar_one_or_none()

async def get_user_by_email(email: str, db: AsyncSession) -> Optional[UserModel]:
    result = await db.execute(select(UserModel).where(UserModel.email == email))
    return result.scalar_one_or_none()

def verify_password(plain_password: str, password_hash: Optional[str]) -> bool:
    # Externally authenticated accounts have no hash and cannot log in with a password.
    if not password_hash:
        return False
    return pwd_context.verify(plain_password, password_hash)


def _ensure_super_admin(actor: UserModel) -> None:
    if actor is None or not is_super_admin(actor.role):
        logger.warning("User management rejected for %s", getattr(actor, "email", None))
        raise ForbiddenError("Forbidden - Only superadmins can manage users")


async def change_user_role(db: AsyncSession, actor: UserModel, target_user_id: str, new_role: str) -> UserModel:
    """
    Set the role of `target_user_id`.

    Any transition between the three roles is allowed, except that a
    superadmin may not move themselves off superadmin.
    """
    _ensure_super_admin(actor)

    try:
        role = UserRole(new_role)
    except ValueError:
        raise InvalidInputError("Invalid role")

    if target_user_id == actor.id and role is not UserRole.SUPERADMIN:
        raise InvalidInputError("Cannot change your own superadmin role")

    target = await get_user_by_id(target_user_id, db)
    if target is None:
        raise NotFoundError("User not found")

    previous = target.role
    target.role = role.value
    await db.commit()
    await db.refresh(target)
    logger.info(f"Role changed: user={target.email} {previous} -> {target.role}, by={actor.email}")
    return target


async def delete_user(db: AsyncSession, actor: UserModel, target_user_id: str) -> None:
    """Delete a user together with every article they authored."""
    _ensure_super_admin(actor)

    if target_user_id == actor.id:
        raise InvalidInputError("Cannot delete yourself")

    target = await get_user_by_id(target_user_id, db)
    if target is None:
        raise NotFoundError("User not found")

    await db.delete(target)
    await db.commit()
    logger.info(f"User deleted: {target.email}, by={actor.email}")


from fastapi import APIRouter

from ..database import SessionDep
from ..users.models import User as UserModel

from .schema import UserUpdate, UserPublic
from . import service as user_service
from ..auth.dependencies import CurrentUser

router = APIRouter(prefix="/api/users", tags=["users"])

@router.get("/me", response_model=UserPublic)
async def read_users_me(current_user: UserModel = CurrentUser):
    return current_user

@router.patch("/me", response_model=UserPublic)
async def update_users_me(
    db: SessionDep,
    user_update_data: UserUpdate,
    current_user: UserModel = CurrentUser,
):
    return await user_service.update_user(db, db_user=current_user, user_in=user_update_data)

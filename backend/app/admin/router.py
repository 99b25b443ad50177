from typing import List

from fastapi import APIRouter

from ..auth.dependencies import AdminUser, SuperAdminUser
from ..articles.schemas import MessageResponse
from ..database import SessionDep
from ..users import service as user_service
from ..users.models import User
from ..users.schema import RoleUpdate, UserAdminListItem, UserPublic
from . import service
from .schemas import DashboardStats

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(db: SessionDep, _: User = AdminUser):
    return await service.get_dashboard_stats(db)


@router.get("/users", response_model=List[UserAdminListItem])
async def list_users(db: SessionDep, _: User = AdminUser):
    return await service.list_users_with_article_counts(db)


@router.patch("/users/{user_id}", response_model=UserPublic)
async def change_user_role(user_id: str, body: RoleUpdate, db: SessionDep, actor: User = SuperAdminUser):
    """(Superadmin only) Change a user's role. A superadmin cannot demote themselves."""
    return await user_service.change_user_role(db, actor, user_id, body.role)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: str, db: SessionDep, actor: User = SuperAdminUser):
    """(Superadmin only) Delete a user and their articles. A superadmin cannot delete themselves."""
    await user_service.delete_user(db, actor, user_id)
    return MessageResponse(message="User deleted successfully")

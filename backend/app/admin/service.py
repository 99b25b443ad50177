from datetime import datetime, timedelta, timezone
from typing import List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..articles.models import Article
from ..users.models import User
from ..users.schema import UserAdminListItem
from .schemas import DashboardStats


async def _count(db: AsyncSession, stmt) -> int:
    return (await db.execute(stmt)).scalar_one()


async def get_dashboard_stats(db: AsyncSession) -> DashboardStats:
    since = datetime.now(timezone.utc) - timedelta(days=settings.RECENT_USERS_DAYS)
    return DashboardStats(
        total_users=await _count(db, select(func.count(User.id))),
        total_articles=await _count(db, select(func.count(Article.id))),
        published_articles=await _count(db, select(func.count(Article.id)).where(Article.published.is_(True))),
        draft_articles=await _count(db, select(func.count(Article.id)).where(Article.published.is_(False))),
        recent_users=await _count(db, select(func.count(User.id)).where(User.created_at >= since)),
    )


async def list_users_with_article_counts(db: AsyncSession) -> List[UserAdminListItem]:
    """All users, newest first, each with the number of articles they wrote."""
    stmt = (
        select(User, func.count(Article.id))
        .outerjoin(Article, Article.author_id == User.id)
        .group_by(User.id)
        .order_by(User.created_at.desc())
    )
    result = await db.execute(stmt)
    return [
        UserAdminListItem(
            id=user.id,
            email=user.email,
            name=user.name,
            image=user.image,
            role=user.role,
            created_at=user.created_at,
            article_count=count,
        )
        for user, count in result.all()
    ]

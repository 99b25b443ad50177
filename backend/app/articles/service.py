# backend/app/articles/service.py
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..errors import ConflictError, ForbiddenError, InvalidInputError, NotFoundError
from ..auth.permissions import is_admin
from ..users.models import User
from .models import Article
from .schemas import ArticleCreate, ArticleUpdate
from .utils import encode_tags, slugify

logger = logging.getLogger(__name__)

SLUG_TAKEN = "An article with this slug already exists"
REQUIRED_FIELDS = ("title", "slug", "excerpt", "content")


def _ensure_admin(actor: User) -> None:
    if actor is None or not is_admin(actor.role):
        logger.warning("Article mutation rejected for %s", getattr(actor, "email", None))
        raise ForbiddenError()


def _clean(value):
    return value.strip() if isinstance(value, str) else value


async def _slug_exists(db: AsyncSession, slug: str) -> bool:
    result = await db.execute(select(Article.id).where(Article.slug == slug))
    return result.scalar_one_or_none() is not None


async def _reload(db: AsyncSession, article_id: str) -> Article:
    # populate_existing refreshes server-generated timestamps and attaches the author
    result = await db.execute(
        select(Article)
        .options(selectinload(Article.author))
        .where(Article.id == article_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def _commit_or_conflict(db: AsyncSession) -> None:
    """Commit, translating a unique-index violation into a slug conflict.

    The pre-insert slug lookup can race with another writer; the index on
    articles.slug decides who wins.
    """
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.info(f"Slug conflict detected on commit: {e.orig}")
        raise ConflictError(SLUG_TAKEN)


async def list_articles(db: AsyncSession, *, include_unpublished: bool = False) -> List[Article]:
    """Newest first. Drafts are only included when explicitly requested."""
    stmt = select(Article).options(selectinload(Article.author)).order_by(Article.created_at.desc())
    if not include_unpublished:
        stmt = stmt.where(Article.published.is_(True))
    result = await db.execute(stmt)
    return result.scalars().all()


async def get_article_by_slug(db: AsyncSession, slug: str, *, include_unpublished: bool = True) -> Article:
    stmt = select(Article).options(selectinload(Article.author)).where(Article.slug == slug)
    if not include_unpublished:
        stmt = stmt.where(Article.published.is_(True))
    result = await db.execute(stmt)
    article = result.scalar_one_or_none()
    if article is None:
        raise NotFoundError("Article not found")
    return article


async def create_article(db: AsyncSession, actor: User, data: ArticleCreate) -> Article:
    _ensure_admin(actor)

    values = {field: _clean(getattr(data, field)) for field in REQUIRED_FIELDS}
    if not values["slug"]:
        values["slug"] = slugify(values["title"] or "")
    if not all(values[field] for field in REQUIRED_FIELDS):
        raise InvalidInputError("Title, slug, excerpt, and content are required")

    if await _slug_exists(db, values["slug"]):
        raise ConflictError(SLUG_TAKEN)

    article = Article(
        **values,
        cover_image=_clean(data.cover_image) or None,
        published=bool(data.published),
        read_time=_clean(data.read_time) or settings.DEFAULT_READ_TIME,
        tags=encode_tags(data.tags),
        author_id=actor.id,
    )
    db.add(article)
    await _commit_or_conflict(db)

    logger.info(f"Article created: slug={article.slug}, author={actor.email}")
    return await _reload(db, article.id)


async def update_article(db: AsyncSession, actor: User, slug: str, data: ArticleUpdate) -> Article:
    """
    Apply a partial update to the article at `slug`.

    Only fields present in the request are touched. For non-nullable columns
    an explicit null is ignored; `cover_image: null` clears the image.
    """
    _ensure_admin(actor)

    article = await get_article_by_slug(db, slug)
    update_data = data.model_dump(exclude_unset=True)
    changes = {}

    new_slug = _clean(update_data.pop("new_slug", None))
    echoed_slug = _clean(update_data.pop("slug", None))
    target_slug = new_slug or echoed_slug
    if target_slug and target_slug != article.slug:
        if await _slug_exists(db, target_slug):
            raise ConflictError(SLUG_TAKEN)
        changes["slug"] = target_slug

    for field in ("title", "excerpt", "content"):
        value = _clean(update_data.get(field))
        if value is None:
            continue
        if not value:
            raise InvalidInputError(f"{field.capitalize()} cannot be empty")
        changes[field] = value

    if update_data.get("published") is not None:
        changes["published"] = update_data["published"]
    if update_data.get("read_time") is not None:
        changes["read_time"] = _clean(update_data["read_time"]) or settings.DEFAULT_READ_TIME
    if "cover_image" in update_data:
        changes["cover_image"] = _clean(update_data["cover_image"]) or None
    if update_data.get("tags") is not None:
        changes["tags"] = encode_tags(update_data["tags"])

    for field, value in changes.items():
        setattr(article, field, value)
    await _commit_or_conflict(db)

    logger.info(f"Article updated: slug={slug} -> {article.slug}, by={actor.email}")
    return await _reload(db, article.id)


async def delete_article(db: AsyncSession, actor: User, slug: str) -> None:
    _ensure_admin(actor)

    article = await get_article_by_slug(db, slug)
    await db.delete(article)
    await db.commit()
    logger.info(f"Article deleted: slug={slug}, by={actor.email}")

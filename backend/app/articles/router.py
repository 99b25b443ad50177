# backend/app/articles/router.py
from typing import List, Optional

from fastapi import APIRouter, Query

from ..auth.dependencies import AdminUser, OptionalClaims
from ..auth.permissions import is_admin
from ..auth.schema import SessionClaims
from ..database import SessionDep
from ..users.models import User
from .schemas import ArticleCreate, ArticleOut, ArticleUpdate, MessageResponse
from . import service

router = APIRouter(prefix="/api/articles", tags=["articles"])


@router.get("", response_model=List[ArticleOut])
async def list_articles(
    db: SessionDep,
    include_all: bool = Query(False, alias="all", description="Include drafts (admins only)"),
    claims: Optional[SessionClaims] = OptionalClaims,
):
    include_unpublished = include_all and claims is not None and is_admin(claims.role)
    return await service.list_articles(db, include_unpublished=include_unpublished)


@router.post("", response_model=ArticleOut)
async def create_article(body: ArticleCreate, db: SessionDep, actor: User = AdminUser):
    return await service.create_article(db, actor, body)


@router.get("/{slug}", response_model=ArticleOut)
async def get_article(slug: str, db: SessionDep, claims: Optional[SessionClaims] = OptionalClaims):
    # Drafts are only visible to admins (the edit screen loads through here).
    include_unpublished = claims is not None and is_admin(claims.role)
    return await service.get_article_by_slug(db, slug, include_unpublished=include_unpublished)


@router.put("/{slug}", response_model=ArticleOut)
async def update_article(slug: str, body: ArticleUpdate, db: SessionDep, actor: User = AdminUser):
    return await service.update_article(db, actor, slug, body)


@router.delete("/{slug}", response_model=MessageResponse)
async def delete_article(slug: str, db: SessionDep, actor: User = AdminUser):
    await service.delete_article(db, actor, slug)
    return MessageResponse(message="Article deleted successfully")

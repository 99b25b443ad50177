# backend/app/articles/schemas.py
from ..models import CustomModel
from .utils import decode_tags
from pydantic import Field, field_validator
from typing import Optional, List, Union
from datetime import datetime


class ArticleAuthor(CustomModel):
    id: str
    name: Optional[str] = None
    email: str
    image: Optional[str] = None


class ArticleCreate(CustomModel):
    # Required fields are checked by the service so that blanks and omissions
    # both come back as a 400 with a single message.
    title: Optional[str] = Field(None, json_schema_extra={"example": "Hello World!"})
    slug: Optional[str] = Field(None, description="Derived from the title when omitted")
    excerpt: Optional[str] = None
    content: Optional[str] = None
    cover_image: Optional[str] = None
    published: Optional[bool] = None
    read_time: Optional[str] = None
    tags: Optional[Union[List[str], str]] = Field(None, json_schema_extra={"example": ["python", "fastapi"]})


class ArticleUpdate(CustomModel):
    """Partial update: omitted fields keep their stored value."""
    title: Optional[str] = None
    new_slug: Optional[str] = Field(None, description="Rename the article to this slug")
    # The edit form echoes the slug field; treated like newSlug when that is absent.
    slug: Optional[str] = None
    excerpt: Optional[str] = None
    content: Optional[str] = None
    cover_image: Optional[str] = None
    published: Optional[bool] = None
    read_time: Optional[str] = None
    tags: Optional[Union[List[str], str]] = None


class ArticleOut(CustomModel):
    id: str
    title: str
    slug: str
    excerpt: str
    content: str
    cover_image: Optional[str] = None
    published: bool
    read_time: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    author_id: str
    created_at: datetime
    updated_at: datetime
    author: Optional[ArticleAuthor] = None

    @field_validator("tags", mode="before")
    @classmethod
    def _decode_tags(cls, v):
        return decode_tags(v)


class MessageResponse(CustomModel):
    message: str

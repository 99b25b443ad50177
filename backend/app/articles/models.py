# backend/app/articles/models.py
import uuid
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Boolean, false
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base

class Article(Base):
    __tablename__ = "articles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    excerpt = Column(Text, nullable=False)
    content = Column(Text, nullable=False)  # rich text markup
    cover_image = Column(String(500), nullable=True)
    published = Column(Boolean, default=False, server_default=false(), nullable=False, index=True)
    read_time = Column(String(50), default="5 min read", nullable=True)
    tags = Column(Text, nullable=True)  # JSON array string, see articles.tags
    author_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    author = relationship("User", back_populates="articles")

    def __repr__(self) -> str:
        return f"Article(id={self.id!r}, slug={self.slug!r}, published={self.published!r})"
    def __str__(self) -> str:
        return self.title

from pydantic import EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

from ..models import CustomModel
from .models import UserRole

class UserBase(CustomModel):
    email: EmailStr = Field(..., json_schema_extra={"example": "user@example.com"})
    name: Optional[str] = Field(None, max_length=100, json_schema_extra={"example": "John Doe"})

class UserCreate(UserBase):
    password: str = Field(..., min_length=8, json_schema_extra={"example": "strongpassword123"})

class UserUpdate(CustomModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100, json_schema_extra={"example": "Johnathan Doe"})
    image: Optional[str] = Field(None, max_length=500)

class UserPublic(CustomModel):
    """User as returned by the API. Never carries the password hash."""
    id: str
    email: str
    name: Optional[str] = None
    image: Optional[str] = None
    role: UserRole
    created_at: datetime

    @field_validator("role", mode="before")
    @classmethod
    def _parse_role(cls, v):
        return UserRole.parse(v)

class UserAdminListItem(UserPublic):
    article_count: int = 0

class RoleUpdate(CustomModel):
    # Kept as a plain string so an unknown role is a 400 from the role manager, not a 422.
    role: str = Field(..., json_schema_extra={"example": "admin"})

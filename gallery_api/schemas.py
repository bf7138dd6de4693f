"""
Pydantic schemas for request and response data validation.
Defines data structures for API endpoints with automatic validation and serialization.
"""
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List


# Fields that may be omitted from an update but never explicitly set to null
NON_NULLABLE_FIELDS = frozenset(
    {"title", "category", "type", "image", "description", "height", "featured"}
)


class GalleryItemRead(BaseModel):
    """
    Gallery item as returned by the API.
    Timestamps stay in the database and are not part of the payload.
    """
    id: int
    title: str
    category: str
    type: str
    image: str
    video_url: Optional[str] = Field(default=None, alias="videoUrl")
    description: str
    height: str
    featured: bool
    tags: Optional[List[str]] = None

    model_config = ConfigDict(
        from_attributes=True,  # Enable conversion from SQLAlchemy models
        populate_by_name=True,
    )


class GalleryItemCreate(BaseModel):
    """
    Request schema for creating gallery items.
    Used by POST /api/admin/gallery. Strict mode: no coercion between primitive types.
    """
    title: str = Field(min_length=1, max_length=255)
    category: str = Field(max_length=50)
    type: str = Field(default="image", max_length=20)
    image: str = Field(min_length=1)
    video_url: Optional[str] = Field(default=None, alias="videoUrl")
    description: str
    height: str = Field(default="h-64", max_length=20)
    featured: bool = False
    tags: Optional[List[str]] = None

    model_config = ConfigDict(strict=True, populate_by_name=True)


class GalleryItemUpdate(BaseModel):
    """
    Request schema for partial updates.
    Used by PUT /api/admin/gallery/{id}; only the supplied fields are changed.
    """
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category: Optional[str] = Field(default=None, max_length=50)
    type: Optional[str] = Field(default=None, max_length=20)
    image: Optional[str] = Field(default=None, min_length=1)
    video_url: Optional[str] = Field(default=None, alias="videoUrl")
    description: Optional[str] = None
    height: Optional[str] = Field(default=None, max_length=20)
    featured: Optional[bool] = None
    tags: Optional[List[str]] = None

    model_config = ConfigDict(strict=True, populate_by_name=True)

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        nulls = sorted(
            name for name in self.model_fields_set
            if name in NON_NULLABLE_FIELDS and getattr(self, name) is None
        )
        if nulls:
            raise ValueError(f"{', '.join(nulls)} cannot be null")
        return self

    def changes(self) -> dict:
        """Return only the fields present in the request body."""
        return self.model_dump(exclude_unset=True)


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1, max_length=128)


class UserRead(BaseModel):
    """Public view of a credential record; never includes the password hash."""
    id: int
    username: str

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    message: str
    user: UserRead


class CurrentUserResponse(BaseModel):
    user: UserRead


class MessageResponse(BaseModel):
    message: str

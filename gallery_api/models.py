"""
SQLAlchemy models for the application.
All database models inherit from Base (declarative base).
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, JSON, ForeignKey
from sqlalchemy.sql import func
from gallery_api.database import Base


class GalleryItem(Base):
    """
    Gallery item model.
    One image or video entry with the metadata shown in the public gallery.
    The image URL doubles as the poster frame for video items.
    """
    __tablename__ = "gallery_items"
    # Ids of deleted items are never handed out again
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    category = Column(String(50), nullable=False, index=True)
    type = Column(String(20), nullable=False, default="image")
    image = Column(Text, nullable=False)
    video_url = Column(Text, nullable=True)
    description = Column(Text, nullable=False)
    height = Column(String(20), nullable=False, default="h-64")
    featured = Column(Boolean, nullable=False, default=False)
    tags = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class User(Base):
    """
    Credential record.
    The password column only ever holds a bcrypt hash.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(64), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class SessionRecord(Base):
    """Server-side session keyed by the identifier carried in the client cookie."""
    __tablename__ = "sessions"

    sid = Column(String(64), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    data = Column(JSON, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<SessionRecord(sid={self.sid[:8]!r}..., expires_at={self.expires_at})>"

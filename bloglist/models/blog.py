"""
Bloglist — Blog SQLAlchemy Model
=================================

What:  ORM model representing the `blogs` table.
Who:   Used by BlogService for CRUD operations and by Alembic.

Table Design:
    - UUID primary key, exposed to clients as `id`
    - title, url: required; author optional
    - likes: integer, defaults to 0
    - user_id: owning user (NOT NULL); every blog belongs to exactly one user
    - created_at: insertion time, used for stable listing order
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bloglist.database import Base

if TYPE_CHECKING:
    from bloglist.models.user import User


class Blog(Base):
    """A blog post saved to the list, owned by the user who created it."""

    __tablename__ = "blogs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    author: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        default=None,
    )

    url: Mapped[str] = mapped_column(String(2048), nullable=False)

    likes: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    user: Mapped["User"] = relationship(back_populates="blogs")

    __table_args__ = (
        Index("idx_blogs_user_id", "user_id"),
        Index("idx_blogs_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Blog(id={self.id}, title='{self.title}', likes={self.likes})>"

"""
Bloglist — User SQLAlchemy Model
=================================

What:  ORM model representing the `users` table.
Who:   Used by UserService (registration, listing), AuthService (login) and
       BlogService (owner lookups).

Table Design:
    - UUID primary key, exposed to clients as `id`
    - username: unique, indexed (login lookup)
    - password_hash: bcrypt hash; never leaves the service layer
    - blogs: one-to-many to Blog; the owned-post reference list
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bloglist.database import Base

if TYPE_CHECKING:
    from bloglist.models.blog import Blog


class User(Base):
    """
    A registered account.

    Lifecycle:
        1. Created by POST /api/users with a bcrypt password hash
        2. Gains blog references as the user creates posts
        3. Never deleted through the API
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    username: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Loaded explicitly with selectinload() where needed; async sessions
    # cannot lazy-load on attribute access
    blogs: Mapped[List["Blog"]] = relationship(
        back_populates="user",
        order_by="Blog.created_at",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"

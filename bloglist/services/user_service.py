"""
Bloglist — User Service
========================

What:  Account registration and listing.
Who:   Called by the /api/users route handlers.

Registration rules:
    - username and password each at least min_username_length /
      min_password_length characters (3 by default)
    - username unique
    Violations raise ValidationError (400).
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from bloglist.config import settings
from bloglist.exceptions import DatabaseError, ValidationError
from bloglist.models.blog import Blog  # noqa: F401  (registers the relationship target)
from bloglist.models.user import User
from bloglist.schemas.user import UserBlogItem, UserCreate, UserResponse
from bloglist.services.auth_service import hash_password

logger = logging.getLogger(__name__)


def user_to_response(user: User) -> UserResponse:
    """Serialize a User (with blogs loaded); the password hash is left out."""
    return UserResponse(
        id=str(user.id),
        username=user.username,
        name=user.name,
        blogs=[
            UserBlogItem(
                id=str(blog.id),
                title=blog.title,
                author=blog.author,
                url=blog.url,
                likes=blog.likes,
            )
            for blog in user.blogs
        ],
    )


class UserService:
    """Business logic for user accounts."""

    async def create_user(self, db: AsyncSession, payload: UserCreate) -> UserResponse:
        """
        Register a new user.

        Raises:
            ValidationError: username/password too short, or username taken
            DatabaseError: the insert failed for another reason
        """
        username = payload.username.strip()
        if len(username) < settings.min_username_length:
            raise ValidationError(
                message=f"username must be at least {settings.min_username_length} characters long",
                field="username",
            )
        if len(payload.password) < settings.min_password_length:
            raise ValidationError(
                message=f"password must be at least {settings.min_password_length} characters long",
                field="password",
            )

        try:
            existing = await db.execute(select(User.id).where(User.username == username))
            if existing.scalar_one_or_none() is not None:
                raise ValidationError(message="username must be unique", field="username")

            user = User(
                username=username,
                name=payload.name,
                password_hash=hash_password(payload.password),
                blogs=[],
            )
            db.add(user)
            await db.flush()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same name
            raise ValidationError(message="username must be unique", field="username")
        except SQLAlchemyError as e:
            logger.error("Database error creating user: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the user. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("User %s registered", user.id)
        return user_to_response(user)

    async def list_users(self, db: AsyncSession) -> List[UserResponse]:
        """Every user with the blogs they created."""
        try:
            result = await db.execute(
                select(User)
                .options(selectinload(User.blogs))
                .order_by(User.created_at)
            )
            users = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing users: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve users. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [user_to_response(user) for user in users]


user_service = UserService()

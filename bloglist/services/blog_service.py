"""
Bloglist — Blog Service (Business Logic)
=========================================

What:  CRUD over blog posts, each owned by a user.
How:   Async SQLAlchemy queries against the `blogs` table; results are
       converted to BlogResponse with the creator summary embedded.
Who:   Called by the /api/blogs route handlers.

Operation semantics:
    list_blogs()   every post, oldest first, each with {username, name, id}
    get_blog()     one post or NotFoundError
    create_blog()  owner taken from the verified token; likes default to 0
    update_blog()  applies the fields present in the body; no owner check
    delete_blog()  idempotent: an unknown id is not an error

Consistency:
    The blog row and the owner's reference list are written in the same
    session, which the request dependency commits once at the end.
"""

import logging
import uuid
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from bloglist.exceptions import (
    AuthenticationError,
    BloglistError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from bloglist.models.blog import Blog
from bloglist.models.user import User
from bloglist.schemas.blog import BlogCreate, BlogResponse, BlogUpdate, UserSummary
from bloglist.schemas.user import TokenClaims

logger = logging.getLogger(__name__)

# Fields a PUT may not clear; a null in the body leaves them unchanged
_NON_NULLABLE_FIELDS = ("title", "url", "likes")


def parse_id(raw_id: str, resource: str = "blog") -> uuid.UUID:
    """Convert a path id to a UUID, or raise ValidationError (400)."""
    try:
        return uuid.UUID(str(raw_id))
    except ValueError:
        raise ValidationError(
            message="malformatted id",
            field="id",
            context={"resource": resource, "value": str(raw_id)[:64]},
        )


def blog_to_response(blog: Blog) -> BlogResponse:
    """Serialize a Blog (with its user loaded) into the public shape."""
    return BlogResponse(
        id=str(blog.id),
        title=blog.title,
        author=blog.author,
        url=blog.url,
        likes=blog.likes,
        user=UserSummary(
            id=str(blog.user.id),
            username=blog.user.username,
            name=blog.user.name,
        ),
    )


class BlogService:
    """
    Business logic layer for blog operations.

    Error Handling Strategy:
        SQLAlchemy errors are wrapped in DatabaseError (details logged only).
        Application errors (NotFoundError, ValidationError, ...) propagate
        unchanged.
    """

    async def list_blogs(self, db: AsyncSession) -> List[BlogResponse]:
        """Return every blog, oldest first, each with its creator summary."""
        try:
            result = await db.execute(
                select(Blog)
                .options(selectinload(Blog.user))
                .order_by(Blog.created_at)
            )
            blogs = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing blogs: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve blogs. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [blog_to_response(blog) for blog in blogs]

    async def get_blog(self, db: AsyncSession, blog_id: str) -> BlogResponse:
        """
        Fetch one blog by id.

        Raises:
            ValidationError: id is not a UUID (400)
            NotFoundError: no blog with that id (404)
        """
        blog = await self._load(db, parse_id(blog_id))
        if blog is None:
            raise NotFoundError(resource="blog", resource_id=blog_id)
        return blog_to_response(blog)

    async def create_blog(
        self,
        db: AsyncSession,
        claims: TokenClaims,
        payload: BlogCreate,
    ) -> BlogResponse:
        """
        Create a blog owned by the token's user.

        Workflow:
            1. Load the owner named in the token (with its blog list)
            2. Insert the blog and append it to the owner's list
            3. Flush so the id is assigned; the request commits

        Raises:
            AuthenticationError: the token's user no longer exists
            DatabaseError: the insert failed
        """
        owner_id = parse_id(claims.id, resource="user")
        try:
            result = await db.execute(
                select(User)
                .options(selectinload(User.blogs))
                .where(User.id == owner_id)
            )
            owner = result.scalar_one_or_none()
            if owner is None:
                raise AuthenticationError(message="token missing or invalid")

            blog = Blog(
                title=payload.title,
                author=payload.author,
                url=payload.url,
                likes=payload.likes,
            )
            db.add(blog)
            # Sets blog.user through the back-reference
            owner.blogs.append(blog)
            await db.flush()
        except BloglistError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error creating blog: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the blog. Please try again.",
                context={"error_type": type(e).__name__, "user_id": claims.id},
            )

        logger.info("Blog %s created by user %s", blog.id, owner.id)
        return blog_to_response(blog)

    async def update_blog(
        self,
        db: AsyncSession,
        blog_id: str,
        payload: BlogUpdate,
    ) -> BlogResponse:
        """
        Apply the fields present in `payload` to an existing blog.

        Last write wins; there is no ownership check.

        Raises:
            ValidationError: id is not a UUID
            NotFoundError: no blog with that id
        """
        parsed = parse_id(blog_id)
        blog = await self._load(db, parsed)
        if blog is None:
            raise NotFoundError(resource="blog", resource_id=blog_id)

        changes = payload.model_dump(exclude_unset=True)
        for field in _NON_NULLABLE_FIELDS:
            if field in changes and changes[field] is None:
                del changes[field]
        for field, value in changes.items():
            setattr(blog, field, value)

        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating blog %s: %s", blog_id, str(e))
            raise DatabaseError(
                message="Could not update the blog. Please try again.",
                context={"blog_id": blog_id},
            )

        logger.info("Blog %s updated: %s", blog_id, sorted(changes))
        return blog_to_response(blog)

    async def delete_blog(self, db: AsyncSession, blog_id: str) -> bool:
        """
        Delete a blog by id.

        Returns:
            True if a row was removed, False if the id was unknown. Both are
            successful outcomes for the caller.

        Raises:
            ValidationError: id is not a UUID
        """
        parsed = parse_id(blog_id)
        try:
            result = await db.execute(delete(Blog).where(Blog.id == parsed))
        except SQLAlchemyError as e:
            logger.error("Database error deleting blog %s: %s", blog_id, str(e))
            raise DatabaseError(
                message="Could not delete the blog. Please try again.",
                context={"blog_id": blog_id},
            )

        removed = (result.rowcount or 0) > 0
        if removed:
            logger.info("Blog %s deleted", blog_id)
        else:
            logger.info("Delete of unknown blog %s ignored", blog_id)
        return removed

    async def _load(self, db: AsyncSession, blog_id: uuid.UUID) -> Blog | None:
        try:
            result = await db.execute(
                select(Blog)
                .options(selectinload(Blog.user))
                .where(Blog.id == blog_id)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching blog %s: %s", blog_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the blog. Please try again.",
                context={"blog_id": str(blog_id)},
            )


blog_service = BlogService()

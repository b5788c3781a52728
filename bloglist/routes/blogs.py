"""
Bloglist — Blog Route Handlers
===============================

What:  The /api/blogs resource.

    GET    /api/blogs        list (public)
    GET    /api/blogs/{id}   detail (public)
    POST   /api/blogs        create (bearer token)
    PUT    /api/blogs/{id}   update fields such as likes (public)
    DELETE /api/blogs/{id}   delete, idempotent (bearer token)

How:   Handlers stay thin: extract input, call BlogService, pick the status.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from bloglist.database import get_db_session
from bloglist.routes.auth import require_token
from bloglist.schemas.blog import BlogCreate, BlogResponse, BlogUpdate
from bloglist.schemas.common import ErrorResponse
from bloglist.schemas.user import TokenClaims
from bloglist.services.blog_service import blog_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Blogs"])


@router.get(
    "/blogs",
    response_model=List[BlogResponse],
    summary="List all blogs with their creators",
)
async def list_blogs(
    db: AsyncSession = Depends(get_db_session),
) -> List[BlogResponse]:
    return await blog_service.list_blogs(db)


@router.get(
    "/blogs/{blog_id}",
    response_model=BlogResponse,
    responses={
        400: {"description": "Malformed id", "model": ErrorResponse},
        404: {"description": "Blog not found", "model": ErrorResponse},
    },
    summary="Get a single blog",
)
async def get_blog(
    blog_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> BlogResponse:
    return await blog_service.get_blog(db, blog_id)


@router.post(
    "/blogs",
    status_code=status.HTTP_201_CREATED,
    response_model=BlogResponse,
    responses={
        400: {"description": "title or url missing", "model": ErrorResponse},
        401: {"description": "Token missing or invalid", "model": ErrorResponse},
    },
    summary="Create a blog owned by the logged-in user",
)
async def create_blog(
    body: BlogCreate,
    claims: TokenClaims = Depends(require_token),
    db: AsyncSession = Depends(get_db_session),
) -> BlogResponse:
    """
    Create a blog.

    `require_token` runs before the handler: without a valid token the
    request ends in 401 and nothing is written.
    """
    return await blog_service.create_blog(db, claims, body)


@router.put(
    "/blogs/{blog_id}",
    response_model=BlogResponse,
    responses={
        400: {"description": "Malformed id or body", "model": ErrorResponse},
        404: {"description": "Blog not found", "model": ErrorResponse},
    },
    summary="Update a blog (typically its likes)",
)
async def update_blog(
    blog_id: str,
    body: BlogUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> BlogResponse:
    # TODO: decide whether updates should require the owner's token like DELETE
    return await blog_service.update_blog(db, blog_id, body)


@router.delete(
    "/blogs/{blog_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        400: {"description": "Malformed id", "model": ErrorResponse},
        401: {"description": "Token missing or invalid", "model": ErrorResponse},
    },
    summary="Delete a blog (succeeds for unknown ids)",
)
async def delete_blog(
    blog_id: str,
    claims: TokenClaims = Depends(require_token),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    removed = await blog_service.delete_blog(db, blog_id)
    if removed:
        logger.info("User %s removed blog %s", claims.id, blog_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""
Bloglist — User Route Handlers
===============================

What:  POST /api/users (registration) and GET /api/users (listing with blogs).
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from bloglist.database import get_db_session
from bloglist.schemas.common import ErrorResponse
from bloglist.schemas.user import UserCreate, UserResponse
from bloglist.services.user_service import user_service

router = APIRouter(prefix="/api", tags=["Users"])


@router.post(
    "/users",
    status_code=status.HTTP_201_CREATED,
    response_model=UserResponse,
    responses={
        400: {"description": "Username taken or too short, password too short", "model": ErrorResponse},
    },
    summary="Register a user",
)
async def create_user(
    body: UserCreate,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.create_user(db, body)


@router.get(
    "/users",
    response_model=List[UserResponse],
    summary="List users with the blogs they created",
)
async def list_users(
    db: AsyncSession = Depends(get_db_session),
) -> List[UserResponse]:
    return await user_service.list_users(db)

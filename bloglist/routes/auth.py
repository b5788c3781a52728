"""
Bloglist — Login Route & Bearer Dependency
===========================================

What:  POST /api/login and the `require_token` dependency that guards the
       mutating blog routes.
How:   The dependency reads `Authorization: bearer <token>` (scheme matched
       case-insensitively) and verifies it before the route handler runs,
       so an unauthenticated request never reaches the repository.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from bloglist.database import get_db_session
from bloglist.schemas.common import ErrorResponse
from bloglist.schemas.user import LoginRequest, LoginResponse, TokenClaims
from bloglist.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Auth"])

# auto_error=False: a missing or non-bearer header yields None, and
# auth_service.verify() turns that into our own 401 body
bearer_scheme = HTTPBearer(auto_error=False)


async def require_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TokenClaims:
    """Dependency: the verified claims of the request's bearer token, or 401."""
    token = credentials.credentials if credentials else None
    return auth_service.verify(token)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        200: {"description": "Token issued", "model": LoginResponse},
        401: {"description": "Invalid username or password", "model": ErrorResponse},
    },
    summary="Log in and receive a bearer token",
)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    """Exchange username/password for a signed token plus {username, name}."""
    return await auth_service.login(db, body.username, body.password)

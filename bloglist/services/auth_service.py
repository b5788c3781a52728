"""
Bloglist — Auth Service (Passwords & Tokens)
=============================================

What:  Password hashing, login, and stateless token issue/verification.
How:   bcrypt for password hashes; PyJWT (HS256 by default) for tokens that
       carry {username, id, exp}. Tokens are never stored; a token is valid
       when its signature checks out and it has not expired.
Who:   AuthService.login() backs POST /api/login; verify() backs the bearer
       dependency guarding POST and DELETE /api/blogs.

Error contract:
    Every failure surfaces as AuthenticationError (401). Unknown usernames
    and wrong passwords produce the same message.
"""

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

import bcrypt
import jwt
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bloglist.config import settings
from bloglist.exceptions import AuthenticationError, DatabaseError, ValidationError
from bloglist.models.user import User
from bloglist.schemas.user import LoginResponse, TokenClaims

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "invalid username or password"
TOKEN_INVALID = "token missing or invalid"
TOKEN_EXPIRED = "token expired"

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a password with bcrypt at the configured cost."""
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        raise ValidationError(
            message=f"password must be at most {BCRYPT_MAX_BYTES} bytes",
            field="password",
        )
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(encoded, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a bcrypt hash (constant-time)."""
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning("Stored password hash could not be parsed")
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    # Compared against when the username is unknown, so both failure paths
    # cost one bcrypt check
    return hash_password("bloglist-timing-equalizer")


def create_token(user_id: str, username: str, now: Optional[datetime] = None) -> str:
    """Sign a token for the given user that expires after token_expire_seconds."""
    issued = now or datetime.now(timezone.utc)
    payload = {
        "username": username,
        "id": user_id,
        "exp": issued + timedelta(seconds=settings.token_expire_seconds),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: Optional[str]) -> TokenClaims:
    """
    Verify a token's signature and expiry and return its claims.

    Raises:
        AuthenticationError: token missing, malformed, wrongly signed,
            expired, or lacking the username/id claims.
    """
    if not token:
        raise AuthenticationError(message=TOKEN_INVALID)

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "id", "username"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError(message=TOKEN_EXPIRED) from e
    except jwt.PyJWTError as e:
        logger.info("Rejected token: %s", type(e).__name__)
        raise AuthenticationError(message=TOKEN_INVALID) from e

    try:
        return TokenClaims.model_validate(payload)
    except PydanticValidationError as e:
        raise AuthenticationError(message=TOKEN_INVALID) from e


class AuthService:
    """
    Login and token verification.

    Stateless: the database session is passed to each call.
    """

    async def login(self, db: AsyncSession, username: str, password: str) -> LoginResponse:
        """
        Check credentials and issue a token.

        Returns:
            LoginResponse {token, username, name}

        Raises:
            AuthenticationError: unknown username or wrong password
            DatabaseError: the user lookup failed
        """
        try:
            result = await db.execute(select(User).where(User.username == username))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error during login: %s", str(e))
            raise DatabaseError(context={"error_type": type(e).__name__})

        if user is None:
            verify_password(password, _dummy_hash())
            logger.info("Login failed: unknown username")
            raise AuthenticationError(message=INVALID_CREDENTIALS)

        if not verify_password(password, user.password_hash):
            logger.info("Login failed for user %s", user.id)
            raise AuthenticationError(message=INVALID_CREDENTIALS)

        token = create_token(str(user.id), user.username)
        logger.info("User %s logged in", user.id)
        return LoginResponse(token=token, username=user.username, name=user.name)

    def verify(self, token: Optional[str]) -> TokenClaims:
        """Verify a bearer token; see decode_token()."""
        return decode_token(token)


auth_service = AuthService()

"""
Bloglist — User & Login Schemas
================================

What:  Pydantic models for registration, user listing and login.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Body of POST /api/users. Length rules are enforced by UserService."""
    username: str = Field(max_length=64)
    name: str = Field(default="", max_length=255)
    password: str = Field(max_length=128)


class UserBlogItem(BaseModel):
    """A blog as listed under its owner (no nested user)."""
    id: str
    title: str
    author: Optional[str] = None
    url: str
    likes: int


class UserResponse(BaseModel):
    """A user as returned by the API. The password hash is never included."""
    id: str = Field(description="Unique user identifier")
    username: str
    name: str
    blogs: List[UserBlogItem] = Field(default_factory=list)


class LoginRequest(BaseModel):
    """Body of POST /api/login."""
    username: str
    password: str


class LoginResponse(BaseModel):
    """Successful login: signed token plus the user summary."""
    token: str = Field(description="Signed bearer token")
    username: str
    name: str


class TokenClaims(BaseModel):
    """Decoded contents of a valid access token."""
    id: str = Field(description="User id the token was issued to")
    username: str
    exp: int = Field(description="Expiry as a UNIX timestamp")

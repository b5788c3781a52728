"""
Bloglist — Blog Request/Response Schemas
=========================================

What:  Pydantic models defining the blog API contract.
How:   FastAPI validates request bodies against these models and serializes
       responses through them. Missing required fields surface as a 400
       (see the RequestValidationError handler in main.py).

Identifier rule:
    Every response exposes the primary key as `id` (a UUID string). No other
    identifier field and no password hash is ever part of a response model.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserSummary(BaseModel):
    """Creator info embedded in each blog: {username, name, id}."""
    id: str = Field(description="Creator's user id")
    username: str = Field(description="Creator's unique username")
    name: str = Field(description="Creator's display name")


class BlogCreate(BaseModel):
    """
    Body of POST /api/blogs.

    title and url are required and may not be blank; likes defaults to 0
    when absent. Surrounding whitespace is stripped from every string.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=255, description="Post title")
    author: Optional[str] = Field(default=None, max_length=255, description="Post author")
    url: str = Field(min_length=1, max_length=2048, description="Link to the post")
    likes: int = Field(default=0, ge=0, description="Number of likes")


class BlogUpdate(BaseModel):
    """
    Body of PUT /api/blogs/{id}.

    Only fields present in the body are applied. Clients usually send the
    whole blog back (including `id` and `user`); unknown fields are ignored.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    author: Optional[str] = Field(default=None, max_length=255)
    url: Optional[str] = Field(default=None, min_length=1, max_length=2048)
    likes: Optional[int] = Field(default=None, ge=0)


class BlogResponse(BaseModel):
    """A blog post as returned by every blog endpoint."""
    id: str = Field(description="Unique blog identifier")
    title: str
    author: Optional[str] = None
    url: str
    likes: int = Field(description="Number of likes (0 when never liked)")
    user: UserSummary = Field(description="The user who created the post")

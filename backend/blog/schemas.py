# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the blog endpoints."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# -- Requests --------------------------------------------------------------
# image_url is a link to an image hosted elsewhere; this API never receives
# file uploads.


class BlogPostCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    excerpt: Optional[str] = Field(default=None, max_length=512)
    category: Optional[str] = Field(default=None, max_length=64)
    image_url: Optional[str] = Field(default=None, max_length=2048)


class BlogPostUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = Field(default=None, min_length=1)
    excerpt: Optional[str] = Field(default=None, max_length=512)
    category: Optional[str] = Field(default=None, max_length=64)
    image_url: Optional[str] = Field(default=None, max_length=2048)


# -- Responses -------------------------------------------------------------


class BlogPostRow(BaseModel):
    id: str = Field(alias="_id")
    author_id: Optional[str] = None
    title: str
    content: str
    excerpt: Optional[str] = None
    category: str
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}

    @classmethod
    def from_post(cls, post) -> "BlogPostRow":
        return cls(
            id=str(post.id),
            author_id=str(post.author_id) if post.author_id is not None else None,
            title=post.title,
            content=post.content,
            excerpt=post.excerpt,
            category=post.category,
            image_url=post.image_url,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class BlogPostResponse(BaseModel):
    status: str = "success"
    data: BlogPostRow


class BlogPostListResponse(BaseModel):
    status: str = "success"
    count: int
    data: List[BlogPostRow]

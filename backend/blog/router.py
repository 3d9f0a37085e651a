# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Blog endpoints – public reading, admin-only writing.

* ``GET`` endpoints need no token: the blog is the public face of the site.
* Every write goes through ``require_admin``; a valid token that belongs to
  a ``user`` role receives 403 before any business logic runs.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from core.exceptions import NotFound
from core.logger import get_logger
from core.security import require_admin
from models.blog_post import BlogPost
from models.user import User
from blog.schemas import (
    BlogPostCreate,
    BlogPostListResponse,
    BlogPostResponse,
    BlogPostRow,
    BlogPostUpdate,
)

router = APIRouter(prefix="/api/blogs", tags=["blogs"])

log = get_logger("blog")

# Non-nullable columns a PUT body may name with null
_REQUIRED_COLUMNS = {"title", "content", "category"}


def _get_post(post_id: int, db: Session) -> BlogPost:
    """Load a BlogPost by ID or raise 404."""
    post = db.get(BlogPost, post_id)
    if post is None:
        raise NotFound("Blog post not found")
    return post


# ---------------------------------------------------------------------------
# GET /api/blogs  – list posts, newest first
# ---------------------------------------------------------------------------


@router.get("", response_model=BlogPostListResponse)
def list_posts(category: Optional[str] = None, db: Session = Depends(get_db)):
    query = db.query(BlogPost)
    if category:
        query = query.filter(BlogPost.category == category)
    posts = query.order_by(BlogPost.created_at.desc(), BlogPost.id.desc()).all()
    return BlogPostListResponse(count=len(posts), data=[BlogPostRow.from_post(p) for p in posts])


# ---------------------------------------------------------------------------
# GET /api/blogs/{id}
# ---------------------------------------------------------------------------


@router.get("/{post_id}", response_model=BlogPostResponse)
def get_post(post_id: int, db: Session = Depends(get_db)):
    return BlogPostResponse(data=BlogPostRow.from_post(_get_post(post_id, db)))


# ---------------------------------------------------------------------------
# POST /api/blogs  – create
# ---------------------------------------------------------------------------


@router.post("", response_model=BlogPostResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    body: BlogPostCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    post = BlogPost(
        author_id=admin.id,
        title=body.title,
        content=body.content,
        excerpt=body.excerpt,
        image_url=body.image_url,
    )
    if body.category:
        post.category = body.category
    db.add(post)
    db.commit()
    db.refresh(post)
    log.info("Blog post %s created by user id=%s", post.id, admin.id)
    return BlogPostResponse(data=BlogPostRow.from_post(post))


# ---------------------------------------------------------------------------
# PUT /api/blogs/{id}  – partial update
# ---------------------------------------------------------------------------


@router.put("/{post_id}", response_model=BlogPostResponse)
def update_post(
    post_id: int,
    body: BlogPostUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Only fields present in the body are changed.  An explicit null clears
    the optional columns; it is ignored for the required ones.
    """
    post = _get_post(post_id, db)

    for field, value in body.model_dump(exclude_unset=True).items():
        if value is None and field in _REQUIRED_COLUMNS:
            continue
        setattr(post, field, value)

    db.commit()
    db.refresh(post)
    log.info("Blog post %s updated by user id=%s", post.id, admin.id)
    return BlogPostResponse(data=BlogPostRow.from_post(post))


# ---------------------------------------------------------------------------
# DELETE /api/blogs/{id}
# ---------------------------------------------------------------------------


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(
    post_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    post = _get_post(post_id, db)
    db.delete(post)
    db.commit()
    log.info("Blog post %s deleted by user id=%s", post_id, admin.id)

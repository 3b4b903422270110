from datetime import datetime, timezone
from typing import Optional
import logging
import re

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from claryon.core.database import get_db
from claryon.core.auth import get_current_admin
from claryon.models.admin import Admin
from claryon.models.blog_post import BlogPost, BlogPostStatus, BodyContentType
from claryon.schemas.blog import (
    BlogPostCreate,
    BlogPostUpdate,
    BlogPostSummary,
    BlogPostResponse,
    BlogPostListResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/blog", tags=["Blog"])
admin_router = APIRouter(prefix="/api/admin/blog", tags=["Admin: Blog"])


def generate_slug(title: str) -> str:
    """
    Build a URL-friendly slug from a post title.

    "Navigating the New Wave!" -> "navigating-the-new-wave"
    """
    slug = title.lower().strip()
    slug = re.sub(r"[\s_]+", "-", slug)
    slug = re.sub(r"[^a-z0-9-]+", "", slug)
    slug = re.sub(r"-{2,}", "-", slug)
    return slug.strip("-")


def published_filter(query, today=None):
    """Publication gate: published status and a publication date that is not in the future."""
    today = today or datetime.now(timezone.utc).date()
    return query.filter(
        BlogPost.status == BlogPostStatus.PUBLISHED,
        BlogPost.publication_date.isnot(None),
        BlogPost.publication_date <= today,
    )


def _wrap_body(content, content_type: str):
    """Plain markdown or HTML text is stored as {"type": ..., "text": ...}."""
    if isinstance(content, str):
        return {"type": content_type, "text": content}
    return content


def _ensure_unique_slug(db: Session, slug: str, exclude_id: Optional[str] = None):
    query = db.query(BlogPost).filter(BlogPost.slug == slug)
    if exclude_id:
        query = query.filter(BlogPost.id != exclude_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"A post with slug '{slug}' already exists"
        )


def _get_post_or_404(db: Session, post_id: str) -> BlogPost:
    post = db.query(BlogPost).filter(BlogPost.id == post_id).first()
    if not post:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Blog post with ID '{post_id}' not found"
        )
    return post


# ============================================================================
# Public endpoints
# ============================================================================

@router.get("", response_model=BlogPostListResponse)
def list_published_posts(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Number of items per page"),
    tag: Optional[str] = Query(None, description="Only posts carrying this tag"),
    db: Session = Depends(get_db)
):
    """Published posts, newest publication date first."""
    query = published_filter(db.query(BlogPost))
    posts = query.order_by(BlogPost.publication_date.desc(), BlogPost.created_at.desc()).all()

    # Tags live in a JSON column, filter portably in Python
    if tag:
        wanted = tag.strip().lower()
        posts = [p for p in posts if any(t.lower() == wanted for t in (p.tags or []))]

    total = len(posts)
    offset = (page - 1) * page_size

    return BlogPostListResponse(
        total=total,
        posts=[BlogPostSummary.model_validate(p) for p in posts[offset:offset + page_size]],
        page=page,
        page_size=page_size
    )


@router.get("/{identifier}", response_model=BlogPostResponse)
def get_published_post(identifier: str, db: Session = Depends(get_db)):
    """Single published post, looked up by slug first and then by id."""
    query = published_filter(db.query(BlogPost))
    post = query.filter(BlogPost.slug == identifier).first()
    if not post:
        post = query.filter(BlogPost.id == identifier).first()

    if not post:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Blog post '{identifier}' not found"
        )
    return BlogPostResponse.model_validate(post)


# ============================================================================
# Admin endpoints
# ============================================================================

@admin_router.get("", response_model=list[BlogPostSummary])
def admin_list_posts(
    status_filter: Optional[BlogPostStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, description="Search title or slug"),
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
):
    """All posts regardless of status or date, most recently updated first."""
    query = db.query(BlogPost)
    if status_filter is not None:
        query = query.filter(BlogPost.status == status_filter)
    if search:
        term = f"%{search}%"
        query = query.filter(or_(BlogPost.title.ilike(term), BlogPost.slug.ilike(term)))

    posts = query.order_by(BlogPost.updated_at.desc()).all()
    return [BlogPostSummary.model_validate(p) for p in posts]


@admin_router.get("/{post_id}", response_model=BlogPostResponse)
def admin_get_post(
    post_id: str,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
):
    return BlogPostResponse.model_validate(_get_post_or_404(db, post_id))


@admin_router.post("", response_model=BlogPostResponse, status_code=status.HTTP_201_CREATED)
def admin_create_post(
    post_data: BlogPostCreate,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
):
    """Create a post. The slug is generated from the title when not supplied."""
    slug = post_data.slug or generate_slug(post_data.title)
    if len(slug) < 3:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not generate a slug from the title; please provide one"
        )
    _ensure_unique_slug(db, slug)

    post = BlogPost(
        title=post_data.title,
        slug=slug,
        introduction=post_data.introduction,
        hero_image_url=post_data.hero_image_url,
        author_name=post_data.author_name,
        tags=post_data.tags,
        body_content_type=post_data.body_content_type.value,
        body_content=_wrap_body(post_data.body_content, post_data.body_content_type.value),
        publication_date=post_data.publication_date,
        status=post_data.status,
    )
    db.add(post)
    db.commit()
    db.refresh(post)

    logger.info(f"[Blog] Post '{post.slug}' created by {current_admin.username}")
    return BlogPostResponse.model_validate(post)


@admin_router.put("/{post_id}", response_model=BlogPostResponse)
def admin_update_post(
    post_id: str,
    post_data: BlogPostUpdate,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
):
    """Update only the fields that were sent."""
    post = _get_post_or_404(db, post_id)
    changes = post_data.model_dump(exclude_unset=True)

    if changes.get("slug"):
        _ensure_unique_slug(db, changes["slug"], exclude_id=post.id)
    elif "slug" in changes:
        del changes["slug"]
    if "title" in changes and not changes["title"]:
        del changes["title"]
    if changes.get("body_content_type") is not None:
        changes["body_content_type"] = changes["body_content_type"].value
    elif "body_content_type" in changes:
        del changes["body_content_type"]
    if "status" in changes and changes["status"] is None:
        del changes["status"]
    if "body_content" in changes:
        content_type = changes.get("body_content_type") or post.body_content_type or BodyContentType.MARKDOWN.value
        changes["body_content"] = _wrap_body(changes["body_content"], content_type)

    for field, value in changes.items():
        setattr(post, field, value)
    post.updated_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(post)

    logger.info(f"[Blog] Post '{post.slug}' updated by {current_admin.username}")
    return BlogPostResponse.model_validate(post)


@admin_router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def admin_delete_post(
    post_id: str,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
):
    post = _get_post_or_404(db, post_id)
    db.delete(post)
    db.commit()
    logger.info(f"[Blog] Post '{post.slug}' deleted by {current_admin.username}")

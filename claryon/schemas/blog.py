import re
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, Any, List, Union
from datetime import date, datetime

from claryon.models.blog_post import BlogPostStatus, BodyContentType

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def _parse_tags(v):
    """Accept a list of tags or a comma-separated string."""
    if v is None:
        return None
    if isinstance(v, str):
        v = v.split(",")
    tags = [str(tag).strip() for tag in v if str(tag).strip()]
    return tags or None


def _check_url(v):
    if v is not None and not v.startswith(("http://", "https://")):
        raise ValueError("Must be a valid URL")
    return v


def _check_slug(v):
    if v is not None and not SLUG_PATTERN.match(v):
        raise ValueError("Slug must be URL-friendly (e.g., 'my-new-post')")
    return v


class BlogPostBase(BaseModel):
    introduction: Optional[str] = None
    hero_image_url: Optional[str] = Field(None, max_length=1024)
    author_name: Optional[str] = Field(None, max_length=255)
    body_content_type: BodyContentType = BodyContentType.MARKDOWN
    body_content: Optional[Any] = Field(None, description="Markdown/HTML text or a JSON document")
    publication_date: Optional[date] = None
    status: BlogPostStatus = BlogPostStatus.DRAFT

    @field_validator("hero_image_url", mode="before")
    @classmethod
    def empty_url_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("hero_image_url")
    @classmethod
    def check_url(cls, v):
        return _check_url(v)


class BlogPostCreate(BlogPostBase):
    title: str = Field(..., min_length=3, max_length=255)
    slug: Optional[str] = Field(None, min_length=3, max_length=255, description="Generated from the title when omitted")
    tags: Optional[Union[List[str], str]] = None

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, v):
        return _parse_tags(v)

    @field_validator("slug", mode="before")
    @classmethod
    def empty_slug_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v):
        return _check_slug(v)


class BlogPostUpdate(BaseModel):
    """All fields optional; only the ones sent are written"""
    title: Optional[str] = Field(None, min_length=3, max_length=255)
    slug: Optional[str] = Field(None, min_length=3, max_length=255)
    introduction: Optional[str] = None
    hero_image_url: Optional[str] = Field(None, max_length=1024)
    author_name: Optional[str] = Field(None, max_length=255)
    tags: Optional[Union[List[str], str]] = None
    body_content_type: Optional[BodyContentType] = None
    body_content: Optional[Any] = None
    publication_date: Optional[date] = None
    status: Optional[BlogPostStatus] = None

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, v):
        return _parse_tags(v)

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v):
        return _check_slug(v)

    @field_validator("hero_image_url", mode="before")
    @classmethod
    def empty_url_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("hero_image_url")
    @classmethod
    def check_url(cls, v):
        return _check_url(v)


class BlogPostSummary(BaseModel):
    """Fields shown in listings"""
    id: str
    title: str
    slug: str
    introduction: Optional[str] = None
    hero_image_url: Optional[str] = None
    author_name: Optional[str] = None
    tags: Optional[List[str]] = None
    publication_date: Optional[date] = None
    status: BlogPostStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BlogPostResponse(BlogPostSummary):
    body_content_type: Optional[str] = None
    body_content: Optional[Any] = None


class BlogPostListResponse(BaseModel):
    total: int
    posts: list[BlogPostSummary]
    page: int
    page_size: int

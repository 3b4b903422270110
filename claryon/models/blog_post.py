import enum
import uuid

from sqlalchemy import Column, String, Text, Date, DateTime, JSON, Enum as SQLEnum
from sqlalchemy.sql import func
from claryon.core.database import Base


class BlogPostStatus(str, enum.Enum):
    """Publication status of a blog post"""
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class BodyContentType(str, enum.Enum):
    MARKDOWN = "markdown"
    HTML = "html"


class BlogPost(Base):
    """
    Blog post shown on the public site once published.
    The body is stored as an untyped JSON blob tagged by body_content_type.
    """
    __tablename__ = "blog_posts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    introduction = Column(Text, nullable=True)
    hero_image_url = Column(String(1024), nullable=True)
    body_content_type = Column(String(20), nullable=True, default=BodyContentType.MARKDOWN.value)
    body_content = Column(JSON, nullable=True)
    author_name = Column(String(255), nullable=True)
    tags = Column(JSON, nullable=True)
    publication_date = Column(Date, nullable=True, index=True)
    status = Column(
        SQLEnum(BlogPostStatus, values_callable=lambda e: [m.value for m in e], name="blog_post_status"),
        default=BlogPostStatus.DRAFT,
        nullable=False,
        index=True,
    )

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<BlogPost(id={self.id}, slug='{self.slug}', status='{self.status}')>"

from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from claryon.core.database import get_db
from claryon.core.auth import get_current_admin
from claryon.models.admin import Admin
from claryon.models.testimonial import Testimonial
from claryon.schemas.testimonial import (
    TestimonialCreate,
    TestimonialUpdate,
    TestimonialResponse,
    PublicTestimonialResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/testimonials", tags=["Testimonials"])
admin_router = APIRouter(prefix="/api/admin/testimonials", tags=["Admin: Testimonials"])


def _get_testimonial_or_404(db: Session, testimonial_id: str) -> Testimonial:
    testimonial = db.query(Testimonial).filter(Testimonial.id == testimonial_id).first()
    if not testimonial:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Testimonial with ID '{testimonial_id}' not found"
        )
    return testimonial


@router.get("", response_model=list[PublicTestimonialResponse])
def list_published_testimonials(
    limit: Optional[int] = Query(None, ge=1, le=100, description="Maximum number of testimonials"),
    db: Session = Depends(get_db)
):
    """Published testimonials, newest first."""
    query = db.query(Testimonial).filter(
        Testimonial.is_published == True  # noqa: E712
    ).order_by(Testimonial.created_at.desc())
    if limit:
        query = query.limit(limit)
    return [PublicTestimonialResponse.model_validate(t) for t in query.all()]


@admin_router.get("", response_model=list[TestimonialResponse])
def admin_list_testimonials(
    is_published: Optional[bool] = Query(None, description="Filter by publication flag"),
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
):
    """All testimonials, published or not, newest first."""
    query = db.query(Testimonial)
    if is_published is not None:
        query = query.filter(Testimonial.is_published == is_published)
    return [TestimonialResponse.model_validate(t) for t in query.order_by(Testimonial.created_at.desc()).all()]


@admin_router.get("/{testimonial_id}", response_model=TestimonialResponse)
def admin_get_testimonial(
    testimonial_id: str,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
):
    return TestimonialResponse.model_validate(_get_testimonial_or_404(db, testimonial_id))


@admin_router.post("", response_model=TestimonialResponse, status_code=status.HTTP_201_CREATED)
def admin_create_testimonial(
    testimonial_data: TestimonialCreate,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
):
    testimonial = Testimonial(**testimonial_data.model_dump())
    db.add(testimonial)
    db.commit()
    db.refresh(testimonial)

    logger.info(f"[Testimonials] Testimonial from '{testimonial.client_name}' created by {current_admin.username}")
    return TestimonialResponse.model_validate(testimonial)


@admin_router.put("/{testimonial_id}", response_model=TestimonialResponse)
def admin_update_testimonial(
    testimonial_id: str,
    testimonial_data: TestimonialUpdate,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
):
    testimonial = _get_testimonial_or_404(db, testimonial_id)

    for field, value in testimonial_data.model_dump(exclude_unset=True).items():
        # Required columns cannot be cleared
        if value is None and field in ("client_name", "quote", "is_published"):
            continue
        setattr(testimonial, field, value)

    db.commit()
    db.refresh(testimonial)
    return TestimonialResponse.model_validate(testimonial)


@admin_router.delete("/{testimonial_id}", status_code=status.HTTP_204_NO_CONTENT)
def admin_delete_testimonial(
    testimonial_id: str,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
):
    testimonial = _get_testimonial_or_404(db, testimonial_id)
    db.delete(testimonial)
    db.commit()
    logger.info(f"[Testimonials] Testimonial {testimonial_id} deleted by {current_admin.username}")

"""
Contact Router
Public contact form and the admin inbox (read-only)
"""
from typing import Optional
import logging

from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session

from claryon.core.database import get_db
from claryon.core.auth import get_current_admin
from claryon.models.admin import Admin
from claryon.models.contact_submission import ContactSubmission
from claryon.schemas.contact import (
    ContactSubmissionCreate,
    ContactSubmissionResponse,
    ContactSubmissionReceipt,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/contact", tags=["Contact"])
admin_router = APIRouter(prefix="/api/admin/contact-submissions", tags=["Admin: Contact"])


@router.post("", response_model=ContactSubmissionReceipt, status_code=status.HTTP_201_CREATED)
def submit_contact_form(
    form_data: ContactSubmissionCreate,
    db: Session = Depends(get_db)
):
    """Store a contact form message. Public endpoint."""
    submission = ContactSubmission(
        name=form_data.name,
        email=str(form_data.email),
        phone=form_data.phone,
        service_of_interest=form_data.service_of_interest,
        message=form_data.message,
        is_read=False,
    )
    db.add(submission)
    db.commit()
    db.refresh(submission)

    logger.info(f"[Contact] Submission {submission.id} received")
    return ContactSubmissionReceipt(
        message="Thank you for your inquiry. We'll get back to you within 24 hours.",
        submission_id=submission.id
    )


@admin_router.get("", response_model=list[ContactSubmissionResponse])
def list_contact_submissions(
    unread_only: bool = Query(False, description="Only unread submissions"),
    limit: Optional[int] = Query(None, ge=1, le=500),
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
):
    query = db.query(ContactSubmission)
    if unread_only:
        query = query.filter(ContactSubmission.is_read == False)  # noqa: E712
    query = query.order_by(ContactSubmission.created_at.desc())
    if limit:
        query = query.limit(limit)
    return [ContactSubmissionResponse.model_validate(s) for s in query.all()]

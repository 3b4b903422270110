"""
Appointment Router
Public booking form endpoint and read-only admin views
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import Optional
import logging

from claryon.core.database import get_db
from claryon.core.auth import get_current_admin
from claryon.models.admin import Admin
from claryon.models.appointment import Appointment, AppointmentStatus
from claryon.schemas.appointment import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentBookedResponse,
    AppointmentListResponse,
)
from claryon.services import booking_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/appointments", tags=["Appointments"])
admin_router = APIRouter(prefix="/api/admin/appointments", tags=["Admin: Appointments"])


@router.post("", response_model=AppointmentBookedResponse, status_code=status.HTTP_201_CREATED)
def book_appointment(
    appointment_data: AppointmentCreate,
    db: Session = Depends(get_db)
):
    """
    Submit the booking form. This is a public endpoint (no authentication required).

    The appointment is stored as pending with no calendar event; the calendar
    entry is created separately through /api/calendar-events.
    """
    appointment = booking_service.create_appointment(db, appointment_data)

    return AppointmentBookedResponse(
        message="Your appointment request has been submitted. We'll confirm your booking within 24 hours.",
        appointment=AppointmentResponse.model_validate(appointment)
    )


@admin_router.get("", response_model=AppointmentListResponse)
def list_appointments(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(50, ge=1, le=100, description="Number of items per page"),
    status_filter: Optional[AppointmentStatus] = Query(None, alias="status", description="Filter by status"),
    unsynced: bool = Query(False, description="Only appointments without a calendar event"),
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
):
    """List appointment requests, newest first."""
    query = db.query(Appointment)

    if status_filter is not None:
        query = query.filter(Appointment.status == status_filter)
    if unsynced:
        query = query.filter(Appointment.google_calendar_event_id.is_(None))

    total = query.count()
    offset = (page - 1) * page_size
    appointments = query.order_by(Appointment.created_at.desc()).offset(offset).limit(page_size).all()

    return AppointmentListResponse(
        total=total,
        appointments=[AppointmentResponse.model_validate(a) for a in appointments],
        page=page,
        page_size=page_size
    )


@admin_router.get("/{appointment_id}", response_model=AppointmentResponse)
def get_appointment(
    appointment_id: str,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
):
    appointment = booking_service.get_appointment(db, appointment_id)
    if not appointment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Appointment with ID '{appointment_id}' not found"
        )
    return AppointmentResponse.model_validate(appointment)

"""
Calendar Event Router
Entry points that push bookings onto the Google calendar
"""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import Optional
import logging

from claryon.core.database import get_optional_db
from claryon.schemas.calendar_event import (
    CalendarEventRequest,
    DirectBookingRequest,
    CalendarEventResponse,
    CalendarErrorResponse,
    CalendarPartialFailureResponse,
)
from claryon.services import booking_service
from claryon.services.booking_service import CalendarSyncResult, PipelineStage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/calendar-events", tags=["Calendar Events"])

ERROR_RESPONSES = {
    500: {"model": CalendarErrorResponse, "description": "Configuration, provider or partial failure"},
}


def _result_response(result: CalendarSyncResult, success_message: str) -> JSONResponse:
    """Map a pipeline outcome onto an HTTP response."""
    if result.succeeded:
        body = CalendarEventResponse(
            stage=result.stage.value,
            message=success_message,
            appointment_id=result.appointment_id,
            event_id=result.event.id,
            event_url=result.event.html_link,
            meet_link=result.event.meet_link,
        )
        return JSONResponse(status_code=status.HTTP_200_OK, content=body.model_dump())

    if result.needs_reconciliation:
        body = CalendarPartialFailureResponse(
            stage=result.stage.value,
            message="Google Calendar event created, but failed to update appointment record in database.",
            appointment_id=result.appointment_id,
            event_id=result.event.id,
            event_url=result.event.html_link,
            database_error=result.error,
        )
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body.model_dump())

    body = CalendarErrorResponse(
        stage=result.stage.value,
        error=result.error or "Failed to create Google Calendar event.",
        details=result.details,
    )
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body.model_dump())


@router.post("", response_model=CalendarEventResponse, responses=ERROR_RESPONSES)
def create_event_for_appointment(
    request_data: CalendarEventRequest,
    db: Optional[Session] = Depends(get_optional_db)
):
    """
    Create the Google Calendar event for a stored appointment and save the event id on it.

    Each call creates a new event unless GOOGLE_CALENDAR_IDEMPOTENT_EVENTS is enabled.
    """
    failure = booking_service.check_calendar_config(db, request_data.appointment_id)
    if failure:
        return _result_response(failure, "")

    appointment = booking_service.get_appointment(db, request_data.appointment_id)
    if not appointment:
        logger.warning(f"[Calendar] Appointment not found: {request_data.appointment_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Appointment with ID '{request_data.appointment_id}' not found"
        )

    result = booking_service.sync_appointment_to_calendar(db, appointment)
    return _result_response(
        result,
        "Successfully created Google Calendar event and updated appointment record."
    )


@router.post("/direct", response_model=CalendarEventResponse, responses=ERROR_RESPONSES)
def create_direct_event(booking: DirectBookingRequest):
    """
    Book straight onto the calendar from the request payload, with a Google Meet link.
    No appointment row is stored.
    """
    result = booking_service.book_direct_event(booking)
    return _result_response(
        result,
        "Appointment booked and Google Calendar event created successfully!"
    )


@router.get("/direct")
def direct_event_info():
    """Usage hint for the direct booking endpoint."""
    return {
        "message": "This endpoint creates calendar events via POST request.",
        "documentation_note": "Please use the POST method with a JSON body containing name, email and date_time.",
    }

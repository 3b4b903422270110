"""
Booking Service
Stores appointment requests and pushes them onto the Google calendar.

The calendar pipeline runs token -> event -> row update in one request.
Each halt point is reported as a PipelineStage so the caller can tell a
clean failure from an event that exists without being recorded.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from claryon.core.config import settings
from claryon.models.appointment import Appointment, AppointmentStatus
from claryon.schemas.appointment import AppointmentCreate
from claryon.schemas.calendar_event import DirectBookingRequest
from claryon.services.google_calendar import (
    CalendarConfigurationError,
    CalendarError,
    CalendarEventDraft,
    CreatedEvent,
    GoogleCalendarService,
    calendar_event_key,
)

logger = logging.getLogger(__name__)


class AppointmentUpdateError(Exception):
    """The appointment row could not be updated."""


class StoreNotInitializedError(AppointmentUpdateError):
    """No database session was handed to the updater."""


class PipelineStage(str, enum.Enum):
    COMPLETED = "completed"
    EVENT_CREATED = "event_created"
    CONFIG_ERROR = "config_error"
    TOKEN_FAILED = "token_failed"
    EVENT_CREATION_FAILED = "event_creation_failed"
    UPDATE_FAILED_AFTER_EVENT_CREATED = "update_failed_after_event_created"


@dataclass
class CalendarSyncResult:
    stage: PipelineStage
    appointment_id: Optional[str] = None
    event: Optional[CreatedEvent] = None
    error: Optional[str] = None
    details: Any = None

    @property
    def succeeded(self) -> bool:
        return self.stage in (PipelineStage.COMPLETED, PipelineStage.EVENT_CREATED)

    @property
    def needs_reconciliation(self) -> bool:
        return self.stage == PipelineStage.UPDATE_FAILED_AFTER_EVENT_CREATED


def create_appointment(db: Session, data: AppointmentCreate) -> Appointment:
    """Insert a pending appointment with no calendar event attached."""
    appointment = Appointment(
        client_name=data.client_name,
        client_email=str(data.client_email),
        client_phone=data.client_phone,
        service_name=data.service_name,
        preferred_datetime=data.preferred_datetime,
        notes=data.notes,
        status=AppointmentStatus.PENDING,
        google_calendar_event_id=None,
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)
    logger.info(f"[Booking] Appointment {appointment.id} created for service '{appointment.service_name}'")
    return appointment


def get_appointment(db: Session, appointment_id: str) -> Optional[Appointment]:
    return db.query(Appointment).filter(Appointment.id == appointment_id).first()


def attach_calendar_event(db: Optional[Session], appointment_id: str, event_id: str) -> Appointment:
    """
    Record the created event on its appointment. Only google_calendar_event_id is written.

    Raises:
        StoreNotInitializedError: db is None
        AppointmentUpdateError: missing id, no matching row, or a database error
    """
    if db is None:
        raise StoreNotInitializedError("Database session not initialized. Cannot update appointment.")
    if not appointment_id:
        raise AppointmentUpdateError("Appointment ID not provided for database update.")

    try:
        result = db.execute(
            update(Appointment)
            .where(Appointment.id == appointment_id)
            .values(google_calendar_event_id=event_id)
        )
        if result.rowcount != 1:
            db.rollback()
            raise AppointmentUpdateError(
                f"Expected to update 1 appointment with id {appointment_id}, matched {result.rowcount}."
            )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise AppointmentUpdateError(f"Failed to update appointment {appointment_id}: {e}") from e

    appointment = get_appointment(db, appointment_id)
    db.refresh(appointment)
    logger.info(f"[Booking] Appointment {appointment_id} linked to calendar event {event_id}")
    return appointment


def _appointment_draft(appointment: Appointment) -> CalendarEventDraft:
    description = "\n".join([
        f"Client: {appointment.client_name}",
        f"Email: {appointment.client_email}",
        f"Phone: {appointment.client_phone or 'Not provided'}",
        f"Service: {appointment.service_name}",
        f"Appointment ID: {appointment.id}",
        f"Notes: {appointment.notes or 'No additional notes provided.'}",
    ])
    return CalendarEventDraft(
        summary=f"Appointment: {appointment.service_name} with {appointment.client_name}",
        description=description,
        start=appointment.preferred_datetime,
        attendees=[appointment.client_email],
        event_id=calendar_event_key(appointment.id) if settings.GOOGLE_CALENDAR_IDEMPOTENT_EVENTS else None,
    )


def _direct_draft(booking: DirectBookingRequest, calendar_owner: Optional[str]) -> CalendarEventDraft:
    lines = [f"Client Email: {booking.email}"]
    if booking.phone:
        lines.append(f"Client Phone: {booking.phone}")
    if booking.service:
        lines.append(f"Service: {booking.service}")
    if booking.notes:
        lines.append(f"Notes: {booking.notes}")

    summary = f"Consultation: {booking.name}"
    if booking.service:
        summary = f"Consultation: {booking.service} with {booking.name}"

    return CalendarEventDraft(
        summary=summary,
        description="\n".join(lines),
        start=booking.date_time,
        attendees=[str(booking.email), calendar_owner],
        request_conference=True,
    )


def check_calendar_config(
    db: Optional[Session],
    appointment_id: Optional[str] = None,
    require_store: bool = True,
) -> Optional[CalendarSyncResult]:
    """
    Fail fast before any provider call. Returns a CONFIG_ERROR result when a
    setting is missing or, with require_store, when there is no database session.
    """
    missing = settings.missing_calendar_settings(include_database=require_store)
    if missing:
        logger.error(f"[Calendar] Missing configuration: {', '.join(missing)}")
        return CalendarSyncResult(
            stage=PipelineStage.CONFIG_ERROR,
            appointment_id=appointment_id,
            error="Calendar integration is not configured correctly due to missing environment variables.",
            details=missing,
        )

    if require_store and db is None:
        logger.error("[Booking] Appointment store is not initialized")
        return CalendarSyncResult(
            stage=PipelineStage.CONFIG_ERROR,
            appointment_id=appointment_id,
            error="Database session not initialized. Cannot update appointment.",
            details=["DATABASE_URL"],
        )
    return None


def _acquire_token(calendar: GoogleCalendarService, appointment_id: Optional[str]):
    """Run the token exchange; returns (token, failed_result)."""
    try:
        return calendar.get_access_token(), None
    except CalendarConfigurationError as e:
        logger.error(f"[Calendar] Configuration error during token exchange: {e.message}")
        return None, CalendarSyncResult(
            stage=PipelineStage.CONFIG_ERROR,
            appointment_id=appointment_id,
            error="Calendar integration is not configured correctly.",
            details=e.message,
        )
    except CalendarError as e:
        logger.error(f"[Calendar] Failed to obtain Google API access token: {e.message}")
        return None, CalendarSyncResult(
            stage=PipelineStage.TOKEN_FAILED,
            appointment_id=appointment_id,
            error="Failed to obtain Google API access token.",
            details=e.message,
        )


def sync_appointment_to_calendar(
    db: Optional[Session],
    appointment: Appointment,
    calendar: Optional[GoogleCalendarService] = None,
) -> CalendarSyncResult:
    """
    Create the calendar event for a stored appointment and record its id.

    Nothing is retried and a created event is never deleted; a failed row
    update comes back as UPDATE_FAILED_AFTER_EVENT_CREATED with the event id.
    """
    # A failed update rolls back and expires the instance
    appointment_id = appointment.id
    logger.info(f"[Booking] Calendar sync started for appointment {appointment_id}")
    failure = check_calendar_config(db, appointment_id)
    if failure:
        return failure

    calendar = calendar or GoogleCalendarService.from_settings()
    access_token, failure = _acquire_token(calendar, appointment_id)
    if failure:
        return failure

    try:
        event = calendar.create_event(access_token, _appointment_draft(appointment))
    except CalendarError as e:
        logger.error(f"[Calendar] Failed to create event for appointment {appointment_id}: {e.message}")
        return CalendarSyncResult(
            stage=PipelineStage.EVENT_CREATION_FAILED,
            appointment_id=appointment_id,
            error=e.message,
            details=e.details,
        )

    try:
        attach_calendar_event(db, appointment_id, event.id)
    except AppointmentUpdateError as e:
        logger.error(
            f"[Booking] Event {event.id} created but appointment {appointment_id} was not updated: {e}. "
            "Manual reconciliation required."
        )
        return CalendarSyncResult(
            stage=PipelineStage.UPDATE_FAILED_AFTER_EVENT_CREATED,
            appointment_id=appointment_id,
            event=event,
            error=str(e),
        )

    logger.info(f"[Booking] Appointment {appointment_id} synced to calendar event {event.id}")
    return CalendarSyncResult(stage=PipelineStage.COMPLETED, appointment_id=appointment_id, event=event)


def book_direct_event(
    booking: DirectBookingRequest,
    calendar: Optional[GoogleCalendarService] = None,
) -> CalendarSyncResult:
    """Create a calendar event with a Meet link straight from a booking payload."""
    logger.info("[Booking] Direct calendar booking started")
    failure = check_calendar_config(None, require_store=False)
    if failure:
        return failure

    calendar = calendar or GoogleCalendarService.from_settings()
    access_token, failure = _acquire_token(calendar, None)
    if failure:
        return failure

    try:
        event = calendar.create_event(access_token, _direct_draft(booking, calendar.calendar_id))
    except CalendarError as e:
        logger.error(f"[Calendar] Direct booking failed: {e.message}")
        return CalendarSyncResult(
            stage=PipelineStage.EVENT_CREATION_FAILED,
            error=e.message,
            details=e.details,
        )

    return CalendarSyncResult(stage=PipelineStage.EVENT_CREATED, event=event)

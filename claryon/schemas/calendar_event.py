from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, Any
from datetime import datetime

from claryon.schemas.appointment import _as_utc, _blank_to_none


class CalendarEventRequest(BaseModel):
    """Create the calendar event for an appointment that is already stored"""
    appointment_id: str = Field(..., min_length=1, description="ID of the stored appointment")


class DirectBookingRequest(BaseModel):
    """Inline booking: event details are taken from the payload, nothing is stored"""
    name: str = Field(..., min_length=1, max_length=255, description="Client name")
    email: EmailStr = Field(..., description="Client email")
    phone: Optional[str] = Field(None, max_length=50)
    date_time: datetime = Field(..., description="Start of the meeting (ISO 8601)")
    service: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = Field(None, max_length=5000)

    @field_validator("phone", "service", "notes", mode="before")
    @classmethod
    def empty_string_to_none(cls, v):
        return _blank_to_none(v)

    @field_validator("date_time")
    @classmethod
    def normalize_timezone(cls, v: datetime) -> datetime:
        return _as_utc(v)


class CalendarEventResponse(BaseModel):
    """Body returned when the pipeline runs to completion"""
    success: bool = True
    stage: str
    message: str
    appointment_id: Optional[str] = None
    event_id: str
    event_url: Optional[str] = None
    meet_link: Optional[str] = None


class CalendarErrorResponse(BaseModel):
    """Body returned when the pipeline halts before an event exists"""
    success: bool = False
    stage: str
    error: str
    details: Optional[Any] = None


class CalendarPartialFailureResponse(BaseModel):
    """Event exists on the calendar but the appointment row could not be updated"""
    success: bool = False
    stage: str
    message: str
    appointment_id: str
    event_id: str
    event_url: Optional[str] = None
    database_error: str

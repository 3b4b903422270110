from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator
from typing import Optional
from datetime import datetime, timezone

from claryon.models.appointment import AppointmentStatus


def _as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC; aware ones are converted to it."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class AppointmentCreate(BaseModel):
    """Schema for a booking form submission"""
    client_name: str = Field(..., min_length=1, max_length=255, description="Name of the client")
    client_email: EmailStr = Field(..., description="Email address of the client")
    client_phone: Optional[str] = Field(None, max_length=50, description="Phone number of the client")
    service_name: str = Field(..., min_length=1, max_length=255, description="Requested service")
    preferred_datetime: datetime = Field(..., description="Preferred date and time (ISO 8601)")
    notes: Optional[str] = Field(None, max_length=5000, description="Additional notes")

    @field_validator("client_phone", "notes", mode="before")
    @classmethod
    def empty_string_to_none(cls, v):
        return _blank_to_none(v)

    @field_validator("client_name", "service_name")
    @classmethod
    def strip_required_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("preferred_datetime")
    @classmethod
    def normalize_timezone(cls, v: datetime) -> datetime:
        return _as_utc(v)


class AppointmentResponse(BaseModel):
    id: str
    client_name: str
    client_email: str
    client_phone: Optional[str]
    service_name: str
    preferred_datetime: datetime
    notes: Optional[str]
    status: AppointmentStatus
    google_calendar_event_id: Optional[str]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AppointmentBookedResponse(BaseModel):
    """Schema for booking response with success message"""
    message: str
    appointment: AppointmentResponse


class AppointmentListResponse(BaseModel):
    total: int
    appointments: list[AppointmentResponse]
    page: int
    page_size: int

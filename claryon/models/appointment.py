"""
Appointment Model
Stores appointment requests submitted through the booking form
"""
import enum
import uuid

from sqlalchemy import Column, String, Text, DateTime, Enum as SQLEnum
from sqlalchemy.sql import func
from claryon.core.database import Base


class AppointmentStatus(str, enum.Enum):
    """Lifecycle states of an appointment request"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Client Information
    client_name = Column(String(255), nullable=False)
    client_email = Column(String(255), nullable=False, index=True)
    client_phone = Column(String(50), nullable=True)

    # Appointment Details
    service_name = Column(String(255), nullable=False)
    preferred_datetime = Column(DateTime(timezone=True), nullable=False)
    notes = Column(Text, nullable=True)

    # Status and Tracking
    status = Column(
        SQLEnum(AppointmentStatus, values_callable=lambda e: [m.value for m in e], name="appointment_status"),
        default=AppointmentStatus.PENDING,
        nullable=False,
    )
    coach_id = Column(String(36), nullable=True)  # Declared for staff assignment, not populated yet
    google_calendar_event_id = Column(String(1024), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Appointment(id={self.id}, client='{self.client_name}', status='{self.status}')>"

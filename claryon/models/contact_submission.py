import uuid

from sqlalchemy import Column, String, Text, DateTime, Boolean
from sqlalchemy.sql import func
from claryon.core.database import Base


class ContactSubmission(Base):
    """Message left through the public contact form."""
    __tablename__ = "contact_submissions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    service_of_interest = Column(String(255), nullable=True)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<ContactSubmission(id={self.id}, email='{self.email}', read={self.is_read})>"

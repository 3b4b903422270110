import uuid

from sqlalchemy import Column, String, Text, Date, DateTime, Boolean, SmallInteger, CheckConstraint
from sqlalchemy.sql import func
from claryon.core.database import Base


class Testimonial(Base):
    """
    Client testimonial. Only rows with is_published set appear on the public site.
    """
    __tablename__ = "testimonials"
    __table_args__ = (
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="ck_testimonials_rating"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    client_name = Column(String(255), nullable=False)
    quote = Column(Text, nullable=False)
    service_availed = Column(String(255), nullable=True)
    rating = Column(SmallInteger, nullable=True)
    date_received = Column(Date, nullable=True)
    is_published = Column(Boolean, default=False, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Testimonial(id={self.id}, client='{self.client_name}', published={self.is_published})>"

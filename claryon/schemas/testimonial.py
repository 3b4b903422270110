from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import date, datetime


class TestimonialBase(BaseModel):
    client_name: str = Field(..., min_length=2, max_length=255, description="Name of the client")
    quote: str = Field(..., min_length=10, description="Testimonial text")
    service_availed: Optional[str] = Field(None, max_length=255)
    rating: Optional[int] = Field(None, ge=1, le=5, description="Rating from 1 to 5")
    date_received: Optional[date] = None
    is_published: bool = False


class TestimonialCreate(TestimonialBase):
    pass


class TestimonialUpdate(BaseModel):
    client_name: Optional[str] = Field(None, min_length=2, max_length=255)
    quote: Optional[str] = Field(None, min_length=10)
    service_availed: Optional[str] = Field(None, max_length=255)
    rating: Optional[int] = Field(None, ge=1, le=5)
    date_received: Optional[date] = None
    is_published: Optional[bool] = None


class PublicTestimonialResponse(BaseModel):
    """What the public site sees; the publication flag is implied"""
    id: str
    client_name: str
    quote: str
    service_availed: Optional[str]
    rating: Optional[int]
    date_received: Optional[date]

    model_config = ConfigDict(from_attributes=True)


class TestimonialResponse(PublicTestimonialResponse):
    is_published: bool
    created_at: datetime

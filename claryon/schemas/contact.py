from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator
from typing import Optional
from datetime import datetime


class ContactSubmissionCreate(BaseModel):
    """Schema for the public contact form"""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)
    service_of_interest: Optional[str] = Field(None, max_length=255)
    message: str = Field(..., min_length=1, max_length=10000)

    @field_validator("phone", "service_of_interest", mode="before")
    @classmethod
    def empty_string_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ContactSubmissionResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: Optional[str]
    service_of_interest: Optional[str]
    message: str
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ContactSubmissionReceipt(BaseModel):
    message: str
    submission_id: str

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime


class AdminLogin(BaseModel):
    """Schema for admin login (username or email plus password)"""
    username: str = Field(..., min_length=1, description="Username or email")
    password: str = Field(..., min_length=1, description="Plain text password")


class AdminResponse(BaseModel):
    id: int
    username: str
    email: str
    name: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AdminLoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    admin: AdminResponse


class TokenData(BaseModel):
    """Claims carried by an admin access token"""
    username: Optional[str] = None
    admin_id: Optional[int] = None

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from uuid import UUID
import re


EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'


# ===== USER PYDANTIC MODELS =====

class UserRegister(BaseModel):
    email: str = Field(..., max_length=255, description="User's email address")
    # bcrypt only looks at the first 72 bytes
    password: str = Field(..., min_length=6, max_length=72, description="Password (6-72 characters)")
    full_name: str = Field(..., min_length=1, max_length=255, description="Display name")

    @field_validator('email')
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.lower().strip()
        if not re.match(EMAIL_PATTERN, v):
            raise ValueError('Invalid email format')
        return v

    @field_validator('full_name')
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Full name must not be empty')
        return v


class UserLogin(BaseModel):
    email: str = Field(..., description="User's email")
    password: str = Field(..., min_length=1, description="User's password")

    @field_validator('email')
    @classmethod
    def validate_login_identifier(cls, v: str) -> str:
        return v.lower().strip()


class UserResponse(BaseModel):
    """User data returned to client - no sensitive info"""
    id: UUID
    email: str
    full_name: str
    avatar_url: Optional[str] = None
    is_active: bool
    last_login_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    message: str
    user: UserResponse
    token: str
    token_type: str = "bearer"


class MeResponse(BaseModel):
    user: UserResponse

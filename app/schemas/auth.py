"""Authentication schemas with comprehensive validation."""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional


class Token(BaseModel):
    """JWT token response model."""
    access_token: str
    token_type: str = "bearer"
    expires_in: Optional[int] = None


class UserLogin(BaseModel):
    """User login request."""
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, max_length=128, description="User's password")

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        email = str(v).lower().strip()
        if len(email) > 254:  # RFC 5321 limit
            raise ValueError("Email address too long")
        return email


class AuthResult(BaseModel):
    """Authentication operation result."""
    success: bool
    token: Optional[Token] = None
    error_code: Optional[str] = None
    message: Optional[str] = None


class RegistrationResult(BaseModel):
    """User registration operation result."""
    success: bool
    user_id: Optional[int] = None
    error_code: Optional[str] = None
    message: Optional[str] = None

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

from app.models.user import UserRole


# ============================================================
# Request Schemas (What client sends)
# ============================================================

class UserRegister(BaseModel):
    """Schema for user registration request"""

    email: EmailStr  # Pydantic validates this is a valid email
    password: str = Field(
        min_length=6,
        max_length=100,
        description="Password must be 6-100 characters"
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    class Config:
        json_schema_extra = {
            "example": {
                "email": "author@quizhub.io",
                "password": "SecurePass123"
            }
        }


class UserLogin(BaseModel):
    """Schema for user login request"""

    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    class Config:
        json_schema_extra = {
            "example": {
                "email": "author@quizhub.io",
                "password": "SecurePass123"
            }
        }


class RefreshTokenRequest(BaseModel):
    """Schema for token refresh request"""

    refresh_token: str


# ============================================================
# Response Schemas (What server sends back)
# ============================================================

class UserResponse(BaseModel):
    """Public user profile"""

    id: int
    email: EmailStr
    role: UserRole
    score: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    """Tokens returned after register/login"""

    user: UserResponse
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class TokenRefreshResponse(BaseModel):
    """New access token issued from a refresh token"""

    access_token: str
    token_type: str = "bearer"
    expires_in: int


class TokenUser(BaseModel):
    id: int
    email: EmailStr
    role: UserRole

    class Config:
        from_attributes = True


class TokenVerifyResponse(BaseModel):
    valid: bool = True
    user: TokenUser


class ErrorResponse(BaseModel):
    """Standard error body"""

    detail: str

# app/schemas/auth/auth.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional


class RegisterRequest(BaseModel):
    # Presence is checked by the auth service so missing fields map to 400, not 422
    username: Optional[str] = Field(None, max_length=100, description="Unique display name")
    email: Optional[str] = Field(None, max_length=255, description="Unique login email")
    password: Optional[str] = Field(None, description="At least 6 characters")

    @field_validator('username', 'email')
    @classmethod
    def strip_whitespace(cls, v):
        return v.strip() if isinstance(v, str) else v


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

    @field_validator('email')
    @classmethod
    def strip_email(cls, v):
        return v.strip() if isinstance(v, str) else v


class UserResponse(BaseModel):
    id: int
    username: str
    email: str


class AuthResponse(BaseModel):
    success: bool
    token: str
    user: UserResponse

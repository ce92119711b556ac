"""
Roster Backend — Auth & Account Schemas
========================================

What:  Request/response contracts for registration, login, password
       strength, password generation and password reset, plus the
       decoded JWT payload.
"""

import uuid
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field, field_validator


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=50, description="Unique login name")
    password: str = Field(min_length=1, max_length=256)

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username cannot be blank")
        return v


class LoginRequest(BaseModel):
    username: str = Field(max_length=50)
    password: str = Field(max_length=256)


class LoginResponse(BaseModel):
    token: str = Field(description="Bearer JWT for the Authorization header")
    token_type: str = Field(default="bearer")
    role: str = Field(description="Admin or User")


class UserResponse(BaseModel):
    id: uuid.UUID
    username: str
    role: str
    created_at: datetime

    model_config = {"from_attributes": True}


class TokenPayload(BaseModel):
    """Claims carried in an access token (iss/aud/iat are checked by python-jose)."""
    sub: str
    name: str
    role: str
    exp: int


class PasswordStrengthRequest(BaseModel):
    password: str = Field(default="", max_length=256)


class PasswordStrengthResponse(BaseModel):
    score: int = Field(ge=0, le=6, description="Number of satisfied criteria out of 6")
    max_score: int = Field(default=6)
    level: str = Field(description="very weak, weak, medium, good, excellent")
    recommendations: List[str] = Field(default_factory=list)


class GeneratedPasswordResponse(BaseModel):
    password: str


class ResetTokenResponse(BaseModel):
    """Returned to an Admin, who hands the token to the user out of band."""
    username: str
    reset_token: str
    expires_at: datetime


class PasswordResetRequest(BaseModel):
    username: str = Field(max_length=50)
    token: str = Field(max_length=64)
    new_password: str = Field(min_length=1, max_length=256)

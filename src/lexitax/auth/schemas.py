"""
Auth-specific Pydantic schemas for request and response models.

This module contains all Pydantic models related to signup, login and
the user records the backend returns.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from lexitax.auth.constants import Role, TokenType


class User(BaseModel):
    """User information. Created server-side, only displayed by the client."""

    id: str = Field(..., description="User's unique identifier")
    email: str = Field(..., description="User's email address")
    full_name: str = Field("", description="User's full name")
    role: Role = Field(Role.USER, description="User's role")
    created_at: datetime | None = Field(None, description="User creation timestamp")
    updated_at: datetime | None = Field(None, description="User last update timestamp")


class LoginRequest(BaseModel):
    """Request body for logging in."""

    email: str
    password: str


class SignupRequest(BaseModel):
    """Request body for creating an account."""

    email: str
    password: str
    full_name: str


class AuthResponse(BaseModel):
    """Payload returned by signup and login."""

    id: str = Field(..., description="User's unique identifier")
    email: str = Field(..., description="User's email address")
    full_name: str = Field("", description="User's full name")
    access_token: str | None = Field(None, description="Bearer token for later requests")
    refresh_token: str | None = Field(None, description="Refresh token")
    token_type: TokenType = Field(TokenType.BEARER, description="Authorization scheme")
    expires_in: int | None = Field(None, description="Access token lifetime in seconds")

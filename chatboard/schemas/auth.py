"""Pydantic schemas for the account endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CredentialsRequest(BaseModel):
    """Body of /api/register and /api/login.

    Fields are loosely typed so that malformed input reaches the account service
    and is rejected with the same messages as any other invalid credential.
    """

    username: Any = Field(default=None, description="Username (3-20 of [A-Za-z0-9_-])")
    password: Any = Field(default=None, description="Plaintext password")


class AuthResponse(BaseModel):
    """Successful register or login."""

    success: bool = Field(default=True)
    token: str = Field(..., description="Opaque session token for the realtime channel")
    username: str = Field(..., description="Canonical username")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "token": "0b6c1c4e-5d8e-4f8e-9a51-2a6b3c2f9d10",
                "username": "alice",
            }
        }
    )


class ErrorResponse(BaseModel):
    """Failed request."""

    success: bool = Field(default=False)
    error: str = Field(..., description="User-facing error message")
    error_type: str | None = Field(default=None, description="Error category")

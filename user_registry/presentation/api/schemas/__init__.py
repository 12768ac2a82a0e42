"""API request/response schemas -- Pydantic v2 models with strict validation."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


# ============================================================================
# Common / shared
# ============================================================================

class ErrorDetail(BaseModel):
    """Single field-level validation error."""

    model_config = ConfigDict(frozen=True)

    field: str | None = None
    message: str


class ErrorBody(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    details: list[ErrorDetail] = Field(default_factory=list)
    request_id: str | None = None
    timestamp: str | None = None


class ErrorResponse(BaseModel):
    """Standard error envelope returned for all non-2xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorBody


class IdResponse(BaseModel):
    id: str = Field(..., description="Identifier of the created resource")


# ============================================================================
# User schemas
# ============================================================================

class CreateUserRequest(BaseModel):
    """Signup payload."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"name": "John Doe", "email": "john@gmail.com", "password": "wUN3B%AM7oV9AO"},
            ],
        },
    )

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=4, description="Password")
    name: str = Field(..., max_length=200, pattern=r"^[a-zA-Z ]*$", description="Name")

    @field_validator("email")
    @classmethod
    def validate_email_length(cls, v: str) -> str:
        if not 5 <= len(v) <= 320:
            raise ValueError("email must be between 5 and 320 characters")
        return v


__all__ = ["CreateUserRequest", "ErrorBody", "ErrorDetail", "ErrorResponse", "IdResponse"]

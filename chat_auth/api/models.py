"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Every response shares one envelope: {"success": true, "result": ...} or
{"success": false, "error": "..."}.
"""

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, EmailStr, Field

ResultT = TypeVar("ResultT")


class RegisterRequest(BaseModel):
    """Request model for user registration."""

    email: EmailStr
    password: str = Field(..., min_length=1, description="User password")


class RegisterResult(BaseModel):
    """Result of a successful registration."""

    message: str
    verification_token: str = Field(
        ..., description="Verification token (returned directly for development use)"
    )


class ActivateResult(BaseModel):
    """Result of a successful activation."""

    message: str


class SuccessResponse(BaseModel, Generic[ResultT]):
    """Envelope for successful responses."""

    success: Literal[True] = True
    result: ResultT


class ErrorResponse(BaseModel):
    """Envelope for error responses."""

    success: Literal[False] = False
    error: str

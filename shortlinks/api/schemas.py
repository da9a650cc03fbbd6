"""API request and response schemas.

This module contains Pydantic models for API request validation
and response serialization.
"""

from pydantic import BaseModel, Field, field_validator


class ShortenRequest(BaseModel):
    """Request schema for shortening a URL."""
    url: str = Field(..., min_length=1, description="Full URL on this site")

    @field_validator("url")
    def strip_whitespace(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("url must not be blank")
        return v


class ShortenResponse(BaseModel):
    """Response schema for a shortened URL."""
    short_url: str
    hash: str
    url: str


class ResolveResponse(BaseModel):
    """Response schema for a resolved short code."""
    hash: str
    url: str


class ErrorResponse(BaseModel):
    """Response schema for errors."""
    detail: str

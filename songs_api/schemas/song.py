"""
Songs API — Pydantic Response Schemas
=======================================

What:  Pydantic models describing what the API returns.
Why:   Consistent serialization and OpenAPI documentation for every response.
Who:   Used by route handlers as response models and by the song service.

Request bodies are deliberately NOT modeled here: the validator checks
presence only and POST echoes the submitted body verbatim.
"""

from typing import Optional

from pydantic import BaseModel, Field


class SongResponse(BaseModel):
    """
    What:  One song record as read back from the store.
    Who:   Returned by GET /songs?title=<t>.

    Every value is the store's raw string, including `released`
    (stored as a number, returned as e.g. "1999").
    """
    title: Optional[str] = Field(description="Unique song title (store key)")
    artist: Optional[str] = Field(description="Performing artist")
    album: Optional[str] = Field(description="Album name")
    released: Optional[str] = Field(description="Release year, as stored")
    genres: Optional[str] = Field(description="Free-form genre list")


class ErrorResponse(BaseModel):
    """Body of validation (400/405) and write failure (500) responses."""
    error: str = Field(description="Human-readable error message")


class MessageResponse(BaseModel):
    """Body of the 404 response for GET /songs."""
    message: str = Field(description="Human-readable explanation")


class HealthResponse(BaseModel):
    """
    What:  Health check response for monitoring systems.
    Who:   Returned by GET /health.
    """
    status: str = Field(description="Overall status: healthy or unhealthy")
    version: str = Field(description="Application version")
    store: str = Field(description="Record store status: reachable or unreachable")
    uptime_seconds: float = Field(description="Seconds since service started")

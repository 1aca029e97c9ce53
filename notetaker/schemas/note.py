"""
NoteTaker Backend: Pydantic Response Schemas
=============================================

What:  Pydantic models defining what the API returns.
How:   FastAPI serializes route results through these models and documents
       them in the OpenAPI schema.

Request bodies are deliberately not modelled: POST /notes accepts JSON or
form data and passes `title`/`contents` through without validation (see
routes/notes.py).
"""

from typing import Optional

from pydantic import BaseModel, Field


class NoteResponse(BaseModel):
    """
    What:  A persisted note.
    Who:   Returned by every notes endpoint (alone or inside a list).
    """
    id: int = Field(description="Store-assigned identifier")
    title: Optional[str] = Field(default=None, description="Note title")
    contents: Optional[str] = Field(default=None, description="Note body")

    model_config = {"from_attributes": True}


class ResetResponse(BaseModel):
    """Fixed confirmation returned by POST /notes/reset."""
    success: bool = Field(description="Always true when the reset completed")
    message: str = Field(description="Human-readable confirmation")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and database status.
    Who:   Returned by GET /health for container and load balancer probes.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")

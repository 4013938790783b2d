"""
Pydantic schemas for the User Manual API.

Requests are validated by services/validation.py (so the per-field error
messages stay under our control); these schemas only shape responses.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, field_serializer


class ManualResponse(BaseModel):
    """What we return for a single user manual."""
    id: int
    title: str
    serial_number: Optional[int] = None
    description: Optional[str] = None
    video_link: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @field_serializer("created_at", "updated_at", "deleted_at")
    def serialize_timestamp(self, value: Optional[datetime]) -> Optional[str]:
        # SQLite hands timestamps back naive; they were written as UTC
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()


class PageLink(BaseModel):
    """One entry of the paginator's ``links`` list."""
    url: Optional[str] = None
    label: str
    active: bool


class ErrorEnvelope(BaseModel):
    """Every failure looks like this. ``errors`` only on validation failures."""
    success: bool = False
    message: str
    errors: Optional[dict[str, list[str]]] = None

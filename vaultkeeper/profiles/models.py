"""
Profile models.

User-facing metadata with no bearing on authorization.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class Profile(BaseModel):
    """Display metadata for one user; ``id`` is the Supabase Auth user id."""

    id: UUID
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None

    # Timestamps
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "example": {
                "id": "5b0c2f7e-9d41-4c3a-8f7e-2a61d0c9b3e4",
                "display_name": "Jane Doe",
                "avatar_url": "https://example.com/jane.png",
                "created_at": "2024-03-18T09:12:00Z",
                "updated_at": "2024-05-02T16:40:00Z",
            }
        },
    }


class UpdateProfileRequest(BaseModel):
    """Request model for updating the caller's own profile."""

    display_name: Optional[str] = Field(None, max_length=255)
    avatar_url: Optional[str] = Field(None, max_length=2048)

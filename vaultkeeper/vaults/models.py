"""
Vault models.

Pydantic models for vault records and vault requests.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class VaultState(str, Enum):
    """Open/closed state of a vault. CLOSED is initial."""

    CLOSED = "closed"
    OPEN = "open"

    def toggled(self) -> "VaultState":
        return VaultState.OPEN if self is VaultState.CLOSED else VaultState.CLOSED


class VaultRecord(BaseModel):
    """
    Vault model - represents a row in the vaults table.

    ``owner_id`` is fixed at creation. ``is_open`` is the only field the
    authorization engine reads besides ownership.
    """

    id: UUID
    name: str
    description: Optional[str] = None
    owner_id: UUID
    is_open: bool = False

    # Timestamps
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "name": "Finance",
                "description": "Payment provider credentials",
                "owner_id": "456e7890-e89b-12d3-a456-426614174000",
                "is_open": False,
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z",
            }
        },
    }

    @property
    def state(self) -> VaultState:
        return VaultState.OPEN if self.is_open else VaultState.CLOSED

    def is_owned_by(self, user_id: UUID) -> bool:
        return self.owner_id == user_id


class CreateVaultRequest(BaseModel):
    """Request model for creating a new vault."""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)

    model_config = {"str_strip_whitespace": True}

"""
Secret models.

Pydantic models for secrets stored in a vault. Values are held as
SecretStr so they never show up in reprs or log records.
"""

from datetime import datetime
from enum import Enum
from typing import List
from uuid import UUID

from pydantic import BaseModel, Field, SecretStr

from ..vaults.models import VaultRecord


class SecretType(str, Enum):
    """Kind of value a secret holds."""

    TEXT = "text"
    PASSWORD = "password"
    API_KEY = "api_key"
    CERTIFICATE = "certificate"


class VaultSecret(BaseModel):
    """
    Secret model - represents a row in the vault_secrets table.

    Keys are not unique within a vault; several rows may share a key.
    """

    id: UUID
    vault_id: UUID
    key: str
    value: SecretStr
    secret_type: SecretType = SecretType.TEXT
    created_by: UUID
    created_at: datetime

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "vault_id": "456e7890-e89b-12d3-a456-426614174000",
                "key": "STRIPE_API_KEY",
                "value": "**********",
                "secret_type": "api_key",
                "created_by": "789e0123-e89b-12d3-a456-426614174000",
                "created_at": "2024-01-01T00:00:00Z",
            }
        },
    }

    def reveal(self) -> str:
        """Return the plain secret value."""
        return self.value.get_secret_value()


class CreateSecretRequest(BaseModel):
    """Request model for writing a secret into a vault."""

    key: str = Field(..., min_length=1, max_length=255)
    value: str = Field(..., min_length=1, repr=False)
    secret_type: SecretType = SecretType.TEXT


class VaultSecrets(BaseModel):
    """Result of reading a vault: the vault summary and its secrets."""

    vault: VaultRecord
    secrets: List[VaultSecret] = Field(default_factory=list)

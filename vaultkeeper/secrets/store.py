"""
Secret storage for Vaultkeeper.

Reads the vault_secrets table and writes to it through the
vaultkeeper_insert_secret database function.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from pydantic import SecretStr

from ..utils.supabase import run_query
from .models import CreateSecretRequest, SecretType, VaultSecret

if TYPE_CHECKING:
    from ..client import Vaultkeeper

INSERT_SECRET_FN = "vaultkeeper_insert_secret"


class SecretStore:
    """
    Manager for secret rows.

    Inserts never go straight to the table: the database function locks the
    parent vault row and only inserts while the vault is open, so a write
    cannot commit against a vault that was closed after it was authorized.

    Example:
        ```python
        vk = await Vaultkeeper.create()

        secrets = await vk.secrets.list_by_vault(vault_id)
        for secret in secrets:
            print(secret.key, secret.secret_type.value)
        ```
    """

    def __init__(self, vaultkeeper: "Vaultkeeper") -> None:
        """
        Initialize SecretStore.

        Args:
            vaultkeeper: Vaultkeeper client instance
        """
        self.vaultkeeper = vaultkeeper
        self.client = vaultkeeper.client

    async def list_by_vault(self, vault_id: UUID) -> List[VaultSecret]:
        """
        List all secrets of a vault, oldest first.

        Args:
            vault_id: Vault UUID

        Returns:
            List of VaultSecret (duplicate keys included)
        """
        result = await run_query(
            self.client.table("vault_secrets").select("*").eq(
                "vault_id", str(vault_id)
            ).order("created_at").execute(),
            "list secrets",
        )

        return [self._parse_secret(row) for row in result.data or []]

    async def insert_if_open(
        self,
        vault_id: UUID,
        request: CreateSecretRequest,
        created_by: UUID,
    ) -> Optional[VaultSecret]:
        """
        Insert a secret if, at commit time, its vault exists and is open.

        Args:
            vault_id: Parent vault UUID
            request: Validated key/value/type
            created_by: Writing user

        Returns:
            Created VaultSecret, or None if the vault was closed (or gone)
            when the insert ran
        """
        result = await run_query(
            self.client.rpc(
                INSERT_SECRET_FN,
                {
                    "p_vault_id": str(vault_id),
                    "p_key": request.key,
                    "p_value": request.value,
                    "p_secret_type": request.secret_type.value,
                    "p_created_by": str(created_by),
                },
            ).execute(),
            "create secret",
        )

        if not result.data:
            return None

        return self._parse_secret(result.data[0])

    def _parse_secret(self, data: dict) -> VaultSecret:
        """Parse database row into VaultSecret model."""
        return VaultSecret(
            id=UUID(data["id"]),
            vault_id=UUID(data["vault_id"]),
            key=data["key"],
            value=SecretStr(data["value"]),
            secret_type=SecretType(data.get("secret_type") or SecretType.TEXT.value),
            created_by=UUID(data["created_by"]),
            created_at=datetime.fromisoformat(data["created_at"].replace("Z", "+00:00")),
        )

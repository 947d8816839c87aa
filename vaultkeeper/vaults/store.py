"""
Vault state store.

Holds vault ownership and the open/closed flag in the vaults table and
performs the compare-and-set toggle.
"""

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from ..exceptions import StorageError
from ..utils.supabase import run_query
from .models import CreateVaultRequest, VaultRecord

if TYPE_CHECKING:
    from ..client import Vaultkeeper

logger = logging.getLogger(__name__)


class VaultStore:
    """
    Manager for vault rows.

    Works directly with the vaults table via PostgREST. It performs no
    authorization; use ``vk.operations`` for guarded access.

    Example:
        ```python
        vk = await Vaultkeeper.create()

        vault = await vk.vaults.get(vault_id)
        if vault and vault.is_open:
            ...

        # All vaults owned by a user
        mine = await vk.vaults.list(owner_id=user_id)
        ```
    """

    def __init__(self, vaultkeeper: "Vaultkeeper") -> None:
        """
        Initialize VaultStore.

        Args:
            vaultkeeper: Vaultkeeper client instance
        """
        self.vaultkeeper = vaultkeeper
        self.client = vaultkeeper.client

    async def get(self, vault_id: UUID) -> Optional[VaultRecord]:
        """
        Get a vault by ID.

        Args:
            vault_id: Vault UUID

        Returns:
            VaultRecord if found, None otherwise
        """
        result = await run_query(
            self.client.table("vaults").select("*").eq("id", str(vault_id)).execute(),
            "load vault",
        )

        if not result.data:
            return None

        return self._parse_vault(result.data[0])

    async def list(self, owner_id: Optional[UUID] = None) -> List[VaultRecord]:
        """
        List vaults, optionally restricted to one owner.

        Args:
            owner_id: Only return vaults owned by this user; None for all

        Returns:
            List of VaultRecord, newest first
        """
        query = self.client.table("vaults").select("*")

        if owner_id is not None:
            query = query.eq("owner_id", str(owner_id))

        result = await run_query(query.order("created_at", desc=True).execute(), "list vaults")

        return [self._parse_vault(row) for row in result.data or []]

    async def create(self, owner_id: UUID, request: CreateVaultRequest) -> VaultRecord:
        """
        Insert a new vault. New vaults always start closed.

        Args:
            owner_id: Creating user, owner for the vault's lifetime
            request: Validated name/description

        Returns:
            Created VaultRecord
        """
        result = await run_query(
            self.client.table("vaults").insert(
                {
                    "name": request.name,
                    "description": request.description,
                    "owner_id": str(owner_id),
                    "is_open": False,
                }
            ).execute(),
            "create vault",
        )

        if not result.data:
            raise StorageError("Failed to create vault: no row returned")

        return self._parse_vault(result.data[0])

    async def flip(self, vault: VaultRecord) -> Optional[VaultRecord]:
        """
        Flip ``is_open`` if it still holds the value read in ``vault``.

        The update matches on both id and the previous ``is_open`` value,
        so two racing toggles can never both apply against the same read.

        Args:
            vault: The snapshot the toggle was authorized against

        Returns:
            Updated VaultRecord, or None if the vault changed (or vanished)
            since the snapshot was taken
        """
        result = await run_query(
            self.client.table("vaults").update(
                {
                    "is_open": not vault.is_open,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                }
            ).eq("id", str(vault.id)).eq("is_open", vault.is_open).execute(),
            "toggle vault",
        )

        if not result.data:
            logger.debug("Vault %s changed since it was read; flip not applied", vault.id)
            return None

        return self._parse_vault(result.data[0])

    def _parse_vault(self, data: dict) -> VaultRecord:
        """Parse database row into VaultRecord model."""
        return VaultRecord(
            id=UUID(data["id"]),
            name=data["name"],
            description=data.get("description"),
            owner_id=UUID(data["owner_id"]),
            is_open=bool(data.get("is_open", False)),
            created_at=datetime.fromisoformat(data["created_at"].replace("Z", "+00:00")),
            updated_at=datetime.fromisoformat(data["updated_at"].replace("Z", "+00:00")),
        )

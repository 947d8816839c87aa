"""
Vaultkeeper vaults module.

Vault records, the open/closed state and the vault store.
"""

from .models import CreateVaultRequest, VaultRecord, VaultState
from .store import VaultStore

__all__ = [
    "VaultStore",
    "VaultRecord",
    "VaultState",
    "CreateVaultRequest",
]

"""
Vaultkeeper - role and ownership based access control for vaults and secrets.

Vaults hold typed secrets and are either open or closed. Every read and
write goes through a single authorization engine; writes additionally
require the vault to be open.

Example:
    ```python
    from vaultkeeper import Vaultkeeper, Role

    vk = await Vaultkeeper.create()

    # Admins manage roles
    await vk.operations.assign_role(admin_id, user_id, Role.VAULT_USER)

    # Vault users create vaults (closed) and open them
    vault = await vk.operations.create_vault(user_id, name="Finance")
    vault = await vk.operations.toggle_vault(user_id, vault.id)

    # Secrets can only be written into open vaults
    await vk.operations.write_secret(user_id, vault.id, key="API_KEY", value="…")

    # Viewers can read
    result = await vk.operations.list_secrets(viewer_id, vault.id)
    ```
"""

from .audit import DecisionEvent, DecisionLogger
from .authz import DenyReason, ListScope, Operation, Verdict, decide, vault_list_scope
from .client import Vaultkeeper
from .config import VaultkeeperConfig, load_config
from .exceptions import (
    AccessDenied,
    ConcurrentModificationError,
    StorageError,
    ValidationError,
    VaultkeeperError,
    VaultNotFound,
)
from .profiles import Profile
from .rbac import Role, RoleChange, Subject, UserSummary
from .secrets import SecretType, VaultSecret, VaultSecrets
from .vaults import VaultRecord, VaultState

__version__ = "0.1.0"

__all__ = [
    # Main client
    "Vaultkeeper",
    "VaultkeeperConfig",
    "load_config",
    # Authorization engine
    "decide",
    "vault_list_scope",
    "Operation",
    "DenyReason",
    "ListScope",
    "Verdict",
    # Models
    "Role",
    "Subject",
    "RoleChange",
    "UserSummary",
    "VaultRecord",
    "VaultState",
    "VaultSecret",
    "VaultSecrets",
    "SecretType",
    "Profile",
    # Decision logging
    "DecisionLogger",
    "DecisionEvent",
    # Errors
    "VaultkeeperError",
    "AccessDenied",
    "VaultNotFound",
    "ValidationError",
    "StorageError",
    "ConcurrentModificationError",
]

"""
Vaultkeeper entry point: one object holding the configured stores.
"""

import logging
from typing import Optional

from .audit import DecisionLogger
from .auth import SessionManager
from .config import VaultkeeperConfig, load_config
from .operations import VaultOperations
from .profiles import ProfileManager
from .rbac import RoleRegistry
from .secrets import SecretStore
from .utils.supabase import VaultkeeperSupabaseClient
from .vaults import VaultStore


class Vaultkeeper:
    """
    Main Vaultkeeper client.

    Wires the Supabase client, the stores and the operations facade
    together. Application code should go through ``operations``; the
    stores underneath perform no authorization.

    Example:
        ```python
        from vaultkeeper import Vaultkeeper

        async with await Vaultkeeper.create() as vk:
            vaults = await vk.operations.list_vaults(user_id)
        ```
    """

    def __init__(self, config: VaultkeeperConfig, client: VaultkeeperSupabaseClient) -> None:
        self.config = config
        self.client = client

        if config.debug:
            logging.getLogger("vaultkeeper").setLevel(logging.DEBUG)

        # Identity
        self.sessions = SessionManager(self)

        # Stores
        self.roles = RoleRegistry(self)
        self.vaults = VaultStore(self)
        self.secrets = SecretStore(self)
        self.profiles = ProfileManager(self)

        # Decisions and the guarded facade
        self.decisions = DecisionLogger(enabled=config.enable_decision_log)
        self.operations = VaultOperations(self)

    @classmethod
    async def create(
        cls,
        supabase_url: Optional[str] = None,
        supabase_key: Optional[str] = None,
        **kwargs,
    ) -> "Vaultkeeper":
        """
        Load configuration, connect to Supabase and return a ready client.

        ``supabase_url`` and ``supabase_key`` fall back to the environment
        when omitted; any other keyword overrides a VaultkeeperConfig field.

        Raises:
            pydantic.ValidationError: the resulting configuration is incomplete
        """
        overrides = dict(kwargs)
        if supabase_url:
            overrides["supabase_url"] = supabase_url
        if supabase_key:
            overrides["supabase_key"] = supabase_key

        config = load_config(**overrides)
        return cls(config, await VaultkeeperSupabaseClient.create(config))

    async def close(self) -> None:
        """Release the underlying Supabase client."""
        await self.client.close()

    async def __aenter__(self) -> "Vaultkeeper":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

"""
Supabase client wrapper for Vaultkeeper.

Provides a thin wrapper around the Supabase AsyncClient with Vaultkeeper-specific
configuration, plus the helper that turns collaborator failures into StorageError.

Package versions this was built against:
- supabase: 2.27.1
- supabase-auth: 2.27.1
- postgrest: 2.27.1
"""

from typing import Any, Awaitable, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, acreate_client
from supabase.lib.client_options import AsyncClientOptions
from supabase_auth import AsyncMemoryStorage

from ..config import VaultkeeperConfig
from ..exceptions import StorageError


class VaultkeeperSupabaseClient:
    """
    Wrapper around Supabase AsyncClient with Vaultkeeper-specific configuration.

    This class provides:
    1. Configured client with service role key (reads and writes vault tables)
    2. Access to the auth API used to verify bearer tokens
    3. Table query builders and RPC calls against the configured schema

    Example:
        ```python
        from vaultkeeper.utils.supabase import VaultkeeperSupabaseClient
        from vaultkeeper.config import VaultkeeperConfig

        config = VaultkeeperConfig()
        client = await VaultkeeperSupabaseClient.create(config)

        result = await client.table("vaults").select("*").execute()
        ```
    """

    def __init__(
        self,
        config: VaultkeeperConfig,
        client: AsyncClient,
        auth_client: Optional[AsyncClient] = None,
    ) -> None:
        """
        Initialize the Vaultkeeper Supabase client.

        Args:
            config: Vaultkeeper configuration
            client: Initialized Supabase AsyncClient (service role)
            auth_client: Client built from the anon key, used only to verify
                bearer tokens; the service client is used when omitted

        Note:
            Use VaultkeeperSupabaseClient.create() instead of direct instantiation.
        """
        self.config = config
        self._client = client
        self._auth_client = auth_client

    @classmethod
    async def create(cls, config: VaultkeeperConfig) -> "VaultkeeperSupabaseClient":
        """
        Create and initialize a VaultkeeperSupabaseClient.

        When ``supabase_anon_key`` is configured a second, anon-key client is
        created for token verification.

        Args:
            config: Vaultkeeper configuration with Supabase credentials

        Returns:
            Initialized VaultkeeperSupabaseClient
        """
        options = AsyncClientOptions(
            schema=config.db_schema,
            storage=AsyncMemoryStorage(),
            headers={
                "apikey": config.supabase_key,
                "Authorization": f"Bearer {config.supabase_key}",
            },
        )

        client = await acreate_client(
            supabase_url=config.supabase_url,
            supabase_key=config.supabase_key,
            options=options,
        )

        auth_client = None
        if config.supabase_anon_key:
            auth_client = await acreate_client(
                supabase_url=config.supabase_url,
                supabase_key=config.supabase_anon_key,
                options=AsyncClientOptions(
                    storage=AsyncMemoryStorage(),
                    auto_refresh_token=False,
                    persist_session=False,
                ),
            )

        return cls(config=config, client=client, auth_client=auth_client)

    @property
    def auth(self):
        """
        Access Supabase Auth client.

        Used for ``auth.get_user(token)`` when verifying bearer credentials.
        Goes through the anon-key client when one was configured.
        """
        return (self._auth_client or self._client).auth

    def table(self, table_name: str):
        """
        Create a query builder for a specific table.

        Args:
            table_name: Name of the table (e.g., "vaults")

        Returns:
            AsyncRequestBuilder for chaining queries

        Example:
            ```python
            vaults = await client.table("vaults").select("*").execute()

            result = await client.table("vaults").update({
                "is_open": True
            }).eq("id", vault_id).execute()
            ```
        """
        return self._client.table(table_name)

    def rpc(self, fn: str, params: Optional[dict] = None):
        """
        Call a Postgres function exposed through PostgREST.

        Args:
            fn: Function name (e.g., "vaultkeeper_insert_secret")
            params: Named arguments for the function

        Returns:
            Request builder; call ``execute()`` on it
        """
        return self._client.rpc(fn, params or {})

    async def close(self) -> None:
        """
        Close the client and cleanup resources.

        Example:
            ```python
            client = await VaultkeeperSupabaseClient.create(config)
            try:
                # ... use client
                pass
            finally:
                await client.close()
            ```
        """
        # Supabase client has no explicit close in 2.27.1
        pass


async def run_query(query: Awaitable[Any], action: str) -> Any:
    """
    Await a PostgREST call, translating collaborator failures.

    Args:
        query: Awaitable returned by ``execute()``
        action: Short description used in the error message

    Returns:
        The PostgREST response

    Raises:
        StorageError: If PostgREST or the HTTP transport fails
    """
    try:
        return await query
    except (APIError, httpx.HTTPError) as e:
        raise StorageError(f"Failed to {action}: {e}") from e


async def create_supabase_client(config: VaultkeeperConfig) -> VaultkeeperSupabaseClient:
    """
    Convenience function to create a VaultkeeperSupabaseClient.

    Args:
        config: Vaultkeeper configuration

    Returns:
        Initialized VaultkeeperSupabaseClient
    """
    return await VaultkeeperSupabaseClient.create(config)

"""
Tests for vaultkeeper.client module.
"""

import logging
from unittest.mock import AsyncMock, patch

import pytest

from vaultkeeper.audit import DecisionLogger
from vaultkeeper.client import Vaultkeeper
from vaultkeeper.config import VaultkeeperConfig
from vaultkeeper.operations import VaultOperations


class TestVaultkeeper:
    """Tests for Vaultkeeper client class."""

    @pytest.mark.asyncio
    async def test_create_with_kwargs(self, mock_vaultkeeper_supabase_client):
        """Test creating Vaultkeeper instance with kwargs."""
        with patch(
            "vaultkeeper.client.VaultkeeperSupabaseClient.create",
            AsyncMock(return_value=mock_vaultkeeper_supabase_client),
        ):
            vk = await Vaultkeeper.create(
                supabase_url="https://test.supabase.co",
                supabase_key="test-key-12345678901234567890",
                toggle_max_attempts=2,
            )

        assert vk.config.supabase_url == "https://test.supabase.co"
        assert vk.config.toggle_max_attempts == 2
        assert vk.client is mock_vaultkeeper_supabase_client

    def test_initialization(self, vaultkeeper):
        """Test Vaultkeeper instance initialization."""
        assert vaultkeeper.sessions is not None
        assert vaultkeeper.roles is not None
        assert vaultkeeper.vaults is not None
        assert vaultkeeper.secrets is not None
        assert vaultkeeper.profiles is not None
        assert isinstance(vaultkeeper.decisions, DecisionLogger)
        assert isinstance(vaultkeeper.operations, VaultOperations)
        assert vaultkeeper.operations.decisions is vaultkeeper.decisions

    def test_debug_enables_debug_logging(self, mock_vaultkeeper_supabase_client):
        logger = logging.getLogger("vaultkeeper")
        previous = logger.level
        config = VaultkeeperConfig(
            supabase_url="https://test.supabase.co",
            supabase_key="test-key-12345678901234567890",
            debug=True,
        )
        try:
            Vaultkeeper(config=config, client=mock_vaultkeeper_supabase_client)
            assert logger.level == logging.DEBUG
        finally:
            logger.setLevel(previous)

    @pytest.mark.asyncio
    async def test_context_manager_closes(self, vaultkeeper):
        vaultkeeper.client.close = AsyncMock()

        async with vaultkeeper as vk:
            assert vk is vaultkeeper

        vaultkeeper.client.close.assert_awaited_once()

"""
Pytest configuration and fixtures for Vaultkeeper tests.

Provides a mock Supabase client, a Vaultkeeper instance built on it and
sample rows/records.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest

from vaultkeeper.client import Vaultkeeper
from vaultkeeper.config import VaultkeeperConfig
from vaultkeeper.rbac.models import Role, Subject
from vaultkeeper.utils.supabase import VaultkeeperSupabaseClient
from vaultkeeper.vaults.models import VaultRecord


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _query_builder() -> Mock:
    query_builder = Mock()
    # Make all methods return self for chaining
    for method in ("select", "insert", "update", "upsert", "delete", "eq", "order", "limit"):
        setattr(query_builder, method, Mock(return_value=query_builder))
    # Default execute returns empty result
    query_builder.execute = AsyncMock(return_value=Mock(data=[], count=0))
    return query_builder


@pytest.fixture
def mock_supabase_client():
    """Create a mock Supabase client."""
    client = AsyncMock()

    # Mock auth client
    client.auth = AsyncMock()

    # Store query builders by table name so we can configure them
    query_builders = {}

    def table_mock(table_name: str):
        if table_name not in query_builders:
            query_builders[table_name] = _query_builder()
        return query_builders[table_name]

    client.table = Mock(side_effect=table_mock)
    client._query_builders = query_builders  # Expose for test configuration

    # RPC calls share one builder
    client._rpc_builder = _query_builder()
    client.rpc = Mock(return_value=client._rpc_builder)

    return client


@pytest.fixture
def vaultkeeper_config():
    """Create a test VaultkeeperConfig."""
    return VaultkeeperConfig(
        supabase_url="https://test.supabase.co",
        supabase_key="test-service-key-12345678901234567890",
        db_schema="public",
    )


@pytest.fixture
def mock_vaultkeeper_supabase_client(mock_supabase_client, vaultkeeper_config):
    """Create a VaultkeeperSupabaseClient around the mock."""
    return VaultkeeperSupabaseClient(config=vaultkeeper_config, client=mock_supabase_client)


@pytest.fixture
def vaultkeeper(mock_vaultkeeper_supabase_client, vaultkeeper_config):
    """Create a test Vaultkeeper instance."""
    return Vaultkeeper(config=vaultkeeper_config, client=mock_vaultkeeper_supabase_client)


@pytest.fixture
def setup_table_mock():
    """
    Configure what ``execute()`` returns for a table.

    Usage: ``query_builder = setup_table_mock(vk, "vaults", [row])``
    """

    def _setup(vk, table_name, data):
        query_builder = vk.client._client.table(table_name)
        query_builder.execute = AsyncMock(return_value=Mock(data=data))
        return query_builder

    return _setup


@pytest.fixture
def owner_id():
    """Owner of the sample vault."""
    return uuid4()


@pytest.fixture
def other_user_id():
    """A user who does not own the sample vault."""
    return uuid4()


@pytest.fixture
def make_vault(owner_id):
    """Factory for VaultRecord snapshots."""

    def _make(is_open: bool = False, owner=None, name: str = "Finance") -> VaultRecord:
        now = datetime.now(timezone.utc)
        return VaultRecord(
            id=uuid4(),
            name=name,
            owner_id=owner or owner_id,
            is_open=is_open,
            created_at=now,
            updated_at=now,
        )

    return _make


@pytest.fixture
def make_subject():
    """Factory for Subjects: ``make_subject(Role.ADMIN, user_id=...)``."""

    def _make(*roles: Role, user_id=None) -> Subject:
        return Subject(user_id=user_id or uuid4(), roles=frozenset(roles))

    return _make


@pytest.fixture
def sample_vault_data(owner_id):
    """Create sample vault row."""
    return {
        "id": str(uuid4()),
        "name": "Finance",
        "description": "Payment provider credentials",
        "owner_id": str(owner_id),
        "is_open": False,
        "created_at": _now(),
        "updated_at": _now(),
    }


@pytest.fixture
def sample_secret_data(sample_vault_data, owner_id):
    """Create sample secret row."""
    return {
        "id": str(uuid4()),
        "vault_id": sample_vault_data["id"],
        "key": "STRIPE_KEY",
        "value": "sk_test_51Hx",
        "secret_type": "api_key",
        "created_by": str(owner_id),
        "created_at": _now(),
    }


@pytest.fixture
def sample_profile_data(owner_id):
    """Create sample profile row."""
    return {
        "id": str(owner_id),
        "display_name": "Test User",
        "avatar_url": None,
        "created_at": _now(),
        "updated_at": _now(),
    }

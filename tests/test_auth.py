"""
Tests for vaultkeeper.auth module.
"""

from unittest.mock import AsyncMock, Mock
from uuid import UUID, uuid4

import httpx
import pytest
from supabase_auth.errors import AuthApiError, AuthRetryableError

from vaultkeeper.exceptions import StorageError


class TestSessionManager:
    """Tests for SessionManager class."""

    @pytest.mark.asyncio
    async def test_valid_token(self, vaultkeeper):
        user_id = uuid4()
        response = Mock()
        response.user = Mock(id=str(user_id))
        vaultkeeper.client._client.auth.get_user = AsyncMock(return_value=response)

        result = await vaultkeeper.sessions.get_user_id_from_token("test-access-token")

        assert result == user_id
        vaultkeeper.client._client.auth.get_user.assert_called_once_with("test-access-token")

    @pytest.mark.asyncio
    async def test_anon_key_client_verifies_tokens(self, vaultkeeper):
        user_id = uuid4()
        anon_client = AsyncMock()
        anon_client.auth.get_user = AsyncMock(return_value=Mock(user=Mock(id=str(user_id))))
        vaultkeeper.client._auth_client = anon_client
        vaultkeeper.client._client.auth.get_user = AsyncMock()

        assert await vaultkeeper.sessions.get_user_id_from_token("test-access-token") == user_id
        anon_client.auth.get_user.assert_awaited_once_with("test-access-token")
        vaultkeeper.client._client.auth.get_user.assert_not_called()

    @pytest.mark.asyncio
    async def test_bearer_prefix_is_stripped(self, vaultkeeper):
        user_id = uuid4()
        response = Mock()
        response.user = Mock(id=str(user_id))
        vaultkeeper.client._client.auth.get_user = AsyncMock(return_value=response)

        result = await vaultkeeper.sessions.get_user_id_from_token("Bearer test-access-token")

        assert isinstance(result, UUID)
        vaultkeeper.client._client.auth.get_user.assert_called_once_with("test-access-token")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", ["", "Bearer ", "   "])
    async def test_empty_token(self, vaultkeeper, token):
        vaultkeeper.client._client.auth.get_user = AsyncMock()

        assert await vaultkeeper.sessions.get_user_id_from_token(token) is None
        vaultkeeper.client._client.auth.get_user.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_token(self, vaultkeeper):
        vaultkeeper.client._client.auth.get_user = AsyncMock(
            side_effect=AuthApiError("invalid JWT", 401, None)
        )

        assert await vaultkeeper.sessions.get_user_id_from_token("expired") is None

    @pytest.mark.asyncio
    async def test_no_user_in_response(self, vaultkeeper):
        vaultkeeper.client._client.auth.get_user = AsyncMock(return_value=None)

        assert await vaultkeeper.sessions.get_user_id_from_token("token") is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [AuthRetryableError("service unavailable", 503), httpx.ConnectTimeout("timed out")],
    )
    async def test_auth_service_unreachable(self, vaultkeeper, error):
        vaultkeeper.client._client.auth.get_user = AsyncMock(side_effect=error)

        with pytest.raises(StorageError):
            await vaultkeeper.sessions.get_user_id_from_token("token")

"""
Bearer token verification for Vaultkeeper.

Exchanges an access token for the stable Supabase user id. Roles are not
read here; the operations facade resolves them per request.

Wraps: supabase_auth._async.gotrue_client.AsyncGoTrueClient.get_user
"""

import logging
from typing import Optional
from uuid import UUID

import httpx
from supabase_auth.errors import AuthApiError, AuthRetryableError

from ..exceptions import StorageError

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Verifies bearer credentials against Supabase Auth.

    Example:
        ```python
        user_id = await vk.sessions.get_user_id_from_token(access_token)
        if user_id is None:
            ...  # reject: not authenticated
        ```
    """

    def __init__(self, vaultkeeper) -> None:
        """
        Initialize SessionManager.

        Args:
            vaultkeeper: Main Vaultkeeper client instance
        """
        self.vaultkeeper = vaultkeeper
        self.client = vaultkeeper.client

    async def get_user_id_from_token(self, token: str) -> Optional[UUID]:
        """
        Get the user id an access token belongs to.

        Args:
            token: JWT access token (with or without a "Bearer " prefix)

        Returns:
            User UUID if the token is valid, None otherwise

        Raises:
            StorageError: If the auth service cannot be reached
        """
        token = token.removeprefix("Bearer ").strip()
        if not token:
            return None

        try:
            response = await self.client.auth.get_user(token)
        except AuthApiError as e:
            logger.info("Rejected bearer token: %s", e.message)
            return None
        except (AuthRetryableError, httpx.HTTPError) as e:
            raise StorageError(f"Failed to verify token: {e}") from e

        if not response or not response.user:
            return None

        return UUID(str(response.user.id))

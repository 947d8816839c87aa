"""
Profile management for Vaultkeeper.

Handles reads and upserts on the profiles table.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from ..exceptions import StorageError
from ..utils.supabase import run_query
from .models import Profile, UpdateProfileRequest

if TYPE_CHECKING:
    from ..client import Vaultkeeper


class ProfileManager:
    """
    Manager for profile rows.

    Example:
        ```python
        profile = await vk.profiles.get(user_id)
        profile = await vk.profiles.upsert(
            user_id, UpdateProfileRequest(display_name="Jane")
        )
        ```
    """

    def __init__(self, vaultkeeper: "Vaultkeeper") -> None:
        """
        Initialize ProfileManager.

        Args:
            vaultkeeper: Vaultkeeper client instance
        """
        self.vaultkeeper = vaultkeeper
        self.client = vaultkeeper.client

    async def get(self, user_id: UUID) -> Optional[Profile]:
        """
        Get a user's profile.

        Args:
            user_id: User UUID

        Returns:
            Profile if one exists, None otherwise
        """
        result = await run_query(
            self.client.table("profiles").select("*").eq("id", str(user_id)).execute(),
            "load profile",
        )

        if not result.data:
            return None

        return self._parse_profile(result.data[0])

    async def upsert(self, user_id: UUID, request: UpdateProfileRequest) -> Profile:
        """
        Create or update a user's profile.

        Only fields set on the request are written.

        Args:
            user_id: User UUID
            request: Fields to change

        Returns:
            The stored Profile
        """
        data = {"id": str(user_id), "updated_at": datetime.now(timezone.utc).isoformat()}
        data.update(request.model_dump(exclude_unset=True))

        result = await run_query(
            self.client.table("profiles").upsert(data).execute(),
            "update profile",
        )

        if not result.data:
            raise StorageError("Failed to update profile: no row returned")

        return self._parse_profile(result.data[0])

    def _parse_profile(self, data: dict) -> Profile:
        """Parse database row into Profile model."""
        return Profile(
            id=UUID(data["id"]),
            display_name=data.get("display_name"),
            avatar_url=data.get("avatar_url"),
            created_at=datetime.fromisoformat(data["created_at"].replace("Z", "+00:00")),
            updated_at=datetime.fromisoformat(data["updated_at"].replace("Z", "+00:00")),
        )

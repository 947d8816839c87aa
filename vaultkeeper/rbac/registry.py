"""
Role registry for Vaultkeeper.

Resolves users to their role sets and maintains the user_roles table.
"""

import logging
from collections import defaultdict
from datetime import datetime
from typing import TYPE_CHECKING, Dict, FrozenSet, List, Set
from uuid import UUID

import httpx
from postgrest.exceptions import APIError

from ..exceptions import StorageError
from ..utils.supabase import run_query
from .models import Role, RoleChange, UserRole, UserSummary, parse_roles

if TYPE_CHECKING:
    from ..client import Vaultkeeper

logger = logging.getLogger(__name__)

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


class RoleRegistry:
    """
    Manager for role assignments.

    Works directly with the user_roles table via PostgREST. A (user, role)
    pair is stored at most once; the table's unique constraint enforces it.

    Example:
        ```python
        vk = await Vaultkeeper.create()

        roles = await vk.roles.get_roles(user_id)
        # frozenset({<Role.VAULT_USER: 'vault_user'>})

        await vk.roles.assign(user_id, Role.VIEWER)
        await vk.roles.remove(user_id, Role.VIEWER)
        ```

    Note:
        This is the storage layer. Authorization for assign/remove lives in
        the operations facade (``vk.operations.assign_role``).
    """

    def __init__(self, vaultkeeper: "Vaultkeeper") -> None:
        """
        Initialize RoleRegistry.

        Args:
            vaultkeeper: Vaultkeeper client instance
        """
        self.vaultkeeper = vaultkeeper
        self.client = vaultkeeper.client

    async def get_roles(self, user_id: UUID) -> FrozenSet[Role]:
        """
        Get the current role set of a user.

        Args:
            user_id: User UUID

        Returns:
            Frozen set of roles; empty if the user holds none
        """
        result = await run_query(
            self.client.table("user_roles").select("role").eq("user_id", str(user_id)).execute(),
            "load roles",
        )

        if not result.data:
            return frozenset()

        return parse_roles(row.get("role") for row in result.data)

    async def list_assignments(self, user_id: UUID) -> List[UserRole]:
        """
        List the raw role rows of a user.

        Args:
            user_id: User UUID

        Returns:
            List of UserRole rows (unknown labels skipped)
        """
        result = await run_query(
            self.client.table("user_roles").select("*").eq("user_id", str(user_id)).execute(),
            "list role assignments",
        )

        rows = []
        for data in result.data or []:
            if data.get("role") not in Role._value2member_map_:
                continue
            rows.append(self._parse_user_role(data))
        return rows

    async def assign(self, user_id: UUID, role: Role) -> RoleChange:
        """
        Assign a role to a user.

        Assigning a role the user already holds is a successful no-op.

        Args:
            user_id: User UUID
            role: Role to grant

        Returns:
            RoleChange with ``changed=False`` if the role was already held

        Raises:
            StorageError: If the insert fails for any other reason
        """
        try:
            await self.client.table("user_roles").insert(
                {"user_id": str(user_id), "role": role.value}
            ).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                logger.debug("Role %s already assigned to %s", role.value, user_id)
                return RoleChange(user_id=user_id, role=role, changed=False)
            raise StorageError(f"Failed to assign role: {e}") from e
        except httpx.HTTPError as e:
            raise StorageError(f"Failed to assign role: {e}") from e

        return RoleChange(user_id=user_id, role=role, changed=True)

    async def remove(self, user_id: UUID, role: Role) -> RoleChange:
        """
        Remove a role from a user.

        Args:
            user_id: User UUID
            role: Role to revoke

        Returns:
            RoleChange with ``changed=False`` if the user did not hold the role
        """
        result = await run_query(
            self.client.table("user_roles").delete().eq(
                "user_id", str(user_id)
            ).eq("role", role.value).execute(),
            "remove role",
        )

        return RoleChange(user_id=user_id, role=role, changed=bool(result.data))

    async def list_users(self) -> List[UserSummary]:
        """
        List every profile together with its roles.

        Returns:
            List of UserSummary, one per profile
        """
        profiles = await run_query(
            self.client.table("profiles").select("*").order("created_at").execute(),
            "list users",
        )
        assignments = await run_query(
            self.client.table("user_roles").select("user_id, role").execute(),
            "list role assignments",
        )

        roles_by_user: Dict[str, Set[str]] = defaultdict(set)
        for row in assignments.data or []:
            roles_by_user[row["user_id"]].add(row["role"])

        users = []
        for data in profiles.data or []:
            roles = parse_roles(roles_by_user.get(data["id"], ()))
            users.append(
                UserSummary(
                    id=UUID(data["id"]),
                    display_name=data.get("display_name"),
                    avatar_url=data.get("avatar_url"),
                    roles=sorted(roles, key=lambda r: r.value),
                    created_at=_parse_timestamp(data.get("created_at")),
                    updated_at=_parse_timestamp(data.get("updated_at")),
                )
            )
        return users

    def _parse_user_role(self, data: dict) -> UserRole:
        """Parse database row into UserRole model."""
        return UserRole(
            id=UUID(data["id"]) if data.get("id") else None,
            user_id=UUID(data["user_id"]),
            role=Role(data["role"]),
            created_at=_parse_timestamp(data.get("created_at")),
        )


def _parse_timestamp(value):
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))

"""
Vaultkeeper RBAC models.

Roles are independent capability flags. A user holds an unordered set of
them and every rule combines them with OR.
"""

from datetime import datetime
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class Role(str, Enum):
    """The closed set of role labels."""

    ADMIN = "admin"
    VAULT_USER = "vault_user"
    VIEWER = "viewer"


class Subject(BaseModel):
    """
    An authenticated caller: a user id plus the roles it currently holds.

    Built by the facade from the Role Registry for every request.
    """

    user_id: UUID
    roles: FrozenSet[Role] = Field(default_factory=frozenset)

    model_config = {"frozen": True}

    def has_role(self, role: Role) -> bool:
        return role in self.roles

    def has_any_role(self, *roles: Role) -> bool:
        return any(role in self.roles for role in roles)

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles


class UserRole(BaseModel):
    """A row of the user_roles table: one (user, role) assignment."""

    id: Optional[UUID] = None
    user_id: UUID
    role: Role
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "user_id": "456e7890-e89b-12d3-a456-426614174000",
                "role": "vault_user",
                "created_at": "2024-01-01T00:00:00Z",
            }
        },
    }


class RoleChangeRequest(BaseModel):
    """Request model for assigning or removing a role."""

    user_id: UUID
    role: Role


class RoleChange(BaseModel):
    """
    Outcome of an assign/remove call.

    ``changed`` is False when the assignment already existed (assign) or
    was already absent (remove).
    """

    user_id: UUID
    role: Role
    changed: bool = True


class UserSummary(BaseModel):
    """A user as seen by an admin: profile fields plus current roles."""

    id: UUID
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    roles: List[Role] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def parse_roles(labels: Iterable[Optional[str]]) -> FrozenSet[Role]:
    """
    Convert stored role labels to a frozen set of Role.

    Labels outside the closed set grant nothing and are dropped.

    Examples:
        >>> sorted(r.value for r in parse_roles(["admin", "viewer", "admin"]))
        ['admin', 'viewer']
        >>> parse_roles(["superuser"])
        frozenset()
    """
    roles = set()
    for label in labels:
        try:
            roles.add(Role(label))
        except ValueError:
            continue
    return frozenset(roles)

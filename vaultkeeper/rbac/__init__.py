"""
Vaultkeeper RBAC module.

Role labels, subjects and the role registry.
"""

from .models import (
    Role,
    RoleChange,
    RoleChangeRequest,
    Subject,
    UserRole,
    UserSummary,
    parse_roles,
)
from .registry import RoleRegistry

__all__ = [
    # Registry
    "RoleRegistry",
    # Models
    "Role",
    "Subject",
    "UserRole",
    "UserSummary",
    "RoleChange",
    "RoleChangeRequest",
    # Utility functions
    "parse_roles",
]

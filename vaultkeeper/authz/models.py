"""
Authorization models.

Operations the engine knows about, the reasons it can deny them, and the
verdict it returns.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Operation(str, Enum):
    """Operations guarded by the authorization engine."""

    LIST_VAULTS = "list_vaults"
    CREATE_VAULT = "create_vault"
    TOGGLE_VAULT = "toggle_vault"
    READ_SECRETS = "read_secrets"
    WRITE_SECRET = "write_secret"
    ASSIGN_ROLE = "assign_role"
    REMOVE_ROLE = "remove_role"
    LIST_USERS = "list_users"

    @property
    def is_vault_scoped(self) -> bool:
        """True if deciding this operation needs a vault record."""
        return self in VAULT_SCOPED_OPERATIONS


VAULT_SCOPED_OPERATIONS = frozenset(
    {Operation.TOGGLE_VAULT, Operation.READ_SECRETS, Operation.WRITE_SECRET}
)


class DenyReason(str, Enum):
    """Why a verdict is Deny."""

    NOT_AUTHENTICATED = "not_authenticated"
    INSUFFICIENT_ROLE = "insufficient_role"
    NOT_OWNER = "not_owner"
    VAULT_CLOSED = "vault_closed"
    VAULT_NOT_FOUND = "vault_not_found"


class ListScope(str, Enum):
    """Which vaults a listVaults call may see."""

    ALL = "all"
    OWNED = "owned"


class Verdict(BaseModel):
    """
    Outcome of one authorization decision.

    Example:
        ```python
        verdict = decide(Operation.WRITE_SECRET, subject, vault)
        if not verdict:
            print(verdict.reason)  # DenyReason.VAULT_CLOSED
        ```
    """

    operation: Operation
    allowed: bool
    reason: Optional[DenyReason] = None

    model_config = {"frozen": True}

    @classmethod
    def allow(cls, operation: Operation) -> "Verdict":
        return cls(operation=operation, allowed=True)

    @classmethod
    def deny(cls, operation: Operation, reason: DenyReason) -> "Verdict":
        return cls(operation=operation, allowed=False, reason=reason)

    def __bool__(self) -> bool:
        return self.allowed

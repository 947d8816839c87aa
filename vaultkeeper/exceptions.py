"""
Vaultkeeper exceptions.

Callers can tell "denied" (AccessDenied, VaultNotFound), "bad request"
(ValidationError) and "broken" (StorageError) apart by type.
"""

from typing import TYPE_CHECKING, Any, Optional, Union
from uuid import UUID

if TYPE_CHECKING:
    from .authz.models import DenyReason, Verdict


class VaultkeeperError(Exception):
    """Base class for every error raised by Vaultkeeper."""


class AccessDenied(VaultkeeperError, PermissionError):
    """
    The authorization engine returned a Deny verdict.

    The verdict is carried as-is so transports can map ``reason`` to
    their own responses.
    """

    def __init__(self, verdict: "Verdict") -> None:
        self.verdict = verdict
        super().__init__(f"{verdict.operation.value} denied: {verdict.reason.value}")

    @property
    def reason(self) -> Optional["DenyReason"]:
        return self.verdict.reason


class VaultNotFound(VaultkeeperError, LookupError):
    """The requested vault does not exist."""

    def __init__(self, vault_id: Union[UUID, str, None]) -> None:
        self.vault_id = vault_id
        super().__init__(f"Vault not found: {vault_id}")

    @property
    def reason(self) -> "DenyReason":
        from .authz.models import DenyReason

        return DenyReason.VAULT_NOT_FOUND


class ValidationError(VaultkeeperError, ValueError):
    """A required field is missing or an enum value is invalid."""

    def __init__(self, message: str, errors: Optional[list[dict[str, Any]]] = None) -> None:
        self.errors = errors or []
        super().__init__(message)

    @classmethod
    def from_pydantic(cls, exc: Any) -> "ValidationError":
        """Build from a pydantic ValidationError, keeping its error list."""
        errors = exc.errors(include_url=False, include_input=False)
        fields = ", ".join(
            ".".join(str(part) for part in error.get("loc", ())) or "body"
            for error in errors
        )
        return cls(f"Invalid request: {fields}", errors=errors)


class StorageError(VaultkeeperError):
    """The durable store failed; distinct from an authorization failure."""


class ConcurrentModificationError(StorageError):
    """A vault kept changing underneath a toggle."""

"""
Authorization engine.

A pure decision function: (operation, subject, vault) -> Verdict. No I/O,
no logging, no state. Every rule lives here and nowhere else; the
operations facade, the HTTP adapter and the CLI all go through ``decide``.

Roles are additive: holding any qualifying role is enough. WRITE_SECRET is
the one rule that also depends on mutable vault state.
"""

from typing import Callable, Dict, Optional

from ..rbac.models import Role, Subject
from ..vaults.models import VaultRecord
from .models import DenyReason, ListScope, Operation, Verdict

Rule = Callable[[Subject, Optional[VaultRecord]], Optional[DenyReason]]

VAULT_WRITERS = (Role.ADMIN, Role.VAULT_USER)
SECRET_READERS = (Role.ADMIN, Role.VIEWER, Role.VAULT_USER)


def _always(subject: Subject, vault: Optional[VaultRecord]) -> Optional[DenyReason]:
    return None


def _can_create_vault(subject: Subject, vault: Optional[VaultRecord]) -> Optional[DenyReason]:
    if not subject.has_any_role(*VAULT_WRITERS):
        return DenyReason.INSUFFICIENT_ROLE
    return None


def _can_toggle_vault(subject: Subject, vault: VaultRecord) -> Optional[DenyReason]:
    if not subject.has_any_role(*VAULT_WRITERS):
        return DenyReason.INSUFFICIENT_ROLE
    # A vault_user who does not own the vault may not toggle it.
    if not (vault.is_owned_by(subject.user_id) or subject.is_admin):
        return DenyReason.NOT_OWNER
    return None


def _can_read_secrets(subject: Subject, vault: VaultRecord) -> Optional[DenyReason]:
    if vault.is_owned_by(subject.user_id) or subject.has_any_role(*SECRET_READERS):
        return None
    return DenyReason.INSUFFICIENT_ROLE


def _can_write_secret(subject: Subject, vault: VaultRecord) -> Optional[DenyReason]:
    # State gate first: a closed vault refuses every writer alike.
    if not vault.is_open:
        return DenyReason.VAULT_CLOSED
    if not subject.has_any_role(*VAULT_WRITERS):
        return DenyReason.INSUFFICIENT_ROLE
    return None


def _admin_only(subject: Subject, vault: Optional[VaultRecord]) -> Optional[DenyReason]:
    if not subject.is_admin:
        return DenyReason.INSUFFICIENT_ROLE
    return None


RULES: Dict[Operation, Rule] = {
    Operation.LIST_VAULTS: _always,
    Operation.CREATE_VAULT: _can_create_vault,
    Operation.TOGGLE_VAULT: _can_toggle_vault,
    Operation.READ_SECRETS: _can_read_secrets,
    Operation.WRITE_SECRET: _can_write_secret,
    Operation.ASSIGN_ROLE: _admin_only,
    Operation.REMOVE_ROLE: _admin_only,
    Operation.LIST_USERS: _admin_only,
}


def decide(
    operation: Operation,
    subject: Optional[Subject],
    vault: Optional[VaultRecord] = None,
) -> Verdict:
    """
    Decide whether ``subject`` may perform ``operation``.

    Args:
        operation: The requested operation
        subject: The caller, or None if it could not be authenticated
        vault: The target vault snapshot (required for vault-scoped operations)

    Returns:
        Verdict; a Deny carries the first failing check's reason

    Raises:
        ValueError: If a vault-scoped operation is decided without a vault.
            A missing vault is reported by the caller as VAULT_NOT_FOUND
            before the engine is consulted.

    Examples:
        >>> from uuid import uuid4
        >>> decide(Operation.CREATE_VAULT, Subject(user_id=uuid4())).reason
        <DenyReason.INSUFFICIENT_ROLE: 'insufficient_role'>
        >>> bool(decide(Operation.LIST_VAULTS, Subject(user_id=uuid4())))
        True
    """
    operation = Operation(operation)

    if subject is None:
        return Verdict.deny(operation, DenyReason.NOT_AUTHENTICATED)

    if operation.is_vault_scoped and vault is None:
        raise ValueError(f"{operation.value} requires a vault record")

    reason = RULES[operation](subject, vault)
    if reason is not None:
        return Verdict.deny(operation, reason)
    return Verdict.allow(operation)


def vault_list_scope(subject: Subject) -> ListScope:
    """
    Which vaults a subject sees when listing.

    Admins see every vault; everyone else sees only the vaults they own.
    """
    return ListScope.ALL if subject.is_admin else ListScope.OWNED

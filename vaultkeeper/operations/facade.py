"""
Vault and secret operations.

Every request goes through the same steps: resolve the caller's roles,
resolve the vault (if any), ask the authorization engine, record the
decision, and only on Allow touch the store. Denials are raised as
AccessDenied carrying the engine's verdict unchanged.
"""

import logging
from typing import TYPE_CHECKING, List, Optional, Type, TypeVar, Union
from uuid import UUID

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..authz import DenyReason, ListScope, Operation, Verdict, decide, vault_list_scope
from ..exceptions import AccessDenied, ConcurrentModificationError, ValidationError, VaultNotFound
from ..profiles.models import Profile, UpdateProfileRequest
from ..rbac.models import Role, RoleChange, RoleChangeRequest, Subject, UserSummary
from ..secrets.models import CreateSecretRequest, SecretType, VaultSecret, VaultSecrets
from ..vaults.models import CreateVaultRequest, VaultRecord

if TYPE_CHECKING:
    from ..client import Vaultkeeper

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT", bound=BaseModel)
IdLike = Union[UUID, str]


class VaultOperations:
    """
    Guarded vault, secret and role operations.

    This is the only component that writes vaults, secrets or role
    assignments. Pass ``user_id=None`` for a caller whose credential could
    not be verified; every operation then fails with NOT_AUTHENTICATED.

    Example:
        ```python
        vk = await Vaultkeeper.create()

        vault = await vk.operations.create_vault(user_id, name="Finance")
        vault = await vk.operations.toggle_vault(user_id, vault.id)  # now open
        secret = await vk.operations.write_secret(
            user_id, vault.id, key="API_KEY", value="sk_live_…"
        )

        try:
            await vk.operations.toggle_vault(other_user_id, vault.id)
        except AccessDenied as e:
            print(e.reason)  # DenyReason.NOT_OWNER
        ```
    """

    def __init__(self, vaultkeeper: "Vaultkeeper") -> None:
        """
        Initialize VaultOperations.

        Args:
            vaultkeeper: Vaultkeeper client instance
        """
        self.vaultkeeper = vaultkeeper

    @property
    def decisions(self):
        return self.vaultkeeper.decisions

    # Vaults

    async def list_vaults(self, user_id: Optional[IdLike]) -> List[VaultRecord]:
        """
        List the vaults a user may see.

        Admins see every vault; everyone else sees the vaults they own.

        Args:
            user_id: Caller

        Returns:
            List of VaultRecord (order is not significant)
        """
        subject = await self._resolve_subject(Operation.LIST_VAULTS, user_id)
        self._authorize(Operation.LIST_VAULTS, subject)

        scope = vault_list_scope(subject)
        owner_id = None if scope is ListScope.ALL else subject.user_id
        return await self.vaultkeeper.vaults.list(owner_id=owner_id)

    async def create_vault(
        self,
        user_id: Optional[IdLike],
        name: Optional[str],
        description: Optional[str] = None,
    ) -> VaultRecord:
        """
        Create a closed vault owned by the caller.

        Args:
            user_id: Caller; needs admin or vault_user
            name: Vault name (required, non-empty)
            description: Optional description

        Returns:
            Created VaultRecord with ``is_open=False``

        Raises:
            AccessDenied: INSUFFICIENT_ROLE
            ValidationError: If name is missing or empty
        """
        subject = await self._resolve_subject(Operation.CREATE_VAULT, user_id)
        self._authorize(Operation.CREATE_VAULT, subject)

        request = _validate(CreateVaultRequest, name=name, description=description)
        vault = await self.vaultkeeper.vaults.create(subject.user_id, request)

        logger.debug("Vault %s created by %s", vault.id, subject.user_id)
        return vault

    async def toggle_vault(self, user_id: Optional[IdLike], vault_id: IdLike) -> VaultRecord:
        """
        Flip a vault between open and closed.

        The flip only applies if the vault still has the state the decision
        was made against; otherwise the decision is re-made on a fresh read.

        Args:
            user_id: Caller; needs admin or vault_user, and ownership unless admin
            vault_id: Vault to toggle

        Returns:
            Updated VaultRecord

        Raises:
            AccessDenied: INSUFFICIENT_ROLE or NOT_OWNER
            VaultNotFound: If the vault does not exist or vault_id is not a UUID
            ConcurrentModificationError: If the vault kept changing
        """
        subject = await self._resolve_subject(Operation.TOGGLE_VAULT, user_id)
        vault_id = self._vault_id(Operation.TOGGLE_VAULT, subject, vault_id)

        attempts = self.vaultkeeper.config.toggle_max_attempts
        for _ in range(attempts):
            vault = await self._load_vault(Operation.TOGGLE_VAULT, subject, vault_id)
            self._authorize(Operation.TOGGLE_VAULT, subject, vault=vault)

            updated = await self.vaultkeeper.vaults.flip(vault)
            if updated is not None:
                logger.debug(
                    "Vault %s is now %s (by %s)", vault_id, updated.state.value, subject.user_id
                )
                return updated

        raise ConcurrentModificationError(
            f"Vault {vault_id} changed during {attempts} toggle attempt(s)"
        )

    # Secrets

    async def list_secrets(self, user_id: Optional[IdLike], vault_id: IdLike) -> VaultSecrets:
        """
        Read all secrets of a vault.

        Args:
            user_id: Caller; the owner or any of admin, viewer, vault_user
            vault_id: Vault to read

        Returns:
            VaultSecrets with the vault summary and its secrets

        Raises:
            AccessDenied: INSUFFICIENT_ROLE
            VaultNotFound: If the vault does not exist or vault_id is not a UUID
        """
        subject = await self._resolve_subject(Operation.READ_SECRETS, user_id)
        vault_id = self._vault_id(Operation.READ_SECRETS, subject, vault_id)

        vault = await self._load_vault(Operation.READ_SECRETS, subject, vault_id)
        self._authorize(Operation.READ_SECRETS, subject, vault=vault)

        secrets = await self.vaultkeeper.secrets.list_by_vault(vault.id)
        return VaultSecrets(vault=vault, secrets=secrets)

    async def write_secret(
        self,
        user_id: Optional[IdLike],
        vault_id: IdLike,
        key: Optional[str],
        value: Optional[str],
        secret_type: Union[SecretType, str, None] = SecretType.TEXT,
    ) -> VaultSecret:
        """
        Write a secret into an open vault.

        Args:
            user_id: Caller; needs admin or vault_user
            vault_id: Target vault; must be open
            key: Secret key (required); duplicates within a vault are allowed
            value: Secret value (required)
            secret_type: One of text, password, api_key, certificate

        Returns:
            Created VaultSecret

        Raises:
            AccessDenied: VAULT_CLOSED or INSUFFICIENT_ROLE
            VaultNotFound: If the vault does not exist or vault_id is not a UUID
            ValidationError: If key/value are missing or secret_type is unknown
        """
        subject = await self._resolve_subject(Operation.WRITE_SECRET, user_id)
        vault_id = self._vault_id(Operation.WRITE_SECRET, subject, vault_id)

        vault = await self._load_vault(Operation.WRITE_SECRET, subject, vault_id)
        self._authorize(Operation.WRITE_SECRET, subject, vault=vault)

        request = _validate(
            CreateSecretRequest,
            key=key,
            value=value,
            secret_type=secret_type or SecretType.TEXT,
        )

        secret = await self.vaultkeeper.secrets.insert_if_open(vault.id, request, subject.user_id)
        if secret is None:
            # The vault closed (or vanished) between the decision and the insert.
            current = await self.vaultkeeper.vaults.get(vault.id)
            reason = DenyReason.VAULT_NOT_FOUND if current is None else DenyReason.VAULT_CLOSED
            verdict = Verdict.deny(Operation.WRITE_SECRET, reason)
            self.decisions.record(verdict, subject, vault_id=vault.id, stage="commit")
            if current is None:
                raise VaultNotFound(vault.id)
            raise AccessDenied(verdict)

        logger.debug("Secret %s written to vault %s by %s", secret.id, vault.id, subject.user_id)
        return secret

    # Roles and users

    async def assign_role(
        self,
        user_id: Optional[IdLike],
        target_user_id: Optional[IdLike],
        role: Union[Role, str, None],
    ) -> RoleChange:
        """
        Grant a role to a user. Granting a role already held is a no-op.

        Args:
            user_id: Caller; needs admin
            target_user_id: User receiving the role
            role: admin, vault_user or viewer

        Returns:
            RoleChange (``changed=False`` for a duplicate)

        Raises:
            AccessDenied: INSUFFICIENT_ROLE
            ValidationError: If the target or role is missing or unknown
        """
        subject = await self._resolve_subject(Operation.ASSIGN_ROLE, user_id)
        request = self._role_request(Operation.ASSIGN_ROLE, subject, target_user_id, role)

        change = await self.vaultkeeper.roles.assign(request.user_id, request.role)
        logger.debug(
            "Role %s assigned to %s by %s (changed=%s)",
            change.role.value, change.user_id, subject.user_id, change.changed,
        )
        return change

    async def remove_role(
        self,
        user_id: Optional[IdLike],
        target_user_id: Optional[IdLike],
        role: Union[Role, str, None],
    ) -> RoleChange:
        """
        Revoke a role from a user.

        Args:
            user_id: Caller; needs admin
            target_user_id: User losing the role
            role: admin, vault_user or viewer

        Returns:
            RoleChange (``changed=False`` if the role was not held)

        Raises:
            AccessDenied: INSUFFICIENT_ROLE
            ValidationError: If the target or role is missing or unknown
        """
        subject = await self._resolve_subject(Operation.REMOVE_ROLE, user_id)
        request = self._role_request(Operation.REMOVE_ROLE, subject, target_user_id, role)

        change = await self.vaultkeeper.roles.remove(request.user_id, request.role)
        logger.debug(
            "Role %s removed from %s by %s (changed=%s)",
            change.role.value, change.user_id, subject.user_id, change.changed,
        )
        return change

    async def list_users(self, user_id: Optional[IdLike]) -> List[UserSummary]:
        """
        List every user with their roles. Admin only.

        Raises:
            AccessDenied: INSUFFICIENT_ROLE
        """
        subject = await self._resolve_subject(Operation.LIST_USERS, user_id)
        self._authorize(Operation.LIST_USERS, subject)

        return await self.vaultkeeper.roles.list_users()

    # Profiles (no authorization relevance; a caller only sees its own)

    async def get_profile(self, user_id: IdLike) -> Optional[Profile]:
        """Get the caller's own profile."""
        return await self.vaultkeeper.profiles.get(_as_uuid(user_id, "user_id"))

    async def update_profile(
        self,
        user_id: IdLike,
        display_name: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> Profile:
        """Create or update the caller's own profile."""
        fields = {}
        if display_name is not None:
            fields["display_name"] = display_name
        if avatar_url is not None:
            fields["avatar_url"] = avatar_url
        request = _validate(UpdateProfileRequest, **fields)
        return await self.vaultkeeper.profiles.upsert(_as_uuid(user_id, "user_id"), request)

    # Internals

    async def _resolve_subject(
        self, operation: Operation, user_id: Optional[IdLike]
    ) -> Subject:
        """Build the caller's Subject; unauthenticated callers are denied here."""
        if user_id is None:
            self._authorize(operation, None)

        user_id = _as_uuid(user_id, "user_id")
        roles = await self.vaultkeeper.roles.get_roles(user_id)
        return Subject(user_id=user_id, roles=roles)

    def _vault_id(self, operation: Operation, subject: Subject, vault_id: IdLike) -> UUID:
        # An id that cannot name a vault is reported like any other missing vault
        try:
            return _as_uuid(vault_id, "vault_id")
        except ValidationError:
            self.decisions.record(Verdict.deny(operation, DenyReason.VAULT_NOT_FOUND), subject)
            raise VaultNotFound(vault_id) from None

    async def _load_vault(
        self, operation: Operation, subject: Subject, vault_id: UUID
    ) -> VaultRecord:
        vault = await self.vaultkeeper.vaults.get(vault_id)
        if vault is None:
            self.decisions.record(
                Verdict.deny(operation, DenyReason.VAULT_NOT_FOUND), subject, vault_id=vault_id
            )
            raise VaultNotFound(vault_id)
        return vault

    def _authorize(
        self,
        operation: Operation,
        subject: Optional[Subject],
        vault: Optional[VaultRecord] = None,
        target_user_id: Optional[UUID] = None,
    ) -> Verdict:
        verdict = decide(operation, subject, vault)
        self.decisions.record(
            verdict,
            subject,
            vault_id=vault.id if vault else None,
            target_user_id=target_user_id,
        )
        if not verdict:
            raise AccessDenied(verdict)
        return verdict

    def _role_request(
        self,
        operation: Operation,
        subject: Subject,
        target_user_id: Optional[IdLike],
        role: Union[Role, str, None],
    ) -> RoleChangeRequest:
        # Malformed targets are still authorized first, then rejected
        try:
            target = _as_uuid(target_user_id, "target_user_id")
        except ValidationError:
            target = None
        self._authorize(operation, subject, target_user_id=target)
        return _validate(RoleChangeRequest, user_id=target_user_id, role=role)


def _validate(model: Type[RequestT], **data) -> RequestT:
    """Build a request model, translating pydantic errors to ValidationError."""
    try:
        return model(**data)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e


def _as_uuid(value: Optional[IdLike], field: str) -> UUID:
    if isinstance(value, UUID):
        return value
    if not value:
        raise ValidationError(f"{field} is required")
    try:
        return UUID(str(value))
    except ValueError as e:
        raise ValidationError(f"Invalid {field}: {value}") from e

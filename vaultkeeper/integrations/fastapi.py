"""
FastAPI integration for Vaultkeeper.

Exposes the operations facade over HTTP. Routes contain no authorization
logic: they authenticate the bearer token, call ``vk.operations`` and map
Vaultkeeper errors to status codes.

Example:
    ```python
    from fastapi import FastAPI
    from vaultkeeper.integrations.fastapi import VaultkeeperFastAPI

    integration = VaultkeeperFastAPI()
    app = FastAPI(lifespan=integration.lifespan)
    app.include_router(integration.router(), prefix="/api")
    ```
"""

from contextlib import asynccontextmanager
from typing import Any, Callable, Dict, Optional
from uuid import UUID

try:
    from fastapi import APIRouter, Depends, FastAPI, HTTPException
    from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
except ImportError:
    raise ImportError(
        "FastAPI is required for this integration. "
        "Install it with: pip install vaultkeeper[fastapi]"
    )

from pydantic import BaseModel

from ..authz.models import DenyReason
from ..client import Vaultkeeper
from ..exceptions import AccessDenied, StorageError, ValidationError, VaultNotFound
from ..secrets.models import VaultSecret

# Security scheme
security = HTTPBearer(auto_error=False)

# Closed vaults are a bad request, not a permission problem
DENY_STATUS: Dict[DenyReason, int] = {
    DenyReason.NOT_AUTHENTICATED: 401,
    DenyReason.INSUFFICIENT_ROLE: 403,
    DenyReason.NOT_OWNER: 403,
    DenyReason.VAULT_CLOSED: 400,
    DenyReason.VAULT_NOT_FOUND: 404,
}


class CreateVaultBody(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class WriteSecretBody(BaseModel):
    key: Optional[str] = None
    value: Optional[str] = None
    secret_type: Optional[str] = None


class AssignRoleBody(BaseModel):
    role: Optional[str] = None


class UpdateProfileBody(BaseModel):
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None


def to_http_exception(exc: Exception) -> HTTPException:
    """
    Map a Vaultkeeper error to an HTTPException.

    AccessDenied uses its deny reason, VaultNotFound is 404, validation
    errors are 400 and storage failures are 500.
    """
    if isinstance(exc, AccessDenied):
        status = DENY_STATUS.get(exc.reason, 403)
        headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
        return HTTPException(
            status_code=status,
            detail={"error": exc.reason.value, "operation": exc.verdict.operation.value},
            headers=headers,
        )
    if isinstance(exc, VaultNotFound):
        return HTTPException(status_code=404, detail={"error": DenyReason.VAULT_NOT_FOUND.value})
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=400, detail={"error": "validation_error", "message": str(exc)})
    if isinstance(exc, StorageError):
        return HTTPException(status_code=500, detail={"error": "storage_error"})
    raise exc


def secret_payload(secret: VaultSecret) -> Dict[str, Any]:
    """Serialize a secret for the response body, value included."""
    data = secret.model_dump(mode="json")
    data["value"] = secret.reveal()
    return data


class VaultkeeperFastAPI:
    """
    FastAPI integration for Vaultkeeper.

    Provides:
    - Vaultkeeper client lifecycle (``lifespan``)
    - ``require_auth`` dependency resolving a bearer token to a user id
    - A router exposing the vault, secret, role and profile operations

    Example:
        ```python
        integration = VaultkeeperFastAPI()
        app = FastAPI(lifespan=integration.lifespan)
        app.include_router(integration.router())

        # Or with an existing client (tests, custom wiring)
        integration = VaultkeeperFastAPI(vaultkeeper=vk)
        ```
    """

    def __init__(
        self,
        vaultkeeper: Optional[Vaultkeeper] = None,
        supabase_url: Optional[str] = None,
        supabase_key: Optional[str] = None,
    ) -> None:
        """
        Initialize VaultkeeperFastAPI integration.

        Args:
            vaultkeeper: Existing client (skips setup/teardown)
            supabase_url: Supabase URL (optional, loads from env)
            supabase_key: Supabase key (optional, loads from env)
        """
        self.supabase_url = supabase_url
        self.supabase_key = supabase_key
        self._vaultkeeper = vaultkeeper
        self._owns_client = vaultkeeper is None

    async def setup(self) -> None:
        """Initialize the Vaultkeeper client."""
        if self._vaultkeeper is None:
            self._vaultkeeper = await Vaultkeeper.create(
                supabase_url=self.supabase_url,
                supabase_key=self.supabase_key,
            )

    async def teardown(self) -> None:
        """Close the Vaultkeeper client if this integration created it."""
        if self._vaultkeeper and self._owns_client:
            await self._vaultkeeper.close()
            self._vaultkeeper = None

    @asynccontextmanager
    async def lifespan(self, app: FastAPI):
        """Lifespan handler for ``FastAPI(lifespan=...)``."""
        await self.setup()
        try:
            yield
        finally:
            await self.teardown()

    @property
    def vaultkeeper(self) -> Vaultkeeper:
        """Get the Vaultkeeper instance."""
        if not self._vaultkeeper:
            raise RuntimeError("Vaultkeeper not initialized. Call setup() first.")
        return self._vaultkeeper

    def require_auth(self) -> Callable:
        """
        Dependency that requires a valid bearer token.

        Returns the caller's user id or raises 401.

        Example:
            ```python
            @app.get("/me")
            async def me(user_id: UUID = Depends(integration.require_auth())):
                return {"id": str(user_id)}
            ```
        """

        async def dependency(
            credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
        ) -> UUID:
            if not credentials:
                raise HTTPException(
                    status_code=401,
                    detail={"error": "No authorization header"},
                    headers={"WWW-Authenticate": "Bearer"},
                )

            try:
                user_id = await self.vaultkeeper.sessions.get_user_id_from_token(
                    credentials.credentials
                )
            except StorageError as e:
                raise to_http_exception(e)

            if not user_id:
                raise HTTPException(
                    status_code=401,
                    detail={"error": "Invalid or expired token"},
                    headers={"WWW-Authenticate": "Bearer"},
                )

            return user_id

        return dependency

    def router(self) -> APIRouter:
        """
        Build the API router.

        Routes:
            GET    /vaults
            POST   /vaults
            POST   /vaults/{vault_id}/toggle
            GET    /vaults/{vault_id}/secrets
            POST   /vaults/{vault_id}/secrets
            GET    /users
            POST   /users/{target_user_id}/roles
            DELETE /users/{target_user_id}/roles/{role}
            GET    /profile
            PATCH  /profile
        """
        router = APIRouter()
        auth = self.require_auth()

        @router.get("/vaults")
        async def list_vaults(user_id: UUID = Depends(auth)) -> Dict[str, Any]:
            try:
                vaults = await self.vaultkeeper.operations.list_vaults(user_id)
            except (AccessDenied, StorageError) as e:
                raise to_http_exception(e)
            return {"vaults": [v.model_dump(mode="json") for v in vaults]}

        @router.post("/vaults")
        async def create_vault(
            body: CreateVaultBody, user_id: UUID = Depends(auth)
        ) -> Dict[str, Any]:
            try:
                vault = await self.vaultkeeper.operations.create_vault(
                    user_id, name=body.name, description=body.description
                )
            except (AccessDenied, ValidationError, StorageError) as e:
                raise to_http_exception(e)
            return {"vault": vault.model_dump(mode="json")}

        @router.post("/vaults/{vault_id}/toggle")
        async def toggle_vault(vault_id: str, user_id: UUID = Depends(auth)) -> Dict[str, Any]:
            try:
                vault = await self.vaultkeeper.operations.toggle_vault(user_id, vault_id)
            except (AccessDenied, VaultNotFound, ValidationError, StorageError) as e:
                raise to_http_exception(e)
            return {"vault": vault.model_dump(mode="json")}

        @router.get("/vaults/{vault_id}/secrets")
        async def list_secrets(vault_id: str, user_id: UUID = Depends(auth)) -> Dict[str, Any]:
            try:
                result = await self.vaultkeeper.operations.list_secrets(user_id, vault_id)
            except (AccessDenied, VaultNotFound, ValidationError, StorageError) as e:
                raise to_http_exception(e)
            return {
                "vault": result.vault.model_dump(mode="json"),
                "secrets": [secret_payload(s) for s in result.secrets],
            }

        @router.post("/vaults/{vault_id}/secrets")
        async def write_secret(
            vault_id: str, body: WriteSecretBody, user_id: UUID = Depends(auth)
        ) -> Dict[str, Any]:
            try:
                secret = await self.vaultkeeper.operations.write_secret(
                    user_id,
                    vault_id,
                    key=body.key,
                    value=body.value,
                    secret_type=body.secret_type,
                )
            except (AccessDenied, VaultNotFound, ValidationError, StorageError) as e:
                raise to_http_exception(e)
            return {"secret": secret_payload(secret)}

        @router.get("/users")
        async def list_users(user_id: UUID = Depends(auth)) -> Dict[str, Any]:
            try:
                users = await self.vaultkeeper.operations.list_users(user_id)
            except (AccessDenied, StorageError) as e:
                raise to_http_exception(e)
            return {"users": [u.model_dump(mode="json") for u in users]}

        @router.post("/users/{target_user_id}/roles")
        async def assign_role(
            target_user_id: str, body: AssignRoleBody, user_id: UUID = Depends(auth)
        ) -> Dict[str, Any]:
            try:
                change = await self.vaultkeeper.operations.assign_role(
                    user_id, target_user_id, body.role
                )
            except (AccessDenied, ValidationError, StorageError) as e:
                raise to_http_exception(e)
            message = "Role assigned" if change.changed else "Role already assigned"
            return {"role": change.model_dump(mode="json"), "message": message}

        @router.delete("/users/{target_user_id}/roles/{role}")
        async def remove_role(
            target_user_id: str, role: str, user_id: UUID = Depends(auth)
        ) -> Dict[str, Any]:
            try:
                change = await self.vaultkeeper.operations.remove_role(
                    user_id, target_user_id, role
                )
            except (AccessDenied, ValidationError, StorageError) as e:
                raise to_http_exception(e)
            return {"role": change.model_dump(mode="json"), "message": "Role removed successfully"}

        @router.get("/profile")
        async def get_profile(user_id: UUID = Depends(auth)) -> Dict[str, Any]:
            try:
                profile = await self.vaultkeeper.operations.get_profile(user_id)
            except StorageError as e:
                raise to_http_exception(e)
            return {"profile": profile.model_dump(mode="json") if profile else None}

        @router.patch("/profile")
        async def update_profile(
            body: UpdateProfileBody, user_id: UUID = Depends(auth)
        ) -> Dict[str, Any]:
            try:
                profile = await self.vaultkeeper.operations.update_profile(
                    user_id, display_name=body.display_name, avatar_url=body.avatar_url
                )
            except (ValidationError, StorageError) as e:
                raise to_http_exception(e)
            return {"profile": profile.model_dump(mode="json")}

        return router

"""
FastAPI application example with Vaultkeeper integration.

Mounts the Vaultkeeper router under /api and adds one custom route that
reuses the bearer-token dependency.

Run with:
    uvicorn examples.fastapi_app:app --reload
"""

from uuid import UUID

from fastapi import Depends, FastAPI

from vaultkeeper.integrations.fastapi import VaultkeeperFastAPI

# =================================================================
# FastAPI App Setup
# =================================================================

integration = VaultkeeperFastAPI()

app = FastAPI(
    title="Vaultkeeper Example API",
    description="Vaults, secrets and roles behind Supabase Auth",
    version="1.0.0",
    lifespan=integration.lifespan,
)

app.include_router(integration.router(), prefix="/api")


# =================================================================
# Custom Routes
# =================================================================


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/api/me")
async def me(user_id: UUID = Depends(integration.require_auth())):
    roles = await integration.vaultkeeper.roles.get_roles(user_id)
    return {"id": str(user_id), "roles": sorted(role.value for role in roles)}

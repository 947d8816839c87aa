"""
Basic Vaultkeeper usage example.

This example walks through a vault's lifecycle:
- Granting roles (admin only)
- Creating a vault, which starts closed
- Opening it and writing secrets
- Reading secrets as a viewer
- What denials look like

Run with:
    VAULTKEEPER_ADMIN_ID=<uuid> VAULTKEEPER_USER_ID=<uuid> VAULTKEEPER_VIEWER_ID=<uuid> \
        python examples/basic_usage.py

The ids must be existing Supabase Auth users; the admin must already hold
the admin role (see ``vaultkeeper roles assign``).
"""

import asyncio
import logging
import os

from vaultkeeper import AccessDenied, Role, Vaultkeeper


async def main():
    logging.basicConfig(level=logging.INFO)

    admin_id = os.environ["VAULTKEEPER_ADMIN_ID"]
    user_id = os.environ["VAULTKEEPER_USER_ID"]
    viewer_id = os.environ["VAULTKEEPER_VIEWER_ID"]

    # Create Vaultkeeper client (loads config from .env)
    async with await Vaultkeeper.create() as vk:
        ops = vk.operations

        # =================================================================
        # 1. Grant roles
        # =================================================================
        print("Granting roles...")

        await ops.assign_role(admin_id, user_id, Role.VAULT_USER)
        await ops.assign_role(admin_id, viewer_id, Role.VIEWER)
        print("  vault_user and viewer granted")

        # =================================================================
        # 2. Create a vault (closed)
        # =================================================================
        print("\nCreating vault...")

        vault = await ops.create_vault(user_id, name="Finance", description="Payment credentials")
        print(f"  Created vault: {vault.name} ({vault.state.value})")

        try:
            await ops.write_secret(user_id, vault.id, key="STRIPE_KEY", value="sk_test_123")
        except AccessDenied as e:
            print(f"  Write refused: {e.reason.value}")

        # =================================================================
        # 3. Open it and write
        # =================================================================
        print("\nOpening vault...")

        vault = await ops.toggle_vault(user_id, vault.id)
        print(f"  Vault is now {vault.state.value}")

        secret = await ops.write_secret(
            user_id, vault.id, key="STRIPE_KEY", value="sk_test_123", secret_type="api_key"
        )
        print(f"  Wrote {secret.key} ({secret.secret_type.value})")

        # =================================================================
        # 4. Read as a viewer
        # =================================================================
        print("\nReading as viewer...")

        result = await ops.list_secrets(viewer_id, vault.id)
        for s in result.secrets:
            print(f"  {s.key}: {s.value}")  # masked

        try:
            await ops.toggle_vault(viewer_id, vault.id)
        except AccessDenied as e:
            print(f"  Viewer toggle refused: {e.reason.value}")

        # =================================================================
        # 5. Listing scope
        # =================================================================
        print("\nListing vaults...")

        print(f"  admin sees {len(await ops.list_vaults(admin_id))} vault(s)")
        print(f"  user sees {len(await ops.list_vaults(user_id))} vault(s)")


if __name__ == "__main__":
    asyncio.run(main())

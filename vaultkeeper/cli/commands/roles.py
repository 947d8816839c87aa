"""
vaultkeeper roles command - Role management CLI.

Assign and remove roles (admin only) and show what each role grants.
"""

import asyncio

import typer
from rich.table import Table

from ...client import Vaultkeeper
from ...rbac.models import Role
from .common import ACTING_USER_HELP, CLI_ERRORS, console, fail

# Operations each role is granted by the authorization engine
ROLE_GRANTS = {
    Role.ADMIN: "list all vaults, create, toggle any vault, read, write, manage roles, list users",
    Role.VAULT_USER: "list own vaults, create, toggle own vaults, read, write",
    Role.VIEWER: "list own vaults, read",
}


def roles_assign_command(
    user_id: str = typer.Argument(..., help="User ID receiving the role"),
    role: Role = typer.Argument(..., help="Role to assign"),
    acting_user: str = typer.Option(..., "--as", help=ACTING_USER_HELP),
) -> None:
    """
    Assign a role to a user.

    Example:
        $ vaultkeeper roles assign 7b0d... vault_user --as <admin-id>
    """
    console.print("\n[bold cyan]Assigning Role[/bold cyan]\n")

    asyncio.run(_assign_role(acting_user, user_id, role))


async def _assign_role(acting_user: str, user_id: str, role: Role) -> None:
    """Internal async function to assign a role."""
    try:
        async with await Vaultkeeper.create() as vk:
            change = await vk.operations.assign_role(acting_user, user_id, role)
    except CLI_ERRORS as e:
        fail(e)

    if change.changed:
        console.print(f"[green]✓[/green] Role [cyan]{change.role.value}[/cyan] assigned to {change.user_id}\n")
    else:
        console.print(f"[yellow]User {change.user_id} already has role {change.role.value}[/yellow]\n")


def roles_remove_command(
    user_id: str = typer.Argument(..., help="User ID losing the role"),
    role: Role = typer.Argument(..., help="Role to remove"),
    acting_user: str = typer.Option(..., "--as", help=ACTING_USER_HELP),
) -> None:
    """
    Remove a role from a user.

    Example:
        $ vaultkeeper roles remove 7b0d... viewer --as <admin-id>
    """
    console.print("\n[bold cyan]Removing Role[/bold cyan]\n")

    asyncio.run(_remove_role(acting_user, user_id, role))


async def _remove_role(acting_user: str, user_id: str, role: Role) -> None:
    """Internal async function to remove a role."""
    try:
        async with await Vaultkeeper.create() as vk:
            change = await vk.operations.remove_role(acting_user, user_id, role)
    except CLI_ERRORS as e:
        fail(e)

    if change.changed:
        console.print(f"[green]✓[/green] Role [cyan]{change.role.value}[/cyan] removed from {change.user_id}\n")
    else:
        console.print(f"[yellow]User {change.user_id} did not have role {change.role.value}[/yellow]\n")


def roles_list_command() -> None:
    """
    Show the available roles and what they grant.

    Example:
        $ vaultkeeper roles list
    """
    console.print("\n[bold cyan]Roles[/bold cyan]\n")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Role")
    table.add_column("Grants")

    for role in Role:
        table.add_row(role.value, ROLE_GRANTS[role])

    console.print(table)
    console.print("\nVault owners can always read their own vault's secrets.\n")

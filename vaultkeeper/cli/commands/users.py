"""
vaultkeeper users command - User listing CLI.
"""

import asyncio

import typer
from rich.table import Table

from ...client import Vaultkeeper
from .common import ACTING_USER_HELP, CLI_ERRORS, console, fail


def users_list_command(
    acting_user: str = typer.Option(..., "--as", help=ACTING_USER_HELP),
) -> None:
    """
    List all users with their roles (admin only).

    Example:
        $ vaultkeeper users list --as <admin-id>
    """
    console.print("\n[bold cyan]Users[/bold cyan]\n")

    asyncio.run(_list_users(acting_user))


async def _list_users(acting_user: str) -> None:
    """Internal async function to list users."""
    try:
        async with await Vaultkeeper.create() as vk:
            users = await vk.operations.list_users(acting_user)
    except CLI_ERRORS as e:
        fail(e)

    if not users:
        console.print("[yellow]No users found[/yellow]\n")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Display name")
    table.add_column("Roles")
    table.add_column("Joined")

    for user in users:
        roles = ", ".join(role.value for role in user.roles) or "[dim]none[/dim]"
        table.add_row(
            str(user.id),
            user.display_name or "-",
            roles,
            user.created_at.strftime("%Y-%m-%d") if user.created_at else "-",
        )

    console.print(table)
    console.print(f"\nTotal: {len(users)} user(s)\n")

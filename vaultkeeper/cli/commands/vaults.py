"""
vaultkeeper vaults command - Vault management CLI.

List, create and open/close vaults as a given user.
"""

import asyncio
from typing import Optional

import typer
from rich.table import Table

from ...client import Vaultkeeper
from .common import ACTING_USER_HELP, CLI_ERRORS, console, fail


def vaults_list_command(
    acting_user: str = typer.Option(..., "--as", help=ACTING_USER_HELP),
) -> None:
    """
    List the vaults visible to a user.

    Admins see every vault, everyone else only the vaults they own.

    Example:
        $ vaultkeeper vaults list --as 3f1c...
    """
    console.print("\n[bold cyan]Vaults[/bold cyan]\n")

    asyncio.run(_list_vaults(acting_user))


async def _list_vaults(acting_user: str) -> None:
    """Internal async function to list vaults."""
    try:
        async with await Vaultkeeper.create() as vk:
            vaults = await vk.operations.list_vaults(acting_user)
    except CLI_ERRORS as e:
        fail(e)

    if not vaults:
        console.print("[yellow]No vaults found[/yellow]\n")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("State")
    table.add_column("Owner", style="dim")
    table.add_column("Created")

    for vault in vaults:
        state = "[green]open[/green]" if vault.is_open else "[red]closed[/red]"
        table.add_row(
            str(vault.id),
            vault.name,
            state,
            str(vault.owner_id),
            vault.created_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)
    console.print(f"\nTotal: {len(vaults)} vault(s)\n")


def vaults_create_command(
    name: str = typer.Argument(..., help="Vault name"),
    description: Optional[str] = typer.Option(
        None,
        "--description",
        "-d",
        help="Vault description",
    ),
    acting_user: str = typer.Option(..., "--as", help=ACTING_USER_HELP),
) -> None:
    """
    Create a new vault. Vaults start closed.

    Example:
        $ vaultkeeper vaults create Finance --as 3f1c...
        $ vaultkeeper vaults create Infra -d "Deploy credentials" --as 3f1c...
    """
    console.print("\n[bold cyan]Creating Vault[/bold cyan]\n")

    asyncio.run(_create_vault(acting_user, name, description))


async def _create_vault(acting_user: str, name: str, description: Optional[str]) -> None:
    """Internal async function to create a vault."""
    try:
        async with await Vaultkeeper.create() as vk:
            vault = await vk.operations.create_vault(acting_user, name=name, description=description)
    except CLI_ERRORS as e:
        fail(e)

    console.print("[green]✓[/green] Vault created successfully!")
    console.print(f"\nID: [cyan]{vault.id}[/cyan]")
    console.print(f"Name: [cyan]{vault.name}[/cyan]")
    if vault.description:
        console.print(f"Description: [cyan]{vault.description}[/cyan]")
    console.print(f"State: [cyan]{vault.state.value}[/cyan]\n")


def vaults_toggle_command(
    vault_id: str = typer.Argument(..., help="Vault ID"),
    acting_user: str = typer.Option(..., "--as", help=ACTING_USER_HELP),
) -> None:
    """
    Open a closed vault or close an open one.

    Example:
        $ vaultkeeper vaults toggle 9a2e... --as 3f1c...
    """
    console.print("\n[bold cyan]Toggling Vault[/bold cyan]\n")

    asyncio.run(_toggle_vault(acting_user, vault_id))


async def _toggle_vault(acting_user: str, vault_id: str) -> None:
    """Internal async function to toggle a vault."""
    try:
        async with await Vaultkeeper.create() as vk:
            vault = await vk.operations.toggle_vault(acting_user, vault_id)
    except CLI_ERRORS as e:
        fail(e)

    console.print(f"[green]✓[/green] Vault [cyan]{vault.name}[/cyan] is now {vault.state.value}\n")

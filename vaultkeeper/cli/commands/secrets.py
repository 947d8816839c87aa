"""
vaultkeeper secrets command - Secret management CLI.

Read the secrets of a vault or add one to an open vault.
"""

import asyncio

import typer
from rich.table import Table

from ...client import Vaultkeeper
from ...secrets.models import SecretType
from .common import ACTING_USER_HELP, CLI_ERRORS, console, fail


def secrets_list_command(
    vault_id: str = typer.Argument(..., help="Vault ID"),
    reveal: bool = typer.Option(
        False,
        "--reveal",
        help="Show secret values instead of masking them",
    ),
    acting_user: str = typer.Option(..., "--as", help=ACTING_USER_HELP),
) -> None:
    """
    List the secrets of a vault.

    Example:
        $ vaultkeeper secrets list 9a2e... --as 3f1c...
        $ vaultkeeper secrets list 9a2e... --reveal --as 3f1c...
    """
    asyncio.run(_list_secrets(acting_user, vault_id, reveal))


async def _list_secrets(acting_user: str, vault_id: str, reveal: bool) -> None:
    """Internal async function to list secrets."""
    try:
        async with await Vaultkeeper.create() as vk:
            result = await vk.operations.list_secrets(acting_user, vault_id)
    except CLI_ERRORS as e:
        fail(e)

    state = "[green]open[/green]" if result.vault.is_open else "[red]closed[/red]"
    console.print(f"\n[bold cyan]Secrets in {result.vault.name}[/bold cyan] ({state})\n")

    if not result.secrets:
        console.print("[yellow]No secrets found[/yellow]\n")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Key")
    table.add_column("Type")
    table.add_column("Value")
    table.add_column("Created")

    for secret in result.secrets:
        table.add_row(
            secret.key,
            secret.secret_type.value,
            secret.reveal() if reveal else "••••••••",
            secret.created_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)
    console.print(f"\nTotal: {len(result.secrets)} secret(s)\n")


def secrets_add_command(
    vault_id: str = typer.Argument(..., help="Vault ID"),
    key: str = typer.Argument(..., help="Secret key"),
    value: str = typer.Option(
        ...,
        "--value",
        "-v",
        prompt=True,
        hide_input=True,
        help="Secret value (prompted if omitted)",
    ),
    secret_type: SecretType = typer.Option(
        SecretType.TEXT,
        "--type",
        "-t",
        help="Secret type",
    ),
    acting_user: str = typer.Option(..., "--as", help=ACTING_USER_HELP),
) -> None:
    """
    Add a secret to an open vault.

    Example:
        $ vaultkeeper secrets add 9a2e... STRIPE_KEY --type api_key --as 3f1c...
    """
    console.print("\n[bold cyan]Adding Secret[/bold cyan]\n")

    asyncio.run(_add_secret(acting_user, vault_id, key, value, secret_type))


async def _add_secret(
    acting_user: str,
    vault_id: str,
    key: str,
    value: str,
    secret_type: SecretType,
) -> None:
    """Internal async function to add a secret."""
    try:
        async with await Vaultkeeper.create() as vk:
            secret = await vk.operations.write_secret(
                acting_user, vault_id, key=key, value=value, secret_type=secret_type
            )
    except CLI_ERRORS as e:
        fail(e)

    console.print("[green]✓[/green] Secret added successfully!")
    console.print(f"\nID: [cyan]{secret.id}[/cyan]")
    console.print(f"Key: [cyan]{secret.key}[/cyan]")
    console.print(f"Type: [cyan]{secret.secret_type.value}[/cyan]\n")

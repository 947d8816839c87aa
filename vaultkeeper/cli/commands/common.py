"""
Shared pieces for the CLI commands: the console, the ``--as`` help text
and error reporting.
"""

from typing import NoReturn, Union

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console

from ...exceptions import (
    AccessDenied,
    StorageError,
    ValidationError,
    VaultkeeperError,
    VaultNotFound,
)

console = Console()

ACTING_USER_HELP = "User id to act as (the acting subject)"

# Errors a command reports instead of a traceback; pydantic errors here
# come from loading the configuration
CLI_ERRORS = (VaultkeeperError, PydanticValidationError)


def fail(error: Union[VaultkeeperError, PydanticValidationError]) -> NoReturn:
    """Print an error and exit with status 1."""
    if isinstance(error, AccessDenied):
        console.print(
            f"[red]Denied:[/red] {error.verdict.operation.value} "
            f"([yellow]{error.reason.value}[/yellow])\n"
        )
    elif isinstance(error, VaultNotFound):
        console.print(f"[red]Vault not found:[/red] {error.vault_id}\n")
    elif isinstance(error, ValidationError):
        console.print(f"[red]Invalid input:[/red] {error}\n")
    elif isinstance(error, StorageError):
        console.print(f"[red]Storage error:[/red] {error}\n")
    elif isinstance(error, PydanticValidationError):
        console.print(f"[red]Error loading configuration:[/red] {error}")
        console.print(
            "\nSet [cyan]VAULTKEEPER_SUPABASE_URL[/cyan] and "
            "[cyan]VAULTKEEPER_SUPABASE_KEY[/cyan]\n"
        )
    else:
        console.print(f"[red]Error:[/red] {error}\n")
    raise typer.Exit(1)

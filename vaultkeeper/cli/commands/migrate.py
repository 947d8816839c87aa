"""
vaultkeeper migrate command - Database migrations.

PostgREST cannot run DDL, so ``migrate`` prints the pending SQL for psql
or the Supabase SQL editor and can record it as applied afterwards.
"""

import asyncio
from typing import Optional

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.syntax import Syntax
from rich.table import Table

from ...config import load_config
from ...migrations.manager import MigrationManager
from ...utils.supabase import VaultkeeperSupabaseClient
from .common import CLI_ERRORS, console, fail


def migrate_command(
    target: Optional[str] = typer.Argument(
        None,
        help="Stop at this version (default: all pending)",
    ),
    mark_applied: bool = typer.Option(
        False,
        "--mark-applied",
        help="Record the pending migrations as applied instead of printing them",
    ),
) -> None:
    """
    Show or record pending migrations.

    Example:
        $ vaultkeeper migrate                  # Print pending SQL
        $ vaultkeeper migrate 001              # Only up to version 001
        $ vaultkeeper migrate | psql $DB_URL   # Apply with psql
        $ vaultkeeper migrate --mark-applied   # Then record them
    """
    try:
        config = load_config()
    except PydanticValidationError as e:
        fail(e)

    asyncio.run(_run_migrations(config, target, mark_applied))


async def _run_migrations(config, target: Optional[str], mark_applied: bool) -> None:
    """
    Print the pending SQL, or record it as applied.

    Args:
        config: Vaultkeeper configuration
        target: Optional target migration version
        mark_applied: Record instead of print
    """
    try:
        client = await VaultkeeperSupabaseClient.create(config)
        manager = MigrationManager(client)
        pending = await manager.pending(target=target)
    except CLI_ERRORS as e:
        fail(e)

    if not pending:
        console.print("[green]✓[/green] Database is up to date\n")
        return

    if not mark_applied:
        console.print(Syntax(manager.render_sql(pending), "sql"))
        return

    try:
        for migration in pending:
            await manager.mark_applied(migration)
            console.print(f"[green]✓[/green] Recorded {migration.version}_{migration.name}")
    except CLI_ERRORS as e:
        fail(e)

    console.print()


def status_command() -> None:
    """
    List bundled migrations and whether each has been recorded.

    Example:
        $ vaultkeeper status
    """
    try:
        config = load_config()
    except PydanticValidationError as e:
        fail(e)

    asyncio.run(_print_status(config))


async def _print_status(config) -> None:
    try:
        client = await VaultkeeperSupabaseClient.create(config)
        manager = MigrationManager(client)
        bundled = manager.discover_migrations()
        applied = set(await manager.get_applied_migrations())
    except CLI_ERRORS as e:
        fail(e)

    table = Table(title="Vaultkeeper migrations")
    table.add_column("Version", style="magenta")
    table.add_column("Migration", style="green")
    table.add_column("State", width=10)

    for migration in bundled:
        state = "[green]applied[/green]" if migration.version in applied else "[yellow]pending[/yellow]"
        table.add_row(migration.version, migration.name, state)

    console.print(table)

    waiting = sum(1 for m in bundled if m.version not in applied)
    if waiting:
        console.print(
            f"\n[yellow]{waiting} of {len(bundled)} pending.[/yellow] "
            "Run [cyan]vaultkeeper migrate[/cyan] to print their SQL\n"
        )
    else:
        console.print(f"\n[green]✓[/green] All {len(bundled)} migrations applied\n")

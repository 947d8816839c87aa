"""
Migration manager for the Vaultkeeper database schema.

Discovers the SQL migrations shipped with the package, reports which
ones are applied, renders pending SQL for psql or the Supabase SQL
editor, and records versions once they have been applied.
"""

import logging
from pathlib import Path
from typing import List, Optional

import httpx
from postgrest.exceptions import APIError

from ..exceptions import StorageError
from ..utils.supabase import VaultkeeperSupabaseClient, run_query

logger = logging.getLogger(__name__)

MIGRATIONS_TABLE = "vaultkeeper_migrations"

# undefined_table from Postgres, and PostgREST's schema-cache miss
MISSING_TABLE_CODES = ("42P01", "PGRST205")


class Migration:
    """One ``NNN_name.sql`` file from the versions directory."""

    def __init__(self, version: str, name: str, path: Path) -> None:
        self.version = version
        self.name = name
        self.path = path

    @classmethod
    def from_file(cls, path: Path) -> "Migration":
        """
        Parse ``path`` as ``<digits>_<name>.sql``.

        Raises:
            ValueError: the file name does not follow that pattern
        """
        version, sep, name = path.stem.partition("_")
        if not sep or not name or not version.isdigit():
            raise ValueError(f"{path.name} is not named like 001_name.sql")
        return cls(version, name, path)

    def read_sql(self) -> str:
        return self.path.read_text()

    def __repr__(self) -> str:
        return f"<Migration {self.version}_{self.name}>"


class MigrationManager:
    """
    Tracks Vaultkeeper schema migrations.

    PostgREST cannot run DDL, so SQL is applied out of band (psql or the
    Supabase SQL editor) and then recorded with ``mark_applied``.
    """

    def __init__(
        self,
        client: VaultkeeperSupabaseClient,
        migrations_dir: Optional[Path] = None,
    ) -> None:
        self.client = client
        self.migrations_dir = migrations_dir or Path(__file__).parent / "versions"

    def discover_migrations(self) -> List[Migration]:
        """Bundled migrations ordered by version; badly named files are skipped."""
        if not self.migrations_dir.is_dir():
            return []

        found = []
        for path in sorted(self.migrations_dir.glob("*.sql")):
            try:
                found.append(Migration.from_file(path))
            except ValueError as e:
                logger.warning("Ignoring migration file: %s", e)

        return sorted(found, key=lambda m: m.version)

    async def get_applied_migrations(self) -> List[str]:
        """
        Versions already recorded in the tracking table.

        A database that has not run 001 yet has no tracking table; that
        counts as nothing applied.

        Raises:
            StorageError: If the tracking table cannot be read
        """
        try:
            result = await self.client.table(MIGRATIONS_TABLE).select("version").execute()
        except APIError as e:
            if e.code in MISSING_TABLE_CODES:
                logger.info("No %s table yet, treating every migration as pending", MIGRATIONS_TABLE)
                return []
            raise StorageError(f"Failed to read applied migrations: {e}") from e
        except httpx.HTTPError as e:
            raise StorageError(f"Failed to read applied migrations: {e}") from e

        return [row["version"] for row in result.data or []]

    async def pending(self, target: Optional[str] = None) -> List[Migration]:
        """
        Migrations not yet recorded as applied.

        Args:
            target: Only include versions up to and including this one
        """
        applied = set(await self.get_applied_migrations())
        todo = [m for m in self.discover_migrations() if m.version not in applied]
        if target:
            todo = [m for m in todo if m.version <= target]
        return todo

    def render_sql(self, migrations: List[Migration]) -> str:
        """Concatenate migrations into one script, each under a header comment."""
        return "\n".join(
            f"-- {m.version}_{m.name}\n{m.read_sql().rstrip()}\n" for m in migrations
        )

    async def mark_applied(self, migration: Migration) -> None:
        """
        Record a migration as applied.

        Args:
            migration: Migration that has been run against the database
        """
        await run_query(
            self.client.table(MIGRATIONS_TABLE).insert(
                {"version": migration.version, "name": migration.name}
            ).execute(),
            f"record migration {migration.version}",
        )
        logger.info("Recorded migration %s_%s as applied", migration.version, migration.name)

"""
Vaultkeeper CLI - Command-line interface for vaults, secrets and roles.

Usage:
    vaultkeeper vaults      List, create and toggle vaults
    vaultkeeper secrets     List and add secrets
    vaultkeeper roles       Assign and remove roles
    vaultkeeper users       List users
    vaultkeeper migrate     Print or record pending migrations
    vaultkeeper status      Show migration status

Every vault, secret, role and user command acts as the user given with
``--as USER_ID`` and is authorized exactly like an API call.
"""

import typer

from .commands import migrate, roles, secrets, users, vaults

# Create the main Typer app
app = typer.Typer(
    name="vaultkeeper",
    help="Role and ownership based access control for vaults and secrets",
    add_completion=False,
)

# Register top-level commands
app.command(name="migrate")(migrate.migrate_command)
app.command(name="status")(migrate.status_command)

# Create vaults subcommand group
vaults_app = typer.Typer(help="Manage vaults")
vaults_app.command(name="list")(vaults.vaults_list_command)
vaults_app.command(name="create")(vaults.vaults_create_command)
vaults_app.command(name="toggle")(vaults.vaults_toggle_command)
app.add_typer(vaults_app, name="vaults")

# Create secrets subcommand group
secrets_app = typer.Typer(help="Manage secrets")
secrets_app.command(name="list")(secrets.secrets_list_command)
secrets_app.command(name="add")(secrets.secrets_add_command)
app.add_typer(secrets_app, name="secrets")

# Create roles subcommand group
roles_app = typer.Typer(help="Manage roles")
roles_app.command(name="assign")(roles.roles_assign_command)
roles_app.command(name="remove")(roles.roles_remove_command)
roles_app.command(name="list")(roles.roles_list_command)
app.add_typer(roles_app, name="roles")

# Create users subcommand group
users_app = typer.Typer(help="List users")
users_app.command(name="list")(users.users_list_command)
app.add_typer(users_app, name="users")


@app.callback()
def callback() -> None:
    """
    Vaultkeeper - vaults, secrets and roles on Supabase.

    Configure with VAULTKEEPER_SUPABASE_URL and VAULTKEEPER_SUPABASE_KEY.
    """
    pass


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

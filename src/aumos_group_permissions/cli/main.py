"""CLI entry point for aumos-group-permissions.

Invoked as::

    group-perms [OPTIONS] COMMAND [ARGS]...

or during development::

    python -m aumos_group_permissions.cli.main

Commands
--------
- init               Create the permissions folder and default definitions
- show               Display groups with their combined permissions
- check              Check a permission for a group member
- group add          Add an empty group
- group remove       Remove a group
- permission add     Grant a permission to a group
- permission remove  Revoke a permission from a group
- version            Show version information
"""
from __future__ import annotations

import sys
from pathlib import Path

import click
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from aumos_group_permissions.config import ConfigLoader
from aumos_group_permissions.groups.store import GroupConfigError
from aumos_group_permissions.permissions.service import PermissionService, PermissionsError

console = Console()
err_console = Console(stderr=True)

_DEFAULT_CONFIG = Path("group-perms.yaml")

_config_option = click.option(
    "--config",
    "-c",
    "config_path",
    default=str(_DEFAULT_CONFIG),
    show_default=True,
    type=click.Path(),
    help="Path to group-perms.yaml.",
)


def _load_service(config_path: str) -> PermissionService:
    config = ConfigLoader().load_or_defaults(Path(config_path))
    return PermissionService.from_config(config)


def _reloaded_service(config_path: str) -> PermissionService:
    """Build a service and reload it, exiting with status 1 on failure."""
    service = _load_service(config_path)
    try:
        service.reload()
    except (FileNotFoundError, GroupConfigError) as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)
    return service


# ---------------------------------------------------------------------------
# Root command group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="aumos-group-permissions")
def cli() -> None:
    """Inspect and edit permission groups."""


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from aumos_group_permissions import __version__

    console.print(
        Panel(
            f"[bold]aumos-group-permissions[/bold]  v[cyan]{__version__}[/cyan]\n"
            "Group-based hierarchical permission engine.",
            title="Version",
            border_style="blue",
        )
    )


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------


@cli.command(name="init")
@_config_option
def init_command(config_path: str) -> None:
    """Create the permissions folder and default definitions if missing."""
    service = _load_service(config_path)
    created = service.create()
    if created:
        console.print(f"[green]Created[/green] permissions file: [bold]{service.store.path}[/bold]")
    else:
        console.print(f"Permissions file already exists: [bold]{service.store.path}[/bold]")


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


@cli.command(name="show")
@_config_option
def show_command(config_path: str) -> None:
    """Display groups with their inheritance and combined permissions."""
    service = _reloaded_service(config_path)
    registry = service.registry

    if not registry:
        console.print("[yellow]No groups defined.[/yellow]")
        return

    table = Table(title=f"Permission Groups ({service.store.path})", box=box.SIMPLE)
    table.add_column("Group", style="cyan")
    table.add_column("Default", style="magenta")
    table.add_column("Inherits")
    table.add_column("Combined permissions")

    for name, group in registry.items():
        table.add_row(
            name,
            "yes" if group is registry.default_group else "",
            ", ".join(group.inheritance),
            ", ".join(group.combined_permissions),
        )

    console.print(table)


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.argument("group_name")
@click.argument("permission")
@_config_option
def check_command(group_name: str, permission: str, config_path: str) -> None:
    """Check PERMISSION for a member of GROUP_NAME.

    Unknown groups fall back to the default group.  Exits 0 when allowed.
    """
    service = _reloaded_service(config_path)
    allowed = service.check_group(group_name, permission)

    status_str = "[green]ALLOWED[/green]" if allowed else "[red]DENIED[/red]"
    console.print(Panel(status_str, title="Permission Check Result", border_style="blue"))
    console.print(f"  Group: [cyan]{group_name}[/cyan]  Permission: [cyan]{permission}[/cyan]")

    sys.exit(0 if allowed else 1)


# ---------------------------------------------------------------------------
# group
# ---------------------------------------------------------------------------


@cli.group(name="group")
def group_group() -> None:
    """Group management commands."""


@group_group.command(name="add")
@click.argument("name")
@_config_option
def group_add_command(name: str, config_path: str) -> None:
    """Add an empty group NAME."""
    service = _load_service(config_path)
    try:
        service.add_group(name)
    except (PermissionsError, FileNotFoundError, GroupConfigError) as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)
    console.print(f"[green]Added[/green] group [bold]{name}[/bold].")


@group_group.command(name="remove")
@click.argument("name")
@_config_option
def group_remove_command(name: str, config_path: str) -> None:
    """Remove group NAME."""
    service = _load_service(config_path)
    try:
        service.remove_group(name)
    except (PermissionsError, FileNotFoundError, GroupConfigError) as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)
    console.print(f"[green]Removed[/green] group [bold]{name}[/bold].")


# ---------------------------------------------------------------------------
# permission
# ---------------------------------------------------------------------------


@cli.group(name="permission")
def permission_group() -> None:
    """Permission management commands."""


@permission_group.command(name="add")
@click.argument("group_name")
@click.argument("permission")
@_config_option
def permission_add_command(group_name: str, permission: str, config_path: str) -> None:
    """Grant PERMISSION to GROUP_NAME."""
    service = _load_service(config_path)
    try:
        service.add_permission(group_name, permission)
    except (PermissionsError, ValueError, FileNotFoundError) as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)
    console.print(f"[green]Granted[/green] [bold]{permission}[/bold] to {group_name}.")


@permission_group.command(name="remove")
@click.argument("group_name")
@click.argument("permission")
@_config_option
def permission_remove_command(group_name: str, permission: str, config_path: str) -> None:
    """Revoke PERMISSION from GROUP_NAME."""
    service = _load_service(config_path)
    try:
        service.remove_permission(group_name, permission)
    except (PermissionsError, FileNotFoundError, GroupConfigError) as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)
    console.print(f"[green]Revoked[/green] [bold]{permission}[/bold] from {group_name}.")


if __name__ == "__main__":
    cli()

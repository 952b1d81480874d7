"""CLI application for cargo-set-registry."""

from pathlib import Path

import typer
from rich.console import Console

from core.models import RegistryChange
from core.set_registry import set_registry as run_set_registry

console = Console()
err_console = Console(stderr=True)


def format_change(change: RegistryChange) -> str:
    """Format a status line for one registry change."""
    if change.old_registry is None:
        return (
            f"{change.member}'s dependency {change.dependency} "
            f"to add registry \"{change.new_registry}\""
        )
    return (
        f"{change.member}'s dependency {change.dependency} from registry "
        f"\"{change.old_registry}\" to \"{change.new_registry}\""
    )


def print_change(change: RegistryChange) -> None:
    console.print(
        f"[bold green]{'Updating':>12}[/bold green] {format_change(change)}",
        highlight=False,
    )


app = typer.Typer(
    name="cargo-set-registry",
    help="Change the registry of dependencies in Cargo.toml manifests",
    add_completion=False,
)


@app.callback()
def main() -> None:
    """Cargo subcommand for rewriting dependency registries."""


@app.command("set-registry")
def set_registry(
    registry: str = typer.Argument(help="Registry to update dependency to"),
    manifest_path: Path | None = typer.Option(
        None, "--manifest-path", metavar="PATH", help="Path to the manifest to upgrade"
    ),
    pkgids: list[str] = typer.Option(
        [], "--package", "-p", metavar="PKGID",
        help="Package id of the crate to change the registry of",
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print changes to be made without making them"),
    exclude: list[str] = typer.Option([], "--exclude", help="Exclude a crate from the modification"),
    locked: bool = typer.Option(False, "--locked", help="Require Cargo.toml to be up to date"),
) -> None:
    """Change a package's registry in the local manifest file (i.e. Cargo.toml)."""

    try:
        run_set_registry(
            registry,
            pkgids,
            manifest_path=manifest_path,
            excluded=exclude,
            dry_run=dry_run,
            locked=locked,
            report=print_change,
        )

        if dry_run:
            err_console.print("[bold yellow]warning[/bold yellow]: aborting set-registry due to dry run")

    except typer.Exit:
        raise
    except Exception as e:
        err_console.print(f"Error: {e}", style="red", highlight=False, markup=False)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()

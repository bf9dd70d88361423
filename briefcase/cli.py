from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from functools import cached_property, wraps
from typing import Any, TypeVar

import typer

from . import __version__
from .config import Settings
from .errors import BriefcaseError
from .locations import StoreLocation, resolve_store_location
from .logging import configure_logging
from .storage import StorageBackend, default_policy, open_backend

app = typer.Typer(
    help="Persist named string variables across shell sessions.",
    no_args_is_help=True,
)

log = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


@dataclass
class Context:
    """Per-invocation state built by the app callback.

    The location is resolved on first use so that commands which never touch
    the store (``version``) work even when no home directory is known.
    """

    settings: Settings

    @cached_property
    def location(self) -> StoreLocation:
        return resolve_store_location(
            default_policy(self.settings), directory=self.settings.backend == "files"
        )

    @cached_property
    def store(self) -> StorageBackend:
        return open_backend(self.settings, self.location)


def reports_errors(func: F) -> F:
    """Render ``BriefcaseError`` as a one-line message on stderr and exit 1."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except BriefcaseError as exc:
            log.debug("command_failed", extra={"event_type": exc.category.value})
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(code=1) from exc

    return wrapper  # type: ignore[return-value]


def _state(ctx: typer.Context) -> Context:
    obj = ctx.obj
    if obj is None:  # pragma: no cover - callback always runs first
        raise RuntimeError("briefcase context not initialised")
    return obj


@app.callback()
def main(
    ctx: typer.Context,
    backend: str | None = typer.Option(None, help="Storage backend: sqlite or files"),
    location_policy: str | None = typer.Option(
        None, help="Where the store lives: home or temp (default depends on backend)"
    ),
    verbose: bool = typer.Option(False, help="Log storage operations to stderr"),
) -> None:
    """Persist named string variables across shell sessions."""
    configure_logging("DEBUG" if verbose else None)
    overrides: dict[str, object] = {}
    if backend is not None:
        overrides["backend"] = backend
    if location_policy is not None:
        overrides["location_policy"] = location_policy
    try:
        settings = Settings(**overrides)
    except ValueError as exc:
        typer.echo(f"Error: invalid configuration: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    ctx.obj = Context(settings=settings)


@app.command()
def version() -> None:
    """Show the version of briefcase."""
    typer.echo(f"Briefcase {__version__}")


@app.command()
@reports_errors
def info(ctx: typer.Context) -> None:
    """Show where briefcase keeps its data."""
    state = _state(ctx)
    location = state.location
    typer.echo(f"Backend: {state.settings.backend}")
    typer.echo(f"Store location: {location.path}")
    typer.echo(f"Location policy: {location.policy}")
    typer.echo(f"Sourced from: {location.source}")
    if location.dir_name is not None:
        typer.echo(f"Briefcase directory name: {location.dir_name}")
    typer.echo(f"Number of entries: {state.store.count()}")


@app.command("set")
@reports_errors
def set_(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the variable"),
    value: list[str] = typer.Argument(..., help="Value of the variable"),
) -> None:
    """Set a briefcase variable."""
    joined = " ".join(value)
    _state(ctx).store.set(name, joined)
    typer.echo(f"Set {name} = {joined}")


@app.command()
@reports_errors
def get(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the variable"),
) -> None:
    """Get a briefcase variable."""
    typer.echo(_state(ctx).store.get(name), nl=False)


@app.command()
@reports_errors
def remove(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the variable"),
) -> None:
    """Remove a briefcase variable."""
    _state(ctx).store.remove(name)
    typer.echo(f"Removed {name}")


@app.command("list")
@reports_errors
def list_entries(ctx: typer.Context) -> None:
    """List briefcase entries."""
    for name, value in sorted(_state(ctx).store.list()):
        typer.echo(f"{name} = {value}")


@app.command()
@reports_errors
def purge(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="Purge without confirmation"),
) -> None:
    """Purge all briefcase data."""
    if not force:
        try:
            answer = typer.prompt(
                "Are you sure you want to delete all briefcase data? (y/n)",
                default="",
                show_default=False,
            )
        except typer.Abort:
            # End of input counts as declining.
            typer.echo()
            answer = ""
        if answer.strip().lower() != "y":
            typer.echo("Exiting without deleting data")
            return
    _state(ctx).store.purge()
    typer.echo("Briefcase data purged successfully")


if __name__ == "__main__":  # pragma: no cover
    app()

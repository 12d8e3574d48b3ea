"""Board settings sync CLI application.

This module provides the command-line interface for loading per-project
board appearance from the settings service, plus configuration helpers.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Final, List

import typer
import yaml
from pydantic import ValidationError

from boardsync.loader import ProjectSettingsLoader
from boardsync.protocols import SettingsClient
from boardsync.remote import SettingsAPIError, SettingsUnavailable, create_settings_client
from boardsync.settings import UserSettings
from boardsync.state import AppStore, Project

# ── CLI setup ────────────────────────────────────────────────────────────────
app = typer.Typer(help="Board settings sync CLI", add_completion=False)
config_app = typer.Typer(help="Config helpers")
app.add_typer(config_app, name="config")

logger: Final = logging.getLogger(__name__)  # Will be "boardsync.cli"

# Options for the main commands
CONFIG_OPTION = typer.Option(..., "--config", "-c", exists=True, dir_okay=False)
DEBUG_OPTION = typer.Option(False, "--debug", help="Enable debug logging")
DST_ARGUMENT = typer.Argument(..., help="Output config file")
PROJECTS_ARGUMENT = typer.Argument(..., help="Project paths, activated in order")
PROJECT_ARGUMENT = typer.Argument(..., help="Project path")


def _configure_logging(settings: UserSettings, debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else getattr(logging, settings.log_level),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def _load_settings(config: Path) -> UserSettings:
    try:
        return UserSettings.load(config)
    except RuntimeError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


async def sync_projects(
    projects: list[str], client: SettingsClient, store: AppStore | None = None
) -> AppStore:
    """Activate *projects* one after another and wait for their settings.

    Args:
        projects: Project paths in activation order
        client: Settings source
        store: Store to update (a new one if None)

    Returns:
        The store holding the loaded appearance
    """
    store = store or AppStore()
    loader = ProjectSettingsLoader(client, store)
    loader.attach(store)
    try:
        for path in projects:
            store.set_current_project(Project(path))
            # let the activation task start before switching again
            await asyncio.sleep(0)
        await loader.wait_idle()
    finally:
        loader.detach()
    return store


@app.command()
def sync(
    projects: List[str] = PROJECTS_ARGUMENT,
    config: Path = CONFIG_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Load board settings for each project and print the resulting state."""
    settings = _load_settings(config)
    _configure_logging(settings, debug)

    client = create_settings_client(settings)
    store = asyncio.run(sync_projects(projects, client))

    state: dict[str, Any] = {
        path: asdict(store.get_board_background(path)) for path in dict.fromkeys(projects)
    }
    typer.echo(yaml.safe_dump(state, sort_keys=False), nl=False)


@app.command()
def show(
    project: str = PROJECT_ARGUMENT,
    config: Path = CONFIG_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Print the board background stored for one project."""
    settings = _load_settings(config)
    _configure_logging(settings, debug)

    client = create_settings_client(settings)
    try:
        result = asyncio.run(client.get_project(project))
    except SettingsAPIError as exc:
        typer.secho(f"Settings request failed: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    if isinstance(result, SettingsUnavailable):
        typer.secho(f"Settings unavailable: {result.reason}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if result.board_background is None:
        typer.echo("No board background stored")
        return

    data = result.board_background.model_dump(by_alias=True, exclude_unset=True)
    typer.echo(yaml.safe_dump(data, sort_keys=False), nl=False)


# ───────────────────────── config sub-commands ───────────────────────────────
@config_app.command("validate")
def validate_config(file: Path):
    """Validate a YAML config file against the schema."""
    try:
        UserSettings.load(file)
        typer.echo("✅ Config valid")
    except RuntimeError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


@config_app.command("wizard")
def wizard(dst: Path = DST_ARGUMENT):
    """Interactive prompt to create a config file."""
    typer.echo("Interactive config builder - press Enter for defaults.")

    while True:
        data: dict[str, Any] = {
            "server_url": typer.prompt("Settings server URL", default="http://localhost:3008"),
            "api_key": typer.prompt("API key (blank for none)", default="", hide_input=True),
            "timeout": float(typer.prompt("Timeout in seconds", default="10")),
            "retries": int(typer.prompt("Retries on network errors", default="0")),
        }
        try:
            cfg = UserSettings(**data)
            break  # valid → exit loop
        except ValidationError as err:
            typer.secho("\nConfig error(s):", fg=typer.colors.RED, err=True)
            for e in err.errors():
                typer.secho(f"  • {e['loc'][0]} - {e['msg']}", fg=typer.colors.RED, err=True)
            typer.echo("Please re-enter the values.\n")

    dst.write_text(
        yaml.safe_dump(cfg.model_dump(exclude_none=True), sort_keys=False), encoding="utf-8"
    )
    typer.secho(f"Config written to {dst}", fg=typer.colors.GREEN)


# ───────────────────────── module entrypoint ────────────────────────────────
if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        sys.exit(0)

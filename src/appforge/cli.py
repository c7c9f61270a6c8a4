"""
appforge.cli - Command Line Interface
=====================================

This module provides the command-line interface for appforge using Typer,
with questionary for interactive prompts and rich for output.

Architecture
------------
    app (main entry point)
    └── new  - Create a new Next.js app

The command only resolves user input into a ``ProjectRequest``. Everything
after that, including the retry prompt and the exit code, is handled by
:func:`appforge.recovery.run`.

Usage Examples
--------------
Interactive mode (prompts for the project name):
    $ appforge new

With a directory:
    $ appforge new my-app

Install with yarn:
    $ appforge new my-app --use-yarn

Show help:
    $ appforge --help
    $ appforge new --help
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated

import questionary
import tomli
import typer
from pydantic import ValidationError
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel

from appforge import __version__, log
from appforge.config import load_settings
from appforge.errors import DownloadError
from appforge.models import ProjectRequest
from appforge.naming import validate_project_name
from appforge.recovery import RETRY_PROMPT, run


# =============================================================================
# CLI Application Setup
# =============================================================================

app = typer.Typer(
    name="appforge",
    help="Bootstrap a Next.js app with one command.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

console = Console()

DEFAULT_PROJECT_NAME = "my-next-app"


# =============================================================================
# Version Callback
# =============================================================================

def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(Panel(
            f"[bold green]appforge[/] version [cyan]{__version__}[/]\n\n"
            f"[dim]Next.js app scaffolder[/]\n"
            f"[dim]Template: Next.js + TypeScript + Tailwind CSS + Recoil[/]",
            border_style="green",
        ))
        raise typer.Exit()


# =============================================================================
# Interactive Prompts
# =============================================================================

def validate_name_input(text: str) -> bool | str:
    """
    Inline validator for the project name prompt.

    The name checked is the basename of the path the user typed, since
    that is what ends up in package.json.

    Returns
    -------
    bool | str
        True if acceptable, otherwise the message questionary displays.
    """
    name = Path(os.path.abspath(text.strip())).name
    validation = validate_project_name(name)
    if validation.valid:
        return True
    return f"Invalid project name: {validation.problems[0]}"


def prompt_project_path() -> str:
    """
    Ask for the project directory.

    Returns
    -------
    str
        The entered path, stripped. Empty if the prompt was cancelled.
    """
    result = questionary.text(
        "What is your project named?",
        default=DEFAULT_PROJECT_NAME,
        validate=validate_name_input,
    ).ask()

    return result.strip() if isinstance(result, str) else ""


def confirm_retry(error: DownloadError) -> bool:
    """Ask whether to retry after a connectivity failure."""
    log.debug(f"Download failed: {error.command}")
    answer = questionary.confirm(RETRY_PROMPT, default=True).ask()
    return bool(answer)


def print_usage_hint() -> None:
    console.print()
    console.print("Please specify the project directory:")
    console.print("  [cyan]appforge new[/] [green]<project-directory>[/]")
    console.print()
    console.print("For example:")
    console.print(f"  [cyan]appforge new[/] [green]{DEFAULT_PROJECT_NAME}[/]")
    console.print()
    console.print("Run [cyan]appforge --help[/] to see all options.")


# =============================================================================
# Main Application Callback
# =============================================================================

@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    [bold]appforge[/] - Next.js app scaffolder.

    [bold]Quick Start:[/]

        appforge new my-app
    """


# =============================================================================
# New Command - Create a New App
# =============================================================================

@app.command()
def new(
    project_directory: Annotated[
        str | None,
        typer.Argument(
            help="Directory to create the app in (prompted for if omitted)",
            show_default=False,
        ),
    ] = None,
    use_yarn: Annotated[
        bool,
        typer.Option(
            "--use-yarn",
            help="Bootstrap the app using yarn instead of npm",
        ),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="TOML file overriding dependencies, template or registry host",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    no_git: Annotated[
        bool,
        typer.Option(
            "--no-git",
            help="Skip git initialization",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show debug output",
        ),
    ] = False,
) -> None:
    """
    Create a new Next.js app.

    Writes package.json, installs dependencies, copies the starter
    template and initializes a git repository.

    [bold]Examples:[/]

        # Prompt for the name
        appforge new

        # Create ./my-app with npm
        appforge new my-app

        # Create ./my-app with yarn
        appforge new my-app --use-yarn
    """
    if verbose:
        log.set_level("debug")

    project_path = (project_directory or "").strip()
    if not project_path:
        project_path = prompt_project_path()

    if not project_path:
        print_usage_hint()
        raise typer.Exit(1)

    try:
        settings = load_settings(config)
    except (OSError, tomli.TOMLDecodeError, ValidationError) as e:
        rprint(f"[red]Error:[/] Could not load settings from {config}: {e}")
        raise typer.Exit(1)

    request = ProjectRequest(target_path=Path(project_path), use_yarn=use_yarn)
    log.debug(f"Resolved target: {request.target_path}")

    exit_code = run(
        request,
        confirm_retry=confirm_retry,
        settings=settings,
        init_git=not no_git,
    )
    raise typer.Exit(exit_code)

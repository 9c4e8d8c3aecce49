"""
relbump CLI - Bump command.

Bump the release version, generate changelogs from merged pull requests,
and stage the edited files.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from relbump import __version__
from relbump.cli.errors import ExitCode, console, print_bump_error, print_error
from relbump.core.config import load_config, load_layered_env
from relbump.core.exceptions import BumpError
from relbump.core.release import BumpResult, BumpService

app = typer.Typer(
    name="relbump",
    help="Bump the release version and generate changelogs",
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)

# Changelog and git status go to stdout; progress and errors go to stderr
out = Console()


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging.

    Args:
        debug: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _version_callback(value: bool) -> None:
    if value:
        out.print(f"relbump version {__version__}")
        raise typer.Exit(0)


def _print_summary(result: BumpResult) -> None:
    console.print("[bold]Release Summary:[/bold]")
    console.print(f"  Version: {result.old_version} → {result.new_version}", highlight=False)
    if result.checkout is not None:
        checkout = result.checkout
        console.print(f"  [green]✓[/green] Submodule {checkout.path} at {checkout.ref}")
    for changelog in result.changelogs:
        if changelog.since is None:
            console.print(f"  [dim]○ {changelog.label}: no release merge found[/dim]")
        else:
            count = len(changelog.entries)
            console.print(f"  [green]✓[/green] {changelog.label}: {count} pull request(s)")
    for path in result.files_written:
        console.print(f"  [green]✓[/green] Updated {path.name}")
    console.print()


@app.command()
def bump(
    ctx: typer.Context,
    new_version: Annotated[
        Optional[str],
        typer.Argument(
            help="Version to release (e.g., 10.8.0)",
            show_default=False,
        ),
    ] = None,
    web_branch: Annotated[
        Optional[str],
        typer.Option(
            "--web-branch",
            "-b",
            help="Web dashboard branch (defaults to the current branch)",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Print the changelogs without changing anything",
        ),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Approve generated changelogs without opening $EDITOR",
        ),
    ] = False,
    skip_submodule: Annotated[
        bool,
        typer.Option(
            "--skip-submodule",
            help="Do not check out the web dashboard submodule",
        ),
    ] = False,
    project_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--project-dir",
            "-C",
            help="Host repository root (defaults to the current directory)",
        ),
    ] = None,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            help="Enable debug logging",
        ),
    ] = False,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show relbump version and exit",
        ),
    ] = None,
) -> None:
    """
    Bump the release version and update the changelogs.

    This command:
    1. Checks out the web dashboard submodule at the release branch
    2. Rewrites the version file
    3. Collects pull requests merged since the previous release
    4. Opens the new debian/changelog and RPM spec entries in $EDITOR
    5. Stages the edited files and prints the GitHub changelog

    Examples:

        # Bump using the current branch for the web dashboard
        bump_version 10.8.0

        # Use a specific web dashboard branch
        bump_version -b release-10.8 10.8.0

        # Preview the changelogs
        bump_version --dry-run 10.8.0
    """
    if new_version is None:
        console.print(ctx.get_usage(), markup=False, highlight=False)
        print_error("Missing argument NEW_VERSION", solution="bump_version 10.8.0")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    setup_logging(debug)

    root = (project_dir or Path.cwd()).resolve()
    load_layered_env(project_dir=root)

    try:
        config = load_config(root, use_cache=False)
    except ValidationError as e:
        print_error(
            "Invalid configuration",
            reason=str(e),
            solution=f"Check {root / '.relbump.json'}",
        )
        raise typer.Exit(ExitCode.USER_ERROR)

    try:
        service = BumpService(root, config, auto_approve=yes)

        console.print(f"[cyan]Bumping to {new_version}...[/cyan]")
        if dry_run:
            console.print("[yellow]DRY RUN - No changes will be made[/yellow]")
        console.print()

        result = service.bump(
            new_version,
            web_branch,
            dry_run=dry_run,
            skip_submodule=skip_submodule,
        )
    except BumpError as e:
        raise typer.Exit(print_bump_error(e))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(ExitCode.SIGINT)

    _print_summary(result)

    if result.fragments.is_empty:
        console.print("[dim]No pull requests found since the previous release[/dim]")

    if dry_run:
        console.rule("debian/changelog")
        console.print(result.fragments.debian, markup=False, highlight=False, end="")
        console.rule("%changelog")
        console.print(result.fragments.yum, markup=False, highlight=False, end="")
        console.rule("GitHub")
    else:
        out.print(result.status, markup=False, highlight=False)
        out.print()

    out.print(result.fragments.github, markup=False, highlight=False, soft_wrap=True, end="")

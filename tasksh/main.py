"""
Main entry point for the tasksh CLI.

This module provides the command-line interface for tasksh: it collects the
description, calls the generation pipeline and renders the suggestion. It
never runs the suggested command.
"""

import asyncio
import importlib.metadata
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from tasksh.config import settings as settings_module
from tasksh.config.environment import GeneratorConfig
from tasksh.config.settings import Settings
from tasksh.errors import (
    ConfigurationError,
    GenerationError,
    SafetyBlockedError,
)
from tasksh.generator.engine import generate_command
from tasksh.models.command_models import (
    CommandConfidence,
    GeneratedCommand,
    Shell,
)
from tasksh.utils import platform_utils
from tasksh.utils.logging import initialize_logging, setup_logging

app = typer.Typer(
    name="task",
    help="Turn a natural-language task description into a shell command.",
    add_completion=False,
)

console = Console()

# Define typer arguments at module level to avoid B008
_DESCRIPTION_ARG = typer.Argument(
    None, help="What you want to do. Read from stdin when omitted."
)
_SHELL_OPTION = typer.Option(
    None, "--shell", "-s", case_sensitive=False, help="Target shell."
)
_CONFIG_OPTION = typer.Option(
    None, "--config", help="Path to a settings.json file to use instead."
)


def get_version() -> str:
    """Get the installed version of tasksh."""
    try:
        return importlib.metadata.version("tasksh")
    except importlib.metadata.PackageNotFoundError:
        return "0.1.0"


@app.callback(invoke_without_command=True)
def callback(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None, "--version", help="Show the application version and exit."
    ),
) -> None:
    """tasksh - describe a task, get a shell command."""
    if version:
        console.print(f"[bold green]tasksh version:[/] {get_version()}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def read_stdin() -> Optional[str]:
    """
    Read a description piped on stdin.

    Returns:
        Optional[str]: The stripped input, or None when stdin is a terminal.
    """
    if sys.stdin is None or sys.stdin.isatty():
        return None
    return sys.stdin.read().strip()


def resolve_default_shell(active_settings: Settings) -> Shell:
    """
    Pick the shell when --shell is not given.

    Order: settings file, then the login shell, then bash.
    """
    candidates = [
        active_settings.get("generation", "default_shell", ""),
        platform_utils.detect_shell_from_environment(),
    ]
    for candidate in candidates:
        if not candidate:
            continue
        try:
            return Shell(str(candidate).lower())
        except ValueError:
            continue
    return Shell.BASH


def render_result(result: GeneratedCommand, verbose: bool = False) -> None:
    """Print a generated command, its explanation and alternatives."""
    if result.is_guidance:
        console.print("[bold yellow]Guidance:[/]")
        console.print(Panel(Text(result.command), border_style="yellow"))
    else:
        console.print("[bold green]Suggested command:[/]")
        console.print(Panel(Text(result.command, style="bold"), border_style="green"))

    if result.explanation:
        console.print(f"[bold]Explanation:[/] {escape(result.explanation)}")

    if result.confidence is CommandConfidence.NEEDS_CONFIRMATION:
        console.print(
            "[yellow]This suggestion is uncertain. Review it before running it.[/]"
        )

    if result.alternatives:
        console.print("\n[bold]Alternative commands:[/]")
        for idx, alt in enumerate(result.alternatives, start=1):
            console.print(f"  {idx}. {escape(alt)}")

    if verbose and result.raw_response is not None:
        console.print("\n[bold]Raw response:[/]")
        console.print(Text(result.raw_response))


@app.command()
def gen(
    description: Optional[List[str]] = _DESCRIPTION_ARG,
    shell: Optional[Shell] = _SHELL_OPTION,
    model: Optional[str] = typer.Option(
        None, "--model", "-m", help="OpenAI chat model to use."
    ),
    system_prompt: Optional[str] = typer.Option(
        None, "--system-prompt", help="Replace the default system prompt."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", help="Show the raw model response."
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
    config_file: Optional[Path] = _CONFIG_OPTION,
) -> None:
    """
    Generate a shell command from a description.

    The command is printed, never executed.
    """
    active_settings = (
        Settings(config_file=config_file) if config_file else settings_module.settings
    )

    if debug:
        setup_logging(log_level="DEBUG")
    else:
        initialize_logging(active_settings=active_settings)

    text = " ".join(description) if description else (read_stdin() or "")

    target_shell = shell or resolve_default_shell(active_settings)
    model = model or active_settings.get("generation", "model") or None
    system_prompt = (
        system_prompt or active_settings.get("generation", "system_prompt") or None
    )
    verbose = verbose or bool(active_settings.get("ui", "verbose", False))

    try:
        result = asyncio.run(
            generate_command(
                text,
                target_shell,
                system_prompt,
                model,
                config=GeneratorConfig.from_env(),
            )
        )
    except SafetyBlockedError as e:
        console.print(f"[bold red]Blocked by safety rules:[/] {escape(str(e))}")
        raise typer.Exit(1) from e
    except ConfigurationError as e:
        console.print(f"[bold red]Configuration error:[/] {escape(str(e))}")
        raise typer.Exit(1) from e
    except GenerationError as e:
        console.print(f"[bold red]Generation failed:[/] {escape(str(e))}")
        raise typer.Exit(1) from e

    render_result(result, verbose=verbose)

"""Command-line entry point for cc-auto-commit."""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from cc_auto_commit.cli.setup_hooks import DEFAULT_HOOK_COMMAND, install_hooks, settings_path
from cc_auto_commit.core.config import CONFIG_ENV_VAR, load_config
from cc_auto_commit.core.diff_source import read_standalone_input
from cc_auto_commit.core.errors import (
    EmptyInputError,
    GenerationError,
    NotARepositoryError,
    ParseError,
    RepoWriteError,
    SettingsError,
    SourceReadError,
)
from cc_auto_commit.core.generator import RECURSION_GUARD_ENV
from cc_auto_commit.hooks.dispatcher import HookDispatcher, parse_input
from cc_auto_commit.models.commit import CommitMessage

LANGUAGE_ENV_VAR = "CC_AUTO_COMMIT_LANGUAGE"
DEBUG_LOG_NAME = "cc-auto-commit-debug.log"

console = Console(stderr=True)
logger = logging.getLogger("cc_auto_commit")


def configure_logging(debug: bool = False) -> None:
    """Log to ~/.claude/cc-auto-commit-debug.log, and to stderr with --debug."""
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    debug_log = Path.home() / ".claude" / DEBUG_LOG_NAME
    try:
        debug_log.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(debug_log, encoding="utf-8")
    except OSError:
        # A hook must keep working even where the log cannot be written.
        logger.addHandler(logging.NullHandler())
    else:
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )
        logger.addHandler(file_handler)

    if debug:
        logger.addHandler(RichHandler(console=console, show_path=False))


@click.group(invoke_without_command=True)
@click.version_option(package_name="cc-auto-commit")
@click.option(
    "-l",
    "--language",
    envvar=LANGUAGE_ENV_VAR,
    help=f"Language for commit messages (env: {LANGUAGE_ENV_VAR})",
)
@click.option(
    "--config",
    "config_path",
    envvar=CONFIG_ENV_VAR,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to a commit-config.toml",
)
@click.option("--debug", is_flag=True, help="Also log to stderr")
@click.pass_context
def main(ctx, language: Optional[str], config_path: Optional[Path], debug: bool):
    """Generate conventional commit messages with AI and commit Claude Code's edits.

    As a Claude Code hook, reads the hook payload from stdin and commits.
    Otherwise reads a diff from stdin and prints a commit message.
    """
    if ctx.invoked_subcommand is not None:
        return

    configure_logging(debug)

    if os.environ.get(RECURSION_GUARD_ENV):
        logger.debug("Invoked from our own generator, skipping")
        return

    try:
        raw = read_standalone_input(sys.stdin)
    except EmptyInputError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        ctx.exit(1)

    try:
        parsed = parse_input(raw)
    except ParseError as e:
        logger.warning("%s", e)
        return

    config = load_config(config_path, cwd=getattr(parsed, "cwd", None))
    dispatcher = HookDispatcher(config, language=language)

    try:
        result = dispatcher.dispatch(parsed)
    except (NotARepositoryError, SourceReadError) as e:
        logger.info("Nothing to do: %s", e)
        return
    except (GenerationError, RepoWriteError) as e:
        logger.error("%s", e)
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        ctx.exit(1)

    if isinstance(result, CommitMessage):
        click.echo(result.text)
    elif result.committed:
        logger.info("Committed %s: %s", result.commit_sha[:8], result.message.subject)


@main.command()
@click.option(
    "--project-path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Project whose .claude/settings.json is updated",
)
@click.option(
    "--global", "global_settings", is_flag=True, help="Update ~/.claude/settings.json"
)
@click.option(
    "--command",
    default=DEFAULT_HOOK_COMMAND,
    show_default=True,
    help="Command Claude Code runs for each hook",
)
def install(project_path: Path, global_settings: bool, command: str):
    """Add SessionStart and PostToolUse hooks to Claude Code settings."""
    configure_logging()
    settings_file = settings_path(project_path.resolve(), global_settings)

    try:
        added = install_hooks(settings_file, command)
    except SettingsError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise click.Abort() from e

    if added:
        console.print(f"[green]✅ Added {', '.join(added)} hooks to {settings_file}[/green]")
    else:
        console.print(f"[yellow]Hooks already configured in {settings_file}[/yellow]")


if __name__ == "__main__":
    main()

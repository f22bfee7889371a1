"""
Command line interface for snap_vcs.

This module defines the ``main`` click group used as the entry point of
the ``svcs`` command. Each subcommand maps its arguments onto exactly one
:class:`~snap_vcs.repository.Repository` operation and renders the result
as text; no versioning logic lives here. Exit codes are defined below.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import List, NoReturn, Optional, Tuple

import click

from snap_vcs import __version__
from snap_vcs.config.loader import ROOT_ENV_VAR, ConfigError, load_settings
from snap_vcs.errors import StorageError
from snap_vcs.repository import CommitStatus, Repository
from snap_vcs.store.checkout import CheckoutStatus
from snap_vcs.store.index import AddStatus

# Create a module-level logger. Handlers are attached by ``main`` once the
# verbosity is known.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_INVALID_USAGE = 2
EXIT_NOT_FOUND = 3
EXIT_CONFIG_ERROR = 5
EXIT_STORAGE_ERROR = 6


# ---------------------------------------------------------------------------
# Supported commands
# ---------------------------------------------------------------------------
class Command(Enum):
    CONFIG = "config"
    ADD = "add"
    LOG = "log"
    COMMIT = "commit"
    CHECKOUT = "checkout"


COMMAND_HELP = {
    Command.CONFIG: "Get and set a username.",
    Command.ADD: "Add a file to the index.",
    Command.LOG: "Show commit logs.",
    Command.COMMIT: "Save changes.",
    Command.CHECKOUT: "Restore a file.",
}


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------
def print_info(message: str) -> None:
    """Print a regular message."""
    click.echo(message)


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    click.echo(message, err=True)


def fail(message: str, code: int) -> NoReturn:
    """Print ``message`` as an error and exit with ``code``."""
    print_error(message)
    raise click.exceptions.Exit(code)


class ClickEchoHandler(logging.Handler):
    """Logging handler writing through ``click.echo`` to the current stderr."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def configure_logging(verbose: bool) -> None:
    """Route ``snap_vcs`` log records to stderr.

    The handler is replaced on every invocation so that running several
    commands in one process (as the tests do) never stacks handlers.
    """
    package_logger = logging.getLogger("snap_vcs")
    for handler in list(package_logger.handlers):
        if isinstance(handler, ClickEchoHandler):
            package_logger.removeHandler(handler)

    handler = ClickEchoHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    package_logger.propagate = False


def render_help() -> str:
    """Return the command overview shown for ``svcs`` and ``svcs --help``."""
    lines = ["These are SVCS commands:"]
    for command in Command:
        lines.append(f"{command.value.ljust(10)} {COMMAND_HELP[command]}")
    return "\n".join(lines)


class SvcsGroup(click.Group):
    """Click group with the svcs command overview and error wording."""

    def list_commands(self, ctx: click.Context) -> List[str]:
        return [command.value for command in Command]

    def get_help(self, ctx: click.Context) -> str:
        return render_help()

    def resolve_command(
        self, ctx: click.Context, args: List[str]
    ) -> Tuple[Optional[str], Optional[click.Command], List[str]]:
        name = args[0]
        if self.get_command(ctx, name) is None and not ctx.resilient_parsing:
            fail(f"'{name}' is not a SVCS command.", EXIT_INVALID_USAGE)
        return super().resolve_command(ctx, args)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
@click.group(cls=SvcsGroup, invoke_without_command=True)
@click.option(
    "--root",
    envvar=ROOT_ENV_VAR,
    type=click.Path(file_okay=False),
    help="Storage directory for the index, log and snapshots (default: ./vcs).",
)
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="svcs")
@click.pass_context
def main(ctx: click.Context, root: Optional[str], verbose: bool) -> None:
    """Minimal content-addressed version control."""
    configure_logging(verbose)

    if ctx.invoked_subcommand is None:
        print_info(render_help())
        raise click.exceptions.Exit(EXIT_SUCCESS)

    try:
        settings = load_settings(root=root)
    except ConfigError as exc:
        fail(f"Configuration error: {exc}", EXIT_CONFIG_ERROR)

    try:
        ctx.obj = Repository.open(settings)
    except StorageError as exc:
        fail(f"Storage error: {exc}", EXIT_STORAGE_ERROR)
    logger.debug("Opened repository at %s", settings.root)


@main.command(Command.CONFIG.value, help=COMMAND_HELP[Command.CONFIG])
@click.argument("name", required=False)
@click.pass_obj
def config_command(repo: Repository, name: Optional[str]) -> None:
    try:
        if name:
            repo.set_username(name)
        username = repo.get_username()
    except ConfigError as exc:
        fail(f"Configuration error: {exc}", EXIT_CONFIG_ERROR)

    if username is None:
        print_info("Please, tell me who you are.")
    else:
        print_info(f"The username is {username}.")


@main.command(Command.ADD.value, help=COMMAND_HELP[Command.ADD])
@click.argument("path", required=False)
@click.pass_obj
def add_command(repo: Repository, path: Optional[str]) -> None:
    try:
        if not path:
            tracked = repo.list_tracked_paths()
            if not tracked:
                print_info("Add a file to the index.")
                return
            print_info("Tracked files:")
            for tracked_path in tracked:
                print_info(tracked_path)
            return

        result = repo.track_path(path)
    except StorageError as exc:
        fail(f"Storage error: {exc}", EXIT_STORAGE_ERROR)

    if result.ok:
        print_info(f"The file '{path}' is tracked.")
    elif result.status is AddStatus.OUTSIDE_WORK_TREE:
        fail(f"'{path}' is outside of the working directory.", EXIT_INVALID_USAGE)
    elif result.status is AddStatus.INSIDE_STORAGE_ROOT:
        fail(f"'{path}' is inside the storage directory.", EXIT_INVALID_USAGE)
    else:
        fail(f"Can't find '{path}'.", EXIT_NOT_FOUND)


@main.command(Command.LOG.value, help=COMMAND_HELP[Command.LOG])
@click.pass_obj
def log_command(repo: Repository) -> None:
    try:
        entries = repo.show_log()
    except StorageError as exc:
        fail(f"Storage error: {exc}", EXIT_STORAGE_ERROR)

    if not entries:
        print_info("No commits yet.")
        return
    for entry in entries:
        print_info(entry.render())


@main.command(Command.COMMIT.value, help=COMMAND_HELP[Command.COMMIT])
@click.argument("message", nargs=-1)
@click.pass_obj
def commit_command(repo: Repository, message: Tuple[str, ...]) -> None:
    try:
        result = repo.commit(" ".join(message))
    except StorageError as exc:
        fail(f"Storage error: {exc}", EXIT_STORAGE_ERROR)

    if result.status is CommitStatus.EMPTY_MESSAGE:
        fail("Message was not passed.", EXIT_INVALID_USAGE)
    elif result.status is CommitStatus.INVALID_MESSAGE:
        fail("Message cannot contain a commit header.", EXIT_INVALID_USAGE)
    elif result.status is CommitStatus.NOTHING_TO_COMMIT:
        print_info("Nothing to commit.")
    else:
        print_info("Changes are committed.")


@main.command(Command.CHECKOUT.value, help=COMMAND_HELP[Command.CHECKOUT])
@click.argument("commit_id", required=False)
@click.pass_obj
def checkout_command(repo: Repository, commit_id: Optional[str]) -> None:
    if not commit_id:
        fail("Commit id was not passed.", EXIT_INVALID_USAGE)

    try:
        result = repo.checkout(commit_id)
    except StorageError as exc:
        fail(f"Storage error: {exc}", EXIT_STORAGE_ERROR)

    if result.status is CheckoutStatus.NOT_FOUND:
        fail("Commit does not exist.", EXIT_NOT_FOUND)
    print_info(f"Switched to commit {commit_id}.")

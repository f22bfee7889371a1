"""
Configuration loader for snap_vcs.

Two kinds of configuration exist:

* :class:`Settings` describes *where* things live: the working area whose
  files are versioned and the storage root (``vcs`` by default) holding
  the index, the log, the username record and the snapshot directories.
  It is resolved once per process from explicit arguments or the
  ``SVCS_ROOT`` environment variable.
* :class:`UserConfig` is the persisted username record (``config.txt``).
  It is absent until first set, survives across runs, and is only ever
  changed by an explicit "set username" request.

A :class:`ConfigError` is raised when the storage root cannot be used.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from snap_vcs.errors import StorageError
from snap_vcs.store.fs import atomic_write_text, read_text


logger = logging.getLogger(__name__)
# Attach a null handler so that importing the library never emits
# "no handler" warnings. Messages reach the root logger once the CLI
# configures logging.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


DEFAULT_ROOT_NAME = "vcs"
ROOT_ENV_VAR = "SVCS_ROOT"

COMMITS_DIR_NAME = "commits"
CONFIG_FILE_NAME = "config.txt"
INDEX_FILE_NAME = "index.txt"
LOG_FILE_NAME = "log.txt"


class ConfigError(Exception):
    """Raised when the storage root or the username record is unusable."""

    pass


@dataclass(frozen=True)
class Settings:
    """Resolved locations used by a repository.

    Attributes
    ----------
    work_tree : Path
        Directory whose files are tracked and restored on checkout.
    root : Path
        Storage root holding every persisted record.
    """

    work_tree: Path
    root: Path

    @property
    def commits_dir(self) -> Path:
        return self.root / COMMITS_DIR_NAME

    @property
    def config_file(self) -> Path:
        return self.root / CONFIG_FILE_NAME

    @property
    def index_file(self) -> Path:
        return self.root / INDEX_FILE_NAME

    @property
    def log_file(self) -> Path:
        return self.root / LOG_FILE_NAME


def load_settings(
    work_tree: Optional[Union[str, Path]] = None,
    root: Optional[Union[str, Path]] = None,
) -> Settings:
    """Resolve the working area and storage root.

    Parameters
    ----------
    work_tree : str or Path, optional
        The working area. Defaults to the current directory.
    root : str or Path, optional
        The storage root. Relative values are taken relative to the
        working area. When omitted, ``$SVCS_ROOT`` is used if set,
        otherwise ``vcs``.

    Returns
    -------
    Settings
        Absolute locations for the repository.

    Raises
    ------
    ConfigError
        If the storage root exists but is not a directory.
    """
    tree = Path(work_tree) if work_tree is not None else Path.cwd()
    tree = tree.resolve()

    if root is None:
        root = os.environ.get(ROOT_ENV_VAR) or DEFAULT_ROOT_NAME
    root_path = Path(root)
    if not root_path.is_absolute():
        root_path = tree / root_path

    if root_path.exists() and not root_path.is_dir():
        logger.error("Storage root '%s' is not a directory", root_path)
        raise ConfigError(f"Storage root {root_path} exists and is not a directory.")

    logger.debug("Resolved work tree %s, storage root %s", tree, root_path)
    return Settings(work_tree=tree, root=root_path)


class UserConfig:
    """Persisted username record.

    The record is a single line of text; an empty record means the
    username has not been set yet.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def get_username(self) -> Optional[str]:
        """Return the stored username, or None if it was never set."""
        try:
            value = read_text(self.path).rstrip("\r\n")
        except StorageError as exc:
            raise ConfigError(str(exc)) from exc
        return value or None

    def set_username(self, name: str) -> None:
        """Persist ``name`` as the current username.

        Raises
        ------
        ConfigError
            If the name is blank, spans several lines, or cannot be written.
        """
        name = name.strip()
        if not name:
            raise ConfigError("Username must not be empty.")
        if "\n" in name or "\r" in name:
            raise ConfigError("Username must be a single line.")
        try:
            atomic_write_text(self.path, name)
        except StorageError as exc:
            raise ConfigError(str(exc)) from exc
        logger.debug("Username set to %r", name)

"""
Repository facade and commit workflow.

:class:`Repository` wires the storage components to one storage root and
exposes the operations used by the command line interface. Outcomes a
user can cause (missing file, empty message, nothing to commit, unknown
commit) come back as result objects; disk failures raise
:class:`~snap_vcs.errors.StorageError` and configuration problems raise
:class:`~snap_vcs.config.loader.ConfigError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from snap_vcs.config.loader import ConfigError, Settings, UserConfig
from snap_vcs.errors import StorageError
from snap_vcs.store.checkout import CheckoutEngine, CheckoutResult
from snap_vcs.store.commit_log import CommitLog, LogEntry, is_recordable_message
from snap_vcs.store.commit_store import CommitStore
from snap_vcs.store.index import AddResult, TrackedFileIndex


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class CommitStatus(Enum):
    """Outcome of a commit request."""

    COMMITTED = "committed"
    NOTHING_TO_COMMIT = "nothing_to_commit"
    EMPTY_MESSAGE = "empty_message"
    INVALID_MESSAGE = "invalid_message"


@dataclass
class CommitResult:
    """Result of :meth:`Repository.commit`.

    ``fingerprint`` is the snapshot fingerprint for committed and
    nothing-to-commit outcomes, and None when the message was rejected.
    """

    status: CommitStatus
    fingerprint: Optional[str] = None
    entry: Optional[LogEntry] = None


class Repository:
    """Versioning operations over a single storage root."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.user_config = UserConfig(settings.config_file)
        self.index = TrackedFileIndex(settings.index_file, settings.work_tree, settings.root)
        self.store = CommitStore(settings.commits_dir, settings.work_tree)
        self.log = CommitLog(settings.log_file)
        self.checkout_engine = CheckoutEngine(self.store, settings.work_tree)

    @classmethod
    def open(cls, settings: Settings) -> "Repository":
        """Create the storage layout if needed and return a repository.

        Raises
        ------
        StorageError
            If the layout cannot be created.
        """
        try:
            settings.commits_dir.mkdir(parents=True, exist_ok=True)
            for record in (settings.config_file, settings.index_file, settings.log_file):
                if not record.exists():
                    record.touch()
                    logger.debug("Created %s", record)
        except OSError as exc:
            logger.error("Cannot initialise storage root %s: %s", settings.root, exc)
            raise StorageError(f"Cannot initialise {settings.root}: {exc}") from exc
        return cls(settings)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def set_username(self, name: str) -> None:
        self.user_config.set_username(name)

    def get_username(self) -> Optional[str]:
        return self.user_config.get_username()

    # ------------------------------------------------------------------
    # Index
    # ------------------------------------------------------------------
    def track_path(self, path: Union[str, Path]) -> AddResult:
        return self.index.add(path)

    def list_tracked_paths(self) -> List[str]:
        return self.index.list()

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    def commit(self, message: Optional[str]) -> CommitResult:
        """Snapshot the tracked files and record the commit.

        The snapshot is stored before the log entry is written, so the
        log never names a fingerprint that has no snapshot. A snapshot
        that already exists (for example after reverting a file to an
        earlier state) is reused instead of being stored again.

        Raises
        ------
        StorageError
            If a tracked file is missing or any record cannot be written.
        """
        if not message:
            return CommitResult(CommitStatus.EMPTY_MESSAGE)
        message = message.rstrip("\n")
        if not message or not is_recordable_message(message):
            return CommitResult(CommitStatus.INVALID_MESSAGE)

        paths = self.index.list()
        candidate = self.store.compute_fingerprint(paths)

        if candidate == self.log.last_fingerprint():
            logger.debug("Snapshot %s is already the latest commit", candidate)
            return CommitResult(CommitStatus.NOTHING_TO_COMMIT, candidate)

        if self.store.exists(candidate):
            logger.debug("Reusing stored snapshot %s", candidate)
        else:
            self.store.store(candidate, paths)

        try:
            author = self.get_username() or ""
        except ConfigError as exc:
            raise StorageError(str(exc)) from exc
        entry = self.log.append(candidate, author, message)
        logger.info("Committed %s (%d file(s))", candidate, len(paths))
        return CommitResult(CommitStatus.COMMITTED, candidate, entry)

    def checkout(self, fingerprint: str) -> CheckoutResult:
        return self.checkout_engine.checkout(fingerprint)

    def show_log(self) -> List[LogEntry]:
        """Return every commit, most recent first; empty if none yet."""
        return list(self.log.entries())

"""
Restoring snapshots into the working area.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List

from snap_vcs.errors import SnapshotNotFoundError, StorageError

from .commit_store import CommitStore


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class CheckoutStatus(Enum):
    """Outcome of a checkout request."""

    SWITCHED = "switched"
    NOT_FOUND = "not_found"


@dataclass
class CheckoutResult:
    """Result of :meth:`CheckoutEngine.checkout`."""

    status: CheckoutStatus
    fingerprint: str
    restored: List[str] = field(default_factory=list)


class CheckoutEngine:
    """Overwrites working-area files with the content of a snapshot."""

    def __init__(self, store: CommitStore, work_tree: Path) -> None:
        self.store = store
        self.work_tree = work_tree

    def checkout(self, fingerprint: str) -> CheckoutResult:
        """Restore every file of the snapshot ``fingerprint``.

        Files are created when absent and replaced when present. Files
        that are not part of the snapshot are left alone. If a write
        fails, the error propagates and files restored so far keep their
        new content.

        Raises
        ------
        StorageError
            If the snapshot cannot be read or a file cannot be written.
        """
        try:
            files = self.store.retrieve(fingerprint)
        except SnapshotNotFoundError:
            logger.debug("No snapshot for %r", fingerprint)
            return CheckoutResult(CheckoutStatus.NOT_FOUND, fingerprint)

        restored: List[str] = []
        for path, content in files.items():
            target = self.work_tree / path
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(content)
            except OSError as exc:
                logger.error("Failed to restore '%s' from %s: %s", path, fingerprint, exc)
                raise StorageError(f"Cannot restore '{path}': {exc}") from exc
            restored.append(path)
            logger.debug("Restored '%s' from %s", path, fingerprint)

        return CheckoutResult(CheckoutStatus.SWITCHED, fingerprint, restored)

"""
Snapshot storage keyed by fingerprint.

Each snapshot is a directory ``commits/<fingerprint>/`` holding verbatim
copies of every tracked file under its path relative to the working
area. Snapshots are immutable once written and exist at most once per
fingerprint; deduplication is decided by the commit workflow, which
checks :meth:`CommitStore.exists` before calling :meth:`CommitStore.store`.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Dict, Iterable, Iterator, List

from snap_vcs.errors import SnapshotExistsError, SnapshotNotFoundError, StorageError

from .hasher import fingerprint_chunks, is_fingerprint


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class CommitStore:
    """Content-addressed store of full-copy snapshots."""

    def __init__(self, commits_dir: Path, work_tree: Path) -> None:
        self.commits_dir = commits_dir
        self.work_tree = work_tree

    # ------------------------------------------------------------------
    # Fingerprinting
    # ------------------------------------------------------------------
    def _read_tracked(self, paths: Iterable[str]) -> Iterator[bytes]:
        for path in paths:
            source = self.work_tree / path
            try:
                yield source.read_bytes()
            except OSError as exc:
                logger.error("Cannot read tracked file '%s': %s", path, exc)
                raise StorageError(f"Cannot read tracked file '{path}': {exc}") from exc

    def compute_fingerprint(self, paths: Iterable[str]) -> str:
        """Return the fingerprint of the current content of ``paths``.

        File contents are concatenated in the given order with no
        separator. An empty ``paths`` yields the fingerprint of empty
        content.

        Raises
        ------
        StorageError
            If any tracked file is missing or unreadable.
        """
        return fingerprint_chunks(self._read_tracked(paths))

    # ------------------------------------------------------------------
    # Snapshot access
    # ------------------------------------------------------------------
    def _snapshot_dir(self, fingerprint: str) -> Path:
        return self.commits_dir / fingerprint

    def exists(self, fingerprint: str) -> bool:
        """Return True if a snapshot with this fingerprint is stored."""
        if not is_fingerprint(fingerprint):
            return False
        return self._snapshot_dir(fingerprint).is_dir()

    def fingerprints(self) -> List[str]:
        """Return the fingerprints of all stored snapshots, sorted."""
        if not self.commits_dir.is_dir():
            return []
        return sorted(
            entry.name
            for entry in self.commits_dir.iterdir()
            if entry.is_dir() and is_fingerprint(entry.name)
        )

    def store(self, fingerprint: str, paths: Iterable[str]) -> None:
        """Persist a snapshot of ``paths`` under ``fingerprint``.

        Raises
        ------
        SnapshotExistsError
            If a snapshot with this fingerprint is already stored.
        StorageError
            If a tracked file cannot be copied. The partial snapshot is
            removed before the error propagates.
        """
        if not is_fingerprint(fingerprint):
            raise ValueError(f"Not a fingerprint: {fingerprint!r}")

        target = self._snapshot_dir(fingerprint)
        try:
            target.mkdir(parents=True)
        except FileExistsError as exc:
            raise SnapshotExistsError(f"Snapshot {fingerprint} already exists.") from exc
        except OSError as exc:
            logger.error("Cannot create snapshot directory %s: %s", target, exc)
            raise StorageError(f"Cannot create snapshot {fingerprint}: {exc}") from exc

        try:
            for path in paths:
                destination = target / path
                destination.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(self.work_tree / path, destination)
                logger.debug("Stored '%s' in snapshot %s", path, fingerprint)
        except OSError as exc:
            logger.error("Failed to store snapshot %s: %s", fingerprint, exc)
            shutil.rmtree(target, ignore_errors=True)
            raise StorageError(f"Cannot store snapshot {fingerprint}: {exc}") from exc

    def retrieve(self, fingerprint: str) -> Dict[str, bytes]:
        """Return the files of a snapshot as a mapping of path to content.

        Paths are relative to the working area, in POSIX form, sorted.

        Raises
        ------
        SnapshotNotFoundError
            If no snapshot exists for ``fingerprint``.
        StorageError
            If a snapshot file cannot be read.
        """
        if not self.exists(fingerprint):
            raise SnapshotNotFoundError(f"Commit {fingerprint} does not exist.")

        root = self._snapshot_dir(fingerprint)
        files: Dict[str, bytes] = {}
        try:
            for entry in sorted(p for p in root.rglob("*") if p.is_file()):
                files[entry.relative_to(root).as_posix()] = entry.read_bytes()
        except OSError as exc:
            logger.error("Failed to read snapshot %s: %s", fingerprint, exc)
            raise StorageError(f"Cannot read snapshot {fingerprint}: {exc}") from exc
        return files

"""
Tracked-file index.

The index is the ordered set of file paths under version control. Paths
are stored one per line in ``index.txt``, relative to the working area
and in POSIX form. The order of first addition is the canonical order in
which file contents are hashed and snapshotted.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator, List, Optional, Union

from .fs import append_text, read_text


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class AddStatus(Enum):
    """Outcome of a request to track a path."""

    ADDED = "added"
    ALREADY_TRACKED = "already_tracked"
    NOT_FOUND = "not_found"
    OUTSIDE_WORK_TREE = "outside_work_tree"
    INSIDE_STORAGE_ROOT = "inside_storage_root"


@dataclass
class AddResult:
    """Result of :meth:`TrackedFileIndex.add`.

    ``path`` is the normalised index entry when the path was accepted, and
    the path exactly as requested otherwise.
    """

    status: AddStatus
    path: str

    @property
    def ok(self) -> bool:
        return self.status in (AddStatus.ADDED, AddStatus.ALREADY_TRACKED)


class TrackedFileIndex:
    """Ordered, duplicate-free list of tracked paths."""

    def __init__(self, index_file: Path, work_tree: Path, storage_root: Optional[Path] = None) -> None:
        self.index_file = index_file
        self.work_tree = Path(work_tree).resolve()
        # Relative location of the storage root when it lives in the working
        # area; nothing below it may be tracked.
        self._storage_prefix: Optional[str] = None
        if storage_root is not None:
            try:
                self._storage_prefix = self.normalize(Path(storage_root).resolve())
            except ValueError:
                pass

    def in_storage_root(self, entry: str) -> bool:
        """Return True if the index entry lies inside the storage root."""
        prefix = self._storage_prefix
        if prefix is None:
            return False
        return prefix == "." or entry == prefix or entry.startswith(prefix + "/")

    def normalize(self, path: Union[str, Path]) -> str:
        """Return ``path`` as a POSIX path relative to the working area.

        Raises
        ------
        ValueError
            If the path lies outside the working area.
        """
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self.work_tree / candidate
        candidate = Path(os.path.normpath(candidate))
        return candidate.relative_to(self.work_tree).as_posix()

    def add(self, path: Union[str, Path]) -> AddResult:
        """Start tracking ``path``.

        The path must name an existing regular file at call time. Adding a
        path that is already tracked changes nothing and is reported as
        :attr:`AddStatus.ALREADY_TRACKED`.
        """
        requested = str(path)
        try:
            entry = self.normalize(path)
        except ValueError:
            logger.debug("Rejected '%s': outside of %s", requested, self.work_tree)
            return AddResult(AddStatus.OUTSIDE_WORK_TREE, requested)

        if self.in_storage_root(entry):
            logger.debug("Rejected '%s': inside the storage root", requested)
            return AddResult(AddStatus.INSIDE_STORAGE_ROOT, requested)

        if not (self.work_tree / entry).is_file():
            logger.debug("Rejected '%s': no such file", requested)
            return AddResult(AddStatus.NOT_FOUND, requested)

        if entry in self.list():
            return AddResult(AddStatus.ALREADY_TRACKED, entry)

        append_text(self.index_file, f"{entry}\n")
        logger.debug("Tracking '%s'", entry)
        return AddResult(AddStatus.ADDED, entry)

    def list(self) -> List[str]:
        """Return the tracked paths in insertion order.

        Blank lines and repeated entries are ignored; the first occurrence
        of a path determines its position.
        """
        seen = set()
        paths: List[str] = []
        for line in read_text(self.index_file).split("\n"):
            entry = line.rstrip("\r")
            if entry and entry not in seen:
                seen.add(entry)
                paths.append(entry)
        return paths

    def __iter__(self) -> Iterator[str]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self.list())

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        try:
            return self.normalize(path) in self.list()
        except ValueError:
            return False

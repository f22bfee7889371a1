"""
Small file-system helpers shared by the storage records.

Every helper converts :class:`OSError` into :class:`StorageError` so that
callers deal with a single failure type for disk problems.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from snap_vcs.errors import StorageError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


def read_text(path: Path) -> str:
    """Return the UTF-8 content of ``path``, or ``""`` if it does not exist."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return ""
    except OSError as exc:
        logger.error("Failed to read %s: %s", path, exc)
        raise StorageError(f"Cannot read {path}: {exc}") from exc


def atomic_write_text(path: Path, content: str) -> None:
    """Replace ``path`` with ``content`` using a temp file and ``os.replace``.

    A crash during the write leaves the previous content in place.
    """
    try:
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    except OSError as exc:
        logger.error("Failed to create temporary file next to %s: %s", path, exc)
        raise StorageError(f"Cannot write {path}: {exc}") from exc

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
        os.replace(tmp_path, path)
    except OSError as exc:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        logger.error("Failed to write %s: %s", path, exc)
        raise StorageError(f"Cannot write {path}: {exc}") from exc


def append_text(path: Path, content: str) -> None:
    """Append ``content`` to ``path``, creating the file if needed."""
    try:
        with path.open("a", encoding="utf-8", newline="") as handle:
            handle.write(content)
    except OSError as exc:
        logger.error("Failed to append to %s: %s", path, exc)
        raise StorageError(f"Cannot write {path}: {exc}") from exc

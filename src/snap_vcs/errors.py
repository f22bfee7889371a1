"""
Exception types raised by the snap_vcs storage layer.

Recoverable outcomes of user requests (a missing path, an empty commit
message, nothing to commit) are reported through result objects in
:mod:`snap_vcs.repository`. The exceptions below are reserved for I/O
failures and for internal invariant violations.
"""

from __future__ import annotations


class VCSError(Exception):
    """Base class for all snap_vcs errors."""

    pass


class StorageError(VCSError):
    """Raised when a persisted record or a tracked file cannot be read or written."""

    pass


class SnapshotExistsError(VCSError):
    """Raised when a snapshot is stored twice under the same fingerprint.

    Callers are expected to check :meth:`CommitStore.exists` first, so
    this indicates a programming error rather than a user error.
    """

    pass


class SnapshotNotFoundError(VCSError):
    """Raised when no snapshot exists for a requested fingerprint."""

    pass

"""
Storage layer for snap_vcs.

This package contains the content hasher, the tracked-file index, the
snapshot store, the commit log and the checkout engine. Each component
owns one persisted record and is correlated with the others only through
fingerprints.
"""

from .checkout import CheckoutEngine, CheckoutResult, CheckoutStatus  # noqa: F401
from .commit_log import CommitLog, LogEntry  # noqa: F401
from .commit_store import CommitStore  # noqa: F401
from .hasher import fingerprint  # noqa: F401
from .index import AddResult, AddStatus, TrackedFileIndex  # noqa: F401

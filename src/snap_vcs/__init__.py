"""
Top-level package for snap_vcs.

snap_vcs records snapshots of a chosen set of files, deduplicates them by
content fingerprint and restores any earlier snapshot. The command line
entry point lives in :mod:`snap_vcs.cli`.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"

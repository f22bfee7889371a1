"""
Configuration handling for snap_vcs.

Provides the resolution of the working area and storage root, and the
persisted username record. See :mod:`snap_vcs.config.loader` for
implementation details.
"""

from .loader import ConfigError, Settings, UserConfig, load_settings  # noqa: F401

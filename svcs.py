#!/usr/bin/env python
"""
Thin wrapper script to invoke the snap_vcs CLI.

Running ``python svcs.py`` is equivalent to running the ``svcs`` console
script installed via ``pyproject.toml``.
"""

from snap_vcs.cli import main


if __name__ == "__main__":
    main(prog_name="svcs")

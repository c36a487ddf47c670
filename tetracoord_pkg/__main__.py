"""Main entry point for running tetracoord_pkg as a module.

This allows running Tetracoord with:
    python -m tetracoord_pkg
    python -m tetracoord_pkg -e "tc[0q2] * 0d3"

This is equivalent to running:
    python -m tetracoord_pkg.cli
    python tetracoord.py
"""

from __future__ import annotations

import sys

from .cli import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())

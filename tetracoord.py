#!/usr/bin/env python3
"""
Tetracoord - Tetracoordinate Calculator

Main entry point for the tetracoord calculator application.
This file serves as a thin wrapper that delegates all functionality
to the tetracoord_pkg package.

Usage:
    python tetracoord.py                        # Interactive REPL
    python tetracoord.py -e "tc[0q0.2 + 0q0.2]" # Evaluate expression
    python tetracoord.py --help                 # Show help
"""

from __future__ import annotations

import sys


def main() -> int:
    """
    Main entry point for Tetracoord.

    Delegates all functionality to the tetracoord_pkg.cli module,
    which handles argument parsing, expression evaluation, and output formatting.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    try:
        from tetracoord_pkg.cli import main_entry

        return main_entry(sys.argv[1:])
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
        return 1
    except ImportError as e:
        print(f"Error: Failed to import tetracoord_pkg: {e}")
        print("Please ensure all dependencies are installed: pip install -e .")
        return 1


if __name__ == "__main__":
    sys.exit(main())

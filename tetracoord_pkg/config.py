"""Centralized configuration for Tetracoord.

This module defines:
- Input validation limits (length, nesting depth)
- Equality tolerances for power scalars and cartesian coordinates
- Default data file used by the command line driver
- Regex patterns for tokenizing expressions

Configuration can be overridden via:
- CLI flags (see cli.py)
- Environment variables (prefixed with TETRACOORD_)
"""

import os
import re

# Version is defined in pyproject.toml [project] section
try:
    import importlib.metadata

    VERSION = importlib.metadata.version("tetracoord")
except Exception:
    # Fallback if package not installed
    VERSION = "0.1.0"

# Input validation limits
MAX_INPUT_LENGTH = int(os.getenv("TETRACOORD_MAX_INPUT_LENGTH", "10000"))  # characters
MAX_EXPRESSION_DEPTH = int(
    os.getenv("TETRACOORD_MAX_EXPRESSION_DEPTH", "100")
)  # tree depth

# Equality tolerances
SCALAR_EQUALS_PRECISION = int(
    os.getenv("TETRACOORD_SCALAR_EQUALS_PRECISION", "8")
)  # decimal places
CCOORD_EQUALS_THRESHOLD = float(
    os.getenv("TETRACOORD_CCOORD_EQUALS_THRESHOLD", "1e-6")
)  # per component

# Command line driver
DEFAULT_DATA_FILE = os.getenv("TETRACOORD_DATA_FILE", "default.tcoord-data.json")
DEFAULT_LOG_LEVEL = os.getenv("TETRACOORD_LOG_LEVEL", "WARNING")

# Regex patterns for tokenizing
RADIX_PREFIX_REGEX = re.compile(r"(?<![\w$])0([bqd])(?=[\d.])")
NUMBER_REGEX = re.compile(r"\d+(?:\.\d+)?")
IDENTIFIER_REGEX = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
IRRATIONAL_SUFFIX_REGEX = re.compile(r"i(?![\w$])|\.\.\.")

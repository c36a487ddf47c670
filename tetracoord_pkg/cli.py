from __future__ import annotations

import argparse
import json
from typing import Any

from .api import evaluate, format_value
from .config import DEFAULT_DATA_FILE, DEFAULT_LOG_LEVEL, VERSION
from .logging_config import get_logger, setup_logging
from .plugins import PluginRegistry
from .radix import RadixType
from .storage import load_context, save_context
from .symbols import VAR_ANS_ID, VAR_CTX_ID, VEC_CCOORD_ID, VEC_TCOORD_ID
from .types import EvalResult, LoadError
from .variable_context import VariableContext

logger = get_logger("cli")


def print_result_pretty(res: EvalResult, output_format: str = "human") -> None:
    """Print result in specified format.

    Args:
        res: Evaluation result
        output_format: "json" for JSON output, "human" for human-readable
    """
    if output_format == "json":
        print(json.dumps(res.to_dict(), ensure_ascii=False))
        return
    if not res.ok:
        print("Error:", res.error)
        return
    print(f"result = {res.result}")
    if res.exact is not None:
        print(f"exact = {res.exact}")


def print_help_text() -> None:
    """Print help text for REPL commands."""
    help_text = f"""Tetracoord calculator version {VERSION}

Expressions:
  0q0.2 + 0q0.2          power scalars in binary (0b), quaternary (0q), decimal (0d)
  0q1.1i                 repeating least significant digit
  tc[0q31]               tetracoordinate
  cc[1, -2]              cartesian coordinate
  cc[tc[0q3]]            convert between vector types
  |cc[3, 4]|             magnitude
  var.a = tc[0q2] * 3    assign a variable
  var.{VAR_ANS_ID}                 last result
  exprcalc["path.py"](a, b)  call an expression calculator plugin

Commands:
  help                   show this text
  vars                   list variables
  save                   save variables to the data file
  reload                 reload variables from the data file
  quit, exit             leave (variables are saved unless --no-save)
"""
    print(help_text)


def print_variables(var_ctx: VariableContext, **fmt: Any) -> None:
    if len(var_ctx) == 0:
        print("No variables defined.")
        return
    for key in var_ctx:
        print(f"{VAR_CTX_ID}.{key} = {format_value(var_ctx.get(key), **fmt)}")


def _reload(path: str, var_ctx: VariableContext) -> bool:
    try:
        return load_context(path, var_ctx)
    except LoadError as e:
        logger.warning(f"Skipping data file {path}: {e}")
        print(f"Error: could not load {path}: {e}")
        return False


def _save(path: str, var_ctx: VariableContext) -> bool:
    try:
        save_context(path, var_ctx)
        return True
    except LoadError as e:
        logger.error(f"Failed to save data file {path}: {e}")
        print(f"Error: could not save {path}: {e}")
        return False


def repl_loop(
    var_ctx: VariableContext,
    data_file: str | None,
    output_format: str = "human",
    scalar_radix: str | None = None,
    vector_format: str | None = None,
    exact: bool = False,
) -> None:
    """Interactive REPL loop."""
    try:
        import readline  # noqa: F401
    except (ImportError, ModuleNotFoundError):
        # readline not available on Windows
        pass

    print("Tetracoord calculator - type 'help' for commands, 'quit' to exit.")
    while True:
        try:
            raw = input(">>> ")
        except (EOFError, KeyboardInterrupt):
            print()
            break
        line = raw.strip()
        if not line:
            continue
        command = line.lower()
        if command in ("quit", "exit"):
            break
        if command == "help":
            print_help_text()
            continue
        if command == "vars":
            print_variables(var_ctx, scalar_radix=scalar_radix, vector_format=vector_format)
            continue
        if command == "save":
            if data_file is None:
                print("No data file in use.")
            elif _save(data_file, var_ctx):
                print(f"Saved {len(var_ctx)} variables to {data_file}")
            continue
        if command == "reload":
            if data_file is None:
                print("No data file in use.")
            elif _reload(data_file, var_ctx):
                print(f"Loaded {len(var_ctx)} variables from {data_file}")
            continue

        res = evaluate(
            line,
            var_ctx,
            scalar_radix=scalar_radix,
            vector_format=vector_format,
            exact=exact,
        )
        print_result_pretty(res, output_format=output_format)


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for the Tetracoord CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(
        prog="tetracoord",
        description="Calculator for power scalars, tetracoordinates and cartesian coordinates",
    )
    parser.add_argument(
        "-e",
        "--eval",
        type=str,
        help="Evaluate one expression and exit (non-interactive)",
        dest="eval_expr",
    )
    parser.add_argument(
        "-s",
        "--scalar-radix",
        type=str,
        choices=[r.value for r in RadixType],
        help="Radix to print scalars in",
    )
    parser.add_argument(
        "-c",
        "--vector-format",
        type=str,
        choices=[VEC_CCOORD_ID, VEC_TCOORD_ID],
        help="Vector type to print vectors as",
    )
    parser.add_argument(
        "-f",
        "--file",
        type=str,
        default=DEFAULT_DATA_FILE,
        help=f"Data file holding saved variables (default: {DEFAULT_DATA_FILE})",
    )
    parser.add_argument(
        "--no-load", action="store_true", help="Do not load variables from the data file"
    )
    parser.add_argument(
        "--no-save", action="store_true", help="Do not save variables to the data file"
    )
    parser.add_argument(
        "--exact", action="store_true", help="Also print the exact rational value"
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=DEFAULT_LOG_LEVEL.upper(),
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    args = parser.parse_args(argv)

    if args.version:
        print(VERSION)
        return 0

    setup_logging(level=args.log_level, log_file=args.log_file)

    var_ctx = VariableContext(registry=PluginRegistry())
    if not args.no_load:
        _reload(args.file, var_ctx)

    fmt = dict(
        scalar_radix=args.scalar_radix,
        vector_format=args.vector_format,
        exact=args.exact,
    )
    exit_code = 0
    try:
        if args.eval_expr is not None:
            res = evaluate(args.eval_expr, var_ctx, **fmt)
            print_result_pretty(res, output_format=args.format)
            exit_code = 0 if res.ok else 1
        else:
            repl_loop(var_ctx, args.file, output_format=args.format, **fmt)
    finally:
        if not args.no_save and not _save(args.file, var_ctx):
            exit_code = 1
    return exit_code


if __name__ == "__main__":
    """Allow running the CLI module directly with python -m tetracoord_pkg.cli"""
    import sys

    sys.exit(main_entry())

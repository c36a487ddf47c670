"""Expression calculator plugins loaded from Python source files.

A plugin module must define ``EXPRESSION_CALCULATOR``, a subclass of
:class:`ExpressionCalculator` constructed with the plugin's file path.
"""

from __future__ import annotations

import hashlib
import importlib.util
import inspect
import os
import sys
import threading
from typing import Any, ClassVar

from .logging_config import get_logger
from .symbols import EXPR_CALC_TYPE
from .types import LoadError, ValueCollection

logger = get_logger("plugins")

PLUGIN_ATTRIBUTE = "EXPRESSION_CALCULATOR"


class ExpressionCalculator:
    """Base class of evaluator plugins callable from expressions."""

    type: ClassVar[str] = EXPR_CALC_TYPE

    def __init__(self, file_path: str):
        self.file_path = file_path

    def eval(self, args: ValueCollection) -> Any:
        """Evaluate the call arguments.

        Raises:
            PluginEvalError: If the arguments are not supported
        """
        raise NotImplementedError

    def save(self) -> dict[str, Any]:
        return {"type": self.type, "file_path": self.file_path}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(file_path={self.file_path!r})"


def _unique_module_name(path: str) -> str:
    base = os.path.splitext(os.path.basename(path))[0]
    digest = hashlib.sha256(path.encode("utf-8")).hexdigest()[:12]
    safe = "".join(ch if ch.isalnum() else "_" for ch in base)
    return f"tetracoord_plugin_{safe}_{digest}"


def load_plugin_module(path: str) -> Any:
    """Import a plugin source file as an anonymous module."""
    if not os.path.isfile(path):
        raise LoadError(f"Plugin not found: {path}", "PLUGIN_LOAD_ERROR", path)
    spec = importlib.util.spec_from_file_location(_unique_module_name(path), path)
    if spec is None or spec.loader is None:
        raise LoadError(f"Failed to load plugin module: {path}", "PLUGIN_LOAD_ERROR", path)
    module = importlib.util.module_from_spec(spec)

    # Let plugins import siblings by temporarily prepending their directory.
    plugin_dir = os.path.dirname(path)
    sys.path.insert(0, plugin_dir)
    try:
        spec.loader.exec_module(module)
    except Exception as err:
        raise LoadError(
            f"Plugin {path} failed to import: {err}", "PLUGIN_LOAD_ERROR", path
        ) from err
    finally:
        if sys.path and sys.path[0] == plugin_dir:
            sys.path.pop(0)
    return module


class PluginRegistry:
    """Cache of loaded expression calculators keyed by absolute file path.

    Each path is imported at most once; later loads return the cached instance.
    """

    def __init__(self) -> None:
        self._cache: dict[str, ExpressionCalculator] = {}
        self._lock = threading.Lock()

    def __contains__(self, file_path: str) -> bool:
        return os.path.abspath(file_path) in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def load(self, file_path: str) -> ExpressionCalculator:
        """Load the expression calculator defined at ``file_path``.

        Raises:
            LoadError: If the file is missing, fails to import or defines no calculator
        """
        key = os.path.abspath(file_path)
        with self._lock:
            cached = self._cache.get(key)
        if cached is not None:
            return cached

        # Module code may itself load plugins through this registry.
        module = load_plugin_module(key)
        calculator_cls = getattr(module, PLUGIN_ATTRIBUTE, None)
        if not (
            inspect.isclass(calculator_cls)
            and issubclass(calculator_cls, ExpressionCalculator)
        ):
            raise LoadError(
                f"Plugin {file_path} does not define {PLUGIN_ATTRIBUTE} "
                f"as an {ExpressionCalculator.__name__} subclass",
                "PLUGIN_LOAD_ERROR",
                file_path,
            )
        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                return cached
            calculator = calculator_cls(file_path)
            self._cache[key] = calculator
        logger.info(f"Loaded plugin {calculator_cls.__name__} from {key}")
        return calculator

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

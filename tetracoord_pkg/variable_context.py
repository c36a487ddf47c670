"""Variable namespace addressed as ``var`` in expressions."""

from __future__ import annotations

import threading
from typing import Any, ClassVar, Iterator

from .logging_config import get_logger
from .plugins import PluginRegistry
from .serializer import Serializer
from .symbols import VAR_ANS_ID, VAR_CTX_ID
from .types import LoadError, ReservedNameError

logger = get_logger("variable_context")


class VariableContext:
    """Named values plus the ``$ans`` slot holding the last evaluation result.

    ``lock`` is held for the whole of an evaluation against this context.
    """

    type: ClassVar[str] = VAR_CTX_ID

    def __init__(
        self,
        values: dict[str, Any] | None = None,
        registry: PluginRegistry | None = None,
    ):
        self.values: dict[str, Any] = dict(values or {})
        self.answer: Any = None
        self.registry = registry if registry is not None else PluginRegistry()
        self.serializer = Serializer(self.registry)
        self.lock = threading.RLock()

    def get(self, key: str) -> Any:
        if key == VAR_ANS_ID:
            return self.answer
        return self.values.get(key)

    def set(self, key: str, value: Any) -> Any:
        """Assign ``value`` to ``key`` and return it.

        Raises:
            ReservedNameError: If ``key`` is the reserved answer slot
        """
        if key == VAR_ANS_ID:
            raise ReservedNameError(f"cannot assign to reserved variable {VAR_CTX_ID}.{key}")
        self.values[key] = value
        return value

    def set_answer(self, value: Any) -> None:
        self.answer = value

    def __contains__(self, key: str) -> bool:
        return key == VAR_ANS_ID or key in self.values

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def load(self, persisted: dict[str, Any]) -> "VariableContext":
        """Merge a saved context into this one, deserializing every entry.

        Nothing is merged unless every entry deserializes.

        Raises:
            LoadError: If ``persisted`` is not a saved variable context
        """
        if not isinstance(persisted, dict) or persisted.get("type") != VAR_CTX_ID:
            raise LoadError(
                f"expected a saved {VAR_CTX_ID} context, got {persisted!r}", "MALFORMED_DATA"
            )
        values = persisted.get("values") or {}
        if not isinstance(values, dict):
            raise LoadError(f"malformed {VAR_CTX_ID} values {values!r}", "MALFORMED_DATA")
        if VAR_ANS_ID in values:
            raise LoadError(
                f"saved {VAR_CTX_ID} values may not define reserved {VAR_ANS_ID}",
                "MALFORMED_DATA",
            )

        loaded = {key: self.serializer.deserialize(obj) for key, obj in values.items()}
        has_answer = VAR_ANS_ID in persisted
        if has_answer:
            answer = self.serializer.deserialize(persisted[VAR_ANS_ID])

        self.values.update(loaded)
        if has_answer:
            self.answer = answer
        logger.debug(f"Loaded {len(loaded)} variables")
        return self

    def save(self) -> dict[str, Any]:
        """Return a detached JSON-compatible snapshot of the context."""
        return {
            "type": VAR_CTX_ID,
            VAR_ANS_ID: self.serializer.serialize(self.answer),
            "values": {
                key: self.serializer.serialize(value) for key, value in self.values.items()
            },
        }

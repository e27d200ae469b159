"""Masking contracts, rule configuration and the record masking engine.

A :class:`MaskConfiguration` is an ordered list of bindings, each pairing a
field name with a record-aware strategy.  Dotted paths such as ``"a.b"`` are
stored as a binding on ``"a"`` whose strategy is itself a whole configuration
holding ``"b"``.  :meth:`MaskConfiguration.as_engine` turns it into the
:class:`MaskingEngine` that masks one record per call.

Strategies hold their own state (random sources, counters) and are not safe
to share between threads without external locking.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from .errors import MaskingError, MaskingErrors

logger = logging.getLogger(__name__)

Entry = Any
Dictionary = Dict[str, Entry]


# -----------------------------
# Value shapes
# -----------------------------
class ValueKind(Enum):
    """Shapes a field value can take once parsed from JSON/YAML."""

    ABSENT = "absent"
    SCALAR = "scalar"
    LIST_OF_SCALAR = "list_of_scalar"
    LIST_OF_RECORD = "list_of_record"
    RECORD = "record"


def kind_of(entry: Entry) -> ValueKind:
    """Classify ``entry``; a list counts as records only if every item is one."""
    if entry is None:
        return ValueKind.ABSENT
    if isinstance(entry, dict):
        return ValueKind.RECORD
    if isinstance(entry, (list, tuple)):
        if entry and all(isinstance(item, dict) for item in entry):
            return ValueKind.LIST_OF_RECORD
        return ValueKind.LIST_OF_SCALAR
    return ValueKind.SCALAR


# -----------------------------
# Contracts
# -----------------------------
class MaskEngine(ABC):
    """Masks a single value.

    ``contexts`` are the records a strategy may read sibling fields from;
    ``contexts[0]`` is the record being masked when called from a root engine.
    Failures are signalled by raising :class:`MaskingError`.
    """

    @abstractmethod
    def mask(self, entry: Entry, *contexts: Dictionary) -> Entry:
        ...


class MaskContextEngine(ABC):
    """Masks the value(s) stored under ``key`` in ``record``.

    Returns the new record and the failure to report, if any.  The input
    record is never mutated.
    """

    @abstractmethod
    def mask_context(
        self, record: Dictionary, key: str, *contexts: Dictionary
    ) -> Tuple[Dictionary, Optional[MaskingError]]:
        ...


class FunctionMaskEngine(MaskEngine):
    """Adapts a plain callable to :class:`MaskEngine`."""

    def __init__(self, function: Callable[..., Entry]):
        self.function = function

    def mask(self, entry: Entry, *contexts: Dictionary) -> Entry:
        return self.function(entry, *contexts)


class _Failures:
    """Keeps the last failure, or all of them when aggregating."""

    def __init__(self, aggregate: bool):
        self.aggregate = aggregate
        self.errors: List[MaskingError] = []

    def add(self, error: MaskingError) -> None:
        if not self.aggregate:
            self.errors = [error]
        elif isinstance(error, MaskingErrors):
            self.errors.extend(error.errors)
        else:
            self.errors.append(error)

    def outcome(self) -> Optional[MaskingError]:
        if not self.errors:
            return None
        if self.aggregate:
            return MaskingErrors(list(self.errors))
        return self.errors[-1]


# -----------------------------
# Record-aware adapter
# -----------------------------
class ContextWrapper(MaskContextEngine):
    """Lifts a :class:`MaskEngine` to work on a field of a record.

    Lists are masked element by element.  An element or field whose masking
    fails keeps its original value here; the engine one level up decides what
    to do with the field.
    """

    def __init__(self, engine: MaskEngine, aggregate_errors: bool = False):
        self.engine = engine
        self.aggregate_errors = aggregate_errors

    def mask_context(
        self, record: Dictionary, key: str, *contexts: Dictionary
    ) -> Tuple[Dictionary, Optional[MaskingError]]:
        result: Dictionary = {}
        failures = _Failures(self.aggregate_errors)
        for k, value in record.items():
            if k != key:
                result[k] = value
                continue
            kind = kind_of(value)
            if kind is ValueKind.LIST_OF_RECORD:
                result[k] = [
                    self._mask_one(item, key, contexts, failures, expect_record=True)
                    for item in value
                ]
            elif kind is ValueKind.LIST_OF_SCALAR:
                result[k] = [self._mask_one(item, key, contexts, failures) for item in value]
            elif kind in (ValueKind.SCALAR, ValueKind.RECORD, ValueKind.ABSENT):
                result[k] = self._mask_one(value, key, contexts, failures)
            else:  # pragma: no cover - ValueKind is closed
                raise TypeError(f"unhandled value kind {kind}")
        return result, failures.outcome()

    def _mask_one(
        self,
        value: Entry,
        key: str,
        contexts: Tuple[Dictionary, ...],
        failures: _Failures,
        expect_record: bool = False,
    ) -> Entry:
        try:
            masked = self.engine.mask(value, *contexts)
        except MaskingError as err:
            if err.key is None:
                err.key = key
            failures.add(err)
            return value
        except Exception as err:
            wrapped = MaskingError(f"{type(err).__name__}: {err}", key=key)
            wrapped.__cause__ = err
            failures.add(wrapped)
            return value
        if expect_record and not isinstance(masked, dict):
            failures.add(
                MaskingError(
                    f"expected a record, strategy returned {type(masked).__name__}",
                    key=key,
                )
            )
            return value
        return masked


# -----------------------------
# Configuration
# -----------------------------
@dataclass(frozen=True)
class MaskKey:
    """Binding of one field name to the strategy that masks it."""

    key: str
    engine: MaskContextEngine


@dataclass(frozen=True)
class MaskConfiguration:
    """Ordered, append-only list of :class:`MaskKey` bindings.

    ``with_*`` methods return a new configuration and leave this one as is.
    Registering a path twice yields two bindings, applied in order.
    """

    config: Tuple[MaskKey, ...] = ()
    aggregate_errors: bool = False

    def with_entry(self, key: str, engine: MaskEngine) -> "MaskConfiguration":
        """Bind a value strategy to ``key`` (dotted paths allowed)."""
        return self.with_context_entry(key, ContextWrapper(engine, self.aggregate_errors))

    def with_context_entry(self, key: str, engine: MaskContextEngine) -> "MaskConfiguration":
        """Bind a record-aware strategy to ``key`` (dotted paths allowed)."""
        head, sep, rest = key.partition(".")
        if sep:
            nested = MaskConfiguration(aggregate_errors=self.aggregate_errors)
            nested = nested.with_context_entry(rest, engine)
            logger.debug("nested configuration for %r under %r", rest, head)
            binding = MaskKey(head, nested.as_context_engine())
        else:
            binding = MaskKey(key, engine)
        return replace(self, config=self.config + (binding,))

    def get_masking_engine(self, key: str) -> Optional[MaskContextEngine]:
        """Return the first strategy bound to exactly ``key``."""
        for mask_key in self.config:
            if mask_key.key == key:
                return mask_key.engine
        return None

    def entries(self) -> List[MaskKey]:
        return list(self.config)

    def as_engine(self) -> "MaskingEngine":
        """Root engine: every binding sees the record being built as context."""
        return MaskingEngine(self, root=True)

    def as_context_engine(self) -> MaskContextEngine:
        """Nested engine lifted to a field strategy; contexts pass through."""
        return ContextWrapper(MaskingEngine(self, root=False), self.aggregate_errors)


# -----------------------------
# Engine
# -----------------------------
class MaskingEngine(MaskEngine):
    """Applies every binding of a configuration to a record, in order."""

    def __init__(self, config: MaskConfiguration, root: bool = True):
        self.config = config
        self.root = root

    def mask_record(
        self, entry: Entry, *contexts: Dictionary
    ) -> Tuple[Entry, Optional[MaskingError]]:
        """Mask ``entry`` and return it with the failure to report, if any.

        A field whose masking fails is removed from the output so the
        unmasked value is never returned.  Anything but a record is returned
        unchanged.
        """
        if not isinstance(entry, dict):
            return entry, None

        output: Dictionary = dict(entry)
        failures = _Failures(self.config.aggregate_errors)
        for mask_key in self.config.entries():
            passed = (output,) if self.root else contexts
            output, err = mask_key.engine.mask_context(output, mask_key.key, *passed)
            if err is not None:
                failures.add(err)
                output.pop(mask_key.key, None)
                if self.root:
                    logger.warning("masking of %r failed, field removed: %s", mask_key.key, err)
        return output, failures.outcome()

    def mask(self, entry: Entry, *contexts: Dictionary) -> Entry:
        masked, err = self.mask_record(entry, *contexts)
        if err is not None:
            raise err
        return masked


__all__ = [
    "Entry",
    "Dictionary",
    "ValueKind",
    "kind_of",
    "MaskEngine",
    "MaskContextEngine",
    "FunctionMaskEngine",
    "ContextWrapper",
    "MaskKey",
    "MaskConfiguration",
    "MaskingEngine",
]

"""Fixed values: replace a field, add one, or drop it."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

from ..core.errors import ConfigurationError, MaskingError
from ..core.model import Dictionary, Entry, MaskConfiguration, MaskContextEngine, MaskEngine

if TYPE_CHECKING:  # pragma: no cover
    from ..config.models import Masking

Registration = Tuple[Optional[MaskConfiguration], bool, Optional[ConfigurationError]]


@dataclass
class ConstantMask(MaskEngine):
    value: Entry

    def mask(self, entry: Entry, *contexts: Dictionary) -> Entry:
        return self.value


class RemoveMask(MaskContextEngine):
    """Drop ``key`` from the record."""

    def mask_context(
        self, record: Dictionary, key: str, *contexts: Dictionary
    ) -> Tuple[Dictionary, Optional[MaskingError]]:
        return {k: v for k, v in record.items() if k != key}, None


@dataclass
class AddMask(MaskContextEngine):
    """Set ``key`` to a fixed value, creating the field if needed."""

    value: Entry

    def mask_context(
        self, record: Dictionary, key: str, *contexts: Dictionary
    ) -> Tuple[Dictionary, Optional[MaskingError]]:
        out = dict(record)
        out[key] = self.value
        return out, None


def register_constant(conf: "Masking", config: MaskConfiguration, seed: int) -> Registration:
    if conf.mask.constant is None:
        return None, False, None
    return config.with_entry(conf.selector.jsonpath, ConstantMask(conf.mask.constant)), True, None


def register_remove(conf: "Masking", config: MaskConfiguration, seed: int) -> Registration:
    if not conf.mask.remove:
        return None, False, None
    return config.with_context_entry(conf.selector.jsonpath, RemoveMask()), True, None


def register_add(conf: "Masking", config: MaskConfiguration, seed: int) -> Registration:
    if conf.mask.add is None:
        return None, False, None
    return config.with_context_entry(conf.selector.jsonpath, AddMask(conf.mask.add)), True, None

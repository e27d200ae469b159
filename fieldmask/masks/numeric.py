"""Counters and numeric bucketing."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Tuple

from ..core.errors import ConfigurationError, MaskingError
from ..core.model import Dictionary, Entry, MaskConfiguration, MaskEngine

if TYPE_CHECKING:  # pragma: no cover
    from ..config.models import Masking

Registration = Tuple[Optional[MaskConfiguration], bool, Optional[ConfigurationError]]


class IncrementalMask(MaskEngine):
    """Returns ``start``, ``start + increment``, ... one value per call."""

    def __init__(self, start: int, increment: int):
        self.value = start
        self.increment = increment

    def mask(self, entry: Entry, *contexts: Dictionary) -> Entry:
        out = self.value
        self.value += self.increment
        return out


class RangeMask(MaskEngine):
    """Replace an integer by the ``"[lo;hi]"`` bucket of width ``scope`` holding it."""

    def __init__(self, scope: int):
        if scope <= 0:
            raise ConfigurationError(f"range must be a positive integer, got {scope}")
        self.scope = scope

    def mask(self, entry: Entry, *contexts: Dictionary) -> Entry:
        if isinstance(entry, bool) or not isinstance(entry, (int, float)):
            raise MaskingError(f"range expects a number, got {type(entry).__name__}")
        low = (int(entry) // self.scope) * self.scope
        return f"[{low};{low + self.scope - 1}]"


def register_incremental(conf: "Masking", config: MaskConfiguration, seed: int) -> Registration:
    params = conf.mask.incremental
    if params is None:
        return None, False, None
    mask = IncrementalMask(params.start, params.increment)
    return config.with_entry(conf.selector.jsonpath, mask), True, None


def register_range(conf: "Masking", config: MaskConfiguration, seed: int) -> Registration:
    if conf.mask.range is None:
        return None, False, None
    try:
        mask = RangeMask(conf.mask.range)
    except ConfigurationError as err:
        return None, True, err
    return config.with_entry(conf.selector.jsonpath, mask), True, None

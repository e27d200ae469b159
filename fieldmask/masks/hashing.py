"""Deterministic replacement picked from a fixed list by hashing the input."""
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple

from ..core.errors import ConfigurationError
from ..core.model import Dictionary, Entry, MaskConfiguration, MaskEngine

if TYPE_CHECKING:  # pragma: no cover
    from ..config.models import Masking


@dataclass
class HashMask(MaskEngine):
    """Same input, same output: ``choices[sha256(input) % len(choices)]``."""

    choices: List[Entry]

    def mask(self, entry: Entry, *contexts: Dictionary) -> Entry:
        digest = hashlib.sha256(str(entry).encode("utf-8")).digest()
        return self.choices[int.from_bytes(digest[:8], "big") % len(self.choices)]


def register_mask(
    conf: "Masking", config: MaskConfiguration, seed: int
) -> Tuple[Optional[MaskConfiguration], bool, Optional[ConfigurationError]]:
    if not conf.mask.hash:
        return None, False, None
    return config.with_entry(conf.selector.jsonpath, HashMask(list(conf.mask.hash))), True, None

"""Replace a value with another field of the same record."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

from ..core.errors import ConfigurationError, MaskingError
from ..core.model import Dictionary, Entry, MaskConfiguration, MaskEngine

if TYPE_CHECKING:  # pragma: no cover
    from ..config.models import Masking


def lookup(record: Dictionary, path: str) -> Entry:
    """Return ``record[path]``, descending into nested records on dots.

    Raises ``KeyError`` when a segment is missing.
    """
    if path in record:
        return record[path]
    node: Entry = record
    for segment in path.split("."):
        if not isinstance(node, dict) or segment not in node:
            raise KeyError(path)
        node = node[segment]
    return node


@dataclass
class ReplacementMask(MaskEngine):
    """Ignore the input and return ``contexts[0][field]``.

    Fails when no context is given or the field is missing from it.
    """

    field: str

    def mask(self, entry: Entry, *contexts: Dictionary) -> Entry:
        if not contexts:
            raise MaskingError(f"no record to copy {self.field!r} from")
        try:
            return lookup(contexts[0], self.field)
        except KeyError:
            raise MaskingError(f"source field {self.field!r} is missing") from None


def register_mask(
    conf: "Masking", config: MaskConfiguration, seed: int
) -> Tuple[Optional[MaskConfiguration], bool, Optional[ConfigurationError]]:
    if not conf.mask.replacement:
        return None, False, None
    return (
        config.with_entry(conf.selector.jsonpath, ReplacementMask(conf.mask.replacement)),
        True,
        None,
    )

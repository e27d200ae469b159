"""Random strings generated from a regular expression."""
from __future__ import annotations

import re
from typing import TYPE_CHECKING, Optional, Tuple

import rstr

from ..core.errors import ConfigurationError, MaskingError
from ..core.model import Dictionary, Entry, MaskConfiguration, MaskEngine
from .randomized import seeded_faker

if TYPE_CHECKING:  # pragma: no cover
    from ..config.models import Masking


class RegexMask(MaskEngine):
    """Each call yields a new string matching ``pattern``, never the input.

    Not deterministic: the same input gives different outputs over calls.
    Patterns the generator cannot honour (lookarounds, backreferences) are
    rejected at construction by sampling a few outputs.
    """

    max_attempts = 16
    sample_size = 8

    def __init__(self, pattern: str, seed: int):
        try:
            self.pattern = re.compile(pattern)
        except re.error as e:
            raise ConfigurationError(f"invalid regex {pattern!r}: {e}") from e
        self.fake = seeded_faker(seed)
        self.generator = rstr.Rstr(self.fake.random)
        self._check_generator(seed)

    def _check_generator(self, seed: int) -> None:
        # own random source: checking must not advance self.generator
        sampler = rstr.Rstr(seeded_faker(seed).random)
        try:
            samples = [sampler.xeger(self.pattern) for _ in range(self.sample_size)]
        except Exception as e:
            raise ConfigurationError(f"cannot generate from regex {self.pattern.pattern!r}: {e}") from e
        if not all(self.pattern.fullmatch(s) for s in samples):
            raise ConfigurationError(
                f"regex {self.pattern.pattern!r} uses constructs the generator cannot honour"
            )

    def mask(self, entry: Entry, *contexts: Dictionary) -> Entry:
        for _ in range(self.max_attempts):
            out = self.generator.xeger(self.pattern)
            if out != entry and self.pattern.fullmatch(out):
                return out
        raise MaskingError(
            f"pattern {self.pattern.pattern!r} produced no matching value different from the input"
        )


def register_mask(
    conf: "Masking", config: MaskConfiguration, seed: int
) -> Tuple[Optional[MaskConfiguration], bool, Optional[ConfigurationError]]:
    if not conf.mask.regex:
        return None, False, None
    try:
        mask = RegexMask(conf.mask.regex, seed)
    except ConfigurationError as err:
        return None, True, err
    return config.with_entry(conf.selector.jsonpath, mask), True, None

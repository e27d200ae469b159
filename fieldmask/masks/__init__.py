"""Masking strategies and the registrars that bind them to rules.

A registrar inspects one rule and, if the rule asks for its kind of mask,
returns the configuration extended with that mask::

    config, claimed, error = registrar(rule, config, seed)

``claimed`` is False with no error when the rule is for another kind; a
non-None ``error`` means the rule was meant for this kind but is invalid.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Iterable, List, Optional, Tuple

from ..core.errors import ConfigurationError
from ..core.model import MaskConfiguration
from . import constant, hashing, numeric, randomized, regex, replacement, template

if TYPE_CHECKING:  # pragma: no cover
    from ..config.models import Masking

logger = logging.getLogger(__name__)

Registrar = Callable[
    ["Masking", MaskConfiguration, int],
    Tuple[Optional[MaskConfiguration], bool, Optional[ConfigurationError]],
]

# tried in order until one claims the rule
REGISTRARS: List[Registrar] = [
    constant.register_constant,
    randomized.register_random_choice,
    randomized.register_random_int,
    randomized.register_random_decimal,
    randomized.register_weighted_choice,
    randomized.register_rand_date,
    regex.register_mask,
    hashing.register_mask,
    numeric.register_incremental,
    numeric.register_range,
    replacement.register_mask,
    template.register_mask,
    constant.register_remove,
    constant.register_add,
]


def register(
    rule: "Masking", config: MaskConfiguration, seed: int
) -> Tuple[MaskConfiguration, Registrar]:
    """Bind ``rule`` with the first registrar that claims it."""
    selector = rule.selector.jsonpath
    for registrar in REGISTRARS:
        new_config, claimed, err = registrar(rule, config, seed)
        if err is not None:
            raise ConfigurationError(str(err), selector) from err
        if claimed:
            logger.debug("%s bound by %s.%s", selector, registrar.__module__, registrar.__name__)
            return new_config, registrar
    raise ConfigurationError("no masking strategy matches this rule", selector)


def build_configuration(
    rules: Iterable["Masking"], seed: int, aggregate_errors: bool = False
) -> MaskConfiguration:
    """Assemble the configuration for ``rules``; any invalid rule aborts."""
    config = MaskConfiguration(aggregate_errors=aggregate_errors)
    for rule in rules:
        config, _ = register(rule, config, seed)
        if rule.cache:
            logger.debug("cache %r on %s is not used by the engine", rule.cache, rule.selector.jsonpath)
    return config


__all__ = ["REGISTRARS", "Registrar", "register", "build_configuration"]

"""Configuration loader turning YAML rule files into masking engines."""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from .models import (
    IncrementalType,
    Masking,
    MaskingFile,
    MaskType,
    RandDateType,
    RandIntType,
    RandomDecimalType,
    Selector,
    WeightedChoiceType,
)
from ..core.errors import ConfigurationError
from ..core.model import MaskingEngine
from ..masks import build_configuration

logger = logging.getLogger(__name__)

# YAML key -> MaskType attribute
MASK_KEYS = {
    "hash": "hash",
    "regex": "regex",
    "replacement": "replacement",
    "template": "template",
    "constant": "constant",
    "randomChoice": "random_choice",
    "randomInt": "random_int",
    "randomDecimal": "random_decimal",
    "weightedChoice": "weighted_choice",
    "incremental": "incremental",
    "randDate": "rand_date",
    "range": "range",
    "remove": "remove",
    "add": "add",
}


def _as_datetime(value: Any, selector: str) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return datetime.fromisoformat(str(value))
    except ValueError as e:
        raise ConfigurationError(f"invalid date {value!r}", selector) from e


def _parse_mask(raw: Dict[str, Any], selector: str) -> MaskType:
    mask = MaskType()
    for key, value in raw.items():
        attr = MASK_KEYS.get(key)
        if attr is None:
            raise ConfigurationError(f"unknown mask kind {key!r}", selector)
        if attr == "random_int":
            value = RandIntType(min=int(value.get("min", 0)), max=int(value.get("max", 0)))
        elif attr == "random_decimal":
            value = RandomDecimalType(
                min=float(value.get("min", 0)),
                max=float(value.get("max", 0)),
                precision=int(value.get("precision", 2)),
            )
        elif attr == "weighted_choice":
            value = [
                WeightedChoiceType(choice=w.get("choice"), weight=int(w.get("weight", 0)))
                for w in value
            ]
        elif attr == "incremental":
            value = IncrementalType(
                start=int(value.get("start", 0)), increment=int(value.get("increment", 1))
            )
        elif attr == "rand_date":
            value = RandDateType(
                date_min=_as_datetime(value.get("dateMin"), selector),
                date_max=_as_datetime(value.get("dateMax"), selector),
            )
        elif attr == "range":
            try:
                value = int(value)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"range must be an integer, got {value!r}", selector) from e
        elif attr == "remove":
            value = bool(value)
        setattr(mask, attr, value)
    return mask


def parse_masking(raw: Dict[str, Any]) -> Masking:
    """Build one :class:`Masking` rule from its parsed YAML mapping."""
    if not isinstance(raw, dict):
        raise ConfigurationError(f"masking rule must be a mapping, got {raw!r}")
    selector_raw = raw.get("selector") or {}
    selector = selector_raw.get("jsonpath", "") if isinstance(selector_raw, dict) else ""
    if not selector:
        raise ConfigurationError("rule without selector.jsonpath")
    try:
        mask = _parse_mask(raw.get("mask") or {}, selector)
    except ConfigurationError:
        raise
    except (AttributeError, TypeError, ValueError) as e:
        raise ConfigurationError(f"malformed mask: {e}", selector) from e
    kinds = mask.populated()
    if len(kinds) != 1:
        raise ConfigurationError(
            f"expected exactly one mask kind, got {len(kinds)} ({', '.join(kinds) or 'none'})",
            selector,
        )
    return Masking(selector=Selector(jsonpath=selector), mask=mask, cache=raw.get("cache"))


def parse_config(raw: Dict[str, Any], source: str = "<memory>") -> MaskingFile:
    """Turn the content of a masking file into a :class:`MaskingFile`.

    Parameters
    ----------
    raw: dict
        Parsed YAML document.  Unknown top-level keys are ignored.
    source: str
        Where ``raw`` came from, for log messages.
    """
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{source}: configuration must be a mapping")
    items = raw.get("masking") or []
    if not isinstance(items, list):
        raise ConfigurationError(f"{source}: masking must be a list of rules")
    try:
        seed = int(raw.get("seed") or 0)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{source}: seed must be an integer, got {raw.get('seed')!r}") from e
    rules: List[Masking] = [parse_masking(r) for r in items]
    logger.info("loaded %d masking rules from %s", len(rules), source)
    return MaskingFile(version=str(raw.get("version", "1")), seed=seed, masking=rules)


def load_config(path: str) -> MaskingFile:
    """Load configuration from a YAML file.

    Parameters
    ----------
    path: str
        Path to the YAML configuration file.
    """
    return MaskingFile.from_yaml(path)


__all__ = ["MASK_KEYS", "parse_masking", "parse_config", "load_config"]


def create_engine(config_path: str, aggregate_errors: bool = False) -> MaskingEngine:
    """Application factory creating a root :class:`MaskingEngine`."""

    cfg = load_config(config_path)
    return build_configuration(cfg.masking, cfg.seed, aggregate_errors).as_engine()


__all__.append("create_engine")

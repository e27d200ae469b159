"""Rule declarations read from a masking configuration file."""
from __future__ import annotations

import os
import time
import warnings
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..core.errors import ConfigurationError
from ..utils.io import read_yaml

SEED_ENV_VAR = "FIELDMASK_SEED"


@dataclass
class Selector:
    """Dot-separated path of the field to mask."""

    jsonpath: str = ""


@dataclass
class RandIntType:
    min: int = 0
    max: int = 0


@dataclass
class RandomDecimalType:
    min: float = 0.0
    max: float = 0.0
    precision: int = 2


@dataclass
class WeightedChoiceType:
    choice: Any = None
    weight: int = 0


@dataclass
class IncrementalType:
    start: int = 0
    increment: int = 1


@dataclass
class RandDateType:
    date_min: Optional[datetime] = None
    date_max: Optional[datetime] = None


@dataclass
class MaskType:
    """Strategy descriptor; exactly one attribute is expected to be set."""

    hash: Optional[List[Any]] = None
    regex: Optional[str] = None
    replacement: Optional[str] = None
    template: Optional[str] = None
    constant: Any = None
    random_choice: Optional[List[Any]] = None
    random_int: Optional[RandIntType] = None
    random_decimal: Optional[RandomDecimalType] = None
    weighted_choice: Optional[List[WeightedChoiceType]] = None
    incremental: Optional[IncrementalType] = None
    rand_date: Optional[RandDateType] = None
    range: Optional[int] = None
    remove: bool = False
    add: Any = None

    def populated(self) -> List[str]:
        """Names of the attributes that carry a strategy."""
        out: List[str] = []
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None or (f.name == "remove" and not value):
                continue
            out.append(f.name)
        return out


@dataclass
class Masking:
    """One rule: which field, how to mask it, and an advisory cache name."""

    selector: Selector = field(default_factory=Selector)
    mask: MaskType = field(default_factory=MaskType)
    cache: Optional[str] = None


@dataclass
class MaskingFile:
    """Content of a masking configuration file."""

    version: str
    seed: int
    masking: List[Masking]

    @classmethod
    def from_yaml(cls, path: str, seed: Optional[int] = None) -> "MaskingFile":
        """Load *path*.

        The seed is taken from ``seed`` if given, then from ``FIELDMASK_SEED``,
        then from the file.
        """
        from .loader import parse_config

        raw: Dict[str, Any] = read_yaml(path)
        if not isinstance(raw, dict):
            raise ConfigurationError(f"{path}: configuration must be a mapping")
        env_seed = os.getenv(SEED_ENV_VAR)
        if seed is not None:
            raw["seed"] = seed
        elif env_seed:
            try:
                raw["seed"] = int(env_seed)
            except ValueError as e:
                raise ConfigurationError(f"{SEED_ENV_VAR} must be an integer, got {env_seed!r}") from e
        elif not raw.get("seed"):
            warnings.warn(
                f"No seed in {path} and {SEED_ENV_VAR} is not set; "
                "random masks will differ between runs.",
                UserWarning,
            )
            raw["seed"] = time.time_ns()

        return parse_config(raw, source=path)

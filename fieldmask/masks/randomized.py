"""Masks drawing replacement values from a seeded Faker instance.

Every mask owns its Faker instance; the underlying random source advances on
each call, so an instance must not be shared across threads without a lock.
"""
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional, Tuple

from faker import Faker

from ..core.errors import ConfigurationError
from ..core.model import Dictionary, Entry, MaskConfiguration, MaskEngine

if TYPE_CHECKING:  # pragma: no cover
    from ..config.models import Masking

Registration = Tuple[Optional[MaskConfiguration], bool, Optional[ConfigurationError]]


def seeded_faker(seed: int) -> Faker:
    """Return a Faker whose random source is private and seeded with ``seed``."""
    fake = Faker()
    fake.seed_instance(seed)
    return fake


class RandomChoiceMask(MaskEngine):
    def __init__(self, choices: List[Entry], seed: int):
        self.choices = list(choices)
        self.fake = seeded_faker(seed)

    def mask(self, entry: Entry, *contexts: Dictionary) -> Entry:
        return self.fake.random.choice(self.choices)


class RandomIntMask(MaskEngine):
    """Uniform integer in ``[min, max]``."""

    def __init__(self, min_value: int, max_value: int, seed: int):
        if min_value > max_value:
            raise ConfigurationError(f"randomInt min {min_value} is greater than max {max_value}")
        self.min = min_value
        self.max = max_value
        self.fake = seeded_faker(seed)

    def mask(self, entry: Entry, *contexts: Dictionary) -> Entry:
        return self.fake.random_int(min=self.min, max=self.max)


class RandomDecimalMask(MaskEngine):
    def __init__(self, min_value: float, max_value: float, precision: int, seed: int):
        if min_value > max_value:
            raise ConfigurationError(
                f"randomDecimal min {min_value} is greater than max {max_value}"
            )
        if precision < 0:
            raise ConfigurationError(f"randomDecimal precision {precision} is negative")
        self.min = min_value
        self.max = max_value
        self.precision = precision
        self.fake = seeded_faker(seed)

    def mask(self, entry: Entry, *contexts: Dictionary) -> Entry:
        return round(self.fake.random.uniform(self.min, self.max), self.precision)


class WeightedChoiceMask(MaskEngine):
    """Pick a choice with probability proportional to its weight."""

    def __init__(self, choices: List[Entry], weights: List[int], seed: int):
        if not choices or sum(weights) <= 0:
            raise ConfigurationError("weightedChoice needs at least one positive weight")
        if any(w < 0 for w in weights):
            raise ConfigurationError("weightedChoice weights must not be negative")
        self.choices = list(choices)
        self.weights = list(weights)
        self.fake = seeded_faker(seed)

    def mask(self, entry: Entry, *contexts: Dictionary) -> Entry:
        return self.fake.random.choices(self.choices, weights=self.weights, k=1)[0]


class RandDateMask(MaskEngine):
    """Uniform timestamp between two bounds, inclusive."""

    def __init__(self, date_min: datetime, date_max: datetime, seed: int):
        if date_min is None or date_max is None:
            raise ConfigurationError("randDate needs both dateMin and dateMax")
        if date_min > date_max:
            raise ConfigurationError(f"randDate dateMin {date_min} is after dateMax {date_max}")
        self.date_min = date_min
        self.date_max = date_max
        self.fake = seeded_faker(seed)

    def mask(self, entry: Entry, *contexts: Dictionary) -> Entry:
        return self.fake.date_time_between_dates(
            datetime_start=self.date_min, datetime_end=self.date_max
        )


def register_random_choice(conf: "Masking", config: MaskConfiguration, seed: int) -> Registration:
    if not conf.mask.random_choice:
        return None, False, None
    mask = RandomChoiceMask(conf.mask.random_choice, seed)
    return config.with_entry(conf.selector.jsonpath, mask), True, None


def register_random_int(conf: "Masking", config: MaskConfiguration, seed: int) -> Registration:
    params = conf.mask.random_int
    if params is None:
        return None, False, None
    try:
        mask = RandomIntMask(params.min, params.max, seed)
    except ConfigurationError as err:
        return None, True, err
    return config.with_entry(conf.selector.jsonpath, mask), True, None


def register_random_decimal(conf: "Masking", config: MaskConfiguration, seed: int) -> Registration:
    params = conf.mask.random_decimal
    if params is None:
        return None, False, None
    try:
        mask = RandomDecimalMask(params.min, params.max, params.precision, seed)
    except ConfigurationError as err:
        return None, True, err
    return config.with_entry(conf.selector.jsonpath, mask), True, None


def register_weighted_choice(conf: "Masking", config: MaskConfiguration, seed: int) -> Registration:
    if conf.mask.weighted_choice is None:
        return None, False, None
    choices = [w.choice for w in conf.mask.weighted_choice]
    weights = [w.weight for w in conf.mask.weighted_choice]
    try:
        mask = WeightedChoiceMask(choices, weights, seed)
    except ConfigurationError as err:
        return None, True, err
    return config.with_entry(conf.selector.jsonpath, mask), True, None


def register_rand_date(conf: "Masking", config: MaskConfiguration, seed: int) -> Registration:
    params = conf.mask.rand_date
    if params is None:
        return None, False, None
    try:
        mask = RandDateMask(params.date_min, params.date_max, seed)
    except ConfigurationError as err:
        return None, True, err
    return config.with_entry(conf.selector.jsonpath, mask), True, None

import re

import pytest

from fieldmask.config.models import Masking, MaskType, Selector
from fieldmask.core.errors import ConfigurationError, MaskingError
from fieldmask.core.model import MaskConfiguration
from fieldmask.masks.regex import RegexMask, register_mask

PHONE = "0[1-7]( [0-9]{2}){4}"


def test_output_matches_pattern_and_differs_from_input():
    mask = RegexMask(PHONE, 42)
    for _ in range(20):
        out = mask.mask("01 23 45 67 89")
        assert re.fullmatch(PHONE, out)
        assert out != "01 23 45 67 89"


def test_same_seed_same_sequence():
    first = RegexMask("[a-z]{12}", 7)
    second = RegexMask("[a-z]{12}", 7)
    assert [first.mask("x") for _ in range(5)] == [second.mask("x") for _ in range(5)]


def test_not_deterministic_per_input():
    mask = RegexMask("[a-z]{12}", 7)
    outputs = {mask.mask("same") for _ in range(10)}
    assert len(outputs) > 1


def test_pattern_that_only_yields_input_fails():
    mask = RegexMask("abc", 1)
    with pytest.raises(MaskingError):
        mask.mask("abc")
    assert mask.mask("other") == "abc"


def test_malformed_pattern_fails_construction():
    with pytest.raises(ConfigurationError):
        RegexMask("([a-z]", 0)


def test_register_reports_malformed_pattern():
    rule = Masking(selector=Selector("phone"), mask=MaskType(regex="[0-9"))
    config, claimed, err = register_mask(rule, MaskConfiguration(), 0)
    assert config is None
    assert claimed
    assert isinstance(err, ConfigurationError)


def test_register_ignores_empty_rule():
    assert register_mask(Masking(), MaskConfiguration(), 0) == (None, False, None)


def test_masks_phone_in_record():
    rule = Masking(selector=Selector("phone"), mask=MaskType(regex=PHONE))
    config, _, _ = register_mask(rule, MaskConfiguration(), 3)
    result, err = config.as_engine().mask_record({"phone": "06 00 00 00 00", "name": "x"})
    assert err is None
    assert result["name"] == "x"
    assert re.fullmatch(PHONE, result["phone"])


class _FixedGenerator:
    def __init__(self, outputs):
        self.outputs = list(outputs)

    def xeger(self, pattern):
        return self.outputs.pop(0) if len(self.outputs) > 1 else self.outputs[0]


def test_lookaround_pattern_fails_construction():
    with pytest.raises(ConfigurationError):
        RegexMask(r"(?=a)[a-z]{3}", 1)


def test_register_reports_unsupported_pattern():
    rule = Masking(selector=Selector("code"), mask=MaskType(regex=r"(?=a)[a-z]{3}"))
    config, claimed, err = register_mask(rule, MaskConfiguration(), 1)
    assert config is None
    assert claimed
    assert isinstance(err, ConfigurationError)


def test_non_matching_output_is_retried():
    mask = RegexMask("[a-z]{3}", 1)
    mask.generator = _FixedGenerator([".aszy", "abcd", "abc"])
    assert mask.mask("x") == "abc"


def test_never_matching_output_fails():
    mask = RegexMask("[a-z]{3}", 1)
    mask.generator = _FixedGenerator([".aszy"])
    with pytest.raises(MaskingError):
        mask.mask("x")

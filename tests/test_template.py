import pytest

from fieldmask.config.models import Masking, MaskType, Selector
from fieldmask.core.errors import ConfigurationError
from fieldmask.core.model import MaskConfiguration
from fieldmask.masks.template import TemplateMask, register_mask


def test_template_renders_sibling_fields():
    mask = TemplateMask("{{name}}.{{surname}}@gmail.com")
    engine = MaskConfiguration().with_entry("mail", mask).as_engine()
    data = {"name": "Jean", "surname": "Bonbeur", "mail": "jean44@outlook.com"}
    result, err = engine.mask_record(data)
    assert err is None
    assert result == {"name": "Jean", "surname": "Bonbeur", "mail": "Jean.Bonbeur@gmail.com"}


def test_template_renders_nested_fields():
    mask = TemplateMask("{{customer.identity.name}}.{{customer.identity.surname}}@gmail.com")
    engine = MaskConfiguration().with_entry("mail", mask).as_engine()
    identity = {"name": "Jean", "surname": "Bonbeur"}
    data = {"customer": {"identity": identity}, "mail": "jean44@outlook.com"}
    result, err = engine.mask_record(data)
    assert err is None
    assert result == {"customer": {"identity": identity}, "mail": "Jean.Bonbeur@gmail.com"}


def test_template_direct_call():
    mask = TemplateMask("{{name}}.{{surname}}@gmail.com")
    assert mask.mask("x", {"name": "Jean", "surname": "Bonbeur"}) == "Jean.Bonbeur@gmail.com"


def test_template_in_nested_path_reads_root_record():
    mask = TemplateMask("{{first}}@corp.example")
    engine = MaskConfiguration().with_entry("contact.mail", mask).as_engine()
    result, err = engine.mask_record({"first": "ana", "contact": {"mail": "a@b.c", "tel": 1}})
    assert err is None
    assert result == {"first": "ana", "contact": {"mail": "ana@corp.example", "tel": 1}}


def test_unbalanced_template_fails_construction():
    with pytest.raises(ConfigurationError):
        TemplateMask("{{name}.{{surname}}@gmail.com")


def test_register_creates_mask():
    rule = Masking(selector=Selector("mail"), mask=MaskType(template="{{name}}.{{surname}}@gmail.com"))
    config, claimed, err = register_mask(rule, MaskConfiguration(), 0)
    assert claimed
    assert err is None
    assert [k.key for k in config.entries()] == ["mail"]


def test_register_rejects_malformed_template():
    rule = Masking(selector=Selector("mail"), mask=MaskType(template="{{name}.{{surname}}@gmail.com"))
    config, _, err = register_mask(rule, MaskConfiguration(), 0)
    assert config is None
    assert isinstance(err, ConfigurationError)
    assert str(err)


def test_register_ignores_empty_rule():
    config, claimed, err = register_mask(Masking(), MaskConfiguration(), 0)
    assert config is None
    assert not claimed
    assert err is None


def test_unknown_placeholder_removes_field():
    engine = MaskConfiguration().with_entry("mail", TemplateMask("{{nope}}")).as_engine()
    result, err = engine.mask_record({"mail": "jean44@outlook.com", "name": "Jean"})
    assert result == {"name": "Jean"}
    assert "nope" in str(err)


def test_keys_named_like_dict_methods_resolve_to_values():
    mask = TemplateMask("{{order.items}}-{{order.values}}")
    engine = MaskConfiguration().with_entry("ref", mask).as_engine()
    data = {"order": {"items": "3 books", "values": "42"}, "ref": "x"}
    result, err = engine.mask_record(data)
    assert err is None
    assert result == {"order": {"items": "3 books", "values": "42"}, "ref": "3 books-42"}


def test_missing_key_named_like_dict_method_fails():
    engine = MaskConfiguration().with_entry("ref", TemplateMask("{{order.keys}}")).as_engine()
    result, err = engine.mask_record({"order": {"id": 1}, "ref": "x"})
    assert result == {"order": {"id": 1}}
    assert "keys" in str(err)

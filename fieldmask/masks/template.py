"""Build a value from other fields of the record with a Jinja2 template.

Placeholders name fields of ``contexts[0]``; dotted names such as
``{{customer.identity.name}}`` reach into nested records.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Optional, Tuple

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError, UndefinedError

from ..core.errors import ConfigurationError, MaskingError
from ..core.model import Dictionary, Entry, MaskConfiguration, MaskEngine

if TYPE_CHECKING:  # pragma: no cover
    from ..config.models import Masking


class _RecordEnvironment(Environment):
    """Resolves ``{{a.b}}`` as ``a["b"]`` on records.

    Record keys such as ``items`` or ``values`` must not resolve to dict
    methods.
    """

    def getattr(self, obj: Any, attribute: str) -> Any:
        if isinstance(obj, Mapping):
            try:
                return obj[attribute]
            except KeyError:
                return self.undefined(obj=obj, name=attribute)
        return super().getattr(obj, attribute)


# missing placeholders fail instead of rendering as empty strings
_env = _RecordEnvironment(undefined=StrictUndefined, keep_trailing_newline=True)


class TemplateMask(MaskEngine):
    def __init__(self, source: str):
        try:
            self.template = _env.from_string(source)
        except TemplateSyntaxError as e:
            raise ConfigurationError(f"invalid template {source!r}: {e.message}") from e
        self.source = source

    def mask(self, entry: Entry, *contexts: Dictionary) -> Entry:
        data = contexts[0] if contexts else {}
        try:
            return self.template.render(data)
        except UndefinedError as e:
            raise MaskingError(f"template {self.source!r}: {e.message}") from e


def register_mask(
    conf: "Masking", config: MaskConfiguration, seed: int
) -> Tuple[Optional[MaskConfiguration], bool, Optional[ConfigurationError]]:
    if not conf.mask.template:
        return None, False, None
    try:
        mask = TemplateMask(conf.mask.template)
    except ConfigurationError as err:
        return None, True, err
    return config.with_entry(conf.selector.jsonpath, mask), True, None

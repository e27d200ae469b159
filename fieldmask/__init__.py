"""Top-level package for the rule based record masking engine."""

from .core.errors import ConfigurationError, MaskingError, MaskingErrors
from .core.model import MaskConfiguration, MaskEngine, MaskingEngine
from .masks import build_configuration

__all__ = [
    "ConfigurationError",
    "MaskingError",
    "MaskingErrors",
    "MaskConfiguration",
    "MaskEngine",
    "MaskingEngine",
    "build_configuration",
]

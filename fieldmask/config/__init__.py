"""Configuration helpers for the masking application."""

from .models import Masking, MaskingFile, MaskType, Selector
from .loader import load_config, parse_config, create_engine

__all__ = [
    "Masking",
    "MaskingFile",
    "MaskType",
    "Selector",
    "load_config",
    "parse_config",
    "create_engine",
]

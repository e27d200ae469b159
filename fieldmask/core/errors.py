"""Exception hierarchy shared by the masking engine and its strategies."""
from __future__ import annotations

from typing import List, Optional


class FieldMaskError(Exception):
    """Base class for every error raised by fieldmask."""


class ConfigurationError(FieldMaskError, ValueError):
    """A masking rule cannot be turned into a working strategy.

    Raised (or returned by registrars) at startup: malformed patterns or
    templates, inverted bounds, unknown mask kinds.
    """

    def __init__(self, message: str, selector: Optional[str] = None):
        if selector:
            message = f"{selector}: {message}"
        super().__init__(message)
        self.selector = selector


class MaskingError(FieldMaskError):
    """A strategy failed to mask one value of one record."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.key = key

    def __str__(self) -> str:
        if self.key is None:
            return self.message
        return f"field {self.key!r}: {self.message}"


class MaskingErrors(MaskingError):
    """Every failure met during one call, in encounter order."""

    def __init__(self, errors: List[MaskingError]):
        super().__init__("; ".join(str(e) for e in errors))
        self.errors = errors

    def __str__(self) -> str:
        return self.message


__all__ = ["FieldMaskError", "ConfigurationError", "MaskingError", "MaskingErrors"]

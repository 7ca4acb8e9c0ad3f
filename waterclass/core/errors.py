from __future__ import annotations


class WaterClassError(Exception):
    """Base class for structural errors that abort a classification call."""


class UnsupportedFactorError(WaterClassError, NotImplementedError):
    """Raised when a factor outside a family's allow-list is classified."""


class UnsupportedReadingError(WaterClassError, TypeError):
    """Raised when a family that only models numeric readings receives text."""


class MalformedLimitError(WaterClassError, ValueError):
    """Raised when a range limit does not parse as 'min-max'."""


class StandardNotFoundError(WaterClassError, LookupError):
    """Raised when no standard table exists for a requested version."""


class StandardFormatError(WaterClassError, ValueError):
    """Raised when a standard table record cannot be decoded."""

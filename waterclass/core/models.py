from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum, IntEnum
from typing import Any, Union

from waterclass.core.contract import RANGE_SEPARATOR


class QualityClass(IntEnum):
    """Water quality class, best (I) to worst. Ordering is the only semantic used."""

    I = 1
    II = 2
    III = 3
    IV = 4
    V = 5
    WORSE_THAN_V = 6

    @property
    def label(self) -> str:
        return "worse than V" if self is QualityClass.WORSE_THAN_V else self.name

    @classmethod
    def best(cls) -> QualityClass:
        return cls.I

    @classmethod
    def from_token(cls, token: Any) -> QualityClass:
        """
        Accepts 'I'..'V', 'WORSE_THAN_V', the roman glyphs used in the printed
        standards ('Ⅰ'..'Ⅴ', '劣Ⅴ') and the ranks 1..6.
        """
        if isinstance(token, QualityClass):
            return token
        if isinstance(token, int) and not isinstance(token, bool):
            return cls(token)
        s = str(token).strip()
        if s in _GLYPHS:
            return _GLYPHS[s]
        try:
            return cls[s.upper()]
        except KeyError:
            raise ValueError(f"Unknown quality class: {token!r}") from None


_GLYPHS = {
    "Ⅰ": QualityClass.I,
    "Ⅱ": QualityClass.II,
    "Ⅲ": QualityClass.III,
    "Ⅳ": QualityClass.IV,
    "Ⅴ": QualityClass.V,
    "劣Ⅴ": QualityClass.WORSE_THAN_V,
    "劣V": QualityClass.WORSE_THAN_V,
}


class ComparisonKind(Enum):
    BETWEEN_INCLUSIVE = "between_inclusive"
    BETWEEN_EXCLUSIVE = "between_exclusive"
    BETWEEN_INCLUSIVE_MIN_EXCLUSIVE_MAX = "between_inclusive_min_exclusive_max"
    BETWEEN_EXCLUSIVE_MIN_INCLUSIVE_MAX = "between_exclusive_min_inclusive_max"

    GREATER_THAN = "greater_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    LESS_THAN = "less_than"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"
    EQUALITY = "equality"

    TEXT_MATCH = "text_match"
    NOT_DETECTED = "not_detected"

    @property
    def is_range(self) -> bool:
        return self in _RANGE_KINDS

    @property
    def is_textual(self) -> bool:
        return self in (ComparisonKind.TEXT_MATCH, ComparisonKind.NOT_DETECTED)

    @classmethod
    def from_token(cls, token: Any) -> ComparisonKind:
        """Accepts 'LESS_THAN_OR_EQUAL', 'less_than_or_equal' or 'LessThanOrEqual'."""
        if isinstance(token, ComparisonKind):
            return token
        s = str(token).strip()
        if s != s.upper() and s != s.lower():
            s = re.sub(r"(?<!^)(?=[A-Z])", "_", s)
        try:
            return cls[s.upper()]
        except KeyError:
            raise ValueError(f"Unknown comparison kind: {token!r}") from None


_RANGE_KINDS = frozenset(
    {
        ComparisonKind.BETWEEN_INCLUSIVE,
        ComparisonKind.BETWEEN_EXCLUSIVE,
        ComparisonKind.BETWEEN_INCLUSIVE_MIN_EXCLUSIVE_MAX,
        ComparisonKind.BETWEEN_EXCLUSIVE_MIN_INCLUSIVE_MAX,
    }
)


@dataclass(frozen=True)
class ClassLimit:
    quality_class: QualityClass
    comparison: ComparisonKind
    limit_value: str


@dataclass(frozen=True)
class FactorStandard:
    """
    Limits of one factor within one edition of a standard.

    `limits` may hold several entries for the same class (e.g. two pH bands);
    evaluation order is by class, then table order.
    """

    factor: Any
    name: str
    description: str | None = None
    unit: str | None = None
    limits: tuple[ClassLimit, ...] = ()

    def ordered_limits(self) -> list[ClassLimit]:
        return sorted(self.limits, key=lambda lim: lim.quality_class)


# ----------------------------
# Readings
# ----------------------------

@dataclass(frozen=True)
class Numeric:
    value: Decimal

    @property
    def is_negative(self) -> bool:
        return self.value < 0


@dataclass(frozen=True)
class Text:
    token: str


RawValue = Union[Numeric, Text]


def parse_decimal(text: Any) -> Decimal | None:
    """Finite decimal from text, or None."""
    if text is None:
        return None
    try:
        d = Decimal(str(text).strip())
    except (InvalidOperation, ValueError):
        return None
    return d if d.is_finite() else None


def parse_range(limit_value: str) -> tuple[Decimal, Decimal] | None:
    """Parse 'min-max' into two decimals, or None if it is not exactly that."""
    parts = str(limit_value).split(RANGE_SEPARATOR)
    if len(parts) != 2:
        return None
    lo = parse_decimal(parts[0])
    hi = parse_decimal(parts[1])
    if lo is None or hi is None:
        return None
    return lo, hi


def parse_reading(value: Any) -> RawValue:
    """
    Build the reading variant once at the boundary.

    Numbers (and strings that read as a finite decimal) become Numeric; anything
    else is kept verbatim as Text so sentinel conventions can be matched.
    """
    if isinstance(value, (Numeric, Text)):
        return value
    if isinstance(value, bool):
        raise TypeError("Boolean is not a valid reading")
    if isinstance(value, int):
        return Numeric(Decimal(value))
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return Text(str(value))
        return Numeric(Decimal(str(value)))
    if isinstance(value, Decimal):
        return Numeric(value) if value.is_finite() else Text(str(value))
    if value is None:
        return Text("")

    s = str(value)
    d = parse_decimal(s)
    return Numeric(d) if d is not None else Text(s)

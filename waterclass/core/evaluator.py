from __future__ import annotations

import operator
from decimal import Decimal
from typing import Any

from waterclass.core.contract import DETECTION_LIMIT_SUFFIX, NOT_DETECTED_TOKEN
from waterclass.core.errors import MalformedLimitError, UnsupportedFactorError, UnsupportedReadingError
from waterclass.core.family import StandardFamily
from waterclass.core.models import (
    ClassLimit,
    ComparisonKind,
    FactorStandard,
    Numeric,
    QualityClass,
    RawValue,
    Text,
    parse_decimal,
    parse_range,
    parse_reading,
)

_SINGLE_VALUE_OPS = {
    ComparisonKind.GREATER_THAN: operator.gt,
    ComparisonKind.GREATER_THAN_OR_EQUAL: operator.ge,
    ComparisonKind.LESS_THAN: operator.lt,
    ComparisonKind.LESS_THAN_OR_EQUAL: operator.le,
    ComparisonKind.EQUALITY: operator.eq,
}

# (lower bound test, upper bound test)
_RANGE_OPS = {
    ComparisonKind.BETWEEN_INCLUSIVE: (operator.ge, operator.le),
    ComparisonKind.BETWEEN_EXCLUSIVE: (operator.gt, operator.lt),
    ComparisonKind.BETWEEN_INCLUSIVE_MIN_EXCLUSIVE_MAX: (operator.ge, operator.lt),
    ComparisonKind.BETWEEN_EXCLUSIVE_MIN_INCLUSIVE_MAX: (operator.gt, operator.le),
}


def is_detection_limit(token: str) -> bool:
    """'0.01L' / '5l': reported below the method's detection limit."""
    return token.strip().upper().endswith(DETECTION_LIMIT_SUFFIX.upper())


def is_not_detected(token: str) -> bool:
    if not token.strip():
        return False
    return token.strip() == NOT_DETECTED_TOKEN or is_detection_limit(token)


def _limit_matches(standard: FactorStandard, limit: ClassLimit, value: Decimal) -> bool:
    kind = limit.comparison

    if kind in _SINGLE_VALUE_OPS:
        target = parse_decimal(limit.limit_value)
        return target is not None and _SINGLE_VALUE_OPS[kind](value, target)

    if kind in _RANGE_OPS:
        bounds = parse_range(limit.limit_value)
        if bounds is None:
            raise MalformedLimitError(
                f"{standard.name}: range limit {limit.limit_value!r} cannot be used for "
                f"classification (expected 'min-max')"
            )
        lo_ok, hi_ok = _RANGE_OPS[kind]
        lo, hi = bounds
        return lo_ok(value, lo) and hi_ok(value, hi)

    # text-match / not-detected never match a number
    return False


def _evaluate_numeric(standard: FactorStandard, value: Decimal, fallback: QualityClass) -> QualityClass | None:
    if value < 0:
        return None  # not validly measured

    for limit in standard.ordered_limits():
        if limit.comparison.is_textual:
            continue
        if _limit_matches(standard, limit, value):
            return limit.quality_class

    return fallback


def _evaluate_text(standard: FactorStandard, token: str) -> QualityClass | None:
    for limit in standard.ordered_limits():
        if limit.comparison is ComparisonKind.TEXT_MATCH and token == limit.limit_value:
            return limit.quality_class
        if limit.comparison is ComparisonKind.NOT_DETECTED and is_not_detected(token):
            return limit.quality_class

    # Below-detection-limit reports count as best-class evidence even without a rule
    if is_detection_limit(token):
        return QualityClass.best()
    return None


def evaluate(standard: FactorStandard, reading: RawValue, fallback: QualityClass) -> QualityClass | None:
    """
    Class of one reading against one factor's limits.

    Limits are tried best class first; the first match wins. A non-negative number
    that matches nothing gets `fallback`. Negative numbers and text that no rule
    recognises give None.
    """
    if not standard.limits:
        return None
    if isinstance(reading, Numeric):
        return _evaluate_numeric(standard, reading.value, fallback)
    if isinstance(reading, Text):
        return _evaluate_text(standard, reading.token)
    raise TypeError(f"Unsupported reading type: {type(reading).__name__}")


def _resolve_factor(family: StandardFamily, factor: Any) -> Any | None:
    resolved = family.lookup_factor(factor)
    if family.allowed_factors is not None and resolved not in family.allowed_factors:
        raise UnsupportedFactorError(
            f"{family.name}: classification of factor {factor!r} is not supported"
        )
    return resolved


def classify(family: StandardFamily, factor: Any, value: Any, version: Any | None = None) -> QualityClass | None:
    """Quality class of one factor's reading under a family's standard version."""
    resolved = _resolve_factor(family, factor)

    reading = parse_reading(value)
    if isinstance(reading, Text) and not family.accepts_text:
        raise UnsupportedReadingError(
            f"{family.name}: only numeric readings are accepted (got {reading.token!r})"
        )

    table = family.repository.get_standards(family.resolve_version(version))
    if resolved is None:
        return None
    standard = table.get(resolved)
    if standard is None:
        return None

    return evaluate(standard, reading, family.fallback_class)


def get_factor_standard(family: StandardFamily, factor: Any, version: Any | None = None) -> FactorStandard | None:
    resolved = family.lookup_factor(factor)
    table = family.repository.get_standards(family.resolve_version(version))
    return table.get(resolved) if resolved is not None else None

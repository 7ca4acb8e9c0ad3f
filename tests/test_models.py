from __future__ import annotations

from decimal import Decimal

import pytest

from waterclass.core.models import (
    ComparisonKind,
    FactorStandard,
    ClassLimit,
    Numeric,
    QualityClass,
    Text,
    parse_range,
    parse_reading,
)


def test_quality_class_is_totally_ordered() -> None:
    assert QualityClass.I < QualityClass.II < QualityClass.V < QualityClass.WORSE_THAN_V
    assert max(QualityClass.III, QualityClass.I) is QualityClass.III
    assert QualityClass.best() is QualityClass.I
    assert QualityClass.WORSE_THAN_V.label == "worse than V"
    assert QualityClass.IV.label == "IV"


@pytest.mark.parametrize(
    "token, expected",
    [
        ("I", QualityClass.I),
        (" iii ", QualityClass.III),
        ("WORSE_THAN_V", QualityClass.WORSE_THAN_V),
        ("Ⅱ", QualityClass.II),
        ("劣Ⅴ", QualityClass.WORSE_THAN_V),
        (4, QualityClass.IV),
    ],
)
def test_quality_class_from_token(token, expected) -> None:
    assert QualityClass.from_token(token) is expected


def test_quality_class_from_token_rejects_unknown() -> None:
    with pytest.raises(ValueError):
        QualityClass.from_token("VI")


@pytest.mark.parametrize(
    "token, expected",
    [
        ("LESS_THAN_OR_EQUAL", ComparisonKind.LESS_THAN_OR_EQUAL),
        ("less_than", ComparisonKind.LESS_THAN),
        ("LessThanOrEqual", ComparisonKind.LESS_THAN_OR_EQUAL),
        ("BetweenInclusiveMinExclusiveMax", ComparisonKind.BETWEEN_INCLUSIVE_MIN_EXCLUSIVE_MAX),
        ("NotDetected", ComparisonKind.NOT_DETECTED),
    ],
)
def test_comparison_kind_from_token(token, expected) -> None:
    assert ComparisonKind.from_token(token) is expected


def test_comparison_kind_groups() -> None:
    assert ComparisonKind.BETWEEN_EXCLUSIVE.is_range
    assert not ComparisonKind.GREATER_THAN.is_range
    assert ComparisonKind.TEXT_MATCH.is_textual
    assert ComparisonKind.NOT_DETECTED.is_textual
    assert not ComparisonKind.EQUALITY.is_textual
    with pytest.raises(ValueError):
        ComparisonKind.from_token("ROUGHLY")


def test_ordered_limits_is_stable_within_a_class() -> None:
    a = ClassLimit(QualityClass.IV, ComparisonKind.LESS_THAN, "1")
    b = ClassLimit(QualityClass.I, ComparisonKind.LESS_THAN, "2")
    c = ClassLimit(QualityClass.IV, ComparisonKind.GREATER_THAN, "3")
    std = FactorStandard(factor="x", name="x", limits=(a, b, c))
    assert std.ordered_limits() == [b, a, c]


@pytest.mark.parametrize(
    "raw, expected",
    [
        (1, Numeric(Decimal("1"))),
        (1.5, Numeric(Decimal("1.5"))),
        (0.1, Numeric(Decimal("0.1"))),
        (Decimal("2.50"), Numeric(Decimal("2.50"))),
        ("1.5", Numeric(Decimal("1.5"))),
        ("  -3 ", Numeric(Decimal("-3"))),
        ("0.01L", Text("0.01L")),
        ("未检出", Text("未检出")),
        ("", Text("")),
        (None, Text("")),
        ("nan", Text("nan")),
        (float("inf"), Text("inf")),
    ],
)
def test_parse_reading(raw, expected) -> None:
    assert parse_reading(raw) == expected


def test_parse_reading_rejects_bool() -> None:
    with pytest.raises(TypeError):
        parse_reading(True)


def test_parse_range() -> None:
    assert parse_range("6.5-8.5") == (Decimal("6.5"), Decimal("8.5"))
    assert parse_range(" 6 - 9 ") == (Decimal("6"), Decimal("9"))
    assert parse_range("6.5") is None
    assert parse_range("6-7-8") is None
    assert parse_range("a-b") is None

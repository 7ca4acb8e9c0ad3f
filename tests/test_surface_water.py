from __future__ import annotations

import pytest

from waterclass.core import surface_water as sw
from waterclass.core.errors import UnsupportedFactorError, UnsupportedReadingError
from waterclass.core.models import QualityClass
from waterclass.core.repository import find_malformed_limits

F = sw.SurfaceWaterFactor
Q = QualityClass


def test_negative_value_is_unmeasured() -> None:
    assert sw.classify(F.AMMONIA_NITROGEN, -1) is None


def test_non_table_1_factor_is_not_supported() -> None:
    with pytest.raises(NotImplementedError):
        sw.classify(F.SULFATE, 100)


@pytest.mark.parametrize(
    "factor, value, expected",
    [
        (F.PH, 7.0, Q.I),
        (F.DISSOLVED_OXYGEN, 7.5, Q.I),
        (F.DISSOLVED_OXYGEN, 6.0, Q.II),
        (F.DISSOLVED_OXYGEN, 5.0, Q.III),
        (F.DISSOLVED_OXYGEN, 3.0, Q.IV),
        (F.DISSOLVED_OXYGEN, 2.0, Q.V),
        (F.DISSOLVED_OXYGEN, 1.0, Q.WORSE_THAN_V),
        (F.PERMANGANATE_INDEX, 2.0, Q.I),
        (F.PERMANGANATE_INDEX, 4.0, Q.II),
        (F.PERMANGANATE_INDEX, 6.0, Q.III),
        (F.PERMANGANATE_INDEX, 10.0, Q.IV),
        (F.PERMANGANATE_INDEX, 15.0, Q.V),
        (F.PERMANGANATE_INDEX, 20.0, Q.WORSE_THAN_V),
        (F.AMMONIA_NITROGEN, 0.15, Q.I),
        (F.AMMONIA_NITROGEN, 0.5, Q.II),
        (F.AMMONIA_NITROGEN, 1.0, Q.III),
        (F.AMMONIA_NITROGEN, 1.5, Q.IV),
        (F.AMMONIA_NITROGEN, 2.0, Q.V),
        (F.AMMONIA_NITROGEN, 3.0, Q.WORSE_THAN_V),
        (F.TOTAL_PHOSPHORUS_RIVER, 0.02, Q.I),
        (F.TOTAL_PHOSPHORUS_RIVER, 0.1, Q.II),
        (F.TOTAL_PHOSPHORUS_RIVER, 0.2, Q.III),
        (F.TOTAL_PHOSPHORUS_RIVER, 0.3, Q.IV),
        (F.TOTAL_PHOSPHORUS_RIVER, 0.4, Q.V),
        (F.TOTAL_PHOSPHORUS_RIVER, 0.5, Q.WORSE_THAN_V),
    ],
)
def test_classify_against_gb_3838_2002(factor, value, expected) -> None:
    assert sw.classify(factor, value) is expected


def test_ph_outside_six_to_nine_is_worse_than_v() -> None:
    assert sw.classify(F.PH, 5.9) is Q.WORSE_THAN_V
    assert sw.classify(F.PH, 9.01) is Q.WORSE_THAN_V


def test_string_factor_codes_and_versions_are_accepted() -> None:
    assert sw.classify("ammonia_nitrogen", "0.4", "GB_3838_2002") is Q.II
    assert sw.classify(F.AMMONIA_NITROGEN, 0.4, sw.SurfaceWaterStandardVersion.GB_3838_2002) is Q.II


def test_text_reading_is_not_supported() -> None:
    with pytest.raises(UnsupportedReadingError):
        sw.classify(F.AMMONIA_NITROGEN, "0.01L")


def test_very_large_and_tiny_values() -> None:
    assert sw.classify(F.COD, 999999) is Q.WORSE_THAN_V
    assert sw.classify(F.COD, 0.0001) is Q.I


def test_classify_many_and_worst_class() -> None:
    values = {F.PH: 7.5, F.DISSOLVED_OXYGEN: 5.5, F.AMMONIA_NITROGEN: 0.8, F.TOTAL_PHOSPHORUS_RIVER: -1}
    assert sw.classify_many(values) == {
        F.PH: Q.I,
        F.DISSOLVED_OXYGEN: Q.III,
        F.AMMONIA_NITROGEN: Q.III,
        F.TOTAL_PHOSPHORUS_RIVER: None,
    }
    assert sw.worst_class(values) is Q.III
    assert sw.worst_class({}) is None


def test_single_non_table_1_factor_aborts_aggregation() -> None:
    with pytest.raises(UnsupportedFactorError):
        sw.classify_many({F.PH: 7, F.IRON: 0.1})
    with pytest.raises(UnsupportedFactorError):
        sw.worst_class({F.CHLOROFORM: 0.01})


def test_lake_phosphorus_is_stricter_than_river() -> None:
    assert sw.classify(F.TOTAL_PHOSPHORUS_RIVER, 0.05) is Q.II
    assert sw.classify(F.TOTAL_PHOSPHORUS_LAKE, 0.05) is Q.III


def test_every_table_1_factor_has_a_five_class_standard() -> None:
    for factor in sw.TABLE_1_FACTORS:
        std = sw.get_factor_standard(factor)
        assert std is not None, factor
        classes = {lim.quality_class for lim in std.limits}
        assert classes == {Q.I, Q.II, Q.III, Q.IV, Q.V}, factor


def test_supplementary_factors_can_be_looked_up() -> None:
    std = sw.get_factor_standard(F.SULFATE)
    assert std is not None
    assert std.unit == "mg/L"
    assert len(std.limits) == 1


def test_factor_standard_properties() -> None:
    std = sw.get_factor_standard(F.AMMONIA_NITROGEN)
    assert std.factor is F.AMMONIA_NITROGEN
    assert std.name
    assert std.unit == "mg/L"
    assert [lim.limit_value for lim in std.ordered_limits()] == ["0.15", "0.5", "1.0", "1.5", "2.0"]


def test_bundled_table_has_no_malformed_ranges() -> None:
    table = sw.SURFACE_WATER.repository.get_standards(sw.SurfaceWaterStandardVersion.GB_3838_2002)
    assert find_malformed_limits(table) == []
    assert set(table) == set(F)

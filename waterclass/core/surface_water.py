from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

from waterclass.core import aggregate, evaluator
from waterclass.core.family import StandardFamily
from waterclass.core.models import FactorStandard, QualityClass
from waterclass.core.repository import StandardRepository, resource_loader

DATA_PACKAGE = "waterclass.data.surface_water"


class SurfaceWaterStandardVersion(str, Enum):
    GB_3838_2002 = "GB_3838_2002"


class SurfaceWaterFactor(str, Enum):
    # Table 1: basic items
    PH = "ph"
    DISSOLVED_OXYGEN = "dissolved_oxygen"
    PERMANGANATE_INDEX = "permanganate_index"
    COD = "cod"
    BOD5 = "bod5"
    AMMONIA_NITROGEN = "ammonia_nitrogen"
    TOTAL_PHOSPHORUS_RIVER = "total_phosphorus_river"
    TOTAL_PHOSPHORUS_LAKE = "total_phosphorus_lake"
    TOTAL_NITROGEN = "total_nitrogen"
    COPPER = "copper"
    ZINC = "zinc"
    FLUORIDE = "fluoride"
    SELENIUM = "selenium"
    ARSENIC = "arsenic"
    MERCURY = "mercury"
    CADMIUM = "cadmium"
    CHROMIUM_VI = "chromium_vi"
    LEAD = "lead"
    CYANIDE = "cyanide"
    VOLATILE_PHENOLS = "volatile_phenols"
    PETROLEUM = "petroleum"
    ANIONIC_SURFACTANTS = "anionic_surfactants"
    SULFIDE = "sulfide"
    FECAL_COLIFORMS = "fecal_coliforms"

    # Table 2: supplementary items for drinking water sources
    SULFATE = "sulfate"
    CHLORIDE = "chloride"
    NITRATE = "nitrate"
    IRON = "iron"
    MANGANESE = "manganese"

    # Table 3: specific items for drinking water sources (partial)
    CHLOROFORM = "chloroform"
    BENZENE = "benzene"
    TOLUENE = "toluene"


# Only the basic items are graded I..V; tables 2 and 3 carry a single limit.
TABLE_1_FACTORS = frozenset(
    {
        SurfaceWaterFactor.PH,
        SurfaceWaterFactor.DISSOLVED_OXYGEN,
        SurfaceWaterFactor.PERMANGANATE_INDEX,
        SurfaceWaterFactor.COD,
        SurfaceWaterFactor.BOD5,
        SurfaceWaterFactor.AMMONIA_NITROGEN,
        SurfaceWaterFactor.TOTAL_PHOSPHORUS_RIVER,
        SurfaceWaterFactor.TOTAL_PHOSPHORUS_LAKE,
        SurfaceWaterFactor.TOTAL_NITROGEN,
        SurfaceWaterFactor.COPPER,
        SurfaceWaterFactor.ZINC,
        SurfaceWaterFactor.FLUORIDE,
        SurfaceWaterFactor.SELENIUM,
        SurfaceWaterFactor.ARSENIC,
        SurfaceWaterFactor.MERCURY,
        SurfaceWaterFactor.CADMIUM,
        SurfaceWaterFactor.CHROMIUM_VI,
        SurfaceWaterFactor.LEAD,
        SurfaceWaterFactor.CYANIDE,
        SurfaceWaterFactor.VOLATILE_PHENOLS,
        SurfaceWaterFactor.PETROLEUM,
        SurfaceWaterFactor.ANIONIC_SURFACTANTS,
        SurfaceWaterFactor.SULFIDE,
        SurfaceWaterFactor.FECAL_COLIFORMS,
    }
)


def build_family(repository: StandardRepository | None = None) -> StandardFamily:
    return StandardFamily(
        name="surface water",
        factor_type=SurfaceWaterFactor,
        default_version=SurfaceWaterStandardVersion.GB_3838_2002,
        repository=repository or StandardRepository(resource_loader(DATA_PACKAGE, SurfaceWaterFactor)),
        fallback_class=QualityClass.WORSE_THAN_V,
        allowed_factors=TABLE_1_FACTORS,
        accepts_text=False,
    )


SURFACE_WATER = build_family()


def classify(factor: Any, value: Any, version: Any = None, *, family: StandardFamily = SURFACE_WATER) -> QualityClass | None:
    return evaluator.classify(family, factor, value, version)


def classify_many(values: Mapping[Any, Any], version: Any = None, *, family: StandardFamily = SURFACE_WATER) -> dict[Any, QualityClass | None]:
    return aggregate.classify_many(family, values, version)


def worst_class(values: Mapping[Any, Any], version: Any = None, *, family: StandardFamily = SURFACE_WATER) -> QualityClass | None:
    return aggregate.worst_class(family, values, version)


def get_factor_standard(factor: Any, version: Any = None, *, family: StandardFamily = SURFACE_WATER) -> FactorStandard | None:
    """Limits of any tabled factor, including the single-limit supplementary items."""
    return evaluator.get_factor_standard(family, factor, version)

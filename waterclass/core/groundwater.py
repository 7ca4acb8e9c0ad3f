from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

from waterclass.core import aggregate, evaluator
from waterclass.core.family import StandardFamily
from waterclass.core.models import FactorStandard, QualityClass
from waterclass.core.repository import StandardRepository, resource_loader

DATA_PACKAGE = "waterclass.data.groundwater"


class GroundwaterStandardVersion(str, Enum):
    GBT_14848_2017 = "GBT_14848_2017"


class GroundwaterFactor(str, Enum):
    # Sensory and general chemistry
    COLOR = "color"
    ODOR_AND_TASTE = "odor_and_taste"
    TURBIDITY = "turbidity"
    VISIBLE_MATTER = "visible_matter"
    PH = "ph"
    TOTAL_HARDNESS = "total_hardness"
    TOTAL_DISSOLVED_SOLIDS = "total_dissolved_solids"
    SULFATE = "sulfate"
    CHLORIDE = "chloride"
    IRON = "iron"
    MANGANESE = "manganese"
    COPPER = "copper"
    ZINC = "zinc"
    VOLATILE_PHENOLS = "volatile_phenols"
    ANIONIC_SURFACTANTS = "anionic_surfactants"
    OXYGEN_CONSUMPTION = "oxygen_consumption"
    AMMONIA_NITROGEN = "ammonia_nitrogen"
    SULFIDE = "sulfide"
    SODIUM = "sodium"

    # Microbiological
    TOTAL_COLIFORMS = "total_coliforms"

    # Toxicological
    NITRITE = "nitrite"
    NITRATE = "nitrate"
    CYANIDE = "cyanide"
    FLUORIDE = "fluoride"
    IODIDE = "iodide"
    MERCURY = "mercury"
    ARSENIC = "arsenic"
    SELENIUM = "selenium"
    CADMIUM = "cadmium"
    CHROMIUM_VI = "chromium_vi"
    LEAD = "lead"
    BENZENE = "benzene"
    TOLUENE = "toluene"


def build_family(repository: StandardRepository | None = None) -> StandardFamily:
    return StandardFamily(
        name="groundwater",
        factor_type=GroundwaterFactor,
        default_version=GroundwaterStandardVersion.GBT_14848_2017,
        repository=repository or StandardRepository(resource_loader(DATA_PACKAGE, GroundwaterFactor)),
        fallback_class=QualityClass.V,
    )


GROUNDWATER = build_family()


def classify(factor: Any, value: Any, version: Any = None, *, family: StandardFamily = GROUNDWATER) -> QualityClass | None:
    """
    Class of a groundwater reading. Text readings follow the lab conventions:
    '<limit>L' (below detection limit) counts as class I, and '未检出' (not detected)
    matches the factor's not-detected limit where the table has one.
    """
    return evaluator.classify(family, factor, value, version)


def classify_many(values: Mapping[Any, Any], version: Any = None, *, family: StandardFamily = GROUNDWATER) -> dict[Any, QualityClass | None]:
    return aggregate.classify_many(family, values, version)


def worst_class(values: Mapping[Any, Any], version: Any = None, *, family: StandardFamily = GROUNDWATER) -> QualityClass | None:
    return aggregate.worst_class(family, values, version)


def get_factor_standard(factor: Any, version: Any = None, *, family: StandardFamily = GROUNDWATER) -> FactorStandard | None:
    return evaluator.get_factor_standard(family, factor, version)

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import IntEnum
from typing import Any

from waterclass.core.contract import (
    DO_MILD_THRESHOLD,
    DO_SEVERE_THRESHOLD,
    NH3N_MILD_THRESHOLD,
    NH3N_SEVERE_THRESHOLD,
    SD_DEPTH_LINE,
    SD_DEPTH_LINE_RATIO,
    SD_MILD_THRESHOLD,
    SD_SEVERE_THRESHOLD,
)
from waterclass.core.models import Numeric, parse_reading

TRANSPARENCY = "transparency"
DISSOLVED_OXYGEN = "dissolved_oxygen"
AMMONIA_NITROGEN = "ammonia_nitrogen"


class BlackOdorousClass(IntEnum):
    NOT_ODOROUS = 0
    MILD = 1
    SEVERE = 2

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", "-")


@dataclass(frozen=True)
class BlackOdorousResult:
    overall: BlackOdorousClass | None
    factors: list[tuple[str, BlackOdorousClass]] = field(default_factory=list)

    def factor_class(self, name: str) -> BlackOdorousClass | None:
        for n, c in self.factors:
            if n == name:
                return c
        return None


def _as_decimal(x: Any, name: str) -> Decimal:
    reading = parse_reading(x)
    if not isinstance(reading, Numeric):
        raise TypeError(f"{name} must be numeric, got {x!r}")
    return reading.value


def transparency_class(sd: Decimal, depth: Decimal, clear_to_bottom: bool) -> BlackOdorousClass | None:
    """
    Transparency (cm) judged against water depth (cm).

    In water at least SD_DEPTH_LINE deep the fixed thresholds apply. In shallower
    water a clear-to-bottom observation is not odorous; otherwise transparency below
    SD_DEPTH_LINE_RATIO of the depth is severe and anything else mild.
    """
    if sd < 0 or depth < 0:
        return None

    if depth >= SD_DEPTH_LINE:
        if sd >= SD_MILD_THRESHOLD:
            return BlackOdorousClass.NOT_ODOROUS
        if sd >= SD_SEVERE_THRESHOLD:
            return BlackOdorousClass.MILD
        return BlackOdorousClass.SEVERE

    if clear_to_bottom:
        return BlackOdorousClass.NOT_ODOROUS
    if sd < depth * SD_DEPTH_LINE_RATIO:
        return BlackOdorousClass.SEVERE
    return BlackOdorousClass.MILD


def dissolved_oxygen_class(do: Decimal) -> BlackOdorousClass | None:
    if do < 0:
        return None
    if do >= DO_MILD_THRESHOLD:
        return BlackOdorousClass.NOT_ODOROUS
    if do >= DO_SEVERE_THRESHOLD:
        return BlackOdorousClass.MILD
    return BlackOdorousClass.SEVERE


def ammonia_nitrogen_class(nh3n: Decimal) -> BlackOdorousClass | None:
    if nh3n < 0:
        return None
    if nh3n <= NH3N_MILD_THRESHOLD:
        return BlackOdorousClass.NOT_ODOROUS
    if nh3n <= NH3N_SEVERE_THRESHOLD:
        return BlackOdorousClass.MILD
    return BlackOdorousClass.SEVERE


def evaluate_black_odorous(sd: Any, do: Any, nh3n: Any, depth: Any, clear_to_bottom: bool = False) -> BlackOdorousResult:
    """
    Urban black/odorous water grade from transparency (cm), dissolved oxygen (mg/L),
    ammonia nitrogen (mg/L) and water depth (cm).

    Sub-factors with negative (unmeasured) inputs are left out; the overall grade is
    the most severe of the rest, or None when nothing could be graded.
    """
    graded = [
        (TRANSPARENCY, transparency_class(_as_decimal(sd, "SD"), _as_decimal(depth, "depth"), bool(clear_to_bottom))),
        (DISSOLVED_OXYGEN, dissolved_oxygen_class(_as_decimal(do, "DO"))),
        (AMMONIA_NITROGEN, ammonia_nitrogen_class(_as_decimal(nh3n, "NH3N"))),
    ]
    factors = [(name, c) for name, c in graded if c is not None]
    overall = max((c for _, c in factors), default=None)
    return BlackOdorousResult(overall=overall, factors=factors)

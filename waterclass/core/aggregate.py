from __future__ import annotations

from typing import Any, Iterable, Mapping

from waterclass.core.evaluator import classify
from waterclass.core.family import StandardFamily
from waterclass.core.models import QualityClass


def classify_many(
    family: StandardFamily,
    values: Mapping[Any, Any],
    version: Any | None = None,
) -> dict[Any, QualityClass | None]:
    """
    Classify each (factor, reading) independently.
    A structural error for any entry aborts the whole call.
    """
    return {factor: classify(family, factor, value, version) for factor, value in values.items()}


def max_class(classes: Iterable[QualityClass | None]) -> QualityClass | None:
    known = [c for c in classes if c is not None]
    return max(known) if known else None


def worst_class(
    family: StandardFamily,
    values: Mapping[Any, Any],
    version: Any | None = None,
) -> QualityClass | None:
    """Worst class among the classifiable readings; None if there are none."""
    return max_class(classify_many(family, values, version).values())

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from waterclass.core.models import QualityClass
from waterclass.core.repository import StandardRepository


@dataclass(frozen=True)
class StandardFamily:
    """
    One family of national standards (e.g. surface water, groundwater).

    allowed_factors: if set, classifying any other factor is an error
    accepts_text:    whether text readings ('0.01L', not-detected) are modelled
    fallback_class:  class given to a non-negative number no limit matched
    """

    name: str
    factor_type: type[Enum]
    default_version: Any
    repository: StandardRepository
    fallback_class: QualityClass
    allowed_factors: frozenset[Any] | None = None
    accepts_text: bool = True

    def lookup_factor(self, factor: Any) -> Any | None:
        """Factor enum member for an enum or its string code; None if unknown."""
        if isinstance(factor, self.factor_type):
            return factor
        try:
            return self.factor_type(str(factor).strip())
        except ValueError:
            return None

    def resolve_version(self, version: Any | None) -> Any:
        return self.default_version if version is None else version

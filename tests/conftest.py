from __future__ import annotations

from pathlib import Path

import pytest

from waterclass.core.family import StandardFamily
from waterclass.core.models import QualityClass

from tests.helpers.demo_standards import DemoFactor, make_family


@pytest.fixture
def open_family() -> StandardFamily:
    """Groundwater-like: any tabled factor, text readings accepted."""
    return make_family(fallback_class=QualityClass.V)


@pytest.fixture
def strict_family() -> StandardFamily:
    """Surface-water-like: allow-listed factors, numeric readings only."""
    return make_family(
        allowed_factors=frozenset({DemoFactor.ALPHA, DemoFactor.BETA, DemoFactor.PH}),
        accepts_text=False,
    )


@pytest.fixture
def samples_csv(tmp_path: Path) -> Path:
    """Two sites, one sample event each, in long format."""
    p = tmp_path / "samples.csv"
    p.write_text(
        "site_id,sampled_at,factor,value,unit\n"
        "S1,2026-03-01 09:00,ammonia_nitrogen,0.12,mg/L\n"
        "S1,2026-03-01 09:00,dissolved_oxygen,8.1,mg/L\n"
        "S1,2026-03-01 09:00,ph,7.2,\n"
        "S2,2026-03-01 10:30,ammonia_nitrogen,1.8,mg/L\n"
        "S2,2026-03-01 10:30,dissolved_oxygen,5.5,mg/L\n"
        "S2,2026-03-01 10:30,sulfate,120,mg/L\n",
        encoding="utf-8",
    )
    return p

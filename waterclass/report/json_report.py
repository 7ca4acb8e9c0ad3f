from __future__ import annotations

import json
import math
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any

import pandas as pd


def _json_safe(x: Any) -> Any:
    """
    Convert values into strict JSON-safe Python types.

    - NaN / Infinity and pandas/numpy NA become None
    - numpy scalars become python primitives
    - Timestamps become ISO strings
    - Decimals keep their printed digits (as strings), enums their value
    """
    if isinstance(x, dict):
        return {str(k): _json_safe(v) for k, v in x.items()}
    if isinstance(x, (list, tuple)):
        return [_json_safe(v) for v in x]

    if isinstance(x, Enum):
        return _json_safe(x.value)
    if isinstance(x, Decimal):
        return str(x) if x.is_finite() else None

    try:
        if pd.isna(x):
            return None
    except (TypeError, ValueError):
        pass

    if isinstance(x, pd.Timestamp):
        return x.isoformat()

    if isinstance(x, float):
        return None if (math.isnan(x) or math.isinf(x)) else x

    if isinstance(x, (str, int, bool)) or x is None:
        return x

    # numpy scalars
    if hasattr(x, "item") and callable(x.item):
        try:
            return _json_safe(x.item())
        except (TypeError, ValueError):
            pass

    return str(x)


def _df_to_records(df: pd.DataFrame | None) -> list[dict[str, Any]]:
    if df is None or df.empty:
        return []
    # per-record dicts keep nullable integers as ints
    return [_json_safe(r) for r in df.to_dict(orient="records")]


def build_report_payload(
    *,
    generated_at: str | None,
    coverage_line: str | None,
    verdict: str,
    summary_df: pd.DataFrame,
    readings_df: pd.DataFrame | None,
    notes: list[str] | None,
    run_config: dict[str, str] | None,
) -> dict[str, Any]:
    """
    The canonical report document.

    `meta` is closed in the schema: adding a key here needs a schema bump.
    """
    run_config = run_config or {}
    payload = {
        "meta": {
            "generated_at": generated_at,
            "coverage": coverage_line,
            "classifier_version": run_config.get("version"),
            "schema_version": run_config.get("schema"),
            "family": run_config.get("family"),
            "standard_version": run_config.get("standard") or None,
        },
        "summary": {
            "verdict": verdict,
            "table": _df_to_records(summary_df),
        },
        "readings": _df_to_records(readings_df),
        "notes": [str(n) for n in (notes or [])],
    }
    return _json_safe(payload)


def write_json_report(out_path: str | Path, **report: Any) -> Path:
    """Write `build_report_payload(**report)` as strict UTF-8 JSON (no NaN)."""
    p = Path(out_path)
    p.parent.mkdir(parents=True, exist_ok=True)

    payload = build_report_payload(**report)
    p.write_text(
        json.dumps(payload, indent=2, allow_nan=False, ensure_ascii=False),
        encoding="utf-8",
    )
    return p

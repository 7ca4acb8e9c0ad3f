from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd


REQUIRED_COLUMNS = [
    "site_id",
    "sampled_at",
    "factor",
    "value",
]

OPTIONAL_COLUMNS = ["unit"]


@dataclass(frozen=True)
class IngestResult:
    df: pd.DataFrame
    issues: list[str]


def load_samples_csv(path: str | Path) -> IngestResult:
    """
    Load long-format sample readings CSV and validate basic schema.

    Expected columns:
    site_id, sampled_at, factor, value[, unit]

    Values are kept as text: lab reports carry tokens such as '0.01L' or '未检出'
    that only the classifier may interpret.
    """
    path = Path(path)
    issues: list[str] = []

    if not path.exists():
        return IngestResult(df=pd.DataFrame(), issues=[f"File not found: {path}"])

    df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8")
    df.columns = [str(c).strip() for c in df.columns]

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        issues.append(f"Missing required columns: {missing}")
        return IngestResult(df=pd.DataFrame(), issues=issues)

    for col in OPTIONAL_COLUMNS:
        if col not in df.columns:
            df[col] = ""

    # Basic cleanup
    for col in ["site_id", "factor", "value", "unit"]:
        df[col] = df[col].astype(str).str.strip()
    df["factor"] = df["factor"].str.lower()

    # Parse timestamps
    df["sampled_at"] = pd.to_datetime(df["sampled_at"], errors="coerce")
    bad_ts = int(df["sampled_at"].isna().sum())
    if bad_ts:
        issues.append(f"{bad_ts} rows have invalid sampled_at timestamp")

    # Blank cells are "no reading", not an empty text token
    df[["site_id", "factor", "value"]] = df[["site_id", "factor", "value"]].replace("", np.nan)
    blank = int(df[["site_id", "factor", "value"]].isna().any(axis=1).sum())
    if blank:
        issues.append(f"{blank} rows have blank site_id/factor/value")

    # Drop rows missing essentials (strict for v1)
    df = df.dropna(subset=REQUIRED_COLUMNS).copy()
    df = df[REQUIRED_COLUMNS + OPTIONAL_COLUMNS].reset_index(drop=True)

    return IngestResult(df=df, issues=issues)

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from waterclass.core.aggregate import classify_many, max_class
from waterclass.core.black_odorous import (
    AMMONIA_NITROGEN,
    DISSOLVED_OXYGEN,
    TRANSPARENCY,
    BlackOdorousClass,
    evaluate_black_odorous,
)
from waterclass.core.family import StandardFamily
from waterclass.core.models import Numeric, QualityClass, Text, parse_reading

SAMPLE_KEYS = ["site_id", "sampled_at"]

READING_COLUMNS = ["site_id", "sampled_at", "factor", "value", "unit", "quality_class", "class_label"]

SUMMARY_COLUMNS = ["site_id", "sampled_at", "grade", "grade_label", "worst_factors", "classified", "unclassified"]

BLACK_ODOROUS_COLUMNS = [
    "site_id",
    "sampled_at",
    "grade",
    "grade_label",
    TRANSPARENCY,
    DISSOLVED_OXYGEN,
    AMMONIA_NITROGEN,
    "graded",
]

DEPTH = "depth"
CLEAR_TO_BOTTOM = "clear_to_bottom"

_TRUTHY = {"1", "true", "yes", "y", "t", "是"}


@dataclass(frozen=True)
class AssessmentResult:
    df: pd.DataFrame
    issues: list[str]


def _sample_tag(site_id: Any, sampled_at: Any) -> str:
    ts = sampled_at.isoformat() if isinstance(sampled_at, pd.Timestamp) else str(sampled_at)
    return f"{site_id}@{ts}"


def _eligible(family: StandardFamily, factor: Any, value: str) -> str | None:
    """Why a reading cannot go to the classifier, or None if it can."""
    if factor is None:
        return "unknown factor"
    if family.allowed_factors is not None and factor not in family.allowed_factors:
        return f"not graded by {family.name} standard"
    if not family.accepts_text and isinstance(parse_reading(value), Text):
        return "non-numeric reading"
    return None


def classify_samples(df: pd.DataFrame, family: StandardFamily, version: Any = None) -> AssessmentResult:
    """
    Classify every reading, one sample event (site_id, sampled_at) at a time.

    Readings the family cannot take (unknown factor, not an allow-listed factor,
    text for a numeric-only family) are reported and left unclassified so the rest
    of the batch still runs. Broken standard tables still abort.
    """
    if df is None or df.empty:
        return AssessmentResult(df=pd.DataFrame(columns=READING_COLUMNS), issues=[])

    issues: list[str] = []
    rows: list[dict[str, Any]] = []

    for (site_id, sampled_at), g in df.groupby(SAMPLE_KEYS, sort=True):
        tag = _sample_tag(site_id, sampled_at)
        values: dict[Any, str] = {}
        position: dict[Any, int] = {}
        factors: list[Any] = []

        for _, r in g.iterrows():
            factor = family.lookup_factor(r["factor"])
            reason = _eligible(family, factor, r["value"])
            if reason:
                issues.append(f"{tag}: {r['factor']}={r['value']} skipped ({reason})")
                factor = None
            else:
                if factor in values:
                    issues.append(
                        f"{tag}: duplicate {r['factor']} reading, "
                        f"{values[factor]} superseded by {r['value']}"
                    )
                    # superseded row stays unclassified
                    factors[position[factor]] = None
                values[factor] = r["value"]
                position[factor] = len(factors)
            factors.append(factor)

        classes = classify_many(family, values, version)

        for (_, r), factor in zip(g.iterrows(), factors):
            qc = classes.get(factor) if factor is not None else None
            rows.append(
                {
                    "site_id": str(site_id),
                    "sampled_at": sampled_at,
                    "factor": r["factor"],
                    "value": r["value"],
                    "unit": r.get("unit", ""),
                    "quality_class": None if qc is None else int(qc),
                    "class_label": None if qc is None else qc.label,
                }
            )

    out = pd.DataFrame(rows, columns=READING_COLUMNS)
    out["quality_class"] = out["quality_class"].astype("Int64")
    return AssessmentResult(df=out, issues=issues)


def _sort_by_grade(df: pd.DataFrame) -> pd.DataFrame:
    # Worst grade first, ungraded last
    df["_g"] = pd.to_numeric(df["grade"], errors="coerce").fillna(-1)
    return (
        df.sort_values(["_g", "site_id", "sampled_at"], ascending=[False, True, True])
          .drop(columns="_g")
          .reset_index(drop=True)
    )


def sample_summary(classified: pd.DataFrame) -> pd.DataFrame:
    """Worst class per sample event, and which factors set it."""
    if classified is None or classified.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    rows = []
    for (site_id, sampled_at), g in classified.groupby(SAMPLE_KEYS, sort=True):
        known = [QualityClass(int(c)) for c in g["quality_class"].dropna()]
        worst = max_class(known)
        worst_factors = (
            sorted(g.loc[(g["quality_class"] == int(worst)).fillna(False), "factor"].astype(str).unique().tolist())
            if worst is not None
            else []
        )
        rows.append(
            {
                "site_id": str(site_id),
                "sampled_at": sampled_at,
                "grade": None if worst is None else int(worst),
                "grade_label": "unclassified" if worst is None else worst.label,
                "worst_factors": ", ".join(worst_factors),
                "classified": len(known),
                "unclassified": int(len(g) - len(known)),
            }
        )

    df = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
    df["grade"] = df["grade"].astype("Int64")
    return _sort_by_grade(df)


def assessment_verdict(summary: pd.DataFrame, noun: str = "class") -> str:
    """One line per grade, worst first: 'Class V: S1, S3. Class II: S2.'"""
    if summary is None or summary.empty:
        return "No sample data available."

    parts: list[str] = []
    graded = summary[summary["grade"].notna()]
    for label in graded["grade_label"].drop_duplicates().tolist():
        sites = graded.loc[graded["grade_label"] == label, "site_id"].astype(str).unique().tolist()
        parts.append(f"{noun.capitalize()} {label}: {', '.join(sites)}")

    ungraded = summary.loc[summary["grade"].isna(), "site_id"].astype(str).unique().tolist()
    if ungraded:
        parts.append(f"No classifiable readings: {', '.join(ungraded)}")

    return ". ".join(parts) + "."


# ----------------------------
# Black/odorous
# ----------------------------

def _reading_or_missing(row: pd.Series, name: str, tag: str, issues: list[str]) -> Any:
    """Numeric reading, or -1 (treated as unmeasured) with an issue."""
    raw = row.get(name, np.nan)
    if pd.isna(raw):
        issues.append(f"{tag}: no {name} reading")
        return -1
    reading = parse_reading(raw)
    if not isinstance(reading, Numeric):
        issues.append(f"{tag}: {name}={raw} is not numeric")
        return -1
    return reading.value


def assess_black_odorous(df: pd.DataFrame) -> AssessmentResult:
    """
    Grade each sample event from its transparency, dissolved_oxygen,
    ammonia_nitrogen, depth and clear_to_bottom rows.
    """
    if df is None or df.empty:
        return AssessmentResult(df=pd.DataFrame(columns=BLACK_ODOROUS_COLUMNS), issues=[])

    issues: list[str] = []
    wide = df.groupby(SAMPLE_KEYS + ["factor"])["value"].last().unstack("factor")

    rows = []
    for (site_id, sampled_at), r in wide.iterrows():
        tag = _sample_tag(site_id, sampled_at)
        clear_raw = r.get(CLEAR_TO_BOTTOM, np.nan)
        clear = not pd.isna(clear_raw) and str(clear_raw).strip().lower() in _TRUTHY

        result = evaluate_black_odorous(
            sd=_reading_or_missing(r, TRANSPARENCY, tag, issues),
            do=_reading_or_missing(r, DISSOLVED_OXYGEN, tag, issues),
            nh3n=_reading_or_missing(r, AMMONIA_NITROGEN, tag, issues),
            depth=_reading_or_missing(r, DEPTH, tag, issues),
            clear_to_bottom=clear,
        )

        row: dict[str, Any] = {
            "site_id": str(site_id),
            "sampled_at": sampled_at,
            "grade": None if result.overall is None else int(result.overall),
            "grade_label": "ungraded" if result.overall is None else result.overall.label,
            "graded": len(result.factors),
        }
        for name in (TRANSPARENCY, DISSOLVED_OXYGEN, AMMONIA_NITROGEN):
            c: BlackOdorousClass | None = result.factor_class(name)
            row[name] = None if c is None else c.label
        rows.append(row)

    out = pd.DataFrame(rows, columns=BLACK_ODOROUS_COLUMNS)
    out["grade"] = out["grade"].astype("Int64")
    return AssessmentResult(df=_sort_by_grade(out), issues=issues)

from __future__ import annotations

from typing import Any

from waterclass.core.contract import WATERCLASS_DECISION_VERSION

from importlib.metadata import PackageNotFoundError, version

try:
    WATERCLASS_PACKAGE_VERSION = version("waterclass")
except PackageNotFoundError:
    WATERCLASS_PACKAGE_VERSION = "dev"

import argparse
from datetime import datetime
from pathlib import Path

import pandas as pd

from waterclass.schema_constants import SCHEMA_VERSION
from waterclass.core import groundwater, surface_water
from waterclass.core.assessment import (
    AssessmentResult,
    assess_black_odorous,
    assessment_verdict,
    classify_samples,
    sample_summary,
)
from waterclass.core.config import FAMILIES, load_config, merge_config
from waterclass.core.errors import WaterClassError
from waterclass.core.family import StandardFamily
from waterclass.core.ingest import load_samples_csv
from waterclass.core.repository import version_key
from waterclass.report.json_report import write_json_report
from waterclass.report.pdf_report import write_pdf_report


def _console_safe(s: str) -> str:
    """
    Windows consoles can choke on CJK lab tokens and roman-numeral glyphs.
    Keep console output ASCII-safe while leaving the reports untouched.
    """
    return (
        str(s)
        .replace("未检出", "ND")
        .replace("→", "->")
        .replace("•", "-")
        .encode("ascii", errors="replace")
        .decode("ascii")
    )


def _require_existing_file(path: Path, label: str) -> None:
    if not path.exists():
        raise FileNotFoundError(f"{label} not found: {path}")
    if path.is_dir():
        raise IsADirectoryError(f"{label} is a directory, expected a file: {path}")


def _family_for(name: str) -> StandardFamily | None:
    if name == "surface":
        return surface_water.SURFACE_WATER
    if name == "groundwater":
        return groundwater.GROUNDWATER
    return None


def _coverage_line(df: pd.DataFrame) -> str:
    ts = df["sampled_at"] if "sampled_at" in df.columns else pd.Series([], dtype="datetime64[ns]")
    span = "N/A"
    if not ts.empty and pd.notna(ts.min()) and pd.notna(ts.max()):
        span = f"{ts.min().date()} -> {ts.max().date()}"
    sites = df["site_id"].nunique() if "site_id" in df.columns else "N/A"
    return f"Coverage: {span} | Readings: {len(df)} | Sites: {sites}"


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="waterclass", description="Water quality classification against national standards")

    p.add_argument("--input", default=None, help="Path to samples CSV (defaults from config or built-in)")
    p.add_argument("--out", default=None, help="Output PDF path (defaults from config or built-in)")
    p.add_argument("--config", default=None, help="Path to config TOML (optional)")

    p.add_argument("--family", default=None, choices=FAMILIES, help="Standard family to grade against")
    p.add_argument("--version", default=None, help="Standard version (e.g. GB_3838_2002). Default: family default.")

    p.add_argument(
        "--json-out",
        "--json",
        dest="json_out",
        default=None,
        help="Optional JSON report output path",
    )

    return p


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)

    # load_config returns defaults if None/missing
    file_cfg = load_config(args.config)

    cli_explicit: dict[str, Any] = {}
    for name in ("input", "out", "family", "version"):
        if getattr(args, name) is not None:
            cli_explicit[name] = getattr(args, name)
    if args.json_out is not None:
        cli_explicit["json_out"] = args.json_out

    cfg = merge_config(file_cfg, cli_explicit)

    data_path = Path(cfg.input)
    out_pdf = Path(cfg.out)
    # JSON only when asked for, on the command line or in a config file
    json_out_path = Path(cfg.json_out) if (args.json_out is not None or args.config) else None

    # ---- Fail fast: missing input should be explicit (not "No data loaded") ----
    try:
        _require_existing_file(data_path, "Input CSV")
    except (FileNotFoundError, IsADirectoryError) as e:
        print(f"ERROR: {e}")
        return 2

    ingest = load_samples_csv(data_path)
    if ingest.df.empty:
        print(f"ERROR: input CSV parsed to 0 rows: {data_path}")
        if ingest.issues:
            print("Ingest issues:")
            for msg in ingest.issues:
                print(f" - {_console_safe(str(msg))}")
        return 1

    family = _family_for(cfg.family)
    try:
        if family is None:
            assessed: AssessmentResult = assess_black_odorous(ingest.df)
            summary_df = assessed.df
            readings_df = None
            verdict = assessment_verdict(summary_df, noun="grade")
            standard = ""
        else:
            std_version = family.resolve_version(cfg.version)
            assessed = classify_samples(ingest.df, family, std_version)
            readings_df = assessed.df
            summary_df = sample_summary(readings_df)
            verdict = assessment_verdict(summary_df)
            standard = version_key(std_version)
    except WaterClassError as e:
        print(f"ERROR: {_console_safe(str(e))}")
        return 1

    notes = ingest.issues + assessed.issues
    generated_at = datetime.now().strftime("%Y-%m-%d %H:%M")
    coverage = _coverage_line(ingest.df)

    run_config = {
        "config": str(args.config or ""),
        "schema": SCHEMA_VERSION,
        "family": cfg.family,
        "standard": standard,
        "version": WATERCLASS_DECISION_VERSION,
        "package": WATERCLASS_PACKAGE_VERSION,
    }

    out_pdf.parent.mkdir(parents=True, exist_ok=True)
    write_pdf_report(
        out_path=out_pdf,
        summary_df=summary_df,
        verdict=verdict,
        generated_at=generated_at,
        coverage_line=coverage,
        readings_df=readings_df,
        notes=notes,
        run_config=run_config,
    )

    if json_out_path:
        write_json_report(
            out_path=json_out_path,
            generated_at=generated_at,
            coverage_line=coverage,
            verdict=verdict,
            summary_df=summary_df,
            readings_df=readings_df,
            notes=notes,
            run_config=run_config,
        )

    # Prints only at main
    print(f"Report generated: {out_pdf.resolve()}")
    print(f"Family:           {cfg.family}{' ' + standard if standard else ''}")
    print(f"Verdict:          {_console_safe(verdict)}")

    if notes:
        print("Data notes:")
        for n in notes:
            print(f" - {_console_safe(n)}")

    if json_out_path:
        print(f"JSON saved:       {json_out_path.resolve()}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

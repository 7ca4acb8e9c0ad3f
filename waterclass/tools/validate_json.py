from __future__ import annotations

import argparse
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import importlib.resources as resources

import jsonschema

from waterclass.schema_constants import (
    SCHEMA_VERSION,
    SCHEMA_RESOURCE_PACKAGE,
    SCHEMA_RESOURCE_NAME,
)

EXPECTED_SCHEMA_VERSION = SCHEMA_VERSION

# How many schema violations to spell out in one error message
MAX_REPORTED_ERRORS = 5


class StrictJsonError(ValueError):
    """Raised when JSON is invalid or contains forbidden constants (NaN/Infinity)."""


class SchemaVersionMismatch(ValueError):
    """Raised when meta.schema_version does not match EXPECTED_SCHEMA_VERSION."""


class ReportSchemaError(ValueError):
    """Raised when a report breaks the bundled JSON schema; lists every violation path."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = problems
        shown = problems[:MAX_REPORTED_ERRORS]
        more = len(problems) - len(shown)
        msg = "; ".join(shown) + (f" (+{more} more)" if more > 0 else "")
        super().__init__(f"Schema validation failed: {msg}")


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    schema_version: str
    family: str | None = None
    readings: int = 0


def _reject_nonfinite_constants(value: str) -> Any:
    # json.loads would otherwise turn NaN/Infinity into floats
    raise StrictJsonError(f"Forbidden JSON constant encountered: {value}")


def _load_schema_text() -> str:
    """Bundled schema text, read through package resources."""
    return resources.files(SCHEMA_RESOURCE_PACKAGE).joinpath(SCHEMA_RESOURCE_NAME).read_text(
        encoding="utf-8"
    )


def _parse_strict_json(text: str, source: str) -> dict[str, Any]:
    try:
        data = json.loads(text, parse_constant=_reject_nonfinite_constants)
    except json.JSONDecodeError as e:
        raise StrictJsonError(f"{source}: invalid JSON: {e.msg} (line {e.lineno}, col {e.colno})") from e

    if not isinstance(data, dict):
        raise StrictJsonError(f"{source}: top-level JSON must be an object.")
    return data


def _schema_version_of(report: dict[str, Any]) -> str:
    meta = report.get("meta")
    v = meta.get("schema_version") if isinstance(meta, dict) else None
    if not isinstance(v, str) or not v.strip():
        raise SchemaVersionMismatch("Report has no 'meta.schema_version' string.")
    return v.strip()


def _schema_problems(report: dict[str, Any], schema: dict[str, Any]) -> list[str]:
    validator_cls = jsonschema.validators.validator_for(schema)
    validator = validator_cls(schema)
    problems = []
    for err in sorted(validator.iter_errors(report), key=lambda e: [str(p) for p in e.absolute_path]):
        where = "/".join(str(p) for p in err.absolute_path) or "<root>"
        problems.append(f"{where}: {err.message}")
    return problems


def validate_json(path: str | Path, *, expected_schema_version: str = EXPECTED_SCHEMA_VERSION) -> ValidationResult:
    """
    Check a waterclass JSON report:
      1) strict JSON parse (reject NaN/Infinity)
      2) meta.schema_version must equal the expected version
      3) every violation of the bundled JSON schema is collected and reported together
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(str(p))

    report = _parse_strict_json(p.read_text(encoding="utf-8"), str(p))

    actual = _schema_version_of(report)
    if actual != expected_schema_version:
        raise SchemaVersionMismatch(
            f"Schema version mismatch: expected '{expected_schema_version}', got '{actual}'."
        )

    schema = _parse_strict_json(_load_schema_text(), SCHEMA_RESOURCE_NAME)
    problems = _schema_problems(report, schema)
    if problems:
        raise ReportSchemaError(problems)

    readings = report.get("readings")
    return ValidationResult(
        ok=True,
        schema_version=actual,
        family=report["meta"].get("family"),
        readings=len(readings) if isinstance(readings, list) else 0,
    )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Validate a waterclass JSON report.")
    parser.add_argument("path", help="Path to JSON report file")
    args = parser.parse_args(argv)

    try:
        result = validate_json(args.path)
    except (OSError, ValueError) as e:
        print(f"ERROR: {e}")
        raise SystemExit(1) from e

    print(f"OK: JSON validation passed (strict + schema). family={result.family} readings={result.readings}")
    raise SystemExit(0)


if __name__ == "__main__":
    main()

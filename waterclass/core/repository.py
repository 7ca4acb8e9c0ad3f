from __future__ import annotations

import importlib.resources as resources
import json
import threading
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Mapping

from waterclass.core.errors import StandardFormatError, StandardNotFoundError
from waterclass.core.models import ClassLimit, ComparisonKind, FactorStandard, QualityClass, parse_range

StandardTable = dict[Any, FactorStandard]
Loader = Callable[[str], StandardTable]


def version_key(version: Any) -> str:
    """Normalize a version enum or string to the cache / file key."""
    if isinstance(version, Enum):
        version = version.value
    key = str(version).strip().upper()
    if not key:
        raise StandardNotFoundError("Empty standard version")
    return key


class StandardRepository:
    """
    Per-version cache of standard tables.

    The first lookup of a version runs the loader under a lock; every later lookup,
    concurrent or not, returns the same table without loading again. A loader that
    raises caches nothing.
    """

    def __init__(self, loader: Loader) -> None:
        self._loader = loader
        self._cache: dict[str, StandardTable] = {}
        self._lock = threading.Lock()

    def get_standards(self, version: Any) -> StandardTable:
        key = version_key(version)
        table = self._cache.get(key)
        if table is not None:
            return table

        with self._lock:
            table = self._cache.get(key)
            if table is None:
                table = self._loader(key)
                self._cache[key] = table
        return table

    def cached_versions(self) -> list[str]:
        """Versions loaded so far, sorted. Introspection only; never triggers a load."""
        return sorted(self._cache)


# ----------------------------
# Decoding
# ----------------------------

def _first(d: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for k in keys:
        if k in d:
            return d[k]
    return default


def _opt_str(x: Any) -> str | None:
    if x is None:
        return None
    s = str(x).strip()
    return s or None


def _decode_limit(raw: Any, where: str) -> ClassLimit:
    if not isinstance(raw, dict):
        raise StandardFormatError(f"{where}: limit must be an object")
    try:
        quality_class = QualityClass.from_token(_first(raw, "class", "WaterQualityClass"))
        comparison = ComparisonKind.from_token(_first(raw, "comparison", "ComparisonType"))
    except ValueError as e:
        raise StandardFormatError(f"{where}: {e}") from e

    limit_value = _first(raw, "limit", "LimitValue")
    if limit_value is None:
        raise StandardFormatError(f"{where}: missing limit value")
    return ClassLimit(quality_class=quality_class, comparison=comparison, limit_value=str(limit_value))


def decode_standards(data: Any, factor_type: Callable[[str], Any]) -> StandardTable:
    """
    Decode a persisted table: {factor_code: {name, description, unit, limits: [...]}}.

    Range strings are kept as text; they are parsed when a reading is evaluated.
    """
    if not isinstance(data, dict):
        raise StandardFormatError("Standard table must be a JSON object keyed by factor")

    table: StandardTable = {}
    for code, record in data.items():
        try:
            factor = factor_type(code)
        except ValueError as e:
            raise StandardFormatError(f"Unknown factor in standard table: {code!r}") from e
        if not isinstance(record, dict):
            raise StandardFormatError(f"{code}: record must be an object")

        limits = _first(record, "limits", "Limits", default=[])
        if not isinstance(limits, list):
            raise StandardFormatError(f"{code}: limits must be a list")

        table[factor] = FactorStandard(
            factor=factor,
            name=str(_first(record, "name", "FactorName", default=code)),
            description=_opt_str(_first(record, "description", "Description")),
            unit=_opt_str(_first(record, "unit", "Unit")),
            limits=tuple(_decode_limit(lim, f"{code}.limits[{i}]") for i, lim in enumerate(limits)),
        )
    return table


def find_malformed_limits(table: Mapping[Any, FactorStandard]) -> list[str]:
    """
    List range limits that would fail at evaluation time.
    Nothing is raised here; the evaluator stays the enforcing side.
    """
    issues: list[str] = []
    for standard in table.values():
        for lim in standard.limits:
            if lim.comparison.is_range and parse_range(lim.limit_value) is None:
                issues.append(
                    f"{standard.name}: class {lim.quality_class.label} range limit "
                    f"{lim.limit_value!r} is not 'min-max'"
                )
    return issues


# ----------------------------
# Loaders
# ----------------------------

def _parse_json(text: str, source: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise StandardFormatError(f"Invalid JSON in {source}: {e.msg} (line {e.lineno}, col {e.colno})") from e


def resource_loader(package: str, factor_type: Callable[[str], Any]) -> Loader:
    """Load '<VERSION>.json' bundled inside `package` (works for wheels and editable installs)."""

    def load(version: str) -> StandardTable:
        res = resources.files(package).joinpath(f"{version}.json")
        if not res.is_file():
            raise StandardNotFoundError(f"Standard data file not found: {package}/{version}.json")
        return decode_standards(_parse_json(res.read_text(encoding="utf-8"), f"{package}/{version}.json"), factor_type)

    return load


def directory_loader(root: str | Path, factor_type: Callable[[str], Any]) -> Loader:
    """Load '<VERSION>.json' from a directory on disk."""
    base = Path(root)

    def load(version: str) -> StandardTable:
        p = base / f"{version}.json"
        if not p.is_file():
            raise StandardNotFoundError(f"Standard data file not found: {p}")
        return decode_standards(_parse_json(p.read_text(encoding="utf-8"), str(p)), factor_type)

    return load


def table_loader(tables: Mapping[Any, StandardTable]) -> Loader:
    """Serve already-built tables, keyed by version."""
    by_key = {version_key(v): dict(t) for v, t in tables.items()}

    def load(version: str) -> StandardTable:
        if version not in by_key:
            raise StandardNotFoundError(f"No standard table for version: {version}")
        return by_key[version]

    return load

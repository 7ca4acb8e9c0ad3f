from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

try:
    import tomllib  # py3.11+
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore


FAMILIES = ("surface", "groundwater", "black_odorous")


# ----------------------------
# Primary config object
# ----------------------------

@dataclass(frozen=True)
class WaterClassConfig:
    """
    Single, flattened config object used by the CLI/runtime.

    Supports the simple style:
      [waterclass]
      input, out, json_out, family, version

    Also supports structured style:
      [standard], [report]
    """
    # IO
    input: str = "data/samples.csv"
    out: str = "outputs/waterclass_report.pdf"
    json_out: str = "outputs/waterclass_report.json"

    # classification
    family: str = "surface"
    version: str | None = None


# ----------------------------
# Helpers
# ----------------------------

def _as_dict(x: Any) -> dict[str, Any]:
    return x if isinstance(x, dict) else {}


def _get(d: Mapping[str, Any], key: str, default: Any) -> Any:
    return d.get(key, default) if isinstance(d, Mapping) else default


def _coerce_str(x: Any, default: str) -> str:
    if x is None:
        return default
    s = str(x).strip()
    return s or default


def _coerce_opt_str(x: Any) -> str | None:
    if x is None:
        return None
    s = str(x).strip()
    return s or None


def _coerce_family(x: Any, default: str) -> str:
    s = _coerce_str(x, default).lower().replace("-", "_")
    return s if s in FAMILIES else default


# ----------------------------
# Load + merge
# ----------------------------

def load_config(path: str | Path | None) -> WaterClassConfig:
    """
    Load TOML config. If missing/None, returns safe defaults.
    Never raises for missing file (config is optional).
    """
    if not path:
        return WaterClassConfig()

    p = Path(path)
    if not p.exists():
        return WaterClassConfig()

    data = tomllib.loads(p.read_text(encoding="utf-8"))

    # Preferred simple table
    wc = _as_dict(data.get("waterclass", {}))

    # Optional structured tables
    standard = _as_dict(data.get("standard", {}))
    report = _as_dict(data.get("report", {}))

    return WaterClassConfig(
        input=_coerce_str(_get(wc, "input", WaterClassConfig.input), WaterClassConfig.input),
        out=_coerce_str(_get(wc, "out", _get(report, "pdf", WaterClassConfig.out)), WaterClassConfig.out),
        json_out=_coerce_str(
            _get(wc, "json_out", _get(report, "json", WaterClassConfig.json_out)), WaterClassConfig.json_out
        ),
        family=_coerce_family(_get(wc, "family", _get(standard, "family", WaterClassConfig.family)), WaterClassConfig.family),
        version=_coerce_opt_str(_get(wc, "version", _get(standard, "version", None))),
    )


def merge_config(cfg: WaterClassConfig, args: Any) -> WaterClassConfig:
    """
    Merge CLI args over file config.
    `args` may be a mapping or a namespace; only non-empty values apply.
    """
    def lookup(name: str) -> Any:
        if isinstance(args, Mapping):
            return args.get(name)
        return getattr(args, name, None)

    def pick_str(name: str, cur: str) -> str:
        v = lookup(name)
        if v is not None and str(v).strip():
            return str(v).strip()
        return cur

    def pick_opt_str(name: str, cur: str | None) -> str | None:
        v = lookup(name)
        if v is None:
            return cur
        return str(v).strip() or cur

    return WaterClassConfig(
        input=pick_str("input", cfg.input),
        out=pick_str("out", cfg.out),
        json_out=pick_str("json_out", cfg.json_out),
        family=_coerce_family(pick_str("family", cfg.family), cfg.family),
        version=pick_opt_str("version", cfg.version),
    )

from __future__ import annotations

import json
import runpy
import sys
from pathlib import Path

from waterclass.cli import main as cli_main


def _run_module(module: str, argv: list[str]) -> int:
    """
    Run a module as if invoked via `python -m <module> ...` but in-process,
    so coverage counts. Returns the SystemExit code (0 for success).
    """
    old_argv = sys.argv[:]
    try:
        sys.argv = [module, *argv]
        try:
            runpy.run_module(module, run_name="__main__")
            return 0
        except SystemExit as e:
            # argparse / CLI typically exits via SystemExit
            return int(e.code) if e.code is not None else 0
    finally:
        sys.argv = old_argv


def test_cli_module_generates_json_strict(samples_csv: Path, tmp_path: Path) -> None:
    out_pdf = tmp_path / "check.pdf"
    out_json = tmp_path / "check.json"

    rc = _run_module(
        "waterclass.cli",
        ["--input", str(samples_csv), "--out", str(out_pdf), "--json-out", str(out_json)],
    )
    assert rc == 0

    assert out_pdf.exists() and out_pdf.stat().st_size > 0
    assert out_json.exists() and out_json.stat().st_size > 0

    # strict JSON validation: reject NaN/Infinity by failing parse_constant
    raw = out_json.read_text(encoding="utf-8")

    def _reject_constants(x: str):
        raise ValueError(f"Non-JSON constant encountered: {x}")

    obj = json.loads(raw, parse_constant=_reject_constants)
    assert set(("meta", "summary", "readings", "notes")).issubset(obj.keys())


def test_cli_missing_input_returns_2(tmp_path: Path, capsys) -> None:
    rc = cli_main(["--input", str(tmp_path / "nope.csv"), "--out", str(tmp_path / "r.pdf")])
    assert rc == 2
    assert "ERROR: Input CSV not found" in capsys.readouterr().out


def test_cli_input_without_rows_returns_1(tmp_path: Path, capsys) -> None:
    p = tmp_path / "empty.csv"
    p.write_text("site_id,sampled_at,factor,value\n", encoding="utf-8")
    rc = cli_main(["--input", str(p), "--out", str(tmp_path / "r.pdf")])
    assert rc == 1
    assert "parsed to 0 rows" in capsys.readouterr().out


def test_cli_unknown_standard_version_returns_1(samples_csv: Path, tmp_path: Path, capsys) -> None:
    out_pdf = tmp_path / "r.pdf"
    rc = cli_main(["--input", str(samples_csv), "--out", str(out_pdf), "--version", "GB_3838_1988"])
    assert rc == 1
    assert "ERROR:" in capsys.readouterr().out
    assert not out_pdf.exists()


def test_cli_reads_family_from_config(tmp_path: Path) -> None:
    data = tmp_path / "wells.csv"
    data.write_text(
        "site_id,sampled_at,factor,value\n"
        "W1,2026-02-01,mercury,0.0001L\n"
        "W1,2026-02-01,nitrate,25\n",
        encoding="utf-8",
    )
    out_json = tmp_path / "wells.json"
    cfg = tmp_path / "cfg.toml"
    cfg.write_text(
        "[waterclass]\n"
        f'input = "{data.as_posix()}"\n'
        f'out = "{(tmp_path / "wells.pdf").as_posix()}"\n'
        f'json_out = "{out_json.as_posix()}"\n'
        'family = "groundwater"\n',
        encoding="utf-8",
    )

    assert cli_main(["--config", str(cfg)]) == 0

    obj = json.loads(out_json.read_text(encoding="utf-8"))
    assert obj["meta"]["family"] == "groundwater"
    assert obj["meta"]["standard_version"] == "GBT_14848_2017"
    assert obj["summary"]["verdict"] == "Class IV: W1."


def test_black_odorous_tool_module_runs(capsys) -> None:
    rc = _run_module(
        "waterclass.tools.black_odorous",
        ["--sd", "30", "--do", "1", "--nh3n", "20", "--depth", "50"],
    )
    assert rc == 0
    out = capsys.readouterr().out
    assert "dissolved_oxygen  mild" in out
    assert "overall           severe" in out


def test_black_odorous_tool_rejects_text(capsys) -> None:
    rc = _run_module(
        "waterclass.tools.black_odorous",
        ["--sd", "clear", "--do", "1", "--nh3n", "20", "--depth", "50"],
    )
    assert rc == 2
    assert "ERROR:" in capsys.readouterr().out


def test_validate_json_tool_module_runs(samples_csv: Path, tmp_path: Path, capsys) -> None:
    out_json = tmp_path / "check.json"
    assert cli_main(["--input", str(samples_csv), "--out", str(tmp_path / "c.pdf"), "--json", str(out_json)]) == 0

    rc = _run_module("waterclass.tools.validate_json", [str(out_json)])
    assert rc == 0
    assert "OK: JSON validation passed" in capsys.readouterr().out

    rc = _run_module("waterclass.tools.validate_json", [str(tmp_path / "missing.json")])
    assert rc == 1

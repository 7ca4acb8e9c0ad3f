from __future__ import annotations

from pathlib import Path

import pandas as pd
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas


def _pdf_safe(text: object) -> str:
    """Built-in Type1 fonts only cover Latin-1."""
    s = "" if text is None else str(text)
    s = s.replace("未检出", "ND")
    return s.encode("latin-1", errors="replace").decode("latin-1")


def _fmt_ts(x: object) -> str:
    if x is None or (not isinstance(x, str) and pd.isna(x)):
        return "N/A"
    if isinstance(x, pd.Timestamp):
        return x.strftime("%Y-%m-%d %H:%M")
    return str(x)


def _wrap_lines(c: canvas.Canvas, text: str, max_width: float, font_name: str, font_size: int) -> list[str]:
    c.setFont(font_name, font_size)
    words = _pdf_safe(text).split()
    if not words:
        return [""]

    lines: list[str] = []
    current = words[0]
    for w in words[1:]:
        test = f"{current} {w}"
        if c.stringWidth(test, font_name, font_size) <= max_width:
            current = test
        else:
            lines.append(current)
            current = w
    lines.append(current)
    return lines


def _draw_wrapped(
    c: canvas.Canvas,
    x: float,
    y: float,
    text: str,
    max_width: float,
    line_height: int = 13,
    font_name: str = "Helvetica",
    font_size: int = 10,
) -> float:
    lines = _wrap_lines(c, text, max_width, font_name, font_size)
    c.setFont(font_name, font_size)
    for line in lines:
        c.drawString(x, y, line)
        y -= line_height
    return y


def _draw_footer(c: canvas.Canvas, page_w: float, y: float, text: str, left: float, right: float) -> None:
    c.setFont("Helvetica", 8)
    c.drawRightString(page_w - right, y, _pdf_safe(text))
    c.drawString(left, y, "waterclass")


def _new_page(c: canvas.Canvas, page_w: float, page_h: float, title: str, footer: str, left: float, right: float) -> float:
    _draw_footer(c, page_w, 24, footer, left, right)
    c.showPage()
    y = page_h - 60
    c.setFont("Helvetica-Bold", 12)
    c.drawString(left, y, title)
    return y - 24


def write_pdf_report(
    out_path: str | Path,
    summary_df: pd.DataFrame,
    verdict: str,
    generated_at: str | None,
    coverage_line: str | None,
    readings_df: pd.DataFrame | None = None,
    notes: list[str] | None = None,
    run_config: dict[str, str] | None = None,
) -> Path:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    c = canvas.Canvas(str(out_path), pagesize=A4)
    page_w, page_h = A4

    left = 40
    right = 40
    max_width = page_w - left - right
    footer = f"Generated {generated_at}" if generated_at else ""

    # --- Summary table column widths (sum <= max_width) ---
    COL_W = {"site": 90, "sampled": 100, "grade": 80, "detail": 245}
    order = ["site", "sampled", "grade", "detail"]
    X = {}
    x = left
    for k in order:
        X[k] = x
        x += COL_W[k]

    # ======================
    # PAGE 1: SAMPLE SUMMARY
    # ======================
    y = page_h - 60
    c.setFont("Helvetica-Bold", 18)
    c.drawString(left, y, "Water Quality Classification")
    y -= 26

    c.setFont("Helvetica", 10)
    if generated_at:
        c.drawString(left, y, f"Generated: {generated_at}")
        y -= 14
    if coverage_line:
        y = _draw_wrapped(c, left, y, coverage_line, max_width, line_height=12)
        y -= 6

    if run_config:
        parts = []
        for key, label in (("family", "Family"), ("standard", "Standard"), ("version", "Version")):
            if run_config.get(key):
                parts.append(f"{label}: {run_config[key]}")
        if parts:
            y = _draw_wrapped(c, left, y, " | ".join(parts), max_width, line_height=12)
            y -= 6

    y -= 6
    c.setFont("Helvetica-Bold", 12)
    c.drawString(left, y, "Verdict")
    y -= 16
    y = _draw_wrapped(c, left, y, verdict, max_width, line_height=14, font_size=11)
    y -= 12

    c.setFont("Helvetica-Bold", 9)
    c.drawString(X["site"], y, "Site")
    c.drawString(X["sampled"], y, "Sampled")
    c.drawString(X["grade"], y, "Grade")
    c.drawString(X["detail"], y, "Detail")
    y -= 14

    c.setFont("Helvetica", 9)
    if summary_df is None or summary_df.empty:
        c.drawString(left, y, "No sample data available.")
        y -= 14
    else:
        for _, r in summary_df.iterrows():
            if y < 90:
                y = _new_page(c, page_w, page_h, "Water Quality Classification (cont.)", footer, left, right)
                c.setFont("Helvetica", 9)

            if "worst_factors" in summary_df.columns:
                detail = str(r.get("worst_factors") or "")
            else:
                detail = ", ".join(
                    f"{k}: {r.get(k)}"
                    for k in ("transparency", "dissolved_oxygen", "ammonia_nitrogen")
                    if isinstance(r.get(k), str)
                )

            c.drawString(X["site"], y, _pdf_safe(r["site_id"]))
            c.drawString(X["sampled"], y, _fmt_ts(r.get("sampled_at")))
            c.drawString(X["grade"], y, _pdf_safe(r.get("grade_label", "")))
            y = _draw_wrapped(c, X["detail"], y, detail, COL_W["detail"], line_height=11, font_size=9) - 4

    # ======================
    # PAGE 2: READINGS
    # ======================
    if readings_df is not None and not readings_df.empty:
        y = _new_page(c, page_w, page_h, "Readings", footer, left, right)
        cols = [("site_id", 90), ("sampled_at", 100), ("factor", 150), ("value", 90), ("class_label", 85)]

        c.setFont("Helvetica-Bold", 9)
        x = left
        for name, w in cols:
            c.drawString(x, y, name.replace("_", " ").title())
            x += w
        y -= 14

        c.setFont("Helvetica", 9)
        for _, r in readings_df.iterrows():
            if y < 60:
                y = _new_page(c, page_w, page_h, "Readings (cont.)", footer, left, right)
                c.setFont("Helvetica", 9)
            x = left
            for name, w in cols:
                v = r.get(name)
                text = _fmt_ts(v) if name == "sampled_at" else ("-" if v is None or pd.isna(v) else _pdf_safe(v))
                c.drawString(x, y, text)
                x += w
            y -= 12

    # ======================
    # DATA NOTES
    # ======================
    if notes:
        y = _new_page(c, page_w, page_h, "Data Notes", footer, left, right)
        for n in notes:
            if y < 60:
                y = _new_page(c, page_w, page_h, "Data Notes (cont.)", footer, left, right)
            y = _draw_wrapped(c, left, y, f"- {n}", max_width, line_height=13)

    _draw_footer(c, page_w, 24, f"Version {run_config.get('version', '')}" if run_config else footer, left, right)
    c.save()
    return out_path

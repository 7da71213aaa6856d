"""Render scan results as a styled PDF report.

Uses fpdf2 drawing primitives (no markdown-to-HTML conversion).
Install via: pip install cookieguard[pdf]
"""

from __future__ import annotations

from pathlib import Path

from cookieguard.catalog import VIOLATION_TYPES
from cookieguard.render._helpers import (
    LEGAL_SOURCES,
    NO_VIOLATIONS,
    REPORT_TITLE,
    TASKFORCE_ADOPTED,
    format_timestamp,
    latin1,
    recommendation,
)
from cookieguard.scanner import ScanResult
from cookieguard.schemas.settings import ReportSettings


# ── Color palette ──────────────────────────────────────────────────────────

_SEV_COLORS: dict[str, tuple[tuple[int, int, int], tuple[int, int, int]]] = {
    # severity -> (text_rgb, bg_rgb)
    "excellent": ((22, 101, 52), (220, 252, 231)),
    "good":      ((22, 101, 52), (220, 252, 231)),
    "fair":      ((161, 120, 0), (254, 249, 195)),
    "poor":      ((194, 80, 0), (255, 237, 213)),
    "critical":  ((185, 28, 28), (254, 226, 226)),
}

_OUTCOME_COLORS = {
    "violation": _SEV_COLORS["critical"],
    "ok":        _SEV_COLORS["good"],
    "error":     ((75, 85, 99), (229, 231, 235)),
}

_CHARCOAL = (31, 41, 55)
_WHITE = (255, 255, 255)
_ALT_ROW = (248, 249, 250)
_BODY = (30, 30, 30)
_MUTED = (100, 100, 100)
_DIVIDER = (200, 200, 200)

_CHECK_COLS = (92, 28, 25, 25)      # total = 170 < 180


def render_pdf(result: ScanResult, output_path: Path, report: ReportSettings | None = None) -> None:
    """Render the scan result to a PDF file."""
    try:
        from fpdf import FPDF
        from fpdf.enums import XPos, YPos
    except ImportError:
        raise ImportError(
            "PDF output requires 'fpdf2'. "
            "Install it with: pip install cookieguard[pdf]"
        )

    pdf = _CookieReportPDF(result, report or ReportSettings(), FPDF, XPos, YPos)
    pdf.render()
    pdf.output(str(output_path))


class _CookieReportPDF:
    """Builds a PDF from a ScanResult using fpdf2 drawing primitives."""

    def __init__(self, result: ScanResult, report: ReportSettings, fpdf_cls, xpos_enum, ypos_enum):
        self._result = result
        self._report = report
        self._XPos = xpos_enum
        self._YPos = ypos_enum
        self._date = format_timestamp(result.scanned_at)

        self._pdf = fpdf_cls()
        self._pdf.set_auto_page_break(auto=True, margin=20)
        self._pdf.set_margins(15, 20, 15)
        self._content_w = 180  # 210 - 15 - 15

    # ── Delegation ─────────────────────────────────────────────────────

    def output(self, path: str) -> None:
        self._pdf.output(path)

    # ── Header / Footer ───────────────────────────────────────────────

    def _add_page(self) -> None:
        self._pdf.add_page()
        if self._pdf.page_no() > 1:
            self._pdf.set_font("Helvetica", "B", 8)
            self._pdf.set_text_color(*_MUTED)
            self._pdf.set_y(10)
            self._pdf.cell(self._content_w / 2, 5, self._safe(REPORT_TITLE), new_x=self._XPos.RIGHT, new_y=self._YPos.TOP)
            self._pdf.set_font("Helvetica", "", 8)
            self._pdf.cell(self._content_w / 2, 5, self._safe(self._date), align="R", new_x=self._XPos.LMARGIN, new_y=self._YPos.NEXT)
            self._pdf.set_draw_color(*_DIVIDER)
            self._pdf.line(15, 16, 195, 16)
            self._pdf.set_y(20)

    def _footer(self) -> None:
        """Draw footer on current page (called before adding next page).

        Must disable auto_page_break to avoid fpdf2 inserting a blank page
        when we draw below the break threshold (y=283 > margin at 277).
        """
        self._pdf.set_auto_page_break(auto=False)
        self._pdf.set_draw_color(*_DIVIDER)
        self._pdf.line(15, 282, 195, 282)
        self._pdf.set_y(283)
        self._pdf.set_font("Helvetica", "", 7.5)
        self._pdf.set_text_color(*_MUTED)
        self._pdf.cell(self._content_w, 5, f"Page {self._pdf.page_no()}", align="R")
        self._pdf.set_auto_page_break(auto=True, margin=20)

    # ── Drawing helpers ────────────────────────────────────────────────

    def _safe(self, text: str) -> str:
        return latin1(str(text))

    def _set_body_text(self) -> None:
        self._pdf.set_font("Helvetica", "", 9)
        self._pdf.set_text_color(*_BODY)

    def _divider(self) -> None:
        y = self._pdf.get_y() + 2
        self._pdf.set_draw_color(*_DIVIDER)
        self._pdf.line(15, y, 195, y)
        self._pdf.set_y(y + 4)

    def _heading(self, text: str, level: int = 2) -> None:
        sizes = {2: 14, 3: 11, 4: 9.5}
        sz = sizes.get(level, 11)
        spacing = {2: 8, 3: 5, 4: 3}
        self._ensure_space(sz + spacing.get(level, 5) + 5)
        self._pdf.ln(spacing.get(level, 5))
        self._pdf.set_font("Helvetica", "B", sz)
        self._pdf.set_text_color(*_BODY)
        self._pdf.cell(self._content_w, sz * 0.5, self._safe(text), new_x=self._XPos.LMARGIN, new_y=self._YPos.NEXT)
        self._pdf.ln(2)

    def _badge(self, label: str, colors: tuple[tuple[int, int, int], tuple[int, int, int]]) -> None:
        """Draw a colored pill with label text."""
        text_c, bg_c = colors
        label = label.upper()
        self._pdf.set_font("Helvetica", "B", 7)
        w = self._pdf.get_string_width(label) + 4
        h = 4.5
        x = self._pdf.get_x()
        y = self._pdf.get_y()
        self._pdf.set_fill_color(*bg_c)
        self._pdf.set_draw_color(*bg_c)
        self._pdf.rect(x, y, w, h, style="FD")
        self._pdf.set_text_color(*text_c)
        self._pdf.set_xy(x, y)
        self._pdf.cell(w, h, label, align="C", new_x=self._XPos.RIGHT, new_y=self._YPos.TOP)
        self._pdf.set_x(x + w + 2)

    def _bullet(self, text: str, indent: float = 4) -> None:
        self._set_body_text()
        x0 = self._pdf.get_x()
        self._pdf.set_x(x0 + indent)
        cy = self._pdf.get_y() + 1.5
        self._pdf.set_fill_color(*_BODY)
        self._pdf.ellipse(self._pdf.get_x(), cy, 1.2, 1.2, style="F")
        self._pdf.set_x(self._pdf.get_x() + 3)
        self._pdf.multi_cell(self._content_w - indent - 7, 4, self._safe(text), new_x=self._XPos.LMARGIN, new_y=self._YPos.NEXT)

    def _kv(self, key: str, value: str) -> None:
        self._pdf.set_font("Helvetica", "B", 9)
        self._pdf.set_text_color(*_BODY)
        kw = self._pdf.get_string_width(key + ": ") + 2
        self._pdf.cell(kw, 4.5, self._safe(key + ":"), new_x=self._XPos.RIGHT, new_y=self._YPos.TOP)
        self._pdf.set_font("Helvetica", "", 9)
        self._pdf.multi_cell(self._content_w - kw, 4.5, self._safe(value), new_x=self._XPos.LMARGIN, new_y=self._YPos.NEXT)

    def _ensure_space(self, needed: float = 20) -> None:
        """Add a new page if less than `needed` mm remain."""
        if self._pdf.get_y() + needed > 275:
            self._footer()
            self._add_page()

    def _table_header(self, cols: tuple[float, ...], headers: list[str]) -> None:
        """Draw a charcoal header row."""
        self._ensure_space(12)
        self._pdf.set_fill_color(*_CHARCOAL)
        self._pdf.set_text_color(*_WHITE)
        self._pdf.set_font("Helvetica", "B", 7.5)
        for i, hdr in enumerate(headers):
            last = i == len(headers) - 1
            self._pdf.cell(
                cols[i], 6, self._safe(hdr), border=0, fill=True,
                align="L",
                new_x=self._XPos.LMARGIN if last else self._XPos.RIGHT,
                new_y=self._YPos.NEXT if last else self._YPos.TOP,
            )

    def _check_row(self, values: list[str], row_idx: int, outcome: str) -> None:
        """Data row whose second column is an outcome badge."""
        self._ensure_space(8)
        fill = row_idx % 2 == 1
        y_start = self._pdf.get_y()
        if fill:
            self._pdf.set_fill_color(*_ALT_ROW)
            self._pdf.rect(15, y_start, sum(_CHECK_COLS), 5.5, style="F")
        self._pdf.set_text_color(*_BODY)
        self._pdf.set_font("Helvetica", "", 7.5)

        self._pdf.cell(_CHECK_COLS[0], 5.5, self._safe(values[0]), new_x=self._XPos.RIGHT, new_y=self._YPos.TOP)
        self._pdf.set_xy(15 + _CHECK_COLS[0], y_start + 0.5)
        self._badge(outcome, _OUTCOME_COLORS[outcome])
        self._pdf.set_xy(15 + sum(_CHECK_COLS[:2]), y_start)
        self._pdf.set_text_color(*_BODY)
        self._pdf.set_font("Helvetica", "", 7.5)
        self._pdf.cell(_CHECK_COLS[2], 5.5, self._safe(values[2]), new_x=self._XPos.RIGHT, new_y=self._YPos.TOP)
        self._pdf.cell(_CHECK_COLS[3], 5.5, self._safe(values[3]), new_x=self._XPos.LMARGIN, new_y=self._YPos.NEXT)

    # ── Main render ────────────────────────────────────────────────────

    def render(self) -> None:
        self._add_page()
        self._render_title()
        self._render_score_card()
        self._render_checks()
        self._render_violations()
        self._render_recommendation()
        self._render_legal_basis()
        self._footer()

    # ── 1. Title block ─────────────────────────────────────────────────

    def _render_title(self) -> None:
        self._pdf.ln(15)
        self._pdf.set_font("Helvetica", "B", 18)
        self._pdf.set_text_color(*_BODY)
        self._pdf.cell(self._content_w, 10, self._safe(REPORT_TITLE), new_x=self._XPos.LMARGIN, new_y=self._YPos.NEXT)
        self._pdf.set_font("Helvetica", "", 10)
        self._pdf.set_text_color(*_MUTED)
        self._pdf.multi_cell(self._content_w, 6, self._safe(self._result.url or "Unknown URL"), new_x=self._XPos.LMARGIN, new_y=self._YPos.NEXT)
        self._pdf.cell(self._content_w, 6, self._safe(self._date), new_x=self._XPos.LMARGIN, new_y=self._YPos.NEXT)
        self._pdf.ln(6)
        self._divider()

    # ── 2. Score card ──────────────────────────────────────────────────

    def _render_score_card(self) -> None:
        s = self._result.summary
        self._heading("Scores")

        text_c, bg_c = _SEV_COLORS[s.severity_level.value]
        card_h = 26
        self._ensure_space(card_h + 5)
        card_x, card_y = 15, self._pdf.get_y()

        self._pdf.set_fill_color(*bg_c)
        self._pdf.rect(card_x, card_y, self._content_w, card_h, style="F")

        self._pdf.set_xy(card_x + 4, card_y + 3)
        self._pdf.set_font("Helvetica", "B", 16)
        self._pdf.set_text_color(*text_c)
        self._pdf.cell(40, 9, f"{s.overall_score}/100", new_x=self._XPos.RIGHT, new_y=self._YPos.TOP)
        self._pdf.set_font("Helvetica", "B", 10)
        self._pdf.cell(60, 9, self._safe(f"Severity: {s.severity_level.value.upper()}"), new_x=self._XPos.LMARGIN, new_y=self._YPos.NEXT)

        self._pdf.set_xy(card_x + 4, card_y + 14)
        self._pdf.set_font("Helvetica", "", 9)
        self._pdf.cell(
            self._content_w - 8, 4.5,
            self._safe(f"Dark pattern score: {s.dark_pattern_score}/{s.max_dark_pattern_score} ({s.dark_pattern_percentage}%)"),
            new_x=self._XPos.LMARGIN, new_y=self._YPos.NEXT,
        )
        self._pdf.set_x(card_x + 4)
        self._pdf.cell(
            self._content_w - 8, 4.5,
            self._safe(f"Compliance violations: {s.compliance_score}/{s.max_compliance_score} points, "
                       f"{s.violations_count} violation(s) found"),
            new_x=self._XPos.LMARGIN, new_y=self._YPos.NEXT,
        )
        self._pdf.set_y(card_y + card_h + 4)

    # ── 3. Check table ─────────────────────────────────────────────────

    def _render_checks(self) -> None:
        d = self._result.detection
        self._heading("Checks")
        self._table_header(_CHECK_COLS, ["Check", "Result", "Dark pattern", "Compliance"])
        for idx, (kind, vt) in enumerate(VIOLATION_TYPES.items()):
            if kind in d.failed_rules:
                outcome = "error"
            else:
                outcome = "violation" if d[kind] else "ok"
            self._check_row([vt.name, outcome, f"{vt.dark_pattern}/5", f"{vt.compliance}/5"], idx, outcome)
        self._pdf.ln(2)

    # ── 4. Violations ──────────────────────────────────────────────────

    def _render_violations(self) -> None:
        s = self._result.summary
        self._heading("Detected Violations")
        if not s.violations:
            self._set_body_text()
            self._pdf.multi_cell(self._content_w, 5, self._safe(NO_VIOLATIONS), new_x=self._XPos.LMARGIN, new_y=self._YPos.NEXT)
            return
        for i, v in enumerate(s.violations, 1):
            self._heading(f"{i}. {v.name}", 4)
            self._kv("Description", v.description)
            self._kv("Legal basis", v.legal)
            if v.note:
                self._kv("Note", v.note)

    # ── 5. Recommendation ──────────────────────────────────────────────

    def _render_recommendation(self) -> None:
        rec = recommendation(self._result.summary.overall_score, self._report.authority_name)
        self._heading("Recommendation")
        self._pdf.set_font("Helvetica", "B", 9)
        self._pdf.set_text_color(*_BODY)
        self._pdf.multi_cell(self._content_w, 5, self._safe(rec.headline), new_x=self._XPos.LMARGIN, new_y=self._YPos.NEXT)
        if rec.action:
            self._kv("Recommended action", rec.action)
        self._pdf.ln(2)
        self._divider()

    # ── 6. Legal basis ─────────────────────────────────────────────────

    def _render_legal_basis(self) -> None:
        self._heading("Legal Basis", 3)
        for src in LEGAL_SOURCES:
            self._bullet(src)
        self._set_body_text()
        self._pdf.set_text_color(*_MUTED)
        self._pdf.ln(1)
        self._pdf.multi_cell(
            self._content_w, 4.5,
            self._safe(f"Cookie Banner Taskforce report adopted {TASKFORCE_ADOPTED}. "
                       f"More information: {self._report.authority_url}"),
            new_x=self._XPos.LMARGIN, new_y=self._YPos.NEXT,
        )

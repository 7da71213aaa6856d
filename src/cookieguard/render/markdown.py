"""Render scan results as a Markdown report."""

from __future__ import annotations

from cookieguard.catalog import VIOLATION_TYPES
from cookieguard.render._helpers import (
    LEGAL_SOURCES,
    NO_VIOLATIONS,
    TASKFORCE_ADOPTED,
    format_timestamp,
    recommendation,
)
from cookieguard.scanner import ScanResult
from cookieguard.schemas.settings import ReportSettings

_LEVEL_ICONS = {"critical": "[!!]", "warning": "[!]", "ok": "[ok]"}


def render_markdown(result: ScanResult, report: ReportSettings | None = None) -> str:
    """Produce a full Markdown report from a ScanResult."""
    report = report or ReportSettings()
    sections: list[str] = []
    s = result.summary
    d = result.detection

    # ── Title ────────────────────────────────────────────────────────────
    sections.append(f"# Cookie Banner Report: {result.url or 'inline document'}\n")

    # ── Summary box ──────────────────────────────────────────────────────
    summary_lines = [
        f"- **Scanned**: {format_timestamp(result.scanned_at)} ({result.source}, {result.passes} pass(es))",
        f"- **Cookie banners located**: {d.banners_found}",
        f"- **Overall compliance score**: {s.overall_score}/100",
        f"- **Severity**: {s.severity_level.value}",
        f"- **Dark pattern score**: {s.dark_pattern_score}/{s.max_dark_pattern_score} ({s.dark_pattern_percentage}%)",
        f"- **Compliance violations**: {s.compliance_score}/{s.max_compliance_score} points",
        f"- **Keyword tables**: {d.keywords_version}",
    ]
    sections.append("\n".join(summary_lines) + "\n")

    # ── Rule outcomes ────────────────────────────────────────────────────
    sections.append("## Checks\n")
    sections.append("| Check | Result | Dark pattern | Compliance |")
    sections.append("|---|---|---|---|")
    for kind, vt in VIOLATION_TYPES.items():
        if kind in d.failed_rules:
            outcome = "error"
        else:
            outcome = "**violation**" if d[kind] else "ok"
        sections.append(f"| {vt.name} | {outcome} | {vt.dark_pattern}/5 | {vt.compliance}/5 |")
    sections.append("")

    # ── Violations ───────────────────────────────────────────────────────
    sections.append("## Detected Violations\n")
    if not s.violations:
        sections.append(NO_VIOLATIONS + "\n")
    for i, v in enumerate(s.violations, 1):
        sections.append(f"### {i}. {v.name}\n")
        sections.append(f"{v.description}\n")
        sections.append(f"**Legal basis**: {v.legal}\n")
        if v.note:
            sections.append(f"> {v.note}\n")

    # ── Recommendation ───────────────────────────────────────────────────
    rec = recommendation(s.overall_score, report.authority_name)
    sections.append("## Recommendation\n")
    sections.append(f"{_LEVEL_ICONS[rec.level]} **{rec.headline}**\n")
    if rec.action:
        sections.append(f"Recommended action: {rec.action}\n")

    # ── Legal basis ──────────────────────────────────────────────────────
    sections.append("---\n")
    sources = [f"- {src}" for src in LEGAL_SOURCES]
    sources[-1] += f" (adopted {TASKFORCE_ADOPTED})"
    sections.append("\n".join(sources) + "\n")
    sections.append(f"More information: <{report.authority_url}>\n")

    return "\n".join(sections)

"""Render scan results as the plain-text analysis report."""

from __future__ import annotations

from cookieguard.render._helpers import (
    LEGAL_SOURCES,
    NO_VIOLATIONS,
    REPORT_TITLE,
    RULE_LINE,
    TASKFORCE_ADOPTED,
    format_timestamp,
    recommendation,
    recommendation_marker,
)
from cookieguard.scanner import ScanResult
from cookieguard.schemas.settings import ReportSettings


def _banner(title: str) -> list[str]:
    return [RULE_LINE, title, RULE_LINE, ""]


def render_text(result: ScanResult, report: ReportSettings | None = None) -> str:
    """Produce the downloadable text report for a ScanResult."""
    report = report or ReportSettings()
    s = result.summary
    lines: list[str] = [
        REPORT_TITLE,
        RULE_LINE,
        "",
        f"Website: {result.url or 'Unknown URL'}",
        f"Date: {format_timestamp(result.scanned_at)}",
        "Generated by: cookieguard",
        "",
    ]

    lines += _banner("SCORES")
    lines += [
        f"Overall Compliance Score: {s.overall_score}/100",
        f"Severity Level: {s.severity_level.value.upper()}",
        "",
        f"Dark Pattern Score: {s.dark_pattern_score}/{s.max_dark_pattern_score} ({s.dark_pattern_percentage}%)",
        f"Compliance Violations: {s.compliance_score}/{s.max_compliance_score} points",
        "",
        f"Total Violations Found: {s.violations_count}",
        "",
    ]

    lines += _banner("DETECTED VIOLATIONS")
    if not s.violations:
        lines.append(NO_VIOLATIONS)
    for i, v in enumerate(s.violations, 1):
        lines += [
            "",
            f"{i}. {v.name}",
            f"   Description: {v.description}",
            f"   Dark Pattern Score: {v.dark_pattern}/5",
            f"   Compliance Impact: {v.compliance}/5",
            f"   Legal Basis: {v.legal}",
        ]
        if v.note:
            lines.append(f"   Note: {v.note}")
    if result.detection.failed_rules:
        lines += ["", "Rules that could not be evaluated: "
                  + ", ".join(k.value for k in result.detection.failed_rules)]
    lines.append("")

    lines += _banner("RECOMMENDATIONS")
    rec = recommendation(s.overall_score, report.authority_name)
    lines.append(f"{recommendation_marker(rec)} {rec.headline}")
    if rec.action:
        lines.append(f"   Recommended Action: {rec.action}")
    lines.append("")

    lines += _banner("LEGAL BASIS")
    lines.append("This report is based on:")
    lines += [f"- {src}" for src in LEGAL_SOURCES]
    lines += [
        f"  Adopted on: {TASKFORCE_ADOPTED}",
        "",
        f"For more information, visit: {report.authority_url}",
    ]
    return "\n".join(lines) + "\n"

"""Build a mailto: URL reporting a page to the data-protection authority."""

from __future__ import annotations

from urllib.parse import quote

from cookieguard.scanner import ScanResult
from cookieguard.schemas.settings import ReportSettings

SUBJECT = "Rapportering av Cookie Policy Brudd"


def complaint_body(result: ScanResult, report: ReportSettings | None = None) -> str:
    """Complaint e-mail text (Norwegian, addressed to the authority)."""
    report = report or ReportSettings()
    s = result.summary
    violations = "\n\n".join(
        f"{i}. {v.name}\n   - {v.description}\n   - Lovgrunnlag: {v.legal}"
        for i, v in enumerate(s.violations, 1)
    )
    return (
        f"Hei {report.authority_name},\n"
        "\n"
        "Jeg ønsker å rapportere følgende nettside for brudd på cookie-regler:\n"
        f"{result.url or 'Unknown URL'}\n"
        "\n"
        "SAMMENDRAG:\n"
        f"- Compliance Score: {s.overall_score}/100\n"
        f"- Alvorlighetsgrad: {s.severity_level.value.upper()}\n"
        f"- Antall brudd: {s.violations_count}\n"
        f"- Dark Pattern Score: {s.dark_pattern_score}/{s.max_dark_pattern_score}\n"
        "\n"
        "OPPDAGEDE BRUDD:\n"
        f"{violations}\n"
        "\n"
        "Dette er basert på analyse fra cookieguard.\n"
        "Rapporten følger retningslinjene fra Cookie Banner Taskforce (17. januar 2023).\n"
        "\n"
        "Med vennlig hilsen\n"
    )


def render_mailto(result: ScanResult, report: ReportSettings | None = None) -> str:
    report = report or ReportSettings()
    subject = quote(SUBJECT, safe="")
    body = quote(complaint_body(result, report), safe="")
    return f"mailto:{report.authority_email}?subject={subject}&body={body}"

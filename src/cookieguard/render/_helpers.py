"""Shared helpers for render backends (text, markdown, PDF, mailto)."""

from __future__ import annotations

from dataclasses import dataclass

REPORT_TITLE = "CookieGuard - Cookie Banner Analysis Report"
RULE_LINE = "=" * 43

# Sources every report cites
LEGAL_SOURCES = (
    "GDPR (General Data Protection Regulation)",
    "ePrivacy Directive Article 5(3)",
    "Report of the work undertaken by the Cookie Banner Taskforce",
)
TASKFORCE_ADOPTED = "17 January 2023"

NO_VIOLATIONS = "No violations detected. This cookie banner appears to be compliant!"


@dataclass(frozen=True)
class Recommendation:
    level: str          # "critical", "warning", "ok"
    headline: str
    action: str


def recommendation(score: int, authority: str = "Datatilsynet") -> Recommendation:
    """Advice band for an overall score: below 50 critical, below 70 warning."""
    if score < 50:
        return Recommendation(
            level="critical",
            headline="CRITICAL: This website has serious compliance issues.",
            action=f"Contact website owner and/or report to {authority}.",
        )
    if score < 70:
        return Recommendation(
            level="warning",
            headline="WARNING: This website has moderate compliance issues.",
            action="Website should improve cookie consent practices.",
        )
    return Recommendation(
        level="ok",
        headline="This website follows good cookie consent practices.",
        action="",
    )


def recommendation_marker(rec: Recommendation) -> str:
    return "\u2713" if rec.level == "ok" else "\u26a0\ufe0f"


# Unicode -> ASCII substitutions for PDF core fonts (latin-1 only).
_UNICODE_SUBS = str.maketrans({
    "\u2014": "--",   # em dash
    "\u2013": "-",    # en dash
    "\u2018": "'",    # left single quote
    "\u2019": "'",    # right single quote
    "\u201c": '"',    # left double quote
    "\u201d": '"',    # right double quote
    "\u2026": "...",  # ellipsis
    "\u2022": "*",    # bullet
    "\u2713": "OK",   # check mark
    "\u26a0": "!",    # warning sign
    "\ufe0f": "",     # emoji variation selector
    "\u00a0": " ",    # non-breaking space
})


def latin1(text: str) -> str:
    """Sanitize text for latin-1 PDF core fonts."""
    result = text.translate(_UNICODE_SUBS)
    return result.encode("latin-1", errors="replace").decode("latin-1")


def format_timestamp(ts) -> str:
    return ts.strftime("%Y-%m-%d %H:%M:%S UTC")

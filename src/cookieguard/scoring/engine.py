"""Scoring session: turns violation flags into scores and a severity level.

Every kind added contributes its weights to the maximum totals whether or not
it was detected; only detected kinds contribute to the achieved totals. The
overall score is the inverted compliance percentage, so 100 means no
compliance weight was hit.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from fractions import Fraction

from cookieguard.catalog import VIOLATION_TYPES, ViolationKind, lookup
from cookieguard.detector.models import DetectionResult
from cookieguard.scoring.models import ScoredViolation, Severity, Summary

log = logging.getLogger(__name__)

# Notes attached to detected kinds when scoring a detection pass
DETECTION_NOTES: dict[ViolationKind, str] = {
    ViolationKind.LAYERING: "User must click through multiple pages to reject cookies",
    ViolationKind.LINK_INSTEAD_OF_BUTTON: "Reject option is hidden in small text link",
    ViolationKind.DIFFERENT_COLORED_BUTTONS: "Accept button is more prominent than reject",
    ViolationKind.LEGITIMATE_INTEREST: "Non-essential cookies categorized under legitimate interest",
}

_SEVERITY_BANDS = (
    (90, Severity.EXCELLENT),
    (70, Severity.GOOD),
    (50, Severity.FAIR),
    (30, Severity.POOR),
)


def round_half_up(value: Fraction) -> int:
    """Round to the nearest integer, halves away from zero for non-negative values."""
    return math.floor(value + Fraction(1, 2))


def severity_for(score: int) -> Severity:
    for floor, level in _SEVERITY_BANDS:
        if score >= floor:
            return level
    return Severity.CRITICAL


class ScoringSession:
    """Accumulates violations for one page analysis."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._violations: list[ScoredViolation] = []
        self.dark_pattern_score = 0
        self.compliance_score = 0
        self.max_dark_pattern_score = 0
        self.max_compliance_score = 0

    def add_violation(
        self,
        kind: ViolationKind | str,
        detected: bool = True,
        note: str | None = None,
    ) -> bool:
        """Record one kind. Returns False (and changes nothing) if kind is unknown."""
        vt = lookup(kind)
        if vt is None:
            log.error("Unknown violation type: %s", kind)
            return False

        self.max_dark_pattern_score += vt.dark_pattern
        self.max_compliance_score += vt.compliance

        if detected:
            self.dark_pattern_score += vt.dark_pattern
            self.compliance_score += vt.compliance
            self._violations.append(ScoredViolation(
                kind=vt.kind,
                name=vt.name,
                description=vt.description,
                dark_pattern=vt.dark_pattern,
                compliance=vt.compliance,
                legal=vt.legal,
                note=note,
                timestamp=datetime.now(timezone.utc),
            ))
        return True

    @property
    def violations(self) -> list[ScoredViolation]:
        return list(self._violations)

    def compliance_percentage(self) -> int:
        if self.max_compliance_score == 0:
            return 100
        remaining = self.max_compliance_score - self.compliance_score
        return round_half_up(Fraction(100 * remaining, self.max_compliance_score))

    def dark_pattern_percentage(self) -> int:
        if self.max_dark_pattern_score == 0:
            return 0
        return round_half_up(Fraction(100 * self.dark_pattern_score, self.max_dark_pattern_score))

    def overall_score(self) -> int:
        return self.compliance_percentage()

    def severity_level(self) -> Severity:
        return severity_for(self.overall_score())

    def get_summary(self) -> Summary:
        overall = self.overall_score()
        return Summary(
            overall_score=overall,
            severity_level=severity_for(overall),
            compliance_score=self.compliance_score,
            max_compliance_score=self.max_compliance_score,
            dark_pattern_score=self.dark_pattern_score,
            max_dark_pattern_score=self.max_dark_pattern_score,
            compliance_percentage=self.compliance_percentage(),
            dark_pattern_percentage=self.dark_pattern_percentage(),
            violations=list(self._violations),
        )


def score_detection(result: DetectionResult, session: ScoringSession | None = None) -> Summary:
    """Score a detection pass: every kind is added, in catalog order."""
    session = session if session is not None else ScoringSession()
    session.reset()
    for kind in VIOLATION_TYPES:
        detected = result[kind]
        session.add_violation(kind, detected, note=DETECTION_NOTES.get(kind) if detected else None)
    summary = session.get_summary()
    log.info(
        "Scored %s: %d/100 (%s), %d violation(s)",
        result.url or "<inline>", summary.overall_score,
        summary.severity_level.value, summary.violations_count,
    )
    return summary

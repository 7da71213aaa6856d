"""Scoring engine.

Usage:
    from cookieguard.scoring import ScoringSession

    session = ScoringSession()
    session.add_violation(ViolationKind.NO_REJECT_BUTTON, detected=True)
    summary = session.get_summary()
"""

from __future__ import annotations

from cookieguard.scoring.engine import (
    DETECTION_NOTES,
    ScoringSession,
    round_half_up,
    score_detection,
    severity_for,
)
from cookieguard.scoring.models import ScoredViolation, Severity, Summary

__all__ = [
    "DETECTION_NOTES",
    "ScoredViolation",
    "ScoringSession",
    "Severity",
    "Summary",
    "round_half_up",
    "score_detection",
    "severity_for",
]

"""Tests for the scoring session, severity bands and detection scoring."""

from __future__ import annotations

import logging
from fractions import Fraction

import pytest

from cookieguard.catalog import ViolationKind as K
from cookieguard.detector.models import DetectionResult
from cookieguard.scoring import (
    DETECTION_NOTES,
    ScoringSession,
    Severity,
    round_half_up,
    score_detection,
    severity_for,
)


def _detection(*detected):
    return DetectionResult(violations={k: k in detected for k in K}, url="https://site.test/")


class TestScoringSession:
    def test_empty_session(self):
        s = ScoringSession()
        assert s.compliance_percentage() == 100
        assert s.dark_pattern_percentage() == 0
        assert s.overall_score() == 100
        assert s.severity_level() == Severity.EXCELLENT

    def test_undetected_adds_to_max_only(self):
        s = ScoringSession()
        assert s.add_violation(K.PRE_TICKED_BOXES, detected=False)
        assert s.max_compliance_score == 5
        assert s.compliance_score == 0
        assert s.violations == []
        assert s.overall_score() == 100

    def test_detected(self):
        s = ScoringSession()
        s.add_violation(K.NO_REJECT_BUTTON, note="hidden")
        assert s.compliance_score == 5
        assert s.dark_pattern_score == 5
        assert s.overall_score() == 0
        v = s.violations[0]
        assert v.name == "No Cookie Reject Button"
        assert v.note == "hidden"
        assert v.detected is True

    def test_unknown_kind(self, caplog):
        s = ScoringSession()
        with caplog.at_level(logging.ERROR):
            assert s.add_violation("COOKIE_WALL") is False
        assert s.max_compliance_score == 0
        assert "Unknown violation type: COOKIE_WALL" in caplog.text

    def test_kind_by_name(self):
        s = ScoringSession()
        assert s.add_violation("LAYERING")
        assert s.dark_pattern_score == 3

    def test_zero_weight_kind(self):
        # Layering carries no compliance weight, so it cannot lower the score
        s = ScoringSession()
        s.add_violation(K.LAYERING)
        assert s.max_compliance_score == 0
        assert s.overall_score() == 100
        assert s.dark_pattern_percentage() == 100

    def test_half_rounds_up(self):
        s = ScoringSession()
        s.add_violation(K.NO_REJECT_BUTTON, True)
        s.add_violation(K.PRE_TICKED_BOXES, True)
        s.add_violation(K.LAYERING, False)
        s.add_violation(K.LEGITIMATE_INTEREST, False)
        # 10/16 = 62.5%
        assert s.dark_pattern_percentage() == 63
        # 3/13 remaining = 23.08%
        assert s.compliance_percentage() == 23

    def test_reset(self):
        s = ScoringSession()
        s.add_violation(K.NO_REJECT_BUTTON)
        s.reset()
        assert s.max_compliance_score == 0
        assert s.violations == []
        summary = s.get_summary()
        assert summary.overall_score == 100
        assert summary.violations_count == 0
        assert summary.violations == []

    def test_violations_is_a_copy(self):
        s = ScoringSession()
        s.add_violation(K.NO_REJECT_BUTTON)
        s.violations.clear()
        assert len(s.violations) == 1


class TestSeverity:
    @pytest.mark.parametrize("score,level", [
        (100, Severity.EXCELLENT), (90, Severity.EXCELLENT),
        (89, Severity.GOOD), (70, Severity.GOOD),
        (69, Severity.FAIR), (50, Severity.FAIR),
        (49, Severity.POOR), (30, Severity.POOR),
        (29, Severity.CRITICAL), (0, Severity.CRITICAL),
    ])
    def test_bands(self, score, level):
        assert severity_for(score) == level

    def test_round_half_up(self):
        assert round_half_up(Fraction(5, 2)) == 3
        assert round_half_up(Fraction(7, 2)) == 4
        assert round_half_up(Fraction(249, 100)) == 2


class TestScoreDetection:
    def test_clean_page(self):
        summary = score_detection(_detection())
        assert summary.overall_score == 100
        assert summary.severity_level == Severity.EXCELLENT
        assert summary.max_compliance_score == 36
        assert summary.max_dark_pattern_score == 41
        assert summary.violations_count == 0

    def test_pre_ticked_and_refuse_outside(self):
        summary = score_detection(_detection(K.PRE_TICKED_BOXES, K.REFUSE_OUTSIDE_BANNER))
        assert summary.compliance_score == 9
        assert summary.overall_score == 75
        assert summary.severity_level == Severity.GOOD
        assert summary.dark_pattern_percentage == 24

    def test_reject_and_withdraw(self):
        summary = score_detection(_detection(K.NO_REJECT_BUTTON, K.NO_WITHDRAW_CONSENT, K.LAYERING))
        # Compliance 8/36 hit, 28 remaining
        assert summary.compliance_score == 8
        assert summary.overall_score == 78
        assert summary.dark_pattern_score == 11

    def test_everything_detected(self):
        summary = score_detection(_detection(*K))
        assert summary.overall_score == 0
        assert summary.severity_level == Severity.CRITICAL
        assert summary.dark_pattern_percentage == 100
        assert [v.kind for v in summary.violations] == list(K)

    def test_notes_only_on_detected(self):
        summary = score_detection(_detection(K.LAYERING, K.NO_REJECT_BUTTON))
        notes = {v.kind: v.note for v in summary.violations}
        assert notes[K.LAYERING] == DETECTION_NOTES[K.LAYERING]
        assert notes[K.NO_REJECT_BUTTON] is None

    def test_session_is_reset(self):
        session = ScoringSession()
        session.add_violation(K.NO_REJECT_BUTTON)
        summary = score_detection(_detection(), session)
        assert summary.overall_score == 100
        assert summary.max_compliance_score == 36

    def test_summary_json(self):
        data = score_detection(_detection(K.LEGITIMATE_INTEREST)).model_dump(mode="json")
        assert data["severity_level"] == "excellent"
        assert data["violations_count"] == 1
        assert data["violations"][0]["kind"] == "LEGITIMATE_INTEREST"


class TestSessionProperties:
    def test_reject_and_pre_ticked(self):
        s = ScoringSession()
        for kind in K:
            s.add_violation(kind, kind in (K.NO_REJECT_BUTTON, K.PRE_TICKED_BOXES))
        summary = s.get_summary()
        assert summary.compliance_score == 10
        assert summary.max_compliance_score == 36
        assert summary.compliance_percentage == 72
        assert summary.severity_level == Severity.GOOD

    def test_all_undetected(self):
        s = ScoringSession()
        for kind in K:
            s.add_violation(kind, False)
        summary = s.get_summary()
        assert summary.overall_score == 100
        assert summary.severity_level == Severity.EXCELLENT
        assert summary.violations_count == 0

    def test_summary_is_stable(self):
        s = ScoringSession()
        s.add_violation(K.LEGITIMATE_INTEREST)
        assert s.get_summary() == s.get_summary()

    def test_max_counts_every_call(self):
        s = ScoringSession()
        s.add_violation(K.NO_REJECT_BUTTON, False)
        s.add_violation(K.NO_REJECT_BUTTON, True)
        assert s.max_compliance_score == 10
        assert s.compliance_score <= s.max_compliance_score

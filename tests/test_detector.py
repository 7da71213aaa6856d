"""Tests for the detection orchestrator and its result model."""

from __future__ import annotations

import logging

from cookieguard.catalog import VIOLATION_TYPES, ViolationKind
from cookieguard.detector import RULES, detect_all
from cookieguard.detector.models import DetectionResult
from cookieguard.dom.html_frontend import parse_html

PAGE = """
<div id="cookie-banner">
  <p>We use cookies for analytics, marketing and advertising. See our privacy policy.</p>
  <button>Accept all</button>
</div>
"""


def _result(**flags):
    violations = {k: False for k in ViolationKind}
    violations.update({ViolationKind[name]: value for name, value in flags.items()})
    return DetectionResult(violations=violations, url="https://site.test/")


class TestDetectAll:
    def test_flag_for_every_kind(self):
        result = detect_all(parse_html(PAGE, url="https://site.test/"))
        assert set(result.violations) == set(ViolationKind)
        assert result.url == "https://site.test/"
        assert result.banners_found == 1
        assert result.failed_rules == []

    def test_rules_in_catalog_order(self):
        assert list(RULES) == list(VIOLATION_TYPES)

    def test_url_override(self):
        result = detect_all(parse_html(PAGE, url="file:///tmp/x.html"), url="https://shown.test/")
        assert result.url == "https://shown.test/"

    def test_prelocated_banners(self):
        doc = parse_html(PAGE)
        result = detect_all(doc, banners=[])
        assert result.banners_found == 0
        # With no banners the refusal-placement rule has nothing to compare against
        assert not result[ViolationKind.REFUSE_OUTSIDE_BANNER]

    def test_failing_rule_is_isolated(self, monkeypatch, caplog):
        def boom(ctx):
            raise RuntimeError("broken selector")

        monkeypatch.setitem(RULES, ViolationKind.LAYERING, boom)
        with caplog.at_level(logging.ERROR, logger="cookieguard.detector"):
            result = detect_all(parse_html(PAGE))

        assert result.failed_rules == [ViolationKind.LAYERING]
        assert result[ViolationKind.LAYERING] is False
        # The other rules still ran
        assert result[ViolationKind.NO_REJECT_BUTTON] is True
        assert "Rule LAYERING failed" in caplog.text

    def test_same_snapshot_same_flags(self):
        doc = parse_html(PAGE)
        assert detect_all(doc).violations == detect_all(doc).violations


class TestDetectionResult:
    def test_lookup_by_name(self):
        result = _result(PRE_TICKED_BOXES=True)
        assert result["PRE_TICKED_BOXES"] is True
        assert result[ViolationKind.LAYERING] is False

    def test_count_and_kinds(self):
        result = _result(NO_WITHDRAW_CONSENT=True, NO_REJECT_BUTTON=True)
        assert result.violation_count == 2
        assert result.detected_kinds() == [
            ViolationKind.NO_REJECT_BUTTON,
            ViolationKind.NO_WITHDRAW_CONSENT,
        ]

    def test_json_dump(self):
        data = _result(LAYERING=True).model_dump(mode="json")
        assert data["violation_count"] == 1
        assert data["violations"]["LAYERING"] is True
        assert data["keywords_version"]
        assert data["detected_at"].endswith(("Z", "+00:00"))

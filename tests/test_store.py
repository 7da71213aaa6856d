"""Tests for the per-page violation store and badges."""

from __future__ import annotations

from cookieguard.catalog import ViolationKind as K
from cookieguard.detector.models import DetectionResult
from cookieguard.store import BADGE_ALERT_COLOR, BADGE_OK_COLOR, CLEARED, ViolationStore, badge


def _result(*detected, url="https://site.test/"):
    return DetectionResult(violations={k: k in detected for k in K}, url=url)


def test_badge_with_violations():
    b = badge(_result(K.NO_REJECT_BUTTON, K.LAYERING))
    assert b.text == "2"
    assert b.color == BADGE_ALERT_COLOR


def test_badge_clean():
    b = badge(_result())
    assert b.text == "\u2713"
    assert b.color == BADGE_OK_COLOR


class TestViolationStore:
    def test_record_and_get(self):
        store = ViolationStore()
        r = _result(K.PRE_TICKED_BOXES)
        assert store.record(7, r).text == "1"
        assert store.get(7) is r
        assert 7 in store
        assert len(store) == 1

    def test_later_pass_replaces_earlier(self):
        store = ViolationStore()
        store.record("tab", _result(K.PRE_TICKED_BOXES))
        store.record("tab", _result())
        assert store.badge_for("tab").text == "\u2713"
        assert len(store) == 1

    def test_navigation_evicts(self):
        store = ViolationStore()
        store.record(1, _result(K.LAYERING))
        assert store.on_navigation(1) == CLEARED
        assert store.get(1) is None
        assert store.badge_for(1) == CLEARED

    def test_close_evicts(self):
        store = ViolationStore()
        store.record(1, _result())
        store.record(2, _result())
        store.on_close(1)
        assert 1 not in store
        assert 2 in store

    def test_unknown_key(self):
        store = ViolationStore()
        assert store.get("missing") is None
        store.on_close("missing")
        assert store.on_navigation("missing") == CLEARED

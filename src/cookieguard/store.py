"""Keyed store of the latest detection per page or tab.

Entries are evicted when their page navigates away or is closed, so a
lookup never returns a result for a page the user is no longer looking at.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Hashable

from cookieguard.detector.models import DetectionResult

log = logging.getLogger(__name__)

BADGE_ALERT_COLOR = "#e74c3c"
BADGE_OK_COLOR = "#2ecc71"


@dataclass(frozen=True)
class Badge:
    text: str               # violation count, a check mark, or "" when cleared
    color: str | None


CLEARED = Badge(text="", color=None)


def badge(result: DetectionResult) -> Badge:
    """Violation count on red, or a check mark on green when clean."""
    count = result.violation_count
    if count > 0:
        return Badge(text=str(count), color=BADGE_ALERT_COLOR)
    return Badge(text="\u2713", color=BADGE_OK_COLOR)


class ViolationStore:
    def __init__(self) -> None:
        self._results: dict[Hashable, DetectionResult] = {}

    def record(self, key: Hashable, result: DetectionResult) -> Badge:
        """Store result for key, replacing any earlier pass; returns its badge."""
        self._results[key] = result
        log.debug("Stored %d violation(s) for %r", result.violation_count, key)
        return badge(result)

    def get(self, key: Hashable) -> DetectionResult | None:
        return self._results.get(key)

    def on_navigation(self, key: Hashable) -> Badge:
        """The page behind key started loading a new document."""
        self._results.pop(key, None)
        return CLEARED

    def on_close(self, key: Hashable) -> None:
        self._results.pop(key, None)

    def badge_for(self, key: Hashable) -> Badge:
        result = self._results.get(key)
        return badge(result) if result is not None else CLEARED

    def __contains__(self, key: object) -> bool:
        return key in self._results

    def __len__(self) -> int:
        return len(self._results)

"""Violation detection orchestrator.

Usage:
    from cookieguard.detector import detect_all

    result = detect_all(document, settings=settings.detector, url=document.url)
    result[ViolationKind.NO_REJECT_BUTTON]   # -> bool
"""

from __future__ import annotations

import logging
from typing import Callable

from cookieguard.catalog import ViolationKind
from cookieguard.detector._helpers import RuleContext
from cookieguard.detector.banner import locate_banners
from cookieguard.detector.buttons import (
    detect_different_colored_buttons,
    detect_layering,
    detect_link_instead_of_button,
    detect_no_reject_button,
    detect_refuse_outside_banner,
)
from cookieguard.detector.checkboxes import (
    detect_inaccurate_essential_classification,
    detect_pre_ticked_boxes,
)
from cookieguard.detector.models import DetectionResult
from cookieguard.detector.text_scan import (
    detect_lack_of_information,
    detect_legitimate_interest,
    detect_no_withdraw_consent,
)
from cookieguard.dom.nodes import Document, DomNode
from cookieguard.keywords import keyword_sets
from cookieguard.schemas.settings import DetectorSettings

log = logging.getLogger(__name__)

Rule = Callable[[RuleContext], bool]

# One rule per kind, in catalog order.
RULES: dict[ViolationKind, Rule] = {
    ViolationKind.NO_REJECT_BUTTON: detect_no_reject_button,
    ViolationKind.LAYERING: detect_layering,
    ViolationKind.PRE_TICKED_BOXES: detect_pre_ticked_boxes,
    ViolationKind.LINK_INSTEAD_OF_BUTTON: detect_link_instead_of_button,
    ViolationKind.REFUSE_OUTSIDE_BANNER: detect_refuse_outside_banner,
    ViolationKind.LACK_OF_INFORMATION: detect_lack_of_information,
    ViolationKind.DIFFERENT_COLORED_BUTTONS: detect_different_colored_buttons,
    ViolationKind.LEGITIMATE_INTEREST: detect_legitimate_interest,
    ViolationKind.INACCURATE_ESSENTIAL_CLASSIFICATION: detect_inaccurate_essential_classification,
    ViolationKind.NO_WITHDRAW_CONSENT: detect_no_withdraw_consent,
}


def detect_all(
    document: Document,
    settings: DetectorSettings | None = None,
    *,
    banners: list[DomNode] | None = None,
    url: str | None = None,
) -> DetectionResult:
    """Run every rule against one document snapshot.

    Args:
        document: The rendered page.
        settings: Detector thresholds and keyword extensions (defaults if None).
        banners: Pre-located banners; located here when None.
        url: URL recorded on the result. Defaults to document.url.

    Returns:
        DetectionResult with a flag for every ViolationKind. A rule that raises
        is logged, reported in failed_rules and counted as not detected.
    """
    settings = settings or DetectorSettings()
    keywords = keyword_sets(settings.extra_keywords)
    if banners is None:
        banners = locate_banners(document, settings, keywords)

    ctx = RuleContext(document=document, banners=banners, keywords=keywords, settings=settings)

    violations: dict[ViolationKind, bool] = {}
    failed: list[ViolationKind] = []
    for kind, rule in RULES.items():
        try:
            violations[kind] = bool(rule(ctx))
        except Exception:
            log.exception("Rule %s failed", kind.value)
            violations[kind] = False
            failed.append(kind)

    result = DetectionResult(
        violations=violations,
        url=document.url if url is None else url,
        banners_found=len(banners),
        failed_rules=failed,
    )
    log.info("Detected %d violation(s) on %s", result.violation_count, result.url or "<inline>")
    return result


__all__ = ["RULES", "DetectionResult", "Rule", "RuleContext", "detect_all", "locate_banners"]

"""Locate consent-banner regions in a document."""

from __future__ import annotations

import logging
from typing import Mapping

from cookieguard.detector._helpers import has_zero_opacity
from cookieguard.dom.nodes import Document, DomNode
from cookieguard.keywords import KeywordSet, keyword_sets
from cookieguard.schemas.settings import DetectorSettings

log = logging.getLogger(__name__)


def is_banner_candidate(el: DomNode, keywords: Mapping[str, KeywordSet]) -> bool:
    """id/class mention cookies or consent, or a dialog labelled as such."""
    banner = keywords["banner"]
    if banner.matches(el.attr("id")) or banner.matches(el.attr("class")):
        return True
    return el.attr("role") == "dialog" and keywords["banner_dialog"].matches(el.attr("aria-label"))


def is_displayed_banner(el: DomNode, settings: DetectorSettings) -> bool:
    style = el.style
    return (
        style.display != "none"
        and style.visibility != "hidden"
        and not has_zero_opacity(el)
        and el.box.width > settings.banner.min_width
        and el.box.height > settings.banner.min_height
    )


def locate_banners(
    document: Document,
    settings: DetectorSettings | None = None,
    keywords: Mapping[str, KeywordSet] | None = None,
) -> list[DomNode]:
    """Return visible banner candidates in document order, each once.

    Nested matches (a banner and its own inner "cookie-text" block) are all
    returned; rules treat each as a separate search area.
    """
    settings = settings or DetectorSettings()
    keywords = keywords if keywords is not None else keyword_sets(settings.extra_keywords)

    banners = [
        el for el in document.query(lambda n: is_banner_candidate(n, keywords))
        if is_displayed_banner(el, settings)
    ]
    log.info("Found %d cookie banner(s)", len(banners))
    return banners

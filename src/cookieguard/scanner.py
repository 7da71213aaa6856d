"""Unified scanner: document front-end, detection and scoring in one pass."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from cookieguard.detector import detect_all
from cookieguard.detector.models import DetectionResult
from cookieguard.dom.html_frontend import parse_html
from cookieguard.dom.nodes import Document
from cookieguard.dom.snapshot import BrowserSession
from cookieguard.schemas.settings import Settings
from cookieguard.scoring import Summary, score_detection

log = logging.getLogger(__name__)


@dataclass
class ScanResult:
    """Detection flags plus the scored summary for one page."""
    detection: DetectionResult
    summary: Summary
    url: str
    source: str                 # "html", "file", "browser", "document"
    passes: int = 1             # captures taken before the result settled
    scanned_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def scan_document(
    document: Document,
    settings: Settings | None = None,
    *,
    source: str = "document",
    passes: int = 1,
) -> ScanResult:
    """Run BannerLocator, ViolationDetector and ScoringEngine on one snapshot."""
    settings = settings or Settings()
    detection = detect_all(document, settings.detector)
    if detection.failed_rules:
        log.warning("%d rule(s) failed: %s", len(detection.failed_rules),
                    ", ".join(k.value for k in detection.failed_rules))
    summary = score_detection(detection)
    return ScanResult(
        detection=detection,
        summary=summary,
        url=detection.url,
        source=source,
        passes=passes,
    )


def scan_html(html: str, settings: Settings | None = None, *, url: str = "") -> ScanResult:
    settings = settings or Settings()
    doc = parse_html(html, url=url, viewport_width=settings.browser.viewport_width)
    return scan_document(doc, settings, source="html")


def scan_file(path: Path, settings: Settings | None = None, *, url: str | None = None) -> ScanResult:
    """Scan a saved HTML page. url defaults to the file's URI."""
    path = Path(path).resolve()
    log.info("Scanning %s", path)
    html = path.read_text(encoding="utf-8", errors="replace")
    settings = settings or Settings()
    doc = parse_html(
        html,
        url=url if url is not None else path.as_uri(),
        viewport_width=settings.browser.viewport_width,
    )
    return scan_document(doc, settings, source="file")


def scan_url(
    url: str,
    settings: Settings | None = None,
    *,
    session_factory: Callable[..., BrowserSession] = BrowserSession,
) -> ScanResult:
    """Scan a live page, re-capturing while no banner has appeared.

    The page settles for initial_delay_ms, then is captured and scanned. While
    no banner is located it is re-captured every recheck_interval_ms until one
    appears, watch_window_ms (counted from page load) runs out, or max_passes
    captures have been taken. The last pass is returned.
    """
    settings = settings or Settings()
    b = settings.browser

    with session_factory(
        headless=b.headless,
        timeout_ms=b.timeout_ms,
        viewport_width=b.viewport_width,
        viewport_height=b.viewport_height,
    ) as session:
        session.open(url)
        session.wait(b.initial_delay_ms)
        elapsed = b.initial_delay_ms
        passes = 0

        while True:
            passes += 1
            result = scan_document(session.capture(), settings, source="browser", passes=passes)
            if result.detection.banners_found:
                break
            if passes >= b.max_passes or elapsed + b.recheck_interval_ms > b.watch_window_ms:
                log.info("No banner on %s after %d pass(es)", url, passes)
                break
            session.wait(b.recheck_interval_ms)
            elapsed += b.recheck_interval_ms

    return result

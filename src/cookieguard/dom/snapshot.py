"""Live browser front-end: captures a rendered page into a Document.

The page is walked in the browser once per capture; computed styles, bounding
boxes and live form state (checked/disabled) are serialized to plain JSON and
rebuilt into DomNodes offline, so every detection pass works on a frozen
snapshot rather than the mutating page.

Install via: pip install cookieguard[browser]
"""

from __future__ import annotations

import logging
from typing import Any

from cookieguard.dom.nodes import BoundingBox, ComputedStyle, Document, DomNode

log = logging.getLogger(__name__)


class SnapshotError(RuntimeError):
    """Raised when a page cannot be captured or the capture is malformed."""


# Serializes document.documentElement; text of script/style is not collected.
_SNAPSHOT_JS = """
() => {
  const OPAQUE = new Set(["script", "style", "noscript", "template"]);
  function walk(el) {
    const cs = window.getComputedStyle(el);
    const r = el.getBoundingClientRect();
    const attrs = {};
    for (const a of el.attributes) attrs[a.name.toLowerCase()] = a.value;
    if ("checked" in el) {
      if (el.checked) attrs.checked = ""; else delete attrs.checked;
    }
    if ("disabled" in el) {
      if (el.disabled) attrs.disabled = ""; else delete attrs.disabled;
    }
    const tag = el.tagName.toLowerCase();
    const content = [];
    if (!OPAQUE.has(tag)) {
      for (const child of el.childNodes) {
        if (child.nodeType === Node.TEXT_NODE) content.push(child.textContent);
        else if (child.nodeType === Node.ELEMENT_NODE) content.push(walk(child));
      }
    }
    return {
      tag: tag,
      attrs: attrs,
      style: {
        display: cs.display,
        visibility: cs.visibility,
        opacity: cs.opacity,
        background_color: cs.backgroundColor,
        color: cs.color,
        font_size: cs.fontSize,
        font_weight: cs.fontWeight,
        text_decoration: cs.textDecorationLine || cs.textDecoration,
        cursor: cs.cursor,
        border_style: cs.borderTopStyle,
        border_width: cs.borderTopWidth,
      },
      box: {x: r.x, y: r.y, width: r.width, height: r.height},
      content: content,
    };
  }
  return walk(document.documentElement);
}
"""

_STYLE_FIELDS = frozenset(ComputedStyle.__dataclass_fields__)
_BOX_FIELDS = ("x", "y", "width", "height")


def document_from_snapshot(data: dict[str, Any], url: str = "") -> Document:
    """Rebuild a Document from a serialized snapshot."""
    if not isinstance(data, dict) or "tag" not in data:
        raise SnapshotError("Snapshot root must be an element object with a 'tag' key")
    root = _node_from_dict(data, None)
    return Document(root, url=url)


def _node_from_dict(data: dict[str, Any], parent: DomNode | None) -> DomNode:
    try:
        style_data = {k: str(v) for k, v in (data.get("style") or {}).items() if k in _STYLE_FIELDS}
        box_data = data.get("box") or {}
        node = DomNode(
            tag=str(data["tag"]).lower(),
            attrs={str(k).lower(): str(v) for k, v in (data.get("attrs") or {}).items()},
            style=ComputedStyle(**style_data),
            box=BoundingBox(*(float(box_data.get(k, 0.0) or 0.0) for k in _BOX_FIELDS)),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise SnapshotError(f"Malformed snapshot node: {e}") from e
    node.parent = parent
    for item in data.get("content") or []:
        if isinstance(item, str):
            node.append(item)
        elif isinstance(item, dict):
            node.append(_node_from_dict(item, node))
    return node


class BrowserSession:
    """One headless Chromium page, used for one or more captures of a URL.

    Usage:
        with BrowserSession(timeout_ms=15000) as session:
            session.open("https://example.com")
            session.wait(2000)
            doc = session.capture()
    """

    def __init__(
        self,
        *,
        headless: bool = True,
        timeout_ms: int = 15000,
        viewport_width: int = 1280,
        viewport_height: int = 800,
    ) -> None:
        self._headless = headless
        self._timeout_ms = timeout_ms
        self._viewport = {"width": viewport_width, "height": viewport_height}
        self._pw_cm = None
        self._browser = None
        self._page = None
        self.url = ""

    def __enter__(self) -> BrowserSession:
        try:
            from playwright.sync_api import sync_playwright
        except ImportError:
            raise ImportError(
                "Live page scans require 'playwright'. "
                "Install it with: pip install cookieguard[browser] && playwright install chromium"
            )
        self._pw_cm = sync_playwright()
        pw = self._pw_cm.__enter__()
        try:
            self._browser = pw.chromium.launch(headless=self._headless)
            context = self._browser.new_context(viewport=self._viewport)
            self._page = context.new_page()
            self._page.set_default_timeout(self._timeout_ms)
        except Exception:
            self.__exit__(None, None, None)
            raise
        return self

    def __exit__(self, *exc) -> None:
        try:
            if self._browser is not None:
                self._browser.close()
        finally:
            self._browser = None
            self._page = None
            if self._pw_cm is not None:
                self._pw_cm.__exit__(None, None, None)
                self._pw_cm = None

    def open(self, url: str) -> None:
        self._require_page()
        log.info("Opening %s", url)
        try:
            self._page.goto(url, timeout=self._timeout_ms, wait_until="domcontentloaded")
        except Exception as e:
            raise SnapshotError(f"Could not load {url}: {e}") from e
        self.url = self._page.url or url

    def wait(self, ms: int) -> None:
        self._require_page()
        if ms > 0:
            self._page.wait_for_timeout(ms)

    def capture(self) -> Document:
        """Serialize the current page state into a Document."""
        self._require_page()
        try:
            data = self._page.evaluate(_SNAPSHOT_JS)
        except Exception as e:
            raise SnapshotError(f"Snapshot script failed on {self.url}: {e}") from e
        doc = document_from_snapshot(data, url=self.url)
        log.debug("Captured %d elements from %s", len(doc), self.url)
        return doc

    def _require_page(self) -> None:
        if self._page is None:
            raise SnapshotError("BrowserSession is not open; use it as a context manager")

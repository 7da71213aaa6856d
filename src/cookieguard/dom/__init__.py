"""Document model package.

Provides:
    parse_html(html, url="") -> Document            (static markup, BeautifulSoup)
    document_from_snapshot(data, url="") -> Document (serialized browser capture)
"""

from __future__ import annotations

from cookieguard.dom.html_frontend import parse_html
from cookieguard.dom.nodes import BoundingBox, ComputedStyle, Document, DomNode, ElementLike
from cookieguard.dom.snapshot import SnapshotError, document_from_snapshot

__all__ = [
    "BoundingBox",
    "ComputedStyle",
    "Document",
    "DomNode",
    "ElementLike",
    "SnapshotError",
    "document_from_snapshot",
    "parse_html",
]

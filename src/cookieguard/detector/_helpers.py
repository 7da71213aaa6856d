"""Shared predicates and the per-pass rule context."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping

from cookieguard.dom.nodes import Document, DomNode
from cookieguard.keywords import KeywordSet
from cookieguard.schemas.settings import DetectorSettings

_RGB_RE = re.compile(r"rgba?\((\d+),\s*(\d+),\s*(\d+)")
_LEADING_NUMBER_RE = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+))")

TRANSPARENT = "rgba(0, 0, 0, 0)"


@dataclass
class RuleContext:
    """Everything a rule may look at during one detection pass."""

    document: Document
    banners: list[DomNode]
    keywords: Mapping[str, KeywordSet]
    settings: DetectorSettings

    @property
    def scope(self) -> list[DomNode]:
        """Located banners, or the document body when none were found."""
        return self.banners if self.banners else [self.document.body]

    def kw(self, name: str) -> KeywordSet:
        return self.keywords[name]


# ── Matching ───────────────────────────────────────────────────────────────

def matches(el: DomNode, kws: KeywordSet, *attrs: str) -> bool:
    """True if el's text content or any of the named attributes hits kws."""
    if kws.matches(el.text_content):
        return True
    return any(kws.matches(el.attr(a)) for a in attrs)


# ── Element kinds ──────────────────────────────────────────────────────────

def is_button_control(el: DomNode) -> bool:
    """button, a[role=button], input[type=button|submit], [role=button]."""
    if el.tag == "button" or el.attr("role") == "button":
        return True
    return el.tag == "input" and el.attr("type").lower() in ("button", "submit")


def is_button_or_link(el: DomNode) -> bool:
    return el.tag in ("button", "a")


def is_checkbox(el: DomNode) -> bool:
    return el.tag == "input" and el.attr("type").lower() == "checkbox"


def is_choice_input(el: DomNode) -> bool:
    return el.tag == "input" and el.attr("type").lower() in ("checkbox", "radio")


# ── Visibility ─────────────────────────────────────────────────────────────

def is_visible(el: DomNode) -> bool:
    """Not display:none, not visibility:hidden, non-zero width."""
    return (
        el.style.display != "none"
        and el.style.visibility != "hidden"
        and el.box.width > 0
    )


def is_rendered(el: DomNode) -> bool:
    """Participates in layout: neither el nor any ancestor is display:none."""
    if el.style.display == "none":
        return False
    return all(anc.style.display != "none" for anc in el.ancestors())


def has_zero_opacity(el: DomNode) -> bool:
    try:
        return float(el.style.opacity) == 0.0
    except ValueError:
        return False


# ── Style parsing (None when unparsable) ───────────────────────────────────

def parse_rgb(value: str) -> tuple[int, int, int] | None:
    m = _RGB_RE.match(value.strip())
    if not m:
        return None
    return int(m.group(1)), int(m.group(2)), int(m.group(3))


def brightness(rgb: tuple[int, int, int]) -> float:
    return sum(rgb) / 3


def leading_number(value: str) -> float | None:
    """Numeric prefix of a style value ("16px" -> 16.0), None if there is none."""
    m = _LEADING_NUMBER_RE.match(value)
    if not m:
        return None
    return float(m.group(1))


def context_text(*parts: DomNode | str | None) -> str:
    """Lower-cased join of element texts and plain strings, space separated."""
    texts = []
    for part in parts:
        if part is None:
            texts.append("")
        elif isinstance(part, str):
            texts.append(part)
        else:
            texts.append(part.text_content)
    return " ".join(texts).lower()

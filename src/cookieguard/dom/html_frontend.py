"""Static HTML front-end: parses markup into a Document with styles and boxes.

There is no rendering engine here, so bounding boxes come from a simplified
block layout: blocks stack vertically and take the available width, inline
content on one line box per run, controls sized from their label text.
Explicit px/em/% widths and heights, paddings and margins are honoured.
It is accurate enough for the size thresholds the banner locator applies;
use the browser snapshot front-end when real geometry matters.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import soupsieve
from bs4 import BeautifulSoup, Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag
from soupsieve import SelectorSyntaxError

from cookieguard.dom.css import (
    DEFAULT_FONT_SIZE,
    INHERITED,
    StyleRule,
    cascade,
    format_number,
    normalize_color,
    parse_stylesheet,
    resolve_font_size,
    resolve_font_weight,
    resolve_length,
)
from cookieguard.dom.nodes import BoundingBox, ComputedStyle, Document, DomNode

log = logging.getLogger(__name__)

DEFAULT_VIEWPORT_WIDTH = 1280

LINE_HEIGHT = 1.25      # line box height as a multiple of font size
CHAR_WIDTH = 0.55       # average glyph advance as a multiple of font size

_BLOCK_DISPLAYS = frozenset({"block", "flex", "grid", "list-item", "table", "flow-root"})
_OPAQUE_TAGS = frozenset({"script", "style", "template", "noscript"})
_SKIPPED_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)


@dataclass
class _Sides:
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0


def parse_html(html: str, url: str = "", viewport_width: int = DEFAULT_VIEWPORT_WIDTH) -> Document:
    """Parse an HTML string into a styled, laid-out Document."""
    soup = BeautifulSoup(html.replace("\ufeff", ""), "html.parser")

    rules: list[StyleRule] = []
    for style_tag in soup.find_all("style"):
        rules.extend(parse_stylesheet(style_tag.get_text(), start_order=len(rules)))
    log.debug("Parsed %d style rules", len(rules))

    builder = _TreeBuilder(soup, rules)
    root = builder.build(soup)
    _Layout(builder.declared).place_root(root, float(viewport_width))

    doc = Document(root, url=url)
    log.info("Parsed document %s: %d elements", url or "<inline>", len(doc))
    return doc


def match_rules(soup: BeautifulSoup, rules: list[StyleRule]) -> dict[int, list[StyleRule]]:
    """Run each rule's selector through soupsieve; id(Tag) -> matching rules."""
    matched: dict[int, list[StyleRule]] = {}
    for rule in rules:
        try:
            tags = soup.select(rule.selector)
        except (SelectorSyntaxError, NotImplementedError) as exc:
            log.debug("Skipping selector %r: %s", rule.selector, exc)
            continue
        for tag in tags:
            matched.setdefault(id(tag), []).append(rule)
    return matched


def _matches_alone(rule: StyleRule, tag: Tag) -> bool:
    try:
        return soupsieve.match(rule.selector, tag)
    except (SelectorSyntaxError, NotImplementedError):
        return False


class _TreeBuilder:
    """Converts BeautifulSoup tags into DomNodes with computed styles."""

    def __init__(self, soup: BeautifulSoup, rules: list[StyleRule]) -> None:
        self._soup = soup
        self._rules = rules
        self._matched = match_rules(soup, rules)
        # id(DomNode) -> rules matched by its source tag, kept for re-styling
        self._node_rules: dict[int, list[StyleRule]] = {}
        # id(DomNode) -> declared longhands, consumed by the layout pass
        self.declared: dict[int, dict[str, str]] = {}

    def build(self, soup: BeautifulSoup) -> DomNode:
        html_tag = soup.find("html")
        if isinstance(html_tag, Tag):
            root = self._convert(html_tag, None)
        else:
            root = self._synthetic("html", None)
            for child in soup.contents:
                self._append_child(root, child)
        if not any(c.tag == "body" for c in root.children):
            self._wrap_body(root)
        return root

    def _synthetic(self, tag: str, parent: DomNode | None) -> DomNode:
        node = DomNode(tag=tag)
        # Not in the soup, so only selectors about the element itself can match
        detached = self._soup.new_tag(tag)
        self._node_rules[id(node)] = [r for r in self._rules if _matches_alone(r, detached)]
        self._style(node, parent, "")
        return node

    def _wrap_body(self, root: DomNode) -> None:
        """Move everything except <head> under a synthetic <body>."""
        body = self._synthetic("body", root)
        kept: list[str | DomNode] = []
        for item in root.content:
            if isinstance(item, DomNode) and item.tag == "head":
                kept.append(item)
            else:
                body.append(item)
        root.content = kept
        root.append(body)
        # Re-style the moved subtree now that its parent changed
        for node in body.children:
            self._restyle(node, body)

    def _restyle(self, node: DomNode, parent: DomNode) -> None:
        self._style(node, parent, node.attr("style"))
        for child in node.children:
            self._restyle(child, node)

    def _convert(self, tag: Tag, parent: DomNode | None) -> DomNode:
        attrs = {k.lower(): _attr_value(v) for k, v in tag.attrs.items()}
        node = DomNode(tag=tag.name.lower(), attrs=attrs)
        node.parent = parent
        self._node_rules[id(node)] = self._matched.get(id(tag), [])
        self._style(node, parent, attrs.get("style", ""))
        if node.tag in _OPAQUE_TAGS:
            return node
        for child in tag.contents:
            self._append_child(node, child)
        return node

    def _append_child(self, node: DomNode, child) -> None:
        if isinstance(child, _SKIPPED_STRINGS):
            return
        if isinstance(child, NavigableString):
            node.append(str(child))
        elif isinstance(child, Tag):
            node.append(self._convert(child, node))

    def _style(self, node: DomNode, parent: DomNode | None, inline: str) -> None:
        decl = cascade(node.tag, node.attrs, self._node_rules.get(id(node), []), inline)
        self.declared[id(node)] = decl
        node.style = compute_style(decl, parent.style if parent is not None else None)


def compute_style(decl: dict[str, str], parent: ComputedStyle | None) -> ComputedStyle:
    """Turn declared longhands into browser-style computed values."""
    inherited = parent or ComputedStyle()
    parent_px = _px(inherited.font_size) if parent else DEFAULT_FONT_SIZE
    parent_weight = int(inherited.font_weight) if parent and inherited.font_weight.isdigit() else 400

    def pick(prop: str, default: str) -> str:
        value = decl.get(prop)
        if value is None or value == "inherit":
            return getattr(inherited, prop.replace("-", "_")) if prop in INHERITED and parent else default
        return value

    font_px = resolve_font_size(decl.get("font-size"), parent_px)
    weight = resolve_font_weight(decl.get("font-weight"), parent_weight)

    background = decl.get("background-color", "transparent")
    opacity = decl.get("opacity", "1")
    try:
        opacity = format_number(max(0.0, min(1.0, float(opacity))))
    except ValueError:
        opacity = "1"

    return ComputedStyle(
        display=decl.get("display", "inline"),
        visibility=pick("visibility", "visible"),
        opacity=opacity,
        background_color=normalize_color(background) or background,
        color=normalize_color(pick("color", "rgb(0, 0, 0)")) or pick("color", "rgb(0, 0, 0)"),
        font_size=f"{format_number(round(font_px, 2))}px",
        font_weight=str(weight),
        text_decoration=decl.get("text-decoration", "none"),
        cursor=pick("cursor", "auto"),
        border_style=decl.get("border-style", "none"),
        border_width=decl.get("border-width", "0px"),
    )


def _px(value: str) -> float:
    try:
        return float(value.removesuffix("px"))
    except ValueError:
        return DEFAULT_FONT_SIZE


def _attr_value(value) -> str:
    # bs4 returns multi-valued attributes (class, rel) as lists
    if isinstance(value, list):
        return " ".join(value)
    return "" if value is None else str(value)


class _Layout:
    """Approximate normal-flow layout assigning BoundingBoxes."""

    def __init__(self, declared: dict[int, dict[str, str]]) -> None:
        self._declared = declared

    def place_root(self, root: DomNode, viewport_width: float) -> None:
        self._place_block(root, 0.0, 0.0, viewport_width)

    # ── Helpers ────────────────────────────────────────────────────────

    def _decl(self, node: DomNode) -> dict[str, str]:
        return self._declared.get(id(node), {})

    def _sides(self, node: DomNode, prop: str, avail: float) -> _Sides:
        decl = self._decl(node)
        font_px = _px(node.style.font_size)
        values = []
        for side in ("top", "right", "bottom", "left"):
            raw = decl.get(f"{prop}-{side}", "0")
            values.append(max(0.0, resolve_length(raw, font_px, avail) or 0.0))
        return _Sides(*values)

    def _explicit(self, node: DomNode, prop: str, reference: float | None) -> float | None:
        raw = self._decl(node).get(prop)
        if raw is None or raw == "auto":
            return None
        value = resolve_length(raw, _px(node.style.font_size), reference)
        return max(0.0, value) if value is not None else None

    def _zero(self, node: DomNode, x: float, y: float) -> None:
        node.box = BoundingBox(x, y, 0.0, 0.0)
        for child in node.descendants():
            child.box = BoundingBox(x, y, 0.0, 0.0)

    @staticmethod
    def _is_block(node: DomNode) -> bool:
        return node.style.display in _BLOCK_DISPLAYS or node.style.display.startswith("table-")

    def _out_of_flow(self, node: DomNode) -> bool:
        return self._decl(node).get("position") in ("fixed", "absolute")

    # ── Block formatting ───────────────────────────────────────────────

    def _place_block(self, node: DomNode, x: float, y: float, avail: float) -> float:
        """Lay out a block box; returns the vertical space it consumes in flow."""
        if node.style.display == "none":
            self._zero(node, x, y)
            return 0.0

        margin = self._sides(node, "margin", avail)
        padding = self._sides(node, "padding", avail)
        width = self._explicit(node, "width", avail)
        if width is None:
            width = max(0.0, avail - margin.left - margin.right)
        content_w = max(0.0, width - padding.left - padding.right)

        top = y + margin.top
        cursor_y = top + padding.top
        line_h = 0.0
        line_x = x + margin.left + padding.left
        font_px = _px(node.style.font_size)

        for item in node.content:
            if isinstance(item, str):
                if item.strip():
                    line_h = max(line_h, font_px * LINE_HEIGHT)
                continue
            if item.style.display == "none":
                self._zero(item, line_x, cursor_y)
            elif self._is_block(item):
                cursor_y += line_h
                line_h = 0.0
                line_x = x + margin.left + padding.left
                used = self._place_block(item, x + margin.left + padding.left, cursor_y, content_w)
                if not self._out_of_flow(item):
                    cursor_y += used
            else:
                w, h = self._place_inline(item, line_x, cursor_y, content_w)
                line_x += w
                line_h = max(line_h, h)
        cursor_y += line_h

        height = self._explicit(node, "height", None)
        if height is None:
            height = (cursor_y - top - padding.top) + padding.top + padding.bottom
        node.box = BoundingBox(x + margin.left, top, width, height)
        return margin.top + height + margin.bottom

    # ── Inline formatting ──────────────────────────────────────────────

    def _place_inline(self, node: DomNode, x: float, y: float, avail: float) -> tuple[float, float]:
        """Lay out an inline-level box; returns (width, height)."""
        if node.style.display == "none":
            self._zero(node, x, y)
            return 0.0, 0.0

        font_px = _px(node.style.font_size)
        line = font_px * LINE_HEIGHT

        if node.tag == "input" and node.attr("type").lower() in ("checkbox", "radio"):
            node.box = BoundingBox(x, y, 13.0, 13.0)
            return 13.0, 13.0
        if node.tag in ("img", "iframe", "canvas", "video"):
            w = self._explicit(node, "width", avail) or _num(node.attr("width"))
            h = self._explicit(node, "height", None) or _num(node.attr("height"))
            if node.tag == "iframe":
                w, h = w or 300.0, h or 150.0
            node.box = BoundingBox(x, y, w, h)
            return w, h

        padding = self._sides(node, "padding", avail)
        label = " ".join(node.text_content.split())
        if node.tag == "input":
            itype = node.attr("type").lower() or "text"
            label = node.attr("value") if itype in ("button", "submit", "reset") else ""
            text_w = len(label) * font_px * CHAR_WIDTH if label else 150.0
        else:
            text_w = len(label) * font_px * CHAR_WIDTH

        atomic = node.style.display.startswith("inline-") or node.tag in ("button", "input", "select", "textarea")
        width = (self._explicit(node, "width", avail) if atomic else None)
        if width is None:
            width = text_w + padding.left + padding.right
        height = (self._explicit(node, "height", None) if atomic else None)
        if height is None:
            height = line + padding.top + padding.bottom

        node.box = BoundingBox(x, y, width, height)

        child_x = x + padding.left
        for child in node.children:
            if child.style.display == "none":
                self._zero(child, child_x, y)
            elif self._is_block(child):
                self._place_block(child, child_x, y + padding.top, max(0.0, width - padding.left - padding.right))
            else:
                cw, _ = self._place_inline(child, child_x, y + padding.top, avail)
                child_x += cw
        return width, height


def _num(value: str) -> float:
    try:
        return float(value.removesuffix("px"))
    except ValueError:
        return 0.0

"""Minimal CSS support for the static HTML front-end.

Covers what the detection rules read: user-agent defaults, rules from <style>
blocks with their specificity, inline style attributes, inheritance, and
normalisation of colors, font sizes and font weights to the string forms a
browser's getComputedStyle() reports. Selector matching is done by the
front-end through BeautifulSoup's select().
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

log = logging.getLogger(__name__)

DEFAULT_FONT_SIZE = 16.0

# Properties that inherit from the parent when not declared
INHERITED = frozenset({"font-size", "font-weight", "visibility", "cursor", "color"})

BLOCK_TAGS = frozenset({
    "html", "body", "div", "p", "section", "article", "header", "footer", "nav",
    "main", "aside", "form", "fieldset", "ul", "ol", "dl", "dt", "dd",
    "h1", "h2", "h3", "h4", "h5", "h6", "blockquote", "pre", "figure",
    "figcaption", "address", "details", "summary", "hr", "dialog", "legend",
})

HIDDEN_TAGS = frozenset({
    "head", "script", "style", "template", "noscript", "title", "meta", "link", "base",
})

_HEADING_SIZES = {"h1": "2em", "h2": "1.5em", "h3": "1.17em", "h4": "1em", "h5": "0.83em", "h6": "0.67em"}
_HEADING_MARGINS = {"h1": "0.67em", "h2": "0.83em", "h3": "1em", "h4": "1.33em", "h5": "1.67em", "h6": "2.33em"}

_CONTROL_DEFAULTS = {
    "display": "inline-block",
    "background-color": "rgb(239, 239, 239)",
    "border-style": "outset",
    "border-width": "2px",
    "padding-top": "6px",
    "padding-bottom": "6px",
    "padding-left": "12px",
    "padding-right": "12px",
    "cursor": "default",
}


def ua_defaults(tag: str, attrs: dict[str, str]) -> dict[str, str]:
    """User-agent stylesheet declarations for an element."""
    decl: dict[str, str] = {}
    if tag in HIDDEN_TAGS or "hidden" in attrs:
        decl["display"] = "none"
    elif tag == "dialog" and "open" not in attrs:
        decl["display"] = "none"
    elif tag == "li":
        decl["display"] = "list-item"
    elif tag == "table":
        decl["display"] = "table"
    elif tag in ("tr", "thead", "tbody", "tfoot", "td", "th", "caption"):
        decl["display"] = "block"
    elif tag in BLOCK_TAGS:
        decl["display"] = "block"
    else:
        decl["display"] = "inline"

    if tag == "body":
        decl.update({f"margin-{s}": "8px" for s in ("top", "right", "bottom", "left")})
    elif tag in ("p", "ul", "ol", "dl", "blockquote"):
        decl.update({"margin-top": "1em", "margin-bottom": "1em"})
    elif tag in _HEADING_SIZES:
        decl["font-size"] = _HEADING_SIZES[tag]
        decl["font-weight"] = "bold"
        decl.update({"margin-top": _HEADING_MARGINS[tag], "margin-bottom": _HEADING_MARGINS[tag]})

    if tag == "a" and "href" in attrs:
        decl.update({"text-decoration": "underline", "cursor": "pointer", "color": "rgb(0, 0, 238)"})
    elif tag in ("u", "ins"):
        decl["text-decoration"] = "underline"
    elif tag in ("b", "strong", "th"):
        decl["font-weight"] = "bold"
    elif tag == "small":
        decl["font-size"] = "smaller"
    elif tag == "button":
        decl.update(_CONTROL_DEFAULTS)
    elif tag == "input":
        itype = attrs.get("type", "text").lower()
        if itype == "hidden":
            decl["display"] = "none"
        elif itype in ("button", "submit", "reset"):
            decl.update(_CONTROL_DEFAULTS)
        else:
            decl["display"] = "inline-block"
    elif tag in ("select", "textarea"):
        decl["display"] = "inline-block"
    return decl


# ── Declarations ─────────────────────────────────────────────────────────

_SIDES = ("top", "right", "bottom", "left")
_BORDER_STYLES = frozenset({
    "none", "hidden", "dotted", "dashed", "solid", "double", "groove", "ridge", "inset", "outset",
})
_BORDER_WIDTHS = {"thin": "1px", "medium": "3px", "thick": "5px"}


def parse_declarations(text: str) -> tuple[dict[str, str], dict[str, str]]:
    """Parse a declaration block into (normal, important) longhand dicts."""
    normal: dict[str, str] = {}
    important: dict[str, str] = {}
    for chunk in text.split(";"):
        if ":" not in chunk:
            continue
        prop, _, value = chunk.partition(":")
        prop = prop.strip().lower()
        value = value.strip()
        if not prop or not value:
            continue
        target = normal
        if value.lower().endswith("!important"):
            value = value[: -len("!important")].strip()
            target = important
        target.update(expand_shorthand(prop, value))
    return normal, important


def expand_shorthand(prop: str, value: str) -> dict[str, str]:
    """Expand the shorthands the rules care about into longhands."""
    lowered = value.lower()
    if prop in ("margin", "padding"):
        parts = lowered.split()
        if not parts or len(parts) > 4:
            return {}
        # CSS 1-4 value box expansion
        top = parts[0]
        right = parts[1] if len(parts) > 1 else top
        bottom = parts[2] if len(parts) > 2 else top
        left = parts[3] if len(parts) > 3 else right
        return {f"{prop}-top": top, f"{prop}-right": right,
                f"{prop}-bottom": bottom, f"{prop}-left": left}
    if prop == "background":
        for token in _split_tokens(lowered):
            if normalize_color(token) is not None:
                return {"background-color": token}
        if lowered in ("none", "0"):
            return {"background-color": "transparent"}
        return {}
    if prop in ("border", "border-top"):
        if lowered in ("none", "0", "0px"):
            return {"border-style": "none", "border-width": "0px"}
        out: dict[str, str] = {}
        for token in _split_tokens(lowered):
            if token in _BORDER_STYLES:
                out["border-style"] = token
            elif token in _BORDER_WIDTHS:
                out["border-width"] = _BORDER_WIDTHS[token]
            elif re.fullmatch(r"[\d.]+(px)?", token):
                out["border-width"] = token if token.endswith("px") else f"{token}px"
        if "border-style" in out and "border-width" not in out:
            out["border-width"] = "3px"
        out.setdefault("border-style", "none")
        return out
    if prop == "text-decoration-line":
        return {"text-decoration": lowered}
    return {prop: lowered}


def _split_tokens(value: str) -> list[str]:
    """Split on whitespace, keeping functional notations like rgb(...) intact."""
    return re.findall(r"[a-z-]+\([^)]*\)|#[0-9a-f]+|[^\s]+", value)


# ── Stylesheets ──────────────────────────────────────────────────────────

# State the static page never has, and generated boxes that are not elements
_DYNAMIC_RE = re.compile(
    r"::|:(?:hover|focus|focus-within|focus-visible|active|visited|target|target-within"
    r"|before|after|first-line|first-letter)\b",
    re.IGNORECASE,
)
_ATTR_SEL_RE = re.compile(r"\[[^\]]*\]")
_ID_SEL_RE = re.compile(r"#[\w-]+")
_CLASS_SEL_RE = re.compile(r"\.[\w-]+")
_PSEUDO_SEL_RE = re.compile(r"(?<!:):(?!(?:not|is|where)\()[\w-]+")
_TYPE_SEL_RE = re.compile(r"(?:^|[\s>+~(])([a-zA-Z][\w-]*)")


def selector_specificity(text: str) -> tuple[int, int, int]:
    """(ids, classes + attributes + pseudo-classes, types) for one complex selector."""
    attrs = len(_ATTR_SEL_RE.findall(text))
    text = _ATTR_SEL_RE.sub("", text.strip())
    return (
        len(_ID_SEL_RE.findall(text)),
        len(_CLASS_SEL_RE.findall(text)) + attrs + len(_PSEUDO_SEL_RE.findall(text)),
        len(_TYPE_SEL_RE.findall(text)),
    )


@dataclass
class StyleRule:
    selector: str
    specificity: tuple[int, int, int] = (0, 0, 0)
    normal: dict[str, str] = field(default_factory=dict)
    important: dict[str, str] = field(default_factory=dict)
    order: int = 0


def parse_stylesheet(css: str, start_order: int = 0) -> list[StyleRule]:
    """Parse top-level style rules, one per selector in each group.

    @-blocks and selectors that depend on user interaction or target
    pseudo-elements are skipped. Matching against elements is left to the
    caller's selector engine.
    """
    css = re.sub(r"/\*.*?\*/", "", css, flags=re.DOTALL)
    rules: list[StyleRule] = []
    order = start_order
    for prelude, body in _top_level_blocks(css):
        if prelude.startswith("@"):
            continue
        normal, important = parse_declarations(body)
        for sel_text in prelude.split(","):
            sel_text = sel_text.strip()
            if not sel_text or _DYNAMIC_RE.search(sel_text):
                log.debug("Skipping unsupported selector %r", sel_text)
                continue
            rules.append(StyleRule(
                sel_text, selector_specificity(sel_text), dict(normal), dict(important), order,
            ))
            order += 1
    return rules


def _top_level_blocks(css: str) -> list[tuple[str, str]]:
    """Split a stylesheet into (prelude, body) pairs, treating nested blocks as opaque."""
    blocks: list[tuple[str, str]] = []
    depth = 0
    start = 0
    body_start = 0
    prelude = ""
    for i, ch in enumerate(css):
        if ch == "{":
            if depth == 0:
                prelude = css[start:i].strip()
                body_start = i + 1
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                blocks.append((prelude, css[body_start:i]))
                start = i + 1
        elif ch == ";" and depth == 0:
            # Statement at-rules such as @import
            start = i + 1
    return blocks


def cascade(
    tag: str,
    attrs: dict[str, str],
    matched: list[StyleRule],
    inline: str = "",
) -> dict[str, str]:
    """Declared longhand values for one element from the rules that match it."""
    decl = ua_defaults(tag, attrs)
    matched = sorted(matched, key=lambda r: (r.specificity, r.order))
    inline_normal, inline_important = parse_declarations(inline) if inline else ({}, {})
    for r in matched:
        decl.update(r.normal)
    decl.update(inline_normal)
    for r in matched:
        decl.update(r.important)
    decl.update(inline_important)
    return decl


# ── Value normalisation ──────────────────────────────────────────────────

NAMED_COLORS: dict[str, tuple[int, int, int]] = {
    "black": (0, 0, 0), "white": (255, 255, 255), "red": (255, 0, 0),
    "green": (0, 128, 0), "lime": (0, 255, 0), "blue": (0, 0, 255),
    "yellow": (255, 255, 0), "orange": (255, 165, 0), "gray": (128, 128, 128),
    "grey": (128, 128, 128), "lightgray": (211, 211, 211), "lightgrey": (211, 211, 211),
    "darkgray": (169, 169, 169), "darkgrey": (169, 169, 169), "silver": (192, 192, 192),
    "navy": (0, 0, 128), "teal": (0, 128, 128), "purple": (128, 0, 128),
    "maroon": (128, 0, 0), "olive": (128, 128, 0), "aqua": (0, 255, 255),
    "fuchsia": (255, 0, 255), "whitesmoke": (245, 245, 245), "gainsboro": (220, 220, 220),
    "darkgreen": (0, 100, 0), "forestgreen": (34, 139, 34), "dodgerblue": (30, 144, 255),
    "royalblue": (65, 105, 225), "crimson": (220, 20, 60), "tomato": (255, 99, 71),
}

_RGB_FUNC_RE = re.compile(
    r"^rgba?\(\s*([\d.]+)\s*[,\s]\s*([\d.]+)\s*[,\s]\s*([\d.]+)\s*(?:[,/]\s*([\d.]+%?)\s*)?\)$"
)


def normalize_color(value: str) -> str | None:
    """Normalize a CSS color to "rgb(r, g, b)" / "rgba(r, g, b, a)", or None if unparsable."""
    v = value.strip().lower()
    if v == "transparent":
        return "rgba(0, 0, 0, 0)"
    if v in NAMED_COLORS:
        r, g, b = NAMED_COLORS[v]
        return f"rgb({r}, {g}, {b})"
    if v.startswith("#"):
        digits = v[1:]
        if len(digits) in (3, 4):
            digits = "".join(ch * 2 for ch in digits)
        if len(digits) not in (6, 8) or not re.fullmatch(r"[0-9a-f]+", digits):
            return None
        r, g, b = (int(digits[i:i + 2], 16) for i in (0, 2, 4))
        if len(digits) == 8:
            alpha = int(digits[6:8], 16) / 255
            return f"rgba({r}, {g}, {b}, {format_number(round(alpha, 3))})"
        return f"rgb({r}, {g}, {b})"
    m = _RGB_FUNC_RE.match(v)
    if m:
        r, g, b = (min(255, int(float(x))) for x in m.group(1, 2, 3))
        alpha = m.group(4)
        if alpha is None:
            return f"rgb({r}, {g}, {b})"
        a = float(alpha[:-1]) / 100 if alpha.endswith("%") else float(alpha)
        if a >= 1:
            return f"rgb({r}, {g}, {b})"
        return f"rgba({r}, {g}, {b}, {format_number(a)})"
    return None


_FONT_KEYWORDS = {
    "xx-small": 9.0, "x-small": 10.0, "small": 13.0, "medium": 16.0,
    "large": 18.0, "x-large": 24.0, "xx-large": 32.0,
}


def resolve_length(value: str, font_px: float, reference_px: float | None = None) -> float | None:
    """Resolve a CSS length to px; percentages need a reference size."""
    v = value.strip().lower()
    if v in ("0", "0px"):
        return 0.0
    m = re.fullmatch(r"(-?[\d.]+)(px|em|rem|%|pt|vw|vh)?", v)
    if not m:
        return None
    try:
        n = float(m.group(1))
    except ValueError:
        return None
    unit = m.group(2) or "px"
    if unit == "px":
        return n
    if unit == "em":
        return n * font_px
    if unit == "rem":
        return n * DEFAULT_FONT_SIZE
    if unit == "pt":
        return n * 4 / 3
    if unit in ("%", "vw", "vh"):
        return n / 100 * reference_px if reference_px is not None else None
    return None


def resolve_font_size(value: str | None, parent_px: float) -> float:
    if not value:
        return parent_px
    v = value.strip().lower()
    if v in _FONT_KEYWORDS:
        return _FONT_KEYWORDS[v]
    if v == "smaller":
        return parent_px / 1.2
    if v == "larger":
        return parent_px * 1.2
    px = resolve_length(v, parent_px, parent_px)
    return px if px is not None and px > 0 else parent_px


def resolve_font_weight(value: str | None, parent_weight: int) -> int:
    if not value:
        return parent_weight
    v = value.strip().lower()
    if v == "normal":
        return 400
    if v == "bold":
        return 700
    if v == "bolder":
        return 400 if parent_weight < 400 else 700 if parent_weight < 600 else 900
    if v == "lighter":
        return 100 if parent_weight < 600 else 400 if parent_weight < 800 else 700
    try:
        weight = int(float(v))
    except ValueError:
        return parent_weight
    return weight if 1 <= weight <= 1000 else parent_weight


def format_number(n: float) -> str:
    """Format like a browser: integers without a decimal point, others trimmed."""
    if float(n).is_integer():
        return str(int(n))
    return f"{n:.3f}".rstrip("0").rstrip(".")

"""Rules about the refusal control: presence, placement, shape and prominence."""

from __future__ import annotations

import logging

from cookieguard.detector._helpers import (
    TRANSPARENT,
    RuleContext,
    brightness,
    is_button_control,
    is_button_or_link,
    is_rendered,
    is_visible,
    leading_number,
    matches,
    parse_rgb,
)
from cookieguard.dom.nodes import DomNode

log = logging.getLogger(__name__)


def detect_no_reject_button(ctx: RuleContext) -> bool:
    """No control anywhere in scope offers to refuse cookies."""
    reject = ctx.kw("reject")

    if not ctx.banners:
        for el in ctx.document.query(is_button_control):
            if matches(el, reject, "aria-label", "title"):
                return False
        return True

    for banner in ctx.banners:
        for el in banner.find_all(is_button_control):
            if not is_visible(el):
                continue
            if matches(el, reject, "aria-label", "title", "data-action"):
                return False
    return True


def _is_layering_control(el: DomNode) -> bool:
    return el.tag in ("button", "a") or el.attr("role") == "button"


def detect_layering(ctx: RuleContext) -> bool:
    """A banner offers "more options" but no refusal on its first layer."""
    more = ctx.kw("layering")
    reject = ctx.kw("reject_layering")

    for banner in ctx.banners:
        has_more = False
        has_visible_reject = False
        for el in banner.find_all(_is_layering_control):
            if matches(el, more, "aria-label"):
                has_more = True
            if matches(el, reject, "aria-label") and is_visible(el):
                has_visible_reject = True
        if has_more and not has_visible_reject:
            log.debug("Layering in %r", banner)
            return True
    return False


def _is_link_like_element(el: DomNode) -> bool:
    if el.tag == "a":
        return el.attr("role") != "button"
    return el.tag in ("span", "div") and el.has_attr("onclick")


def _styled_as_link(el: DomNode) -> bool:
    style = el.style
    return (
        "underline" in style.text_decoration
        or (style.cursor == "pointer" and not style.has_border)
        or not style.background_color
        or style.background_color in (TRANSPARENT, "transparent")
        or (el.tag == "a" and not el.has_attr("role"))
    )


def detect_link_instead_of_button(ctx: RuleContext) -> bool:
    """Refusal is offered as a plain text link rather than a button."""
    reject = ctx.kw("reject_link")
    for area in ctx.scope:
        for el in area.find_all(_is_link_like_element):
            if matches(el, reject, "aria-label") and _styled_as_link(el):
                return True
    return False


def detect_refuse_outside_banner(ctx: RuleContext) -> bool:
    """A visible refusal control sits outside every located banner."""
    if not ctx.banners:
        return False
    reject = ctx.kw("reject_core")

    for el in ctx.document.query(is_button_or_link):
        if not matches(el, reject, "aria-label"):
            continue
        if any(banner.contains(el) for banner in ctx.banners):
            continue
        if is_rendered(el) and el.box.width > 0 and el.box.height > 0:
            return True
    return False


def _is_prominence_control(el: DomNode) -> bool:
    return el.tag == "button" or (el.tag == "a" and el.attr("role") == "button")


def prominence_factors(accept: DomNode, reject: DomNode, brightness_threshold: float) -> int:
    """How many of background, font size and font weight favour accept.

    Values that cannot be parsed never count as a factor.
    """
    factors = 0
    a_style, r_style = accept.style, reject.style

    if a_style.background_color != r_style.background_color:
        a_rgb = parse_rgb(a_style.background_color)
        r_rgb = parse_rgb(r_style.background_color)
        if a_rgb and r_rgb and abs(brightness(a_rgb) - brightness(r_rgb)) > brightness_threshold:
            factors += 1

    a_size = leading_number(a_style.font_size)
    r_size = leading_number(r_style.font_size)
    if a_size is not None and r_size is not None and a_size > r_size:
        factors += 1

    a_weight = leading_number(a_style.font_weight)
    r_weight = leading_number(r_style.font_weight)
    if a_weight is not None and r_weight is not None and int(a_weight) > int(r_weight):
        factors += 1

    return factors


def detect_different_colored_buttons(ctx: RuleContext) -> bool:
    """The accept control is visually more prominent than the refusal control.

    Only the first accept and first reject control in each area are compared.
    """
    accept_kw = ctx.kw("accept")
    reject_kw = ctx.kw("reject_core")
    settings = ctx.settings

    for area in ctx.scope:
        controls = area.find_all(_is_prominence_control)
        accept = next((el for el in controls if matches(el, accept_kw, "aria-label")), None)
        reject = next((el for el in controls if matches(el, reject_kw, "aria-label")), None)
        if accept is None or reject is None:
            continue
        factors = prominence_factors(accept, reject, settings.brightness_threshold)
        if factors >= settings.prominence_min_factors:
            log.debug("Accept %r outweighs reject %r (%d factors)", accept, reject, factors)
            return True
    return False

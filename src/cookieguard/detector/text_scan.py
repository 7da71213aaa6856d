"""Rules that read banner or page wording."""

from __future__ import annotations

from cookieguard.detector._helpers import RuleContext, is_button_or_link, matches


def detect_lack_of_information(ctx: RuleContext) -> bool:
    """No area names enough cookie purposes or policy references."""
    info = ctx.kw("information")
    needed = ctx.settings.information_min_keywords
    for area in ctx.scope:
        if info.count(area.text_content) >= needed:
            return False
    return True


def detect_legitimate_interest(ctx: RuleContext) -> bool:
    return ctx.kw("legitimate_interest").matches(ctx.document.body.text_content)


def detect_no_withdraw_consent(ctx: RuleContext) -> bool:
    """No link or button anywhere lets the user revisit their choice."""
    withdraw = ctx.kw("withdraw")
    for el in ctx.document.query(is_button_or_link):
        if matches(el, withdraw, "aria-label", "href"):
            return False
    return True

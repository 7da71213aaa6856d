"""Rules about consent checkboxes."""

from __future__ import annotations

from cookieguard.detector._helpers import RuleContext, context_text, is_checkbox, is_choice_input


def detect_pre_ticked_boxes(ctx: RuleContext) -> bool:
    """A non-essential (or unlabelled) choice is checked in advance and can be changed."""
    essential = ctx.kw("essential")
    non_essential = ctx.kw("non_essential")
    min_len = ctx.settings.context_min_length

    for area in ctx.scope:
        for box in area.find_all(is_choice_input):
            if not box.has_attr("checked"):
                continue
            context = context_text(
                box.closest("label"),
                box.parent,
                box.next_element_sibling,
                box.previous_element_sibling,
                box.attr("aria-label"),
            )
            is_essential = essential.matches(context)
            is_non_essential = non_essential.matches(context)
            if is_non_essential or (not is_essential and len(context) > min_len):
                # Locked boxes are taken to be the fixed essential category
                if box.has_attr("disabled") or box.has_attr("readonly"):
                    continue
                return True
    return False


def detect_inaccurate_essential_classification(ctx: RuleContext) -> bool:
    """A locked "essential" checkbox also covers tracking-type purposes."""
    essential = ctx.kw("essential_strict")
    suspicious = ctx.kw("suspicious")

    for area in ctx.scope:
        for box in area.find_all(is_checkbox):
            if not box.has_attr("disabled"):
                continue
            context = context_text(box.closest("label"), box.parent)
            if essential.matches(context) and suspicious.matches(context):
                return True
    return False

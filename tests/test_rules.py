"""Tests for the ten violation rules, one class per rule."""

from __future__ import annotations

from cookieguard.catalog import ViolationKind as K
from cookieguard.detector import detect_all
from cookieguard.detector.buttons import prominence_factors
from cookieguard.dom.html_frontend import parse_html
from cookieguard.dom.nodes import BoundingBox, ComputedStyle, Document, DomNode
from cookieguard.schemas.settings import DetectorSettings

INFO = "We use cookies for analytics, marketing and advertising. See our privacy policy."


def _page(controls="", *, outside="", text=INFO, style=""):
    """A page with one located banner holding text and controls."""
    return (
        f"<html><head><style>{style}</style></head><body>"
        f"<div id='cookie-banner'><p>{text}</p>{controls}</div>"
        f"{outside}</body></html>"
    )


def _detect(html, settings=None):
    return detect_all(parse_html(html), settings)


class TestNoRejectButton:
    def test_accept_only(self):
        assert _detect(_page("<button>Accept all</button>"))[K.NO_REJECT_BUTTON]

    def test_reject_button_present(self):
        assert not _detect(_page("<button>Accept all</button><button>Reject all</button>"))[K.NO_REJECT_BUTTON]

    def test_reject_by_aria_label(self):
        html = _page("<button>Accept</button><button aria-label='Decline cookies'>X</button>")
        assert not _detect(html)[K.NO_REJECT_BUTTON]

    def test_hidden_reject_does_not_count(self):
        html = _page("<button>Accept all</button><button style='display:none'>Reject all</button>")
        assert _detect(html)[K.NO_REJECT_BUTTON]

    def test_norwegian_reject(self):
        assert not _detect(_page("<button>Godta</button><button>Avvis alle</button>"))[K.NO_REJECT_BUTTON]

    def test_no_banner_searches_whole_page(self):
        assert not _detect("<main><p>Hi</p><button>Decline</button></main>")[K.NO_REJECT_BUTTON]
        assert _detect("<main><p>Hi</p><button>OK</button></main>")[K.NO_REJECT_BUTTON]

    def test_extra_keywords(self):
        settings = DetectorSettings(extra_keywords={"reject": ["ablehnen"]})
        html = _page("<button>Akzeptieren</button><button>Ablehnen</button>")
        assert _detect(html)[K.NO_REJECT_BUTTON]
        assert not _detect(html, settings)[K.NO_REJECT_BUTTON]


class TestLayering:
    def test_options_without_reject(self):
        html = _page("<button>Accept all</button><button>Manage options</button>")
        assert _detect(html)[K.LAYERING]

    def test_options_with_reject(self):
        html = _page("<button>Accept all</button><button>Reject all</button><a href='#'>Settings</a>")
        assert not _detect(html)[K.LAYERING]

    def test_hidden_reject(self):
        html = _page(
            "<button>Accept all</button><button>Preferences</button>"
            "<button style='display:none'>Reject all</button>"
        )
        assert _detect(html)[K.LAYERING]

    def test_no_banner(self):
        assert not _detect("<main><button>Manage options</button></main>")[K.LAYERING]


class TestPreTickedBoxes:
    def test_marketing_checked(self):
        html = _page("<label><input type='checkbox' checked> Marketing cookies</label>")
        assert _detect(html)[K.PRE_TICKED_BOXES]

    def test_radio_checked(self):
        html = _page("<label><input type='radio' name='a' checked> Allow tracking</label>")
        assert _detect(html)[K.PRE_TICKED_BOXES]

    def test_unchecked(self):
        html = _page("<label><input type='checkbox'> Marketing cookies</label>")
        assert not _detect(html)[K.PRE_TICKED_BOXES]

    def test_essential_checked(self):
        html = _page("<label><input type='checkbox' checked disabled> Strictly necessary</label>")
        assert not _detect(html)[K.PRE_TICKED_BOXES]

    def test_locked_marketing_box_skipped(self):
        html = _page("<label><input type='checkbox' checked disabled> Marketing</label>")
        assert not _detect(html)[K.PRE_TICKED_BOXES]

    def test_unclassified_long_context(self):
        html = _page("<div><input type='checkbox' checked><span>Share data with partners</span></div>")
        assert _detect(html)[K.PRE_TICKED_BOXES]

    def test_unclassified_short_context(self):
        html = _page("<span><input type='checkbox' checked>Yes</span>")
        assert not _detect(html)[K.PRE_TICKED_BOXES]

    def test_context_threshold_configurable(self):
        html = _page("<span><input type='checkbox' checked>Yes</span>")
        settings = DetectorSettings(context_min_length=3)
        assert _detect(html, settings)[K.PRE_TICKED_BOXES]


class TestLinkInsteadOfButton:
    def test_reject_link(self):
        html = _page("<button>Accept all</button><a href='#'>Reject</a>")
        assert _detect(html)[K.LINK_INSTEAD_OF_BUTTON]

    def test_reject_button(self):
        html = _page("<button>Accept all</button><button>Reject all</button>")
        assert not _detect(html)[K.LINK_INSTEAD_OF_BUTTON]

    def test_link_with_button_role(self):
        html = _page(
            "<button>Accept all</button>"
            "<a href='#' role='button' style='background:#333333;border:1px solid'>Reject</a>"
        )
        assert not _detect(html)[K.LINK_INSTEAD_OF_BUTTON]

    def test_clickable_span(self):
        html = _page("<button>Accept all</button><span onclick='decline()'>No thanks</span>")
        assert _detect(html)[K.LINK_INSTEAD_OF_BUTTON]


class TestRefuseOutsideBanner:
    def test_reject_in_footer(self):
        html = _page("<button>Accept all</button>", outside="<footer><a href='/x'>Decline cookies</a></footer>")
        assert _detect(html)[K.REFUSE_OUTSIDE_BANNER]

    def test_reject_inside(self):
        html = _page("<button>Accept all</button><button>Reject all</button>")
        assert not _detect(html)[K.REFUSE_OUTSIDE_BANNER]

    def test_hidden_outside(self):
        html = _page(
            "<button>Accept all</button>",
            outside="<div style='display:none'><a href='/x'>Decline</a></div>",
        )
        assert not _detect(html)[K.REFUSE_OUTSIDE_BANNER]

    def test_no_banner(self):
        assert not _detect("<main><p>Hi</p><button>Decline</button></main>")[K.REFUSE_OUTSIDE_BANNER]


class TestLackOfInformation:
    def test_sparse_text(self):
        assert _detect(_page("<button>OK</button>", text="We use cookies."))[K.LACK_OF_INFORMATION]

    def test_informative_text(self):
        assert not _detect(_page("<button>OK</button>"))[K.LACK_OF_INFORMATION]

    def test_threshold_configurable(self):
        settings = DetectorSettings(information_min_keywords=6)
        assert _detect(_page("<button>OK</button>"), settings)[K.LACK_OF_INFORMATION]


class TestDifferentColoredButtons:
    STYLE = (
        ".yes { background: #2ecc71; font-size: 18px; font-weight: 700 }"
        ".no { background: #eeeeee; font-size: 12px }"
    )

    def test_accept_dominates(self):
        html = _page(
            "<button class='yes'>Accept all</button><button class='no'>Reject all</button>",
            style=self.STYLE,
        )
        assert _detect(html)[K.DIFFERENT_COLORED_BUTTONS]

    def test_equal_buttons(self):
        html = _page("<button>Accept all</button><button>Reject all</button>")
        assert not _detect(html)[K.DIFFERENT_COLORED_BUTTONS]

    def test_single_factor(self):
        html = _page(
            "<button style='font-size: 20px'>Accept all</button><button>Reject all</button>"
        )
        assert not _detect(html)[K.DIFFERENT_COLORED_BUTTONS]
        settings = DetectorSettings(prominence_min_factors=1)
        assert _detect(html, settings)[K.DIFFERENT_COLORED_BUTTONS]

    def test_missing_reject(self):
        html = _page("<button class='yes'>Accept all</button>", style=self.STYLE)
        assert not _detect(html)[K.DIFFERENT_COLORED_BUTTONS]

    def test_descendant_selector_styles(self):
        style = (
            "#cookie-banner .yes { background: #2ecc71; font-size: 18px; font-weight: 700 }"
            "#cookie-banner .no { background: #eeeeee; font-size: 12px }"
        )
        html = _page(
            "<button class='yes'>Accept all</button><button class='no'>Reject all</button>",
            style=style,
        )
        assert _detect(html)[K.DIFFERENT_COLORED_BUTTONS]

    def test_mixed_case_class_names(self):
        style = (
            ".AcceptBtn { background: #2ecc71; font-size: 18px; font-weight: 700 }"
            ".RejectBtn { background: #eeeeee; font-size: 12px }"
        )
        html = _page(
            "<button class='AcceptBtn'>Accept all</button><button class='RejectBtn'>Reject all</button>",
            style=style,
        )
        assert _detect(html)[K.DIFFERENT_COLORED_BUTTONS]

    def test_unparsable_values_never_count(self):
        accept = DomNode("button", style=ComputedStyle(
            background_color="var(--brand)", font_size="20px", font_weight="700",
        ))
        accept.append("Accept all")
        reject = DomNode("button", style=ComputedStyle(
            background_color="rgb(255, 255, 255)", font_size="16px", font_weight="400",
        ))
        reject.append("Reject all")
        assert prominence_factors(accept, reject, 50) == 2

        banner = DomNode("div", {"id": "cookie-banner"}, box=BoundingBox(0, 0, 800, 200))
        for item in ("We use cookies.", accept, reject):
            banner.append(item)
        body = DomNode("body")
        body.append(banner)
        root = DomNode("html")
        root.append(body)
        assert detect_all(Document(root))[K.DIFFERENT_COLORED_BUTTONS]

        for size in ("inherit", ""):
            heavier = DomNode("button", style=ComputedStyle(
                background_color="", font_size=size, font_weight="700",
            ))
            # Only the weight counts
            assert prominence_factors(heavier, reject, 50) == 1

    def test_factor_count(self):
        doc = parse_html(_page(
            "<button class='yes'>Accept</button><button class='no'>Reject</button>",
            style=self.STYLE,
        ))
        accept, reject = doc.query(lambda n: n.tag == "button")
        assert prominence_factors(accept, reject, 50) == 3
        # A color gap counts in either direction; size and weight only when accept is larger
        assert prominence_factors(reject, accept, 50) == 1
        # Brightness gap is 117; a higher threshold drops the color factor
        assert prominence_factors(accept, reject, 200) == 2


class TestLegitimateInterest:
    def test_phrase_in_banner(self):
        html = _page("<button>OK</button>", text="Some partners process data on the basis of legitimate interest.")
        assert _detect(html)[K.LEGITIMATE_INTEREST]

    def test_phrase_anywhere_on_page(self):
        html = _page("<button>OK</button>", outside="<p>Vi bruker berettiget interesse.</p>")
        assert _detect(html)[K.LEGITIMATE_INTEREST]

    def test_absent(self):
        assert not _detect(_page("<button>OK</button>"))[K.LEGITIMATE_INTEREST]


class TestInaccurateEssential:
    def test_analytics_in_locked_necessary(self):
        html = _page("<label><input type='checkbox' checked disabled> Necessary (incl. analytics)</label>")
        assert _detect(html)[K.INACCURATE_ESSENTIAL_CLASSIFICATION]

    def test_clean_necessary(self):
        html = _page("<label><input type='checkbox' checked disabled> Strictly necessary</label>")
        assert not _detect(html)[K.INACCURATE_ESSENTIAL_CLASSIFICATION]

    def test_unlocked_box_ignored(self):
        html = _page("<label><input type='checkbox'> Necessary and analytics</label>")
        assert not _detect(html)[K.INACCURATE_ESSENTIAL_CLASSIFICATION]

    def test_locked_unchecked_box_scanned(self):
        html = _page("<label><input type='checkbox' disabled> Necessary (incl. analytics)</label>")
        assert _detect(html)[K.INACCURATE_ESSENTIAL_CLASSIFICATION]


class TestNoWithdrawConsent:
    def test_no_settings_link(self):
        assert _detect(_page("<button>Accept all</button>"))[K.NO_WITHDRAW_CONSENT]

    def test_footer_link(self):
        html = _page("<button>OK</button>", outside="<footer><a href='/c'>Change settings</a></footer>")
        assert not _detect(html)[K.NO_WITHDRAW_CONSENT]

    def test_href_match(self):
        html = _page("<button>OK</button>", outside="<a href='/privacy#withdraw'>Privacy</a>")
        assert not _detect(html)[K.NO_WITHDRAW_CONSENT]

    def test_aria_label_match(self):
        html = _page("<button aria-label='Manage cookies'>&#9881;</button>")
        assert not _detect(html)[K.NO_WITHDRAW_CONSENT]


class TestFallbackScope:
    def test_accept_only_banner(self):
        html = "<div id='cookie-banner'><button>Accept All</button></div><main><p>Shop</p></main>"
        assert _detect(html)[K.NO_REJECT_BUTTON]

    def test_preferences_link_without_banner(self):
        html = "<main><p>Shop</p></main><footer><a href='/p'>Cookie Preferences</a></footer>"
        result = _detect(html)
        assert result.banners_found == 0
        assert not result[K.NO_WITHDRAW_CONSENT]

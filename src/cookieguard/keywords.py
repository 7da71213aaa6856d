"""Versioned keyword tables used by the banner locator and detection rules.

Every multilingual phrase list lives here as data. Extending or localizing a
set means adding phrases (in code or through the settings file), never
changing rule logic. Phrases are matched as case-insensitive substrings.

Bump KEYWORDS_VERSION whenever a phrase is added or removed so reports can
state which tables produced them.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

KEYWORDS_VERSION = "2023.01.3"


@dataclass(frozen=True)
class KeywordSet:
    name: str
    phrases: tuple[str, ...]

    def matches(self, text: str) -> bool:
        """True if any phrase occurs in text."""
        lowered = text.lower()
        return any(p in lowered for p in self.phrases)

    def count(self, text: str) -> int:
        """Number of distinct phrases that occur in text."""
        lowered = text.lower()
        return sum(1 for p in self.phrases if p in lowered)

    def extended(self, extra: Iterable[str]) -> KeywordSet:
        added = tuple(p.lower() for p in extra if p and p.lower() not in self.phrases)
        return KeywordSet(self.name, self.phrases + added)


def _kw(name: str, *phrases: str) -> KeywordSet:
    return KeywordSet(name, tuple(p.lower() for p in phrases))


_SETS = (
    # Attribute fragments identifying consent banners
    _kw("banner", "cookie", "consent", "gdpr", "privacy"),
    # aria-label fragments for role="dialog" banners
    _kw("banner_dialog", "cookie", "consent"),

    # ── Reject / refuse ──────────────────────────────────────────────────
    _kw(
        "reject",
        "reject all", "reject", "deny", "decline", "refuse",
        "avvis", "nekt", "avslå", "ikke godta", "not accept",
        "opt out", "opt-out", "no thanks", "nei takk",
        "only necessary", "kun nødvendig", "essential only",
        "disagree", "uenig",
    ),
    # Visible-refusal check used when judging layering
    _kw(
        "reject_layering",
        "reject", "decline", "deny", "avvis", "nekt", "only necessary", "kun nødvendig",
    ),
    _kw(
        "reject_link",
        "reject", "deny", "decline", "avvis", "nekt", "refuse", "opt out", "no thanks",
    ),
    # Refusal placement and prominence comparisons
    _kw("reject_core", "reject", "decline", "deny", "avvis", "nekt", "refuse"),

    _kw("accept", "accept", "agree", "godta", "aksepter", "allow"),

    _kw(
        "layering",
        "more info", "more options", "settings", "options", "customize",
        "preferences", "manage", "mer info", "innstillinger", "tilpass",
        "learn more", "see more", "details", "detaljer", "vis mer",
        "cookie settings", "cookie preferences", "advanced settings",
    ),

    # ── Cookie categories ────────────────────────────────────────────────
    _kw(
        "essential",
        "essential", "necessary", "required", "nødvendig", "påkrevd",
        "obligatorisk", "strictly necessary", "technical",
    ),
    _kw(
        "essential_strict",
        "essential", "necessary", "required", "nødvendig", "strictly necessary",
    ),
    _kw(
        "non_essential",
        "marketing", "analytics", "advertising", "social", "tracking",
        "markedsføring", "analyse", "annonsering", "performance",
        "personalization", "functional", "preference",
    ),
    # Non-essential categories that must never sit behind a locked checkbox
    _kw(
        "suspicious",
        "analytics", "marketing", "advertising", "social media", "tracking", "personalization",
    ),

    _kw(
        "information",
        "cookie", "analytics", "marketing", "advertising", "tracking",
        "personalization", "functional", "performance", "essential",
        "necessary", "privacy policy", "data protection",
    ),
    _kw(
        "legitimate_interest",
        "legitimate interest", "berettiget interesse", "legitim interesse",
        "legitimate purpose", "rechtmatige belangen",
    ),
    _kw(
        "withdraw",
        "withdraw", "change settings", "cookie settings", "preferences",
        "trekke tilbake", "endre innstillinger", "cookie-innstillinger",
        "manage cookies", "cookie preferences", "revoke", "tilbakekall",
    ),
)

KEYWORD_SETS: Mapping[str, KeywordSet] = MappingProxyType({s.name: s for s in _SETS})


def unknown_set_names(names: Iterable[str]) -> list[str]:
    return sorted(n for n in names if n not in KEYWORD_SETS)


def keyword_sets(extra: Mapping[str, Iterable[str]] | None = None) -> Mapping[str, KeywordSet]:
    """Built-in sets, optionally extended with extra phrases per set name.

    Raises:
        KeyError: if extra names a set that does not exist.
    """
    if not extra:
        return KEYWORD_SETS
    unknown = unknown_set_names(extra)
    if unknown:
        raise KeyError(f"Unknown keyword set(s): {', '.join(unknown)}")
    merged = dict(KEYWORD_SETS)
    for name, phrases in extra.items():
        merged[name] = merged[name].extended(phrases)
    return MappingProxyType(merged)

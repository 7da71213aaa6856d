"""Central violation catalog: maps each ViolationKind to its static metadata.

Weights and legal citations follow the EDPB Cookie Banner Taskforce report
(adopted 17 January 2023). The table is read-only and shared process-wide.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class ViolationKind(str, Enum):
    NO_REJECT_BUTTON = "NO_REJECT_BUTTON"
    LAYERING = "LAYERING"
    PRE_TICKED_BOXES = "PRE_TICKED_BOXES"
    LINK_INSTEAD_OF_BUTTON = "LINK_INSTEAD_OF_BUTTON"
    REFUSE_OUTSIDE_BANNER = "REFUSE_OUTSIDE_BANNER"
    LACK_OF_INFORMATION = "LACK_OF_INFORMATION"
    DIFFERENT_COLORED_BUTTONS = "DIFFERENT_COLORED_BUTTONS"
    LEGITIMATE_INTEREST = "LEGITIMATE_INTEREST"
    INACCURATE_ESSENTIAL_CLASSIFICATION = "INACCURATE_ESSENTIAL_CLASSIFICATION"
    NO_WITHDRAW_CONSENT = "NO_WITHDRAW_CONSENT"


@dataclass(frozen=True)
class ViolationType:
    kind: ViolationKind
    name: str                 # display name
    description: str
    dark_pattern: int         # manipulativeness weight
    compliance: int           # legal impact weight
    legal: str                # legal-basis citation


_TYPES = (
    ViolationType(
        kind=ViolationKind.NO_REJECT_BUTTON,
        name="No Cookie Reject Button",
        description="Missing clear reject button for user to object from data collection",
        dark_pattern=5,
        compliance=5,
        legal="Article 5(3) ePrivacy Directive & GDPR",
    ),
    ViolationType(
        kind=ViolationKind.LAYERING,
        name="Layering (Multiple Pages to Opt Out)",
        description="Multiple pages required to opt out - 'see more' or 'learn more' pages",
        dark_pattern=3,
        compliance=0,
        legal="ePrivacy Directive Article 5(3)",
    ),
    ViolationType(
        kind=ViolationKind.PRE_TICKED_BOXES,
        name="Pre-ticked Boxes",
        description="Non-essential cookie boxes are pre-selected on first page",
        dark_pattern=5,
        compliance=5,
        legal="Article 32 GDPR & Article 5(3) ePrivacy Directive",
    ),
    ViolationType(
        kind=ViolationKind.LINK_INSTEAD_OF_BUTTON,
        name="Link Instead of Clear Button",
        description="Reject option is a text link instead of a clear button",
        dark_pattern=4,
        compliance=4,
        legal="GDPR consent requirements",
    ),
    ViolationType(
        kind=ViolationKind.REFUSE_OUTSIDE_BANNER,
        name="Refuse Button Outside Banner",
        description="Reject option is placed outside the visible cookie banner",
        dark_pattern=5,
        compliance=4,
        legal="GDPR consent requirements",
    ),
    ViolationType(
        kind=ViolationKind.LACK_OF_INFORMATION,
        name="No/Lack of Cookie Information",
        description="Missing or insufficient information about cookie types and purposes",
        dark_pattern=4,
        compliance=4,
        legal="GDPR transparency requirements",
    ),
    ViolationType(
        kind=ViolationKind.DIFFERENT_COLORED_BUTTONS,
        name="Different Colored Buttons",
        description="Accept and reject buttons have contrasting colors that favor acceptance",
        dark_pattern=4,
        compliance=3,
        legal="GDPR consent requirements",
    ),
    ViolationType(
        kind=ViolationKind.LEGITIMATE_INTEREST,
        name="Legitimate Interest for Non-Essential Cookies",
        description="Non-essential cookies collected under 'legitimate interest'",
        dark_pattern=3,
        compliance=3,
        legal="Article 5(3) ePrivacy Directive",
    ),
    ViolationType(
        kind=ViolationKind.INACCURATE_ESSENTIAL_CLASSIFICATION,
        name="Inaccurate Essential Cookie Classification",
        description="Non-essential cookies misclassified as essential",
        dark_pattern=5,
        compliance=5,
        legal="GDPR & ePrivacy Directive",
    ),
    ViolationType(
        kind=ViolationKind.NO_WITHDRAW_CONSENT,
        name="No Possibility to Withdraw Consent",
        description="Missing easy way to withdraw previously given consent",
        dark_pattern=3,
        compliance=3,
        legal="GDPR Article 7(3)",
    ),
)

# Keyed by ViolationKind, in catalog order
VIOLATION_TYPES: MappingProxyType[ViolationKind, ViolationType] = MappingProxyType(
    {vt.kind: vt for vt in _TYPES}
)


def lookup(kind: ViolationKind | str) -> ViolationType | None:
    """Resolve a kind (enum member or its name) to its metadata, or None if unknown."""
    try:
        return VIOLATION_TYPES[ViolationKind(kind)]
    except (ValueError, TypeError):
        return None

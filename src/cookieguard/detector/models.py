"""Pydantic models for detection output."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, computed_field

from cookieguard.catalog import VIOLATION_TYPES, ViolationKind
from cookieguard.keywords import KEYWORDS_VERSION


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DetectionResult(BaseModel):
    """Outcome of one detection pass; one flag per ViolationKind."""

    model_config = ConfigDict(frozen=True)

    violations: dict[ViolationKind, bool]
    url: str = ""
    detected_at: datetime = Field(default_factory=_utcnow)
    banners_found: int = 0
    # Rules that raised; their flags are False
    failed_rules: list[ViolationKind] = Field(default_factory=list)
    keywords_version: str = KEYWORDS_VERSION

    @computed_field
    @property
    def violation_count(self) -> int:
        return sum(1 for v in self.violations.values() if v)

    def __getitem__(self, kind: ViolationKind | str) -> bool:
        return self.violations.get(ViolationKind(kind), False)

    def detected_kinds(self) -> list[ViolationKind]:
        """Detected kinds in catalog order."""
        return [k for k in VIOLATION_TYPES if self.violations.get(k)]

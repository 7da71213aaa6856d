"""Pydantic models for scoring output."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field

from cookieguard.catalog import ViolationKind


class Severity(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    CRITICAL = "critical"


class ScoredViolation(BaseModel):
    """A detected violation with its catalog metadata copied in."""

    model_config = ConfigDict(frozen=True)

    kind: ViolationKind
    name: str
    description: str
    dark_pattern: int
    compliance: int
    legal: str
    detected: bool = True
    note: str | None = None
    timestamp: datetime


class Summary(BaseModel):
    model_config = ConfigDict(frozen=True)

    overall_score: int              # 0-100, higher is better
    severity_level: Severity
    compliance_score: int           # achieved compliance weight (lower is better)
    max_compliance_score: int
    dark_pattern_score: int
    max_dark_pattern_score: int
    compliance_percentage: int
    dark_pattern_percentage: int
    violations: list[ScoredViolation] = Field(default_factory=list)

    @computed_field
    @property
    def violations_count(self) -> int:
        return len(self.violations)

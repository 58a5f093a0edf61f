"""
Core data model for the local heuristics engine.

Every value here is immutable once built; the pipeline functions create them
fresh per call and never share them across calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple


class RiskLevel(str, Enum):
    """Three-valued discretization of the composite score."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        return _LEVEL_RANK[self]

    @classmethod
    def from_score(cls, score: int, medium_at: int = 35, high_at: int = 70) -> "RiskLevel":
        if score >= high_at:
            return cls.HIGH
        if score >= medium_at:
            return cls.MEDIUM
        return cls.LOW

    @classmethod
    def parse(cls, value: str) -> Optional["RiskLevel"]:
        """Case-insensitive lookup by label; None for anything else."""
        wanted = value.strip().lower()
        for level in cls:
            if level.value.lower() == wanted:
                return level
        return None


_LEVEL_RANK = {RiskLevel.LOW: 0, RiskLevel.MEDIUM: 1, RiskLevel.HIGH: 2}


def combine_levels(local: RiskLevel, remote: Optional[RiskLevel]) -> RiskLevel:
    """Return the higher of two levels; a missing remote level never lowers local."""
    if remote is None:
        return local
    return remote if remote.rank > local.rank else local


class SignalType(str, Enum):
    URGENCY = "Urgency"
    CREDENTIALS_REQUEST = "Credentials Request"
    FINANCIAL_ASK = "Financial Ask"
    BRAND_IMPERSONATION = "Brand Impersonation"
    SHOUTING = "Shouting"
    EXCESSIVE_PUNCTUATION = "Excessive Punctuation"
    LINKS_PRESENT = "Links Present"
    LINK_FLAGS = "Link Flags"


@dataclass(frozen=True)
class ExtractedLink:
    raw: str                # exact substring from the message
    normalized: str         # scheme-qualified, safe to hand to a URL parser
    has_explicit_scheme: bool


@dataclass(frozen=True)
class LinkFinding:
    url: str
    normalized: Optional[str]
    host: str
    tld: str
    flags: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Signal:
    type: SignalType
    weight: float
    detail: str


@dataclass(frozen=True)
class LexicalCounts:
    urgency: int = 0
    credentials: int = 0
    financial: int = 0
    shouting_lines: int = 0
    exclamations: int = 0


@dataclass(frozen=True)
class HeuristicResult:
    score: int
    level: RiskLevel
    signals: Tuple[Signal, ...] = ()
    urls: Tuple[str, ...] = ()
    link_findings: Tuple[LinkFinding, ...] = ()


@dataclass(frozen=True)
class RedactionResult:
    masked: str
    report: Dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.report.values())

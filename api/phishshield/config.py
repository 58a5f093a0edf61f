"""
Heuristic tables and service settings.

The tables below are the only shared state in the engine. They are built once
at import time, frozen, and passed by reference into every pipeline function.
Recalibrating the scorer means building a new HeuristicsConfig (for example
from a weights file), never editing these values in place.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, FrozenSet, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

# ============================================================================
# Vocabularies
# ============================================================================

URGENCY_PHRASES: Tuple[str, ...] = (
    "urgent",
    "immediately",
    "now",
    "asap",
    "act now",
    "final notice",
    "last warning",
    "suspend",
    "suspended",
    "verify now",
    "limited time",
    "expires",
    "deadline",
)

CREDENTIAL_PHRASES: Tuple[str, ...] = (
    "password",
    "passcode",
    "otp",
    "one-time",
    "one time",
    "2fa",
    "verification code",
    "login",
    "log in",
    "sign in",
    "credentials",
    "account details",
)

FINANCIAL_PHRASES: Tuple[str, ...] = (
    "gift card",
    "crypto",
    "bitcoin",
    "wire",
    "bank transfer",
    "western union",
    "payment",
    "invoice",
    "refund",
    "prize",
    "lottery",
    "cash",
    "paypal",
    "phonepe",
    "gpay",
    "free gift",
    "prize winner",
    "you've won",
    "exclusive offer",
    "new job opportunity",
    "you won't believe",
    "secret",
    "see who viewed your profile",
)

SUSPICIOUS_TLDS: FrozenSet[str] = frozenset(
    {"zip", "mov", "gq", "tk", "ml", "cf", "ga", "top", "virus", "malware", "ly"}
)

BRAND_KEYWORDS: Tuple[str, ...] = (
    "microsoft1",
    "google1",
    "apple0",
    "paypal-1",
    "amazon01",
    "bank",
    "netflix2",
    "netmirror",
    "bitcoin",
)

# ============================================================================
# Rule Weights
# ============================================================================

INSECURE_LINK = "insecure_link"
URGENCY = "urgency"
CREDENTIALS = "credentials"
FINANCIAL = "financial"
BRAND = "brand"
SHOUTING = "shouting"
PUNCTUATION = "punctuation"
LINKS = "links"
LINK_FLAGS = "link_flags"
SUSPICIOUS_TLD = "suspicious_tld"


@dataclass(frozen=True)
class SignalWeight:
    """Sub-score policy for one signal: min(count * per_hit, cap)."""

    per_hit: float
    cap: float

    def apply(self, count: int) -> float:
        return min(count * self.per_hit, self.cap)


# Tuneable calibration; sub-scores are summed, rounded and clamped to 0..100.
RULE_WEIGHTS: Mapping[str, SignalWeight] = MappingProxyType({
    INSECURE_LINK: SignalWeight(per_hit=15, cap=15),
    URGENCY: SignalWeight(per_hit=20, cap=50),
    CREDENTIALS: SignalWeight(per_hit=20, cap=40),
    FINANCIAL: SignalWeight(per_hit=20, cap=50),
    BRAND: SignalWeight(per_hit=25, cap=25),
    SHOUTING: SignalWeight(per_hit=20, cap=20),
    PUNCTUATION: SignalWeight(per_hit=5, cap=20),
    LINKS: SignalWeight(per_hit=5, cap=30),
    LINK_FLAGS: SignalWeight(per_hit=2, cap=10),
    SUSPICIOUS_TLD: SignalWeight(per_hit=20, cap=40),
})


def _lowered(values) -> Tuple[str, ...]:
    return tuple(v.lower() for v in values)


@dataclass(frozen=True)
class HeuristicsConfig:
    urgency_phrases: Tuple[str, ...] = URGENCY_PHRASES
    credential_phrases: Tuple[str, ...] = CREDENTIAL_PHRASES
    financial_phrases: Tuple[str, ...] = FINANCIAL_PHRASES
    suspicious_tlds: FrozenSet[str] = SUSPICIOUS_TLDS
    brand_keywords: Tuple[str, ...] = BRAND_KEYWORDS
    weights: Mapping[str, SignalWeight] = field(default_factory=lambda: RULE_WEIGHTS)
    medium_threshold: int = 35
    high_threshold: int = 70
    lookalike_max_distance: int = 2
    shouting_min_length: int = 6
    punctuation_min_count: int = 3

    def __post_init__(self) -> None:
        # Frozen dataclass: normalise through object.__setattr__.
        object.__setattr__(self, "urgency_phrases", _lowered(self.urgency_phrases))
        object.__setattr__(self, "credential_phrases", _lowered(self.credential_phrases))
        object.__setattr__(self, "financial_phrases", _lowered(self.financial_phrases))
        object.__setattr__(self, "suspicious_tlds", frozenset(_lowered(self.suspicious_tlds)))
        object.__setattr__(self, "brand_keywords", _lowered(self.brand_keywords))
        missing = set(RULE_WEIGHTS) - set(self.weights)
        if missing:
            raise KeyError(f"weights table missing entries: {sorted(missing)}")
        object.__setattr__(self, "weights", MappingProxyType(dict(self.weights)))

    def weight(self, name: str) -> SignalWeight:
        return self.weights[name]

    def with_weights(self, overrides: Mapping[str, SignalWeight]) -> "HeuristicsConfig":
        """Return a copy of this config with some weight entries replaced."""
        unknown = set(overrides) - set(self.weights)
        if unknown:
            raise KeyError(f"unknown weight names: {sorted(unknown)}")
        merged = dict(self.weights)
        merged.update(overrides)
        return replace(self, weights=merged)


DEFAULT_CONFIG = HeuristicsConfig()


def parse_weights(data: Mapping[str, Any]) -> dict[str, SignalWeight]:
    """Validate a {name: {"per_hit": n, "cap": n}} mapping."""
    out: dict[str, SignalWeight] = {}
    for name, entry in data.items():
        if not isinstance(entry, Mapping):
            raise ValueError(f"weight entry {name!r} must be an object")
        try:
            per_hit = float(entry["per_hit"])
            cap = float(entry["cap"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"weight entry {name!r} needs numeric per_hit and cap") from exc
        if per_hit < 0 or cap < 0:
            raise ValueError(f"weight entry {name!r} must not be negative")
        out[name] = SignalWeight(per_hit=per_hit, cap=cap)
    return out


def load_weights_file(path: str | Path, base: HeuristicsConfig = DEFAULT_CONFIG) -> HeuristicsConfig:
    """Build a config from a JSON weights file layered over `base`."""
    path = Path(path).expanduser()
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"weights file {path} is not valid JSON") from exc
    if not isinstance(data, dict):
        raise ValueError(f"weights file {path} must contain a JSON object")
    config = base.with_weights(parse_weights(data))
    logger.info("Loaded %d weight override(s) from %s", len(data), path)
    return config


# ============================================================================
# Service Settings
# ============================================================================

# Upper bound on accepted message length; read once at import.
MAX_MESSAGE_CHARS = int(os.getenv("PHISHSHIELD_MAX_MESSAGE_CHARS", "20000"))


@dataclass(frozen=True)
class Settings:
    openai_api_key: str = ""
    openai_base_url: Optional[str] = None
    ai_model: str = "gpt-4.1-mini"
    ai_timeout: float = 20.0
    ai_max_retries: int = 3
    weights_file: Optional[str] = None
    log_level: str = "INFO"

    @property
    def ai_configured(self) -> bool:
        return bool(self.openai_api_key)


def load_settings() -> Settings:
    """Read service settings from the environment."""
    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY", "").strip(),
        openai_base_url=os.getenv("OPENAI_BASE_URL", "").strip() or None,
        ai_model=os.getenv("PHISHSHIELD_AI_MODEL", "gpt-4.1-mini").strip(),
        ai_timeout=float(os.getenv("PHISHSHIELD_AI_TIMEOUT", "20")),
        ai_max_retries=int(os.getenv("PHISHSHIELD_AI_MAX_RETRIES", "3")),
        weights_file=os.getenv("PHISHSHIELD_WEIGHTS_FILE", "").strip() or None,
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
    )


def load_heuristics_config(settings: Settings) -> HeuristicsConfig:
    if settings.weights_file:
        return load_weights_file(settings.weights_file)
    return DEFAULT_CONFIG

"""
Phase 1: Deterministic (rule-based) message risk scoring.

This module combines the lexical cues and the per-link findings into one
weighted, clamped 0..100 score and a Low/Medium/High level. It runs fully
offline and never fails on odd input: malformed links degrade to a flagged
finding. The signal list is stable and ordered so the UI can render it as-is.
"""

import logging
from typing import List, Sequence

from ..config import (
    BRAND,
    CREDENTIALS,
    DEFAULT_CONFIG,
    FINANCIAL,
    INSECURE_LINK,
    LINK_FLAGS,
    LINKS,
    PUNCTUATION,
    SHOUTING,
    SUSPICIOUS_TLD,
    URGENCY,
    HeuristicsConfig,
)
from ..types import (
    ExtractedLink,
    HeuristicResult,
    LinkFinding,
    RiskLevel,
    Signal,
    SignalType,
)
from .extract_url import extract_urls
from .lexical import scan_lexical
from .link_risk import FLAG_LOOKALIKE, analyze_links

logger = logging.getLogger(__name__)


# ============================================================================
# Link Counters
# ============================================================================

def _insecure_link_count(links: Sequence[ExtractedLink]) -> int:
    """Links typed with an explicit http:// scheme (not ones we defaulted)."""
    return sum(
        1
        for link in links
        if link.has_explicit_scheme and link.normalized.lower().startswith("http://")
    )


def _lookalike_count(findings: Sequence[LinkFinding]) -> int:
    return sum(1 for f in findings if FLAG_LOOKALIKE in f.flags)


def _suspicious_tld_count(findings: Sequence[LinkFinding], config: HeuristicsConfig) -> int:
    """TLDs seen on parsed links only; TLD-like words in prose do not count."""
    return sum(1 for f in findings if f.normalized is not None and f.tld.lower() in config.suspicious_tlds)


def clamp_score(total: float) -> int:
    return max(0, min(100, int(round(total))))


# ============================================================================
# Public API
# ============================================================================

def score_message(text: str, config: HeuristicsConfig = DEFAULT_CONFIG) -> HeuristicResult:
    """
    Score a message using deterministic rules and return score, level and signals.

    Args:
        text: Raw message text; never modified.
        config: Vocabularies, weights and thresholds to score with.

    Returns:
        HeuristicResult with the clamped score, its level, the emitted signals
        in display order, raw link substrings and one finding per link.
    """
    counts = scan_lexical(text, config)
    links = extract_urls(text)
    findings = analyze_links(links, config)

    flag_total = sum(len(f.flags) for f in findings)
    lookalikes = _lookalike_count(findings)

    w = config.weight
    urgency_score = w(URGENCY).apply(counts.urgency)
    creds_score = w(CREDENTIALS).apply(counts.credentials)
    money_score = w(FINANCIAL).apply(counts.financial)
    brand_score = w(BRAND).apply(lookalikes)
    shout_score = w(SHOUTING).apply(counts.shouting_lines)
    excl_score = w(PUNCTUATION).apply(counts.exclamations)
    link_score = w(LINKS).apply(len(links))
    flags_score = w(LINK_FLAGS).apply(flag_total)
    insecure_score = w(INSECURE_LINK).apply(_insecure_link_count(links))
    tld_score = w(SUSPICIOUS_TLD).apply(_suspicious_tld_count(findings, config))

    total = (
        insecure_score
        + urgency_score
        + creds_score
        + money_score
        + brand_score
        + shout_score
        + excl_score
        + link_score
        + flags_score
        + tld_score
    )
    score = clamp_score(total)
    level = RiskLevel.from_score(score, config.medium_threshold, config.high_threshold)

    signals: List[Signal] = []
    if counts.urgency:
        signals.append(Signal(SignalType.URGENCY, urgency_score, f"Found {counts.urgency} urgency cue(s)"))
    if counts.credentials:
        signals.append(Signal(
            SignalType.CREDENTIALS_REQUEST, creds_score,
            f"Mentions of credentials/OTP: {counts.credentials}",
        ))
    if counts.financial:
        signals.append(Signal(SignalType.FINANCIAL_ASK, money_score, f"Payment-related terms: {counts.financial}"))
    if lookalikes:
        signals.append(Signal(
            SignalType.BRAND_IMPERSONATION, brand_score,
            f"{lookalikes} link(s) resemble a known brand",
        ))
    if counts.shouting_lines:
        signals.append(Signal(SignalType.SHOUTING, shout_score, f"{counts.shouting_lines} line(s) in ALL CAPS"))
    # Below the minimum, exclamations still count toward the score.
    if counts.exclamations >= config.punctuation_min_count:
        signals.append(Signal(
            SignalType.EXCESSIVE_PUNCTUATION, excl_score,
            f"{counts.exclamations} exclamation marks",
        ))
    if links:
        signals.append(Signal(SignalType.LINKS_PRESENT, link_score, f"{len(links)} link(s) detected"))
    if flag_total:
        signals.append(Signal(
            SignalType.LINK_FLAGS, flags_score,
            f"{flag_total} suspicious link characteristic(s) present",
        ))

    logger.debug("Heuristic score %d (%s) from %d signal(s)", score, level.value, len(signals))

    return HeuristicResult(
        score=score,
        level=level,
        signals=tuple(signals),
        urls=tuple(link.raw for link in links),
        link_findings=tuple(findings),
    )

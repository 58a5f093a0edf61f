"""
Phase 1 + 2 orchestration.

This module wires the deterministic scorer, the redactor and the optional AI
collaborator together and returns stable, structured responses for the API
layer. It enforces the privacy-first ordering: only redacted text ever leaves
the process.
"""

from functools import partial
from typing import Callable, Optional

from ..ai_service.service import AIAssessment, assess, final_verdict, generate_safe_reply
from ..config import DEFAULT_CONFIG, HeuristicsConfig, Settings
from ..schemas import (
    AIAssessmentOut,
    AnalyzeOut,
    LinkFindingOut,
    RedactionsOut,
    RedactOut,
    SafeReplyOut,
    ScanOut,
    SignalOut,
)
from ..types import HeuristicResult, RedactionResult
from .deterministic import score_message
from .pii import redact

Assessor = Callable[[str], Optional[AIAssessment]]


# ============================================================================
# Converters
# ============================================================================

def to_scan_out(result: HeuristicResult) -> ScanOut:
    return ScanOut(
        score=result.score,
        level=result.level.value,
        signals=[SignalOut(type=s.type.value, weight=s.weight, detail=s.detail) for s in result.signals],
        urls=list(result.urls),
        link_findings=[
            LinkFindingOut(url=f.url, normalized=f.normalized, host=f.host, tld=f.tld, flags=list(f.flags))
            for f in result.link_findings
        ],
    )


def to_redactions_out(result: RedactionResult) -> RedactionsOut:
    return RedactionsOut(types=dict(result.report), count=result.total)


# ============================================================================
# Public API
# ============================================================================

def scan_message(text: str, config: HeuristicsConfig = DEFAULT_CONFIG) -> ScanOut:
    """Deterministic heuristics only; no network."""
    return to_scan_out(score_message(text, config))


def redact_message(text: str) -> RedactOut:
    """Masked preview shown to the user before anything is sent out."""
    red = redact(text)
    return RedactOut(masked=red.masked, redactions=to_redactions_out(red))


def analyze_message(
    text: str,
    *,
    config: HeuristicsConfig = DEFAULT_CONFIG,
    settings: Optional[Settings] = None,
    assessor: Optional[Assessor] = None,
) -> AnalyzeOut:
    """
    Orchestrate scoring -> redaction -> optional remote assessment -> combined verdict.

    The local result is always complete; the remote opinion can only raise
    the final level, never lower it.
    """
    assessor = assessor or partial(assess, settings=settings)
    heur = score_message(text, config)
    red = redact(text)

    ai = assessor(red.masked) if red.masked.strip() else None
    level, reason = final_verdict(heur, ai)

    return AnalyzeOut(
        heuristics=to_scan_out(heur),
        redactions=to_redactions_out(red),
        redacted_text=red.masked,
        ai=(AIAssessmentOut(risk_level=ai.risk_level.value, reasoning=ai.reasoning) if ai else None),
        final_level=level.value,
        final_reason=reason,
    )


def suggest_reply(
    text: str,
    *,
    settings: Optional[Settings] = None,
    replier: Optional[Callable[[str], str]] = None,
) -> SafeReplyOut:
    replier = replier or partial(generate_safe_reply, settings=settings)
    red = redact(text)
    return SafeReplyOut(reply=replier(red.masked), redactions=to_redactions_out(red))

"""
Phase 1: PII redaction utilities.

An ordered list of independent regex rules, applied one after another over
the evolving string. Each rule replaces its matches with a fixed placeholder
and bumps its category counter once per replacement. Placeholders contain no
digits or "@", so a later rule (or a second run) never re-matches them.
Raw PII is never returned or logged.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple

from ..types import RedactionResult

logger = logging.getLogger(__name__)

CATEGORIES = ("emails", "phones", "pins", "accounts", "cards", "addresses", "names")

# ============================================================================
# Regex Patterns
# ============================================================================

# Local part and domain are capped at their RFC lengths to keep scans linear.
_EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]{1,64}@[A-Za-z0-9.-]{1,255}\.[A-Za-z]{2,63}")

# A grouped value such as "1234-5678" is masked whole.
_PIN_RE = re.compile(r"\bPIN\b[ \t]*[:#=-]?[ \t]*\d{4,6}(?:[ -]\d{1,6}){0,3}\b(?![ -]?\d)", re.IGNORECASE)

# 13-19 digits; single spaces/dashes may separate them. Never starts or ends
# inside a longer digit run.
_CARD_RE = re.compile(r"(?<!\d)(?<!\d[ -])(?:\d[ -]?){12,18}\d(?![ -]?\d)")

_PHONE_RE = re.compile(
    r"(?<![\w+])"
    r"(?:\+\d{1,3}[ .-]?)?"                 # country prefix
    r"(?:\(\d{2,4}\)[ ]?|\d{2,4}[ .-])?"    # area code
    r"\d{3,4}[ .-]\d{3,4}"
    r"(?!\w)"
)

_YEAR_RANGE_RE = re.compile(r"(?:19|20)\d\d[ ]?[-.][ ]?(?:19|20)\d\d")

_ACCOUNT_RE = re.compile(r"\b\d{8,20}\b")

_STREET_TYPES = (
    "Street|St|Avenue|Ave|Road|Rd|Boulevard|Blvd|Lane|Ln|Drive|Dr|Court|Ct|"
    "Place|Pl|Way|Terrace|Ter|Parkway|Pkwy|Circle|Cir|Highway|Hwy|Square|Sq"
)
_ADDRESS_RE = re.compile(
    r"\b\d{1,6}[ \t]+"
    r"(?:[A-Za-z0-9.'-]+[ \t]+){0,6}?"
    r"(?:" + _STREET_TYPES + r")\b\.?"
    r"(?:,[ \t]*[A-Z][A-Za-z.'-]*(?:[ \t]+[A-Z][A-Za-z.'-]*){0,3})?"   # locality
    r"(?:,?[ \t]*[A-Z]{2}(?:[ \t]+\d{5}(?:-\d{4})?)?\b)?"              # state/zip
)

_NAME_TOKEN = r"[A-Z][A-Za-z'-]+(?:[ \t]+[A-Z][A-Za-z'-]+)?"
_LABELED_NAME_RE = re.compile(r"\b((?i:full[ \t]+|your[ \t]+)?(?i:name)[ \t]*:[ \t]*)(" + _NAME_TOKEN + r")")
_GREETING_NAME_RE = re.compile(r"^([ \t]*(?:Dear|Hi|Hello|Hey)[ \t]+)(" + _NAME_TOKEN + r")", re.MULTILINE)


def _digit_count(value: str) -> int:
    return sum(1 for c in value if c.isdigit())


def _is_phone(m: re.Match) -> bool:
    value = m.group(0)
    return _digit_count(value) >= 7 and not _YEAR_RANGE_RE.fullmatch(value)


# ============================================================================
# Rules
# ============================================================================

@dataclass(frozen=True)
class RedactionRule:
    category: str
    pattern: re.Pattern
    replace: Callable[[re.Match], str]
    accept: Optional[Callable[[re.Match], bool]] = None


def _placeholder(label: str) -> Callable[[re.Match], str]:
    token = f"[REDACTED {label}]"
    return lambda m: token


def _keep_label(label: str) -> Callable[[re.Match], str]:
    token = f"[REDACTED {label}]"
    return lambda m: m.group(1) + token


# Order matters: each rule sees the previous rule's output.
RULES: Tuple[RedactionRule, ...] = (
    RedactionRule("emails", _EMAIL_RE, _placeholder("EMAIL")),
    RedactionRule("pins", _PIN_RE, _placeholder("PIN")),
    RedactionRule("cards", _CARD_RE, _placeholder("CARD")),
    # Short numeric tokens such as "123 456" and year ranges are left alone.
    RedactionRule("phones", _PHONE_RE, _placeholder("PHONE"), accept=_is_phone),
    RedactionRule("accounts", _ACCOUNT_RE, _placeholder("ACCOUNT")),
    RedactionRule("addresses", _ADDRESS_RE, _placeholder("ADDRESS")),
    RedactionRule("names", _LABELED_NAME_RE, _keep_label("NAME")),
    RedactionRule("names", _GREETING_NAME_RE, _keep_label("NAME")),
)


def apply_rule(rule: RedactionRule, text: str, counts: Dict[str, int]) -> str:
    """Run one rule over `text`, updating `counts` for every replacement made."""

    def _repl(m: re.Match) -> str:
        if rule.accept is not None and not rule.accept(m):
            return m.group(0)
        counts[rule.category] += 1
        return rule.replace(m)

    return rule.pattern.sub(_repl, text)


# ============================================================================
# Public API
# ============================================================================

def redact(text: str, rules: Optional[Sequence[RedactionRule]] = None) -> RedactionResult:
    """
    Redact PII categories in a fixed order and return masked text + per-category counts.
    """
    counts: Dict[str, int] = {c: 0 for c in CATEGORIES}
    red = text
    for rule in rules if rules is not None else RULES:
        red = apply_rule(rule, red, counts)

    if any(counts.values()):
        logger.debug("Redacted %s", {k: v for k, v in counts.items() if v})
    return RedactionResult(masked=red, report=counts)


def redact_text(text: Optional[str]) -> str:
    """Convenience wrapper that returns only the redacted string."""
    if not text:
        return ""
    return redact(text).masked

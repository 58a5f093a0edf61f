"""
Lexical cues: vocabulary hits, all-caps lines and exclamation bursts.
"""

from typing import Iterable

from ..config import DEFAULT_CONFIG, HeuristicsConfig
from ..types import LexicalCounts


def count_phrases(lowered_text: str, phrases: Iterable[str]) -> int:
    """Number of distinct phrases present; repeats of one phrase count once."""
    return sum(1 for p in phrases if p in lowered_text)


def count_shouting_lines(text: str, min_length: int = 6) -> int:
    """Lines of at least `min_length` trimmed chars that are already upper-case."""
    return sum(
        1
        for line in text.splitlines()
        if len(line.strip()) >= min_length and line == line.upper()
    )


def scan_lexical(text: str, config: HeuristicsConfig = DEFAULT_CONFIG) -> LexicalCounts:
    low = text.lower()
    return LexicalCounts(
        urgency=count_phrases(low, config.urgency_phrases),
        credentials=count_phrases(low, config.credential_phrases),
        financial=count_phrases(low, config.financial_phrases),
        shouting_lines=count_shouting_lines(text, config.shouting_min_length),
        exclamations=text.count("!"),
    )

"""
Phish Shield: local heuristics engine for suspected phishing messages.

Components:
- pipeline/deterministic.py: weighted, clamped 0-100 risk score
- pipeline/pii.py: ordered PII redaction with per-category counts
- ai_service/service.py: optional remote opinion, combined by max level
"""

from .pipeline.deterministic import score_message
from .pipeline.pii import redact
from .types import HeuristicResult, RedactionResult, RiskLevel, combine_levels

__all__ = [
    "score_message",
    "redact",
    "HeuristicResult",
    "RedactionResult",
    "RiskLevel",
    "combine_levels",
]
__version__ = "0.1.0"

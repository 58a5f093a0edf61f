from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field

from .config import MAX_MESSAGE_CHARS

Level = Literal["Low", "Medium", "High"]


class MessageIn(BaseModel):
    """
    A suspected phishing / social-engineering message as pasted by the user.
    Empty text is accepted and scores Low.
    """

    text: str = Field(..., max_length=MAX_MESSAGE_CHARS)


class SignalOut(BaseModel):
    type: str
    weight: float
    detail: str


class LinkFindingOut(BaseModel):
    """Per-link red flags. host/tld are "-" for a malformed link."""

    url: str
    normalized: Optional[str] = None
    host: str
    tld: str
    flags: List[str]


class ScanOut(BaseModel):
    """
    Output of the deterministic heuristics.
    score: 0-100 composite risk score
    level: Low | Medium | High, a pure function of score
    signals: weighted observations in display order
    urls: raw link substrings as they appear in the text
    link_findings: one entry per url, same order
    """

    score: int = Field(..., ge=0, le=100)
    level: Level
    signals: List[SignalOut]
    urls: List[str]
    link_findings: List[LinkFindingOut]


class RedactionsOut(BaseModel):
    """
    Summary of PII redactions performed. Raw PII is never returned.
    """

    types: Dict[str, int]
    count: int


class RedactOut(BaseModel):
    masked: str
    redactions: RedactionsOut


class AIAssessmentOut(BaseModel):
    risk_level: Level
    reasoning: str


class AnalyzeOut(BaseModel):
    """Local heuristics plus the optional remote opinion, combined."""

    heuristics: ScanOut
    redactions: RedactionsOut
    redacted_text: str
    ai: Optional[AIAssessmentOut] = None
    final_level: Level
    final_reason: str


class SafeReplyOut(BaseModel):
    reply: str
    redactions: RedactionsOut

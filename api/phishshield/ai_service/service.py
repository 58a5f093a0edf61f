"""
Optional remote opinion from a generative model.

The local heuristics never depend on this module. Every public function here
returns a usable value when the model is unconfigured, slow, rate-limited or
returns junk: `None` for assessments and a fixed reply for safe replies.
Only already-redacted text should be passed in.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from ..config import Settings
from ..deps import get_settings
from ..types import HeuristicResult, RiskLevel, combine_levels

logger = logging.getLogger(__name__)

ASSESS_SYSTEM_PROMPT = (
    "You are a cybersecurity expert specializing in social engineering and phishing "
    "detection. Respond ONLY in strict JSON with keys riskLevel and reasoning."
)

REPLY_SYSTEM_PROMPT = (
    "You are a cybersecurity assistant helping someone answer a message they do not "
    "trust. Respond ONLY in strict JSON with the key safe_reply."
)

FALLBACK_REPLY = (
    "Thanks for reaching out. I can't verify this request or the link provided, so I "
    "won't be sharing any personal information. If this is legitimate, please contact "
    "me through an official channel I can independently verify."
)

# Keep a reasonable cap to avoid oversized payloads.
_MAX_PROMPT_CHARS = 8000


@dataclass(frozen=True)
class AIAssessment:
    risk_level: RiskLevel
    reasoning: str


# ---- Client helpers ----


def _build_ai_client(settings: Settings) -> "OpenAI":
    try:
        from openai import OpenAI
    except ImportError as e:
        raise RuntimeError("openai package not available; install phish-shield with its dependencies") from e

    if not settings.openai_api_key:
        raise RuntimeError("OPENAI_API_KEY not set")

    kwargs: dict[str, Any] = {
        "api_key": settings.openai_api_key,
        "timeout": settings.ai_timeout,
        "max_retries": settings.ai_max_retries,
    }
    if settings.openai_base_url:
        kwargs["base_url"] = settings.openai_base_url
    return OpenAI(**kwargs)


def _complete_json(system_prompt: str, user_prompt: str, settings: Settings, *, temperature: float) -> str:
    """Run one chat completion constrained to a JSON object; return its text."""
    client = _build_ai_client(settings)
    resp = client.chat.completions.create(
        model=settings.ai_model,
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        temperature=temperature,
        response_format={"type": "json_object"},
    )
    return resp.choices[0].message.content or ""


# ---- Parsing ----


def parse_assessment(payload: Any) -> Optional[AIAssessment]:
    """
    Map a collaborator payload (JSON text or decoded dict) to an assessment.

    Anything that is not an object with string riskLevel/reasoning and a known
    level yields None.
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError:
            return None
    if not isinstance(payload, dict):
        return None

    level_raw = payload.get("riskLevel")
    reasoning = payload.get("reasoning")
    if not isinstance(level_raw, str) or not isinstance(reasoning, str):
        return None
    level = RiskLevel.parse(level_raw)
    if level is None:
        return None
    return AIAssessment(risk_level=level, reasoning=reasoning.strip())


# ---- Public API ----


def assess(text: str, settings: Optional[Settings] = None) -> Optional[AIAssessment]:
    """Ask the remote model for a risk level; None when unavailable or unusable."""
    settings = settings or get_settings()
    if not settings.ai_configured:
        logger.info("AI assessment skipped: no API key configured")
        return None

    prompt = (
        "Analyze this message for phishing risk. "
        'Return JSON as {"riskLevel":"High|Medium|Low","reasoning":"1-3 concise sentences"}.'
        "\n\nMessage:\n" + text[:_MAX_PROMPT_CHARS]
    )
    try:
        raw = _complete_json(ASSESS_SYSTEM_PROMPT, prompt, settings, temperature=0.2)
    except Exception as exc:
        logger.warning("AI assessment failed: %s", exc.__class__.__name__)
        return None

    result = parse_assessment(raw)
    if result is None:
        logger.warning("AI assessment returned an unusable payload")
    return result


def generate_safe_reply(text: str, settings: Optional[Settings] = None) -> str:
    """Suggest a short, non-committal reply; falls back to a fixed one."""
    settings = settings or get_settings()
    if not settings.ai_configured:
        return FALLBACK_REPLY

    prompt = (
        "Write a single short paragraph I can send back that shares no personal "
        "information and asks for contact through an independently verifiable channel. "
        'Return JSON as {"safe_reply":"..."}.\n\nMessage:\n' + text[:_MAX_PROMPT_CHARS]
    )
    try:
        raw = _complete_json(REPLY_SYSTEM_PROMPT, prompt, settings, temperature=0.3)
        data = json.loads(raw)
    except Exception as exc:
        logger.warning("Safe reply generation failed: %s", exc.__class__.__name__)
        return FALLBACK_REPLY

    reply = data.get("safe_reply") if isinstance(data, dict) else None
    if isinstance(reply, str) and reply.strip():
        return reply.strip()
    return FALLBACK_REPLY


def final_verdict(result: HeuristicResult, assessment: Optional[AIAssessment]) -> Tuple[RiskLevel, str]:
    """Combine the local level with the remote one; the higher level wins."""
    reason = f"Local score {result.score}/100."
    if assessment is None:
        return result.level, reason
    level = combine_levels(result.level, assessment.risk_level)
    return level, f"{reason} {assessment.reasoning}".strip()

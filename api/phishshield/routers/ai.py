from fastapi import APIRouter, Depends

from ..config import HeuristicsConfig, Settings
from ..deps import get_heuristics_config, get_settings
from ..schemas import AnalyzeOut, MessageIn, SafeReplyOut
from ..pipeline.classify import analyze_message, suggest_reply

router = APIRouter()


@router.post("/analyze", response_model=AnalyzeOut)
def analyze(
    payload: MessageIn,
    config: HeuristicsConfig = Depends(get_heuristics_config),
    settings: Settings = Depends(get_settings),
) -> AnalyzeOut:
    """
    Phase 1 + Phase 2: local heuristics plus an optional remote opinion.

    Pipeline:
    1. **Heuristics:** same result as `POST /scan`
    2. **PII Redaction:** mask the text before any external call
    3. **Remote assessment:** ask the model for Low/Medium/High (skipped when
       OPENAI_API_KEY is unset or the call fails)
    4. **Combine:** the higher of the local and remote levels wins

    The response is always complete; `ai` is null when no remote opinion
    was available.
    """
    return analyze_message(payload.text, config=config, settings=settings)


@router.post("/reply", response_model=SafeReplyOut)
def reply(payload: MessageIn, settings: Settings = Depends(get_settings)) -> SafeReplyOut:
    """Suggest a safe, non-committal reply. Falls back to a fixed reply offline."""
    return suggest_reply(payload.text, settings=settings)

from fastapi import APIRouter, Depends

from ..config import HeuristicsConfig
from ..deps import get_heuristics_config
from ..schemas import MessageIn, ScanOut
from ..pipeline.classify import scan_message

router = APIRouter()


@router.post("", response_model=ScanOut)
def scan(payload: MessageIn, config: HeuristicsConfig = Depends(get_heuristics_config)) -> ScanOut:
    """
    Phase 1: Deterministic message risk heuristics.

    Runs fully offline; no API key required and no text leaves the process.

    Detection features:
    - Urgency, credential/OTP and financial-lure vocabulary
    - ALL CAPS lines and exclamation bursts
    - Link analysis (IP hosts, many dots, '@' in URL, suspicious TLDs,
      brand lookalikes by edit distance, explicit http:// links)

    Returns:
    - `score`: 0-100 composite risk score
    - `level`: Low (<35) | Medium (35-69) | High (>=70)
    - `signals`: weighted observations in display order
    - `urls`: raw link substrings
    - `link_findings`: per-link host, TLD and flags

    Example request:
    ```json
    {"text": "urgent: verify now your password at http://secure-paypa1.com"}
    ```
    """
    return scan_message(payload.text, config)

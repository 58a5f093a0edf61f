from fastapi import APIRouter

from ..schemas import MessageIn, RedactOut
from ..pipeline.classify import redact_message

router = APIRouter()


@router.post("", response_model=RedactOut)
def redact(payload: MessageIn) -> RedactOut:
    """
    Mask PII before anything is shared.

    Categories are applied in a fixed order: emails, PINs, card numbers,
    phone numbers, account numbers, street addresses, labeled names and
    greeting names. The response is the masked preview plus per-category
    counts; raw values are never echoed back.
    """
    return redact_message(payload.text)

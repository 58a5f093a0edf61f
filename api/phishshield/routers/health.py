from fastapi import APIRouter, Depends

from ..config import Settings
from ..deps import get_settings

router = APIRouter()


@router.get("")
def health(settings: Settings = Depends(get_settings)):
    """Return API status and whether the AI collaborator is configured."""
    return {"status": "ok", "ai_configured": settings.ai_configured}

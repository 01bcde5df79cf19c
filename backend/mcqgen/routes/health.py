"""Health check endpoints."""

from __future__ import annotations

import logging
from fastapi import APIRouter

from mcqgen.core.config import settings

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health")
async def health_check():
    """Report configuration readiness without calling the model.

    ``llm`` is ``"ok"`` when a default Gemini key is configured and
    ``"warning"`` otherwise (requests must then carry their own key).
    """
    llm_status = "ok" if settings.GOOGLE_API_KEY else "warning"
    health_status = {
        "llm": llm_status,
        "model": settings.GOOGLE_MODEL,
        "overall": "healthy" if llm_status == "ok" else "degraded",
    }
    logger.debug(f"Health check: {health_status['overall']}")
    return health_status


@router.get("/health/simple")
async def simple_health_check():
    """Simple health check - just returns 200 OK."""
    return {"status": "ok"}

"""Quiz generation route."""

import logging
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from typing import List, Optional

from mcqgen.core.config import settings
from mcqgen.core.exceptions import (
    BackendUnavailableError,
    ConfigurationError,
    MalformedResponseError,
)
from mcqgen.services.quiz.generator import agenerate_quiz
from mcqgen.services.quiz.schemas import GenerationRequest

logger = logging.getLogger(__name__)
router = APIRouter()


class QuizRequest(BaseModel):
    subject: str
    theme: Optional[str] = None
    difficulty: str = "medium"
    styles: List[str] = Field(default_factory=lambda: ["factual"])
    count: int = 10
    api_key: Optional[str] = None


@router.post("/quiz/generate")
async def create_quiz(request: QuizRequest):
    try:
        if request.count > settings.MAX_QUESTION_COUNT:
            raise ConfigurationError(
                f"count must be at most {settings.MAX_QUESTION_COUNT}, got {request.count}"
            )
        generation = GenerationRequest.from_raw(
            subject=request.subject,
            theme=request.theme,
            difficulty=request.difficulty,
            styles=request.styles,
            count=request.count,
        )
        questions = await agenerate_quiz(generation, api_key=request.api_key)

    except ConfigurationError as e:
        logger.warning(f"Quiz request rejected: {e.message}")
        return JSONResponse(status_code=400, content=e.to_dict())

    except BackendUnavailableError as e:
        logger.error(f"Quiz generation backend unavailable: {e.__cause__!r}")
        return JSONResponse(status_code=503, content=e.to_dict())

    except MalformedResponseError as e:
        logger.error(f"Quiz generation returned malformed output ({e.reason})")
        return JSONResponse(status_code=502, content=e.to_dict())

    return JSONResponse(content={
        "questions": [q.to_wire() for q in questions],
        "requested": generation.count,
        "generated": len(questions),
    })

"""UPSC MCQ generation pipeline.

distribute styles -> compose prompts -> call model -> parse array ->
normalize questions. Only the model call does I/O; every other step is a
pure function of the request, so a failed call can simply be repeated.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple

from mcqgen.prompts import get_quiz_prompt, get_system_prompt
from mcqgen.services.llm_service.llm import ainvoke_model, invoke_model
from mcqgen.services.llm_service.llm_schemas import GeneratedQuestion
from mcqgen.services.llm_service.response_parser import parse_question_array
from mcqgen.services.quiz.distributor import distribute_styles
from mcqgen.services.quiz.normalizer import normalize_questions
from mcqgen.services.quiz.schemas import GenerationRequest

logger = logging.getLogger(__name__)


def build_prompts(request: GenerationRequest) -> Tuple[str, str]:
    """Return ``(system_prompt, user_prompt)`` for *request*."""
    allocations = distribute_styles(request.count, request.styles)
    logger.info(
        "Generating %d %s question(s) on %r (theme=%r) with styles [%s]",
        request.count,
        request.difficulty.value,
        request.subject,
        request.theme,
        ", ".join(f"{a.style.value}={a.count}" for a in allocations),
    )
    user_prompt = get_quiz_prompt(
        subject=request.subject,
        difficulty=request.difficulty,
        allocations=allocations,
        total_count=request.count,
        theme=request.theme,
    )
    return get_system_prompt(request.count), user_prompt


def _finish(raw: str, request: GenerationRequest) -> List[GeneratedQuestion]:
    items: List[Any] = parse_question_array(raw)
    questions = normalize_questions(items, request.count)

    if len(questions) < request.count:
        logger.warning("Model under-generated: %d of %d question(s)", len(questions), request.count)
    else:
        logger.info("Generated %d question(s)", len(questions))
    return questions


def generate_quiz(request: GenerationRequest, api_key: Optional[str] = None) -> List[GeneratedQuestion]:
    """Generate up to ``request.count`` validated questions.

    Args:
        request: Subject, theme, difficulty, style positions and count.
        api_key: Gemini key; falls back to ``GOOGLE_API_KEY``.

    Returns:
        Normalized questions. Fewer than ``request.count`` when the model
        under-generates; never more.

    Raises:
        ConfigurationError: missing key, empty styles, unknown style.
        BackendUnavailableError: the model call failed.
        MalformedResponseError: no valid JSON array in the response.
    """
    system_prompt, user_prompt = build_prompts(request)
    raw = invoke_model(system_prompt, user_prompt, request.count, api_key=api_key)
    return _finish(raw, request)


async def agenerate_quiz(request: GenerationRequest, api_key: Optional[str] = None) -> List[GeneratedQuestion]:
    """Async version of generate_quiz."""
    system_prompt, user_prompt = build_prompts(request)
    raw = await ainvoke_model(system_prompt, user_prompt, request.count, api_key=api_key)
    return _finish(raw, request)

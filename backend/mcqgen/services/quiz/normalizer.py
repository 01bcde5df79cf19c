"""Coerce parsed model output into GeneratedQuestion objects.

Each field is repaired on its own: a bad ``options`` array does not throw
away a good ``questionText``. Repaired fields get fixed placeholders, so
the output always satisfies the GeneratedQuestion invariants. The list is
cut to the requested count but never padded.
"""

from __future__ import annotations

import logging
from typing import Any, List, Sequence, Tuple

from mcqgen.services.llm_service.llm_schemas import (
    DEFAULT_QUESTION_TYPE,
    PLACEHOLDER_EXPLANATION,
    PLACEHOLDER_OPTIONS,
    GeneratedQuestion,
)

logger = logging.getLogger(__name__)


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _valid_index(value: Any) -> bool:
    # bool is an int subclass; True/False are not answer indexes
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 3


def _coerce(item: Any, index: int) -> Tuple[dict, List[str]]:
    raw = item if isinstance(item, dict) else {}
    defaulted: List[str] = []

    question_text = raw.get("questionText")
    if not _non_empty_str(question_text):
        question_text = f"Question {index + 1}"
        defaulted.append("questionText")

    question_type = raw.get("questionType")
    if not _non_empty_str(question_type):
        question_type = DEFAULT_QUESTION_TYPE
        defaulted.append("questionType")

    options = raw.get("options")
    if isinstance(options, list) and len(options) == 4:
        options = [o if isinstance(o, str) else str(o) for o in options]
    else:
        options = list(PLACEHOLDER_OPTIONS)
        defaulted.append("options")

    correct = raw.get("correctOption")
    if not _valid_index(correct):
        correct = 0
        defaulted.append("correctOption")

    explanation = raw.get("explanation")
    if not _non_empty_str(explanation):
        explanation = PLACEHOLDER_EXPLANATION
        defaulted.append("explanation")

    fields = {
        "questionText": question_text,
        "questionType": question_type,
        "options": options,
        "correctOption": correct,
        "explanation": explanation,
    }
    if raw.get("metadata") is not None:
        fields["metadata"] = raw["metadata"]
    return fields, defaulted


def normalize_question(item: Any, index: int) -> GeneratedQuestion:
    """Normalize one parsed element; *index* feeds the text placeholder."""
    fields, defaulted = _coerce(item, index)
    if defaulted:
        logger.warning("Question %d: defaulted fields %s", index + 1, ", ".join(defaulted))
    return GeneratedQuestion.model_validate(fields)


def normalize_questions(items: Sequence[Any], count: int) -> List[GeneratedQuestion]:
    """Truncate *items* to *count* and normalize each one, preserving order."""
    if len(items) > count:
        logger.debug("Discarding %d extra question(s) beyond requested %d", len(items) - count, count)
    return [normalize_question(item, i) for i, item in enumerate(items[:count])]

"""Split a question count across the requested style positions."""

from __future__ import annotations

import logging
from typing import List, Sequence, Union

from mcqgen.core.exceptions import ConfigurationError
from mcqgen.services.quiz.schemas import QuestionStyle, StyleAllocation

logger = logging.getLogger(__name__)


def _as_style(style: Union[QuestionStyle, str]) -> QuestionStyle:
    try:
        return QuestionStyle(style)
    except ValueError:
        valid = ", ".join(s.value for s in QuestionStyle)
        raise ConfigurationError(f"Unknown question style {style!r}; expected one of: {valid}") from None


def distribute_styles(count: int, styles: Sequence[Union[QuestionStyle, str]]) -> List[StyleAllocation]:
    """Allocate ``count`` questions over ``styles`` with no remainder lost.

    Every position gets ``count // len(styles)``; the first
    ``count % len(styles)`` positions, in input order, get one more.
    Duplicate styles are separate positions.

    Args:
        count: Total number of questions (>= 0).
        styles: Ordered style positions.

    Returns:
        One StyleAllocation per position, in input order.

    Raises:
        ConfigurationError: if ``count`` is negative, ``styles`` is empty
            while ``count > 0``, or a style is not a known QuestionStyle.
    """
    if count < 0:
        raise ConfigurationError(f"Question count must be >= 0, got {count}")

    resolved = [_as_style(s) for s in styles]
    if not resolved:
        if count > 0:
            raise ConfigurationError("At least one question style is required")
        return []

    base, remainder = divmod(count, len(resolved))
    allocations = [
        StyleAllocation(style=style, count=base + (1 if index < remainder else 0))
        for index, style in enumerate(resolved)
    ]

    logger.debug(
        "Distributed %d questions: %s",
        count, ", ".join(f"{a.style.value}={a.count}" for a in allocations),
    )
    return allocations

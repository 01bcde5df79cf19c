"""Request-side schemas for quiz generation."""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from mcqgen.core.exceptions import ConfigurationError


class QuestionStyle(str, Enum):
    """UPSC Prelims question formats."""

    FACTUAL = "factual"
    CONCEPTUAL = "conceptual"
    STATEMENT = "statement"
    MATCH = "match"
    ASSERTION = "assertion"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class StyleAllocation(BaseModel):
    """Number of questions assigned to one style position of a request."""

    model_config = ConfigDict(frozen=True)

    style: QuestionStyle
    count: int = Field(ge=0)


class GenerationRequest(BaseModel):
    """One quiz generation call.

    ``styles`` keeps duplicates and order: each position is its own bucket
    and remainder questions go to the earliest positions.
    """

    model_config = ConfigDict(frozen=True)

    subject: str = Field(min_length=1)
    theme: Optional[str] = None
    difficulty: Difficulty
    styles: List[QuestionStyle]
    count: int = Field(gt=0)

    @field_validator("subject", mode="before")
    @classmethod
    def _strip_subject(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("theme", mode="before")
    @classmethod
    def _blank_theme_is_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("difficulty", mode="before")
    @classmethod
    def _lower_difficulty(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("styles", mode="before")
    @classmethod
    def _lower_styles(cls, v):
        if isinstance(v, (list, tuple)):
            return [s.strip().lower() if isinstance(s, str) else s for s in v]
        return v

    @classmethod
    def from_raw(
        cls,
        subject: str,
        difficulty: Any,
        styles: Sequence[Any],
        count: int,
        theme: Optional[str] = None,
    ) -> "GenerationRequest":
        """Build a request from loosely-typed input (HTTP body, CLI args).

        Raises:
            ConfigurationError: if any field fails validation, e.g. a style
                outside the supported set.
        """
        try:
            return cls(
                subject=subject,
                theme=theme,
                difficulty=difficulty,
                styles=list(styles),
                count=count,
            )
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
            )
            raise ConfigurationError(f"Invalid generation request: {problems}") from exc

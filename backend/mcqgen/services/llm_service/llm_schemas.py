"""Pydantic schemas for validated LLM quiz output."""

from typing import Any, List, Optional

from pydantic import BaseModel, Field

PLACEHOLDER_OPTIONS: List[str] = ["Option A", "Option B", "Option C", "Option D"]
PLACEHOLDER_EXPLANATION = "No explanation provided."
DEFAULT_QUESTION_TYPE = "standard"


class GeneratedQuestion(BaseModel):
    """One normalized multiple-choice question.

    ``options`` always has exactly four entries and ``correctOption`` is
    always an index into them.
    """

    questionText: str
    questionType: str = DEFAULT_QUESTION_TYPE
    options: List[str] = Field(min_length=4, max_length=4)
    correctOption: int = Field(ge=0, le=3)
    explanation: str
    metadata: Optional[Any] = None

    def to_wire(self) -> dict:
        """Dump for JSON consumers; ``metadata`` is left out when absent."""
        return self.model_dump(exclude_none=True)

"""
Shared pytest fixtures and configuration for the entire test suite.
Applies to all subdirectories: unit/, api/, e2e/
"""

import sys
import os
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch
import pytest

# ── Ensure backend is importable from every pytest session ──────────────────
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "backend"))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

# Minimal env so that Pydantic Settings can validate on import
os.environ.setdefault("GOOGLE_API_KEY", "test-google-api-key")


# ── Sample model output ──────────────────────────────────────────────────────

def make_question(i: int = 0, **overrides) -> dict:
    """A well-formed question dict as the model is asked to emit it."""
    q = {
        "questionText": f"Consider the following statements about Article {14 + i}...",
        "questionType": "statement",
        "options": ["A) Only one", "B) Only two", "C) All three", "D) None"],
        "correctOption": i % 4,
        "explanation": "Article 14 guarantees equality before law (Laxmikanth, Ch. 7).",
    }
    q.update(overrides)
    return q


@pytest.fixture
def sample_questions():
    return [make_question(i) for i in range(5)]


@pytest.fixture
def wrapped_response(sample_questions):
    """Raw model text: a JSON array wrapped in prose and a markdown fence."""
    return (
        "Here are the questions:\n```json\n"
        + json.dumps(sample_questions, indent=2)
        + "\n```\nHope this helps!"
    )


# ── Settings override ────────────────────────────────────────────────────────

@pytest.fixture
def no_default_key(monkeypatch):
    """Clear the process-wide GOOGLE_API_KEY for the duration of a test."""
    from mcqgen.core.config import settings
    monkeypatch.setattr(settings, "GOOGLE_API_KEY", "")
    yield settings


# ── Mocked Gemini chat model ─────────────────────────────────────────────────

@pytest.fixture
def mock_chat_model():
    """Patch ChatGoogleGenerativeAI; yields (class_mock, instance_mock).

    Set ``instance.invoke.return_value`` / ``instance.ainvoke.return_value``
    to control what the model "returns".
    """
    with patch("mcqgen.services.llm_service.llm.ChatGoogleGenerativeAI") as cls:
        instance = MagicMock()
        instance.invoke.return_value = SimpleNamespace(content="[]")
        instance.ainvoke = AsyncMock(return_value=SimpleNamespace(content="[]"))
        cls.return_value = instance
        yield cls, instance

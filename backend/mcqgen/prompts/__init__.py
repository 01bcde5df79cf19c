"""Prompt template loader and quiz prompt composer.

Static instruction text lives in ``.txt`` files inside this package:

- ``difficulty/<difficulty>.txt``: one calibration block per Difficulty
- ``styles/<style>.txt``: one format block per QuestionStyle
- ``subjects/<subject>.txt``: optional subject knowledge bases
- ``quiz_prompt.txt`` / ``system_prompt.txt``: outer documents with
  ``{{PLACEHOLDER}}`` slots

The difficulty and style tables are checked on import so a missing or
empty block fails at load time instead of mid-request.
"""

from __future__ import annotations

import os
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

from mcqgen.core.exceptions import ConfigurationError
from mcqgen.services.quiz.schemas import Difficulty, QuestionStyle, StyleAllocation

_DIR = os.path.dirname(__file__)

_SECTION_RULE = "━" * 79
_STYLE_RULE = "═" * 79


@lru_cache(maxsize=32)
def _load(filename: str) -> str:
    """Read a template file, caching the result."""
    with open(os.path.join(_DIR, filename), encoding="utf-8") as f:
        return f.read()


def _render(filename: str, subs: Dict[str, str]) -> str:
    """Load *filename* and apply all substitutions."""
    text = _load(filename)
    for key, val in subs.items():
        text = text.replace(key, val)
    return text


def _load_table(keys: Iterable, filenames: Iterable[str]) -> Mapping:
    table = {}
    for key, filename in zip(keys, filenames):
        try:
            text = _load(filename).strip()
        except OSError as exc:
            raise ConfigurationError(f"Prompt template {filename!r} is missing") from exc
        if not text:
            raise ConfigurationError(f"Prompt template {filename!r} is empty")
        table[key] = text
    return MappingProxyType(table)


# ── Static tables ─────────────────────────────────────────

DIFFICULTY_INSTRUCTIONS: Mapping[Difficulty, str] = _load_table(
    list(Difficulty), [f"difficulty/{d.value}.txt" for d in Difficulty]
)

STYLE_INSTRUCTIONS: Mapping[QuestionStyle, str] = _load_table(
    list(QuestionStyle), [f"styles/{s.value}.txt" for s in QuestionStyle]
)

# Order matters: lookup is first-match.
_SUBJECT_KEYS: Tuple[str, ...] = (
    "polity",
    "history",
    "geography",
    "economy",
    "environment",
    "science",
    "current affairs",
    "art and culture",
)

SUBJECT_CONTEXTS: Mapping[str, str] = _load_table(
    _SUBJECT_KEYS, [f"subjects/{k.replace(' ', '_')}.txt" for k in _SUBJECT_KEYS]
)

# Second pass, consulted only when no subject key matched.
_SUBJECT_ALIASES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("polity", ("polity", "constitution", "governance")),
    ("history", ("history", "freedom", "independence")),
    ("geography", ("geography", "geo")),
    ("economy", ("economy", "economic", "finance")),
    ("environment", ("environment", "ecology", "biodiversity")),
    ("science", ("science", "technology", "space")),
    ("current affairs", ("current", "affairs")),
    ("art and culture", ("art", "culture", "heritage")),
)


def _check_tables() -> None:
    missing = [d.value for d in Difficulty if d not in DIFFICULTY_INSTRUCTIONS]
    missing += [s.value for s in QuestionStyle if s not in STYLE_INSTRUCTIONS]
    missing += [k for k, _ in _SUBJECT_ALIASES if k not in SUBJECT_CONTEXTS]
    if missing:
        raise ConfigurationError(f"Prompt tables incomplete, no entry for: {', '.join(missing)}")


_check_tables()


# ── Public helpers ────────────────────────────────────────


def get_subject_context(subject: str) -> str:
    """Return the knowledge block for *subject*, or ``""`` when none fits.

    Matching is case-insensitive and bidirectional: a key matches when it
    occurs in the subject or the subject occurs in it ("Indian Polity",
    "geo"). Keyword aliases ("constitution", "ecology", ...) are tried
    only after every key failed. First match wins.
    """
    lowered = (subject or "").strip().casefold()
    if not lowered:
        return ""

    for key, context in SUBJECT_CONTEXTS.items():
        if key in lowered or lowered in key:
            return context

    for key, keywords in _SUBJECT_ALIASES:
        if any(word in lowered for word in keywords):
            return SUBJECT_CONTEXTS[key]

    return ""


def _as_difficulty(difficulty: Union[Difficulty, str]) -> Difficulty:
    try:
        return Difficulty(difficulty)
    except ValueError:
        valid = ", ".join(d.value for d in Difficulty)
        raise ConfigurationError(f"Unknown difficulty {difficulty!r}; expected one of: {valid}") from None


def _style_block(allocation: StyleAllocation) -> str:
    try:
        instructions = STYLE_INSTRUCTIONS[QuestionStyle(allocation.style)]
    except (KeyError, ValueError):
        raise ConfigurationError(f"No prompt template for question style {allocation.style!r}") from None
    return (
        f"{_STYLE_RULE}\n"
        f"GENERATE {allocation.count} QUESTION(S) IN THE FOLLOWING STYLE:\n"
        f"{_STYLE_RULE}\n"
        f"{instructions}"
    )


def get_quiz_prompt(
    subject: str,
    difficulty: Union[Difficulty, str],
    allocations: Sequence[StyleAllocation],
    total_count: Optional[int] = None,
    theme: Optional[str] = None,
) -> str:
    """Compose the user prompt for one generation request.

    One style block is emitted per allocation with a non-zero count, in
    allocation order; zero-count allocations are skipped.
    """
    level = _as_difficulty(difficulty)
    total = total_count if total_count is not None else sum(a.count for a in allocations)

    style_text = "\n\n".join(_style_block(a) for a in allocations if a.count > 0)

    if theme:
        theme_context = (
            f'SPECIFIC FOCUS: "{theme}" - Generate questions specifically on this '
            f"topic/theme within {subject}."
        )
    else:
        theme_context = f"COVERAGE: Generate questions covering diverse important topics within {subject}."

    subject_context = get_subject_context(subject)
    if subject_context:
        subject_block = (
            f"\n{_SECTION_RULE}\n"
            f"SUBJECT-SPECIFIC CONTEXT & KNOWLEDGE BASE:\n"
            f"{_SECTION_RULE}\n"
            f"{subject_context}\n"
        )
    else:
        subject_block = ""

    # Caller-supplied text goes last so it is never rescanned for placeholders.
    return _render("quiz_prompt.txt", {
        "{{TOTAL_COUNT}}": str(total),
        "{{DIFFICULTY_INSTRUCTIONS}}": DIFFICULTY_INSTRUCTIONS[level],
        "{{STYLE_INSTRUCTIONS}}": style_text,
        "{{SUBJECT_CONTEXT}}": subject_block,
        "{{THEME_CONTEXT}}": theme_context,
        "{{SUBJECT}}": subject.upper(),
    })


def get_system_prompt(count: int) -> str:
    return _render("system_prompt.txt", {"{{COUNT}}": str(count)})

"""Extract the question array from raw model text.

Models often wrap the JSON in prose or markdown fences. The parser takes
the span from the first ``[`` to the last ``]`` and requires it to be
valid JSON; there is no repair step.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, List

from mcqgen.core.exceptions import MalformedResponseError

logger = logging.getLogger(__name__)

# Greedy: first "[" through the last "]".
_JSON_ARRAY_RE = re.compile(r"\[[\s\S]*\]")

_LOG_RAW_CHARS = 1000


def extract_json_array(text: str) -> str:
    """Return the array-shaped substring of *text*.

    Raises:
        MalformedResponseError: reason ``no_array`` if no bracket pair exists.
    """
    match = _JSON_ARRAY_RE.search(text or "")
    if not match:
        logger.error("No JSON array found in LLM response. Raw response: %s", (text or "")[:_LOG_RAW_CHARS])
        raise MalformedResponseError(
            "No JSON array found in model response",
            raw_response=text or "",
            reason=MalformedResponseError.NO_ARRAY,
        )
    return match.group(0)


def parse_question_array(text: str) -> List[Any]:
    """Parse the JSON array embedded in *text*.

    Args:
        text: Raw model output.

    Returns:
        The deserialized list; elements are not validated here.

    Raises:
        MalformedResponseError: if no array is present or it is not valid JSON.
    """
    snippet = extract_json_array(text)
    try:
        data = json.loads(snippet)
    except json.JSONDecodeError as exc:
        logger.error(
            "Invalid JSON in LLM response (%s). Raw response: %s",
            exc, text[:_LOG_RAW_CHARS],
        )
        raise MalformedResponseError(
            f"Model response contains malformed JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})",
            raw_response=text,
            reason=MalformedResponseError.INVALID_JSON,
            cause=exc,
        ) from exc

    logger.debug("Parsed JSON array with %d elements", len(data))
    return data

#!/usr/bin/env python
"""Generate a UPSC MCQ set from the command line.

Usage
-----
    # From backend/
    python -m cli.generate --subject polity --count 5
    python -m cli.generate --subject "Modern History" --theme "Gandhi era" \\
        --difficulty hard --style statement --style assertion --count 10
    python -m cli.generate --subject economy --output quiz.json

``--style`` may be repeated; order and duplicates matter (remainder
questions go to the earliest styles). The API key defaults to
``GOOGLE_API_KEY``.

Exit codes: 0 success, 2 configuration error, 3 backend unavailable,
4 malformed model response.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from mcqgen.core.config import settings                      # noqa: E402
from mcqgen.core.exceptions import (                         # noqa: E402
    BackendUnavailableError,
    ConfigurationError,
    MalformedResponseError,
)
from mcqgen.services.quiz.generator import generate_quiz     # noqa: E402
from mcqgen.services.quiz.schemas import (                   # noqa: E402
    Difficulty,
    GenerationRequest,
    QuestionStyle,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(message)s",
)
logger = logging.getLogger("cli.generate")

EXIT_CONFIGURATION = 2
EXIT_BACKEND = 3
EXIT_MALFORMED = 4


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate UPSC Prelims-style multiple-choice questions with Gemini.",
    )
    parser.add_argument("--subject", required=True, help="Subject, e.g. 'polity' or 'Indian Economy'.")
    parser.add_argument("--theme", default=None, help="Optional focus topic within the subject.")
    parser.add_argument(
        "--difficulty",
        default=Difficulty.MEDIUM.value,
        choices=[d.value for d in Difficulty],
    )
    parser.add_argument(
        "--style",
        dest="styles",
        action="append",
        choices=[s.value for s in QuestionStyle],
        help="Question style position; repeat for a mix (default: factual).",
    )
    parser.add_argument("--count", type=int, default=10, help="Number of questions.")
    parser.add_argument("--api-key", default=None, help="Gemini API key (overrides GOOGLE_API_KEY).")
    parser.add_argument("--output", default=None, help="Write JSON here instead of stdout.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        if args.count > settings.MAX_QUESTION_COUNT:
            raise ConfigurationError(
                f"--count must be at most {settings.MAX_QUESTION_COUNT}, got {args.count}"
            )
        request = GenerationRequest.from_raw(
            subject=args.subject,
            theme=args.theme,
            difficulty=args.difficulty,
            styles=args.styles or [QuestionStyle.FACTUAL.value],
            count=args.count,
        )
        questions = generate_quiz(request, api_key=args.api_key)

    except ConfigurationError as exc:
        print(f"Configuration error: {exc.message}", file=sys.stderr)
        return EXIT_CONFIGURATION
    except BackendUnavailableError as exc:
        print(f"Backend unavailable: {exc.message}", file=sys.stderr)
        return EXIT_BACKEND
    except MalformedResponseError as exc:
        print(f"Malformed model response ({exc.reason}): {exc.message}", file=sys.stderr)
        return EXIT_MALFORMED

    payload = json.dumps([q.to_wire() for q in questions], indent=2, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(payload + "\n", encoding="utf-8")
        logger.info("Wrote %d question(s) to %s", len(questions), args.output)
    else:
        print(payload)

    if len(questions) < request.count:
        print(f"Warning: only {len(questions)} of {request.count} questions generated", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Tolerant conversion of generated text into a NewsFeed."""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from core import NewsFeed
from utils.exceptions import ParseError


logger = logging.getLogger(__name__)


def _loads_with_brace_recovery(raw_text: str) -> Any:
    trimmed = raw_text.strip()
    try:
        return json.loads(trimmed)
    except json.JSONDecodeError as original:
        # Models sometimes wrap valid JSON in prose or code fences.
        start = trimmed.find("{")
        end = trimmed.rfind("}")
        if start != -1 and end > start:
            try:
                recovered = json.loads(trimmed[start:end + 1])
            except json.JSONDecodeError:
                pass
            else:
                logger.info(f"Recovered JSON object from wrapped output (chars {start}..{end})")
                return recovered
        raise ParseError(
            f"Output is not valid JSON: {original.msg}",
            {"line": original.lineno, "column": original.colno, "length": len(trimmed)},
        ) from original


def parse_feed(raw_text: str) -> NewsFeed:
    """
    Parse generated text into a NewsFeed.

    Tries a strict parse of the trimmed text first, then the span between the
    first ``{`` and the last ``}``. Anything unrecoverable, or a value that
    does not fit the feed shape, raises ParseError.
    """
    if not isinstance(raw_text, str):
        raise ParseError(f"Expected text output, got {type(raw_text).__name__}")

    data = _loads_with_brace_recovery(raw_text)
    if not isinstance(data, dict):
        raise ParseError(f"Expected a JSON object, got {type(data).__name__}")

    try:
        return NewsFeed.model_validate(data)
    except ValidationError as exc:
        raise ParseError(
            "Output does not match the news feed shape",
            {"errors": exc.error_count(), "first": exc.errors()[0].get("msg") if exc.errors() else ""},
        ) from exc

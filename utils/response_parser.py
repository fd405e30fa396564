#!/usr/bin/env python3
"""Decode model replies into pipeline results.

A reply that cannot be decoded is fatal. Nothing here substitutes empty
strings or defaults for missing content.
"""

from __future__ import annotations

import json
import logging
import re

from pydantic import ValidationError

from utils.release_notes_models import ReleaseNotesResult

logger = logging.getLogger(__name__)

_FENCED = re.compile(r"\A```[a-zA-Z]*[ \t]*\n(?P<inner>.*)\n```\Z", re.DOTALL)


class ResponseParseError(Exception):
    def __init__(self, message: str, code: str = "PARSE_ERROR") -> None:
        super().__init__(message)
        self.code = code


def _strip_fence(text: str) -> str:
    """Unwrap a reply whose whole body is one markdown code fence."""
    match = _FENCED.match(text)
    return match.group("inner").strip() if match else text


def parse_review_text(raw: str) -> str:
    text = (raw or "").strip()
    if not text:
        raise ResponseParseError("Model returned no review content.", code="EMPTY")
    return text


def parse_release_notes(raw: str) -> ReleaseNotesResult:
    """Parse the reply as one JSON object with `changelogBlock` and `whatsNewBlock` strings.

    Raises:
        ResponseParseError: code JSON_DECODE for malformed JSON, VALIDATION for a
            non-object or a missing / non-string field, EMPTY for an empty reply
    """
    text = _strip_fence((raw or "").strip())
    if not text:
        raise ResponseParseError("Model returned no content.", code="EMPTY")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse model JSON: {text[:500]}")
        raise ResponseParseError(f"Model reply is not valid JSON: {e}", code="JSON_DECODE")
    if not isinstance(data, dict):
        raise ResponseParseError(
            f"Model JSON must be an object, got {type(data).__name__}", code="VALIDATION"
        )
    try:
        return ReleaseNotesResult.model_validate(data)
    except ValidationError as e:
        raise ResponseParseError(
            "Model JSON is missing required string fields 'changelogBlock' and 'whatsNewBlock': "
            f"{e.error_count()} error(s)",
            code="VALIDATION",
        )

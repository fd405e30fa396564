#!/usr/bin/env python3
"""Precondition checks for required inputs (env vars, files, config values)."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional


class PreconditionError(Exception):
    """Raised when a required input is missing. Always fatal for the run."""
    def __init__(self, message: str, code: str = "PRECONDITION") -> None:
        super().__init__(message)
        self.code = code


def must_get_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise PreconditionError(f"Missing required env var: {name}", code="MISSING_ENV")
    return value


def require_file(path: str, producer: Optional[str] = None) -> Path:
    """Return `path` as a Path, or raise naming the step expected to create it."""
    p = Path(path)
    if not p.is_file():
        hint = f" Ensure the '{producer}' step ran before this step." if producer else ""
        raise PreconditionError(f"{path} not found.{hint}", code="MISSING_FILE")
    return p

#!/usr/bin/env python3
"""Thin wrapper around the git command line.

Every command is logged as `$ git ...` and any failure (git missing or a
non-zero exit) raises GitCommandError. No command is retried.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class GitCommandError(Exception):
    def __init__(self, message: str, code: str = "GIT_FAILED") -> None:
        super().__init__(message)
        self.code = code


class GitRunner:
    """Runs git commands in a working directory and returns trimmed stdout."""

    def __init__(self, cwd: Optional[Path] = None) -> None:
        self.cwd = Path(cwd) if cwd else None

    def run(self, *args: str) -> str:
        command = ["git", *args]
        display = shlex.join(command)
        logger.info(f"$ {display}")
        try:
            completed = subprocess.run(
                command,
                cwd=self.cwd,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except FileNotFoundError as e:
            raise GitCommandError(f"git executable not available: {e}", code="GIT_MISSING")
        if completed.returncode != 0:
            message = [
                f"Command failed: {display}",
                f"Exit code: {completed.returncode}",
            ]
            if completed.stdout.strip():
                message.append(f"STDOUT:\n{completed.stdout.rstrip()}")
            if completed.stderr.strip():
                message.append(f"STDERR:\n{completed.stderr.rstrip()}")
            raise GitCommandError("\n".join(message))
        return completed.stdout.strip()

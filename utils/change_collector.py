#!/usr/bin/env python3
"""Collect the commits and diff stat between two release tags."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from utils.git_runner import GitRunner

logger = logging.getLogger(__name__)

# Hash of git's empty tree; diffing against it covers the whole history.
EMPTY_TREE_SHA = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = "%h%x1f%s%x1f%an%x1f%ae%x1f%ad%x1f%b%x1e"


class Commit(BaseModel):
    """One commit in the release range."""

    hash: str = Field(..., description="Abbreviated commit hash")
    subject: str = Field("", description="First line of the commit message")
    author_name: str = Field("", description="Author name")
    author_email: str = Field("", description="Author email")
    date: str = Field("", description="Author date as printed by git")
    body: str = Field("", description="Commit message body")

    model_config = {"frozen": True}


class ChangeSet(BaseModel):
    """Commits (newest first, as git log prints them) plus a diff stat summary."""

    commits: Tuple[Commit, ...] = ()
    diff_stat: str = ""

    model_config = {"frozen": True}


def resolve_previous_tag(tags: Sequence[str], current_tag: str) -> Optional[str]:
    """Pick the tag released before `current_tag`.

    Args:
        tags: Tag names sorted by creation date, newest first
        current_tag: The tag being released

    Returns:
        The next older tag, or None when there is none. When `current_tag` is not
        in the list, falls back to the second most recent tag.
    """
    tags = [t for t in tags if t]
    if current_tag not in tags:
        logger.warning(f"Current tag {current_tag} not found in tags list")
        return tags[1] if len(tags) > 1 else None
    idx = tags.index(current_tag)
    return tags[idx + 1] if idx < len(tags) - 1 else None


def parse_git_log(output: str) -> List[Commit]:
    commits: List[Commit] = []
    for record in output.split(_RECORD_SEP):
        record = record.strip("\n")
        if not record.strip():
            continue
        parts = record.split(_FIELD_SEP, 5)
        parts += [""] * (6 - len(parts))
        hash_, subject, author_name, author_email, date, body = parts
        commits.append(Commit(
            hash=hash_.strip(),
            subject=subject.strip(),
            author_name=author_name.strip(),
            author_email=author_email.strip(),
            date=date.strip(),
            body=body.strip(),
        ))
    return commits


class ChangeCollector:
    """Read-only git queries that produce a ChangeSet."""

    def __init__(self, git: Optional[GitRunner] = None) -> None:
        self.git = git or GitRunner()

    def list_tags(self) -> List[str]:
        output = self.git.run("tag", "--sort=-creatordate")
        return [line.strip() for line in output.splitlines() if line.strip()]

    def get_previous_tag(self, current_tag: str) -> Optional[str]:
        return resolve_previous_tag(self.list_tags(), current_tag)

    def collect(self, current_tag: str, previous_tag: Optional[str]) -> ChangeSet:
        if previous_tag:
            log_range = f"{previous_tag}..{current_tag}"
            stat_args = ("diff", "--stat", previous_tag, current_tag)
        else:
            log_range = current_tag
            stat_args = ("diff", "--stat", EMPTY_TREE_SHA, current_tag)
        log_output = self.git.run("log", log_range, f"--pretty=format:{_LOG_FORMAT}")
        commits = parse_git_log(log_output)
        diff_stat = self.git.run(*stat_args)
        logger.info(f"Collected {len(commits)} commits for {log_range}")
        return ChangeSet(commits=tuple(commits), diff_stat=diff_stat)

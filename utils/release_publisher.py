#!/usr/bin/env python3
"""Commit regenerated docs on a release branch and open a pull request.

States: BASE_SYNCED -> BRANCH_CREATED -> NO_CHANGES (done), or
CHANGES_STAGED -> COMMITTED -> PUSHED -> PR_OPENED | SKIPPED_PR.

Re-running after a completed update stages nothing and stops at NO_CHANGES
without touching the GitHub API. Any git failure aborts the run; a partially
created branch is left for manual cleanup. Two concurrent runs for the same tag
race on branch creation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from configs.config import Config
from utils.git_runner import GitRunner
from utils.github_client import GithubClient
from utils.release_notes_models import PullRequestDraft

logger = logging.getLogger(__name__)

PR_BODY = "This PR was automatically generated by Release Genie based on the latest release."


class PublishState(str, Enum):
    BASE_SYNCED = "BASE_SYNCED"
    BRANCH_CREATED = "BRANCH_CREATED"
    NO_CHANGES = "NO_CHANGES"
    CHANGES_STAGED = "CHANGES_STAGED"
    COMMITTED = "COMMITTED"
    PUSHED = "PUSHED"
    PR_OPENED = "PR_OPENED"
    SKIPPED_PR = "SKIPPED_PR"


@dataclass
class PublishOutcome:
    state: PublishState
    branch: str
    history: List[PublishState] = field(default_factory=list)
    pr_number: Optional[int] = None
    pr_url: str = ""


def release_branch_name(tag: str) -> str:
    return f"{Config.BRANCH_PREFIX}/{tag}"


def commit_message(tag: str) -> str:
    return f"chore: update docs for {tag} via Release Genie"


def build_pr_draft(owner: str, repo: str, base_branch: str, tag: str) -> PullRequestDraft:
    return PullRequestDraft(
        owner=owner,
        repo=repo,
        base=base_branch,
        head=release_branch_name(tag),
        title=f"chore: update docs for {tag}",
        body=PR_BODY,
    )


class ReleasePublisher:
    def __init__(self, git: GitRunner, github: Optional[GithubClient] = None):
        self.git = git
        self.github = github

    def publish(self, *, owner: str, repo: str, tag: str, base_branch: str, mode: str = "pull-request") -> PublishOutcome:
        draft = build_pr_draft(owner, repo, base_branch, tag)
        outcome = PublishOutcome(state=PublishState.BASE_SYNCED, branch=draft.head)

        def advance(state: PublishState) -> None:
            outcome.state = state
            outcome.history.append(state)
            logger.info(f"Publisher state: {state.value}")

        self.git.run("checkout", base_branch)
        self.git.run("pull", "origin", base_branch)
        advance(PublishState.BASE_SYNCED)

        self.git.run("checkout", "-b", draft.head)
        advance(PublishState.BRANCH_CREATED)

        self.git.run("add", ".")
        status = self.git.run("status", "--porcelain")
        if not status.strip():
            logger.info("No changes to commit. Skipping commit/PR.")
            advance(PublishState.NO_CHANGES)
            return outcome
        advance(PublishState.CHANGES_STAGED)

        self.git.run("commit", "-m", commit_message(tag))
        advance(PublishState.COMMITTED)

        self.git.run("push", "origin", draft.head)
        advance(PublishState.PUSHED)

        if mode == "commit":
            # The base branch itself is not fast-forwarded in commit mode.
            logger.info(f"Mode is 'commit': pushed {draft.head}, not opening a pull request.")
            advance(PublishState.SKIPPED_PR)
            return outcome

        if self.github is None:
            raise ValueError("A GitHub client is required to open a pull request")
        created = self.github.create_pull_request(
            draft.owner, draft.repo, head=draft.head, base=draft.base, title=draft.title, body=draft.body
        )
        outcome.pr_number = created.get("number")
        outcome.pr_url = created.get("html_url", "")
        advance(PublishState.PR_OPENED)
        logger.info(f"Opened PR from {draft.head} into {draft.base}")
        return outcome

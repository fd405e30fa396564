#!/usr/bin/env python3
"""Post the AI review on a pull request.

Default: one advisory COMMENT review per run (a new review each time).
Sticky mode: keep a single issue comment tagged with a hidden HTML marker and
update it in place on later runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from configs.config import Config
from utils.github_client import GithubClient
from utils.release_notes_models import PRReviewContext


logger = logging.getLogger(__name__)

REVIEW_HEADER = "## 🤖 Review Genie PR Review"
ADVISORY_NOTE = "> Generated by AWS Bedrock. Treat as advisory, please verify before applying changes."


@dataclass
class PostResult:
    kind: str  # "review" | "comment"
    id: Optional[int]
    html_url: str
    created: bool


def render_review_body(review_text: str, context: PRReviewContext) -> str:
    footer = f"<sub>Run: {context.run_id or 'unknown'} • Workflow: {context.workflow or 'unknown'}</sub>"
    return f"{REVIEW_HEADER}\n\n{ADVISORY_NOTE}\n\n{review_text.strip()}\n\n---\n{footer}"


class PRCommenter:
    def __init__(self, client: GithubClient, *, marker: Optional[str] = None):
        self.client = client
        self.marker = marker or Config.get_review_config()["marker"]

    def post_review(self, context: PRReviewContext, review_text: str) -> PostResult:
        """Create exactly one COMMENT review. Earlier reviews are left as they are."""
        body = render_review_body(review_text, context)
        created = self.client.create_review(context.owner, context.repo, context.number, body, event="COMMENT")
        review_id = created.get("id")
        return PostResult("review", int(review_id) if review_id is not None else None, created.get("html_url", ""), True)

    def find_existing_comment(self, context: PRReviewContext) -> Optional[int]:
        comments = self.client.list_issue_comments(context.owner, context.repo, context.number)
        for c in comments:
            body = c.get("body") or ""
            if isinstance(body, str) and self.marker in body and c.get("id"):
                return int(c["id"])
        return None

    def upsert_comment(self, context: PRReviewContext, review_text: str) -> PostResult:
        """Update the marked comment if one exists, else create it."""
        body = f"{self.marker}\n{render_review_body(review_text, context)}"
        existing_id = self.find_existing_comment(context)
        if existing_id is not None:
            updated = self.client.update_issue_comment(context.owner, context.repo, existing_id, body)
            logger.info(f"Updated existing AI review comment (id: {existing_id})")
            return PostResult("comment", int(updated.get("id", existing_id)), updated.get("html_url", ""), False)
        created = self.client.create_issue_comment(context.owner, context.repo, context.number, body)
        logger.info(f"Created new AI review comment (id: {created.get('id')})")
        comment_id = created.get("id")
        return PostResult("comment", int(comment_id) if comment_id is not None else None, created.get("html_url", ""), True)

#!/usr/bin/env python3
"""Models passed between the pipeline stages.

All of them are created fresh for a single run and never persisted.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, StrictStr

TRUNCATION_MARKER = "\n\n[TRUNCATED]"


class ReleaseNotesResult(BaseModel):
	"""Structured model reply for the release notes pipeline.

	Both blocks are required and must be JSON strings; nothing is coerced.
	"""

	model_config = ConfigDict(extra="ignore")

	changelog_block: StrictStr = Field(..., alias="changelogBlock")
	whats_new_block: StrictStr = Field(..., alias="whatsNewBlock")


class ReviewPayload(BaseModel):
	"""Diff text bounded to a character budget."""

	model_config = ConfigDict(frozen=True)

	text: str
	truncated: bool = False
	original_length: int = 0

	@classmethod
	def from_diff(cls, diff_text: str, max_chars: int) -> "ReviewPayload":
		if max_chars < 0:
			raise ValueError("max_chars must be >= 0")
		if len(diff_text) <= max_chars:
			return cls(text=diff_text, truncated=False, original_length=len(diff_text))
		return cls(
			text=diff_text[:max_chars] + TRUNCATION_MARKER,
			truncated=True,
			original_length=len(diff_text),
		)


class PRReviewContext(BaseModel):
	"""Pull request metadata shown to the model and used for posting."""

	owner: str
	repo: str
	number: int
	title: str = ""
	url: str = ""
	author: str = ""
	head_ref: str = ""
	base_ref: str = ""
	run_id: Optional[str] = None
	workflow: Optional[str] = None


class PullRequestDraft(BaseModel):
	"""Pull request to open once the release branch is pushed."""

	owner: str
	repo: str
	base: str
	head: str
	title: str
	body: str

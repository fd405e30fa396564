#!/usr/bin/env python3
from __future__ import annotations

import json
from typing import Dict, List, Optional

from configs.config import Config
from utils.change_collector import ChangeSet
from utils.release_notes_models import PRReviewContext, ReviewPayload

Message = Dict[str, str]

SEVERITY_LEVELS = ("High", "Medium", "Low")
NO_ISSUES_TEXT = "No significant issues found."

RELEASE_NOTES_SECTIONS = [
	"Breaking Changes",
	"New Features",
	"Improvements",
	"Bug Fixes",
	"Internal",
]
MAX_BULLETS_PER_SECTION = 7

REVIEW_SYSTEM_PROMPT = " ".join([
	"You are a senior software engineer and security-minded reviewer.",
	"Provide a helpful PR review based on the diff.",
	"Be specific, actionable, and concise.",
	"If context is insufficient, say so and request what you need.",
	"Do not invent line numbers; if you can't be sure, omit line numbers.",
	"Answer in Markdown with exactly these four sections, in order:",
	"'## Summary' (2-5 bullets);",
	"'## Findings' grouped under '### High', '### Medium' and '### Low' (use no other severity labels),"
	" each finding naming the file, what is wrong and why, and a suggested fix;",
	"'## Suggested tests';",
	"'## Needs human attention'.",
	f"If there are no findings, write \"{NO_ISSUES_TEXT}\" under '## Findings'.",
])

RELEASE_NOTES_SYSTEM_PROMPT = (
	"You are Release Genie, an assistant that writes concise, accurate release notes and 'what's new' docs. "
	"You must ONLY respond with a single JSON object of the shape "
	'{ "changelogBlock": string, "whatsNewBlock": string } and nothing else: '
	"no prose, no code fences, no additional keys."
)


def _bulleted(lines: List[str]) -> str:
	return "\n".join(f"- {line}" for line in lines)


def build_review_payload(diff_text: str, max_chars: Optional[int] = None) -> ReviewPayload:
	budget = Config.MAX_DIFF_CHARS if max_chars is None else max_chars
	return ReviewPayload.from_diff(diff_text, budget)


def build_review_messages(context: PRReviewContext, payload: ReviewPayload) -> List[Message]:
	"""Build the system and user messages for a pull request review."""
	focus = _bulleted([
		"Bugs and logical errors",
		"Security vulnerabilities",
		"Performance issues",
		"Code quality and maintainability",
		"Missing validations, edge cases, or tests",
	])
	user = "\n".join([
		"Review the following GitHub Pull Request changes.",
		"",
		"PR:",
		f"- Title: {context.title}",
		f"- Author: {context.author}",
		f"- Branch: {context.head_ref} -> {context.base_ref}",
		f"- URL: {context.url}",
		"",
		"Focus on:",
		focus,
		"",
		"PR Diff:",
		payload.text,
	]).strip()
	return [
		{"role": "system", "content": REVIEW_SYSTEM_PROMPT},
		{"role": "user", "content": user},
	]


def build_release_notes_payload(
	tag: str,
	prev_tag: Optional[str],
	change_set: ChangeSet,
	current_changelog: Optional[str],
	current_whats_new: Optional[str],
) -> Dict:
	return {
		"newTag": tag,
		"prevTag": prev_tag,
		"commits": [
			{
				"hash": c.hash,
				"subject": c.subject,
				"authorName": c.author_name,
				"authorEmail": c.author_email,
				"date": c.date,
				"body": c.body,
			}
			for c in change_set.commits
		],
		"diffStat": change_set.diff_stat,
		"currentChangelogSection": current_changelog,
		"currentWhatsNewSection": current_whats_new,
		"guidelines": {
			"sections": list(RELEASE_NOTES_SECTIONS),
			"style": "markdown",
			"maxBulletsPerSection": MAX_BULLETS_PER_SECTION,
		},
	}


def build_release_notes_messages(
	tag: str,
	prev_tag: Optional[str],
	change_set: ChangeSet,
	current_changelog: Optional[str] = None,
	current_whats_new: Optional[str] = None,
) -> List[Message]:
	"""Build the messages for release notes generation.

	The user content is canonical JSON (sorted keys) so the same inputs always
	produce the same request.
	"""
	payload = build_release_notes_payload(tag, prev_tag, change_set, current_changelog, current_whats_new)
	return [
		{"role": "system", "content": RELEASE_NOTES_SYSTEM_PROMPT},
		{"role": "user", "content": json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False)},
	]

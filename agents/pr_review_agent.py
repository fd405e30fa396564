#!/usr/bin/env python3
"""PR review agent: send a pull request diff to the model and post its review.

Runs as a GitHub Actions step after a step that writes the PR diff to
`pr_changes.txt`. PR metadata comes from the environment.
"""

import logging
import os
import sys
from typing import Optional

from dotenv import load_dotenv
from langsmith.run_helpers import traceable

# Load environment variables from .env file
load_dotenv()

from clients.bedrock_client import BedrockClient, BedrockError
from configs.config import Config
from utils.github_client import GithubApiError, GithubAuthError, GithubClient
from utils.pr_commenter import PRCommenter, PostResult
from utils.preconditions import PreconditionError, must_get_env, require_file
from utils.prompt_builder import build_review_messages, build_review_payload
from utils.release_notes_models import PRReviewContext
from utils.response_parser import ResponseParseError, parse_review_text

# Set up logging
logger = logging.getLogger(__name__)

DIFF_PRODUCER_STEP = "Fetch PR code changes"


def read_review_context() -> PRReviewContext:
	"""Build the PR context from the workflow environment.

	Raises:
		PreconditionError: If OWNER, REPO or PR_NUMBER is missing or PR_NUMBER is not an integer
	"""
	pr_number_raw = must_get_env("PR_NUMBER")
	try:
		pr_number = int(pr_number_raw)
	except ValueError:
		raise PreconditionError(f"PR_NUMBER must be an integer, got {pr_number_raw!r}", code="INVALID_ENV")
	return PRReviewContext(
		owner=must_get_env("OWNER"),
		repo=must_get_env("REPO"),
		number=pr_number,
		title=os.getenv("PR_TITLE", ""),
		url=os.getenv("PR_URL", ""),
		author=os.getenv("PR_AUTHOR", ""),
		head_ref=os.getenv("PR_HEAD_REF", ""),
		base_ref=os.getenv("PR_BASE_REF", ""),
		run_id=os.getenv("GITHUB_RUN_ID"),
		workflow=os.getenv("GITHUB_WORKFLOW"),
	)


def read_diff(diff_file: str) -> str:
	path = require_file(diff_file, producer=DIFF_PRODUCER_STEP)
	return path.read_text(encoding="utf-8", errors="replace")


class PRReviewAgent:
	"""Collect diff -> build prompt -> call model -> post review."""

	def __init__(self, completion_client: Optional[BedrockClient] = None, github: Optional[GithubClient] = None,
				 model_id: Optional[str] = None, temperature: Optional[float] = None):
		self._completion_client = completion_client
		self._github = github
		self.model_id = model_id
		self.temperature = temperature

	@property
	def completion_client(self) -> BedrockClient:
		if self._completion_client is None:
			self._completion_client = BedrockClient()
		return self._completion_client

	@property
	def github(self) -> GithubClient:
		# Lazy so a missing token only fails when we actually post
		if self._github is None:
			self._github = GithubClient()
		return self._github

	@traceable(name="generate_review")
	def generate_review(self, context: PRReviewContext, diff_text: str, max_diff_chars: Optional[int] = None) -> str:
		payload = build_review_payload(diff_text, max_diff_chars)
		if payload.truncated:
			logger.warning(f"Diff truncated from {payload.original_length} chars to fit the prompt budget")
		messages = build_review_messages(context, payload)
		raw = self.completion_client.complete(messages, model_id=self.model_id, temperature=self.temperature)
		return parse_review_text(raw)

	def run(self, context: PRReviewContext, diff_file: str, *, sticky: bool = False,
			max_diff_chars: Optional[int] = None) -> PostResult:
		diff_text = read_diff(diff_file)
		review = self.generate_review(context, diff_text, max_diff_chars)
		logger.debug(f"AI review result:\n{review}")
		commenter = PRCommenter(self.github)
		if sticky:
			return commenter.upsert_comment(context, review)
		return commenter.post_review(context, review)


def main(argv=None):
	"""CLI entry point for the PR review agent."""
	import argparse

	parser = argparse.ArgumentParser(
		description="Review Genie - post an AI code review on a pull request",
		formatter_class=argparse.RawDescriptionHelpFormatter,
		epilog="""
Environment:
  GITHUB_TOKEN, OWNER, REPO, PR_NUMBER            (required)
  PR_TITLE, PR_URL, PR_AUTHOR, PR_HEAD_REF, PR_BASE_REF (optional)

Examples:
  python -m agents.pr_review_agent
  python -m agents.pr_review_agent --diff-file build/pr.diff --sticky-comment
		"""
	)
	review_config = Config.get_review_config()
	parser.add_argument("--diff-file", default=review_config["diff_file"], help="Path to the PR diff written by an earlier step")
	parser.add_argument("--model", default=None, help="Bedrock model id (defaults to BEDROCK_MODEL_ID)")
	parser.add_argument("--temperature", type=float, default=0.2, help="Sampling temperature")
	parser.add_argument("--max-diff-chars", type=int, default=review_config["max_diff_chars"], help="Truncate the diff beyond this many characters")
	parser.add_argument("--sticky-comment", action="store_true", help="Update a single marked PR comment instead of adding a review")
	parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
	args = parser.parse_args(argv)

	log_level = logging.DEBUG if args.verbose else logging.INFO
	logging.basicConfig(
		level=log_level,
		format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
	)
	if not args.verbose:
		logging.getLogger("urllib3").setLevel(logging.WARNING)
		logging.getLogger("botocore").setLevel(logging.WARNING)

	agent = None
	try:
		context = read_review_context()
		must_get_env("GITHUB_TOKEN")
		agent = PRReviewAgent(model_id=args.model, temperature=args.temperature)
		result = agent.run(context, args.diff_file, sticky=args.sticky_comment, max_diff_chars=args.max_diff_chars)
		if result.kind == "review":
			print(f"Posted AI PR review as a PR review comment on {context.owner}/{context.repo}#{context.number}.")
		elif result.created:
			print(f"Created new AI review comment (id: {result.id}).")
		else:
			print(f"Updated existing AI review comment (id: {result.id}).")
		sys.exit(0)

	except (PreconditionError, BedrockError, ResponseParseError, GithubApiError, GithubAuthError) as e:
		print(f"Error: {e}", file=sys.stderr)
		if args.verbose:
			logger.exception("Detailed error information:")
		sys.exit(1)

	except KeyboardInterrupt:
		print("\nOperation cancelled by user", file=sys.stderr)
		sys.exit(1)

	except Exception as e:
		print(f"Unexpected error: {e}", file=sys.stderr)
		if args.verbose:
			logger.exception("Detailed error information:")
		else:
			print("Use --verbose for more details", file=sys.stderr)
		sys.exit(1)

	finally:
		if agent is not None and agent._github is not None:
			agent._github.close()


if __name__ == "__main__":
	main()

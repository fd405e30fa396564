#!/usr/bin/env python3
"""Release notes agent for automated changelog and "what's new" updates.

For a release tag, collects the git history since the previous tag, asks the
model for a changelog block and a "what's new" block, patches them into the
marked sections of the configured documents, then commits the result on a
`release-genie/<tag>` branch and opens a pull request.
"""

import json
import logging
import os
import sys
from dataclasses import dataclass
from typing import List, Optional, Tuple

from dotenv import load_dotenv
from langsmith.run_helpers import traceable

# Load environment variables from .env file
load_dotenv()

from clients.bedrock_client import BedrockClient, BedrockError
from configs.config import Config
from configs.genie_config import DocTarget, GenieConfig, load_config
from utils.change_collector import ChangeCollector, ChangeSet
from utils.document_patcher import (
	compose_changelog_section,
	extract_section,
	read_document,
	replace_between_markers,
	write_document,
)
from utils.git_runner import GitCommandError, GitRunner
from utils.github_client import GithubApiError, GithubAuthError, GithubClient
from utils.preconditions import PreconditionError
from utils.prompt_builder import build_release_notes_messages
from utils.release_notes_models import ReleaseNotesResult
from utils.release_publisher import PublishOutcome, PublishState, ReleasePublisher
from utils.response_parser import ResponseParseError, parse_release_notes

# Set up logging
logger = logging.getLogger(__name__)


@dataclass
class DocumentState:
	"""A configured document as read before patching."""

	target: DocTarget
	content: str
	current_section: Optional[str]


def resolve_tag(tag: Optional[str] = None) -> str:
	"""Return the release tag from the CLI, or from the release event payload.

	Raises:
		PreconditionError: If no tag is available
	"""
	if tag:
		return tag
	event_path = os.getenv("GITHUB_EVENT_PATH")
	if event_path and os.path.isfile(event_path):
		with open(event_path, "r", encoding="utf-8") as f:
			event = json.load(f)
		tag_name = ((event or {}).get("release") or {}).get("tag_name")
		if tag_name:
			return tag_name
	raise PreconditionError(
		"This action must be triggered by a release event with tag_name (or pass --tag)",
		code="MISSING_TAG",
	)


def resolve_repository(owner: Optional[str] = None, repo: Optional[str] = None) -> Tuple[str, str]:
	if owner and repo:
		return owner, repo
	full_name = os.getenv("GITHUB_REPOSITORY", "")
	if "/" in full_name:
		env_owner, env_repo = full_name.split("/", 1)
		return owner or env_owner, repo or env_repo
	raise PreconditionError("Repository not set. Pass --owner/--repo or set GITHUB_REPOSITORY.", code="MISSING_ENV")


def load_document(target: Optional[DocTarget]) -> Optional[DocumentState]:
	if target is None:
		return None
	content = read_document(target.path)
	if content is None:
		return None
	return DocumentState(target=target, content=content, current_section=extract_section(content, target.section_id))


class ReleaseNotesAgent:
	"""collect -> build prompt -> call model -> parse -> patch -> publish."""

	def __init__(
		self,
		config: Optional[GenieConfig] = None,
		git: Optional[GitRunner] = None,
		completion_client: Optional[BedrockClient] = None,
		github: Optional[GithubClient] = None,
	):
		self.config = config or GenieConfig()
		self.git = git or GitRunner()
		self.collector = ChangeCollector(self.git)
		self._completion_client = completion_client
		self.github = github
		logger.info("Release notes agent initialized")

	@property
	def completion_client(self) -> BedrockClient:
		if self._completion_client is None:
			self._completion_client = BedrockClient()
		return self._completion_client

	@traceable(name="generate_release_notes")
	def generate(
		self,
		tag: str,
		prev_tag: Optional[str],
		change_set: ChangeSet,
		current_changelog: Optional[str],
		current_whats_new: Optional[str],
	) -> ReleaseNotesResult:
		messages = build_release_notes_messages(tag, prev_tag, change_set, current_changelog, current_whats_new)
		raw = self.completion_client.complete(
			messages,
			model_id=self.config.llm.model or Config.BEDROCK_MODEL_ID,
			temperature=self.config.llm.temperature,
		)
		return parse_release_notes(raw)

	def update_docs(
		self,
		tag: str,
		result: ReleaseNotesResult,
		changelog: Optional[DocumentState],
		readme: Optional[DocumentState],
	) -> List[str]:
		"""Patch the configured documents. Returns the paths that changed."""
		updated: List[str] = []
		if changelog is not None:
			body = compose_changelog_section(tag, result.changelog_block, changelog.current_section)
			patched = replace_between_markers(changelog.content, changelog.target.section_id, body)
			if write_document(changelog.target.path, changelog.content, patched):
				logger.info(f"Updated changelog at {changelog.target.path}")
				updated.append(changelog.target.path)
		if readme is not None:
			patched = replace_between_markers(readme.content, readme.target.section_id, result.whats_new_block)
			if write_document(readme.target.path, readme.content, patched):
				logger.info(f"Updated README at {readme.target.path}")
				updated.append(readme.target.path)
		return updated

	def run(self, *, tag: str, owner: str, repo: str, mode: Optional[str] = None) -> PublishOutcome:
		mode = mode or self.config.github.mode
		base_branch = self.config.github.base_branch
		logger.info(f"Running Release Genie for tag {tag}")

		prev_tag = self.collector.get_previous_tag(tag)
		if not prev_tag:
			logger.warning(f"Previous tag not found. Will generate notes using only {tag}.")
		change_set = self.collector.collect(tag, prev_tag)

		changelog = load_document(self.config.docs.changelog)
		readme = load_document(self.config.docs.readme)

		result = self.generate(
			tag,
			prev_tag,
			change_set,
			changelog.current_section if changelog else None,
			readme.current_section if readme else None,
		)
		self.update_docs(tag, result, changelog, readme)

		if mode != "commit" and self.github is None:
			self.github = GithubClient()
		publisher = ReleasePublisher(self.git, self.github)
		return publisher.publish(owner=owner, repo=repo, tag=tag, base_branch=base_branch, mode=mode)


def describe_outcome(outcome: PublishOutcome, tag: str) -> str:
	if outcome.state == PublishState.NO_CHANGES:
		return f"Release Genie completed successfully: docs already up to date for {tag}, nothing to commit."
	if outcome.state == PublishState.SKIPPED_PR:
		return f"Release Genie completed successfully: pushed branch {outcome.branch} (commit mode, no pull request)."
	return f"Release Genie completed successfully: opened PR {outcome.pr_url or outcome.branch}."


def main(argv=None):
	"""CLI entry point for the release notes agent."""
	import argparse

	parser = argparse.ArgumentParser(
		description="Release Genie - update changelog and README sections for a release",
		formatter_class=argparse.RawDescriptionHelpFormatter,
		epilog="""
Examples:
  python -m agents.release_notes_agent --tag v1.4.0
  python -m agents.release_notes_agent --tag v1.4.0 --mode commit --config .release-genie.yml
  python -m agents.release_notes_agent        # tag taken from the release event payload
		"""
	)
	parser.add_argument("--tag", required=False, help="Release tag (defaults to release.tag_name from GITHUB_EVENT_PATH)")
	parser.add_argument("--config", default=Config.CONFIG_PATH, help="Path to the YAML config")
	parser.add_argument("--mode", choices=["pull-request", "commit"], default=None, help="Override github.mode from the config")
	parser.add_argument("--owner", required=False, help="Repository owner (defaults to GITHUB_REPOSITORY)")
	parser.add_argument("--repo", required=False, help="Repository name (defaults to GITHUB_REPOSITORY)")
	parser.add_argument("--github-token", required=False, help="GitHub token (defaults to GITHUB_TOKEN / GH_TOKEN)")
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

	github = None
	try:
		tag = resolve_tag(args.tag)
		owner, repo = resolve_repository(args.owner, args.repo)
		config = load_config(args.config)
		mode = args.mode or config.github.mode
		if mode != "commit":
			# Fail before any model call if we could not open the PR afterwards
			github = GithubClient(token=args.github_token)
		agent = ReleaseNotesAgent(config=config, github=github)
		outcome = agent.run(tag=tag, owner=owner, repo=repo, mode=mode)
		print(describe_outcome(outcome, tag))
		sys.exit(0)

	except (PreconditionError, GitCommandError, BedrockError, ResponseParseError, GithubApiError, GithubAuthError) as e:
		print(f"Error: {e}", file=sys.stderr)
		if isinstance(e, GitCommandError):
			print("Any partially created release branch must be cleaned up manually.", file=sys.stderr)
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
		if github is not None:
			github.close()


if __name__ == "__main__":
	main()

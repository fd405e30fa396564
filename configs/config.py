import os
from typing import Dict, Any

class Config:
	"""Environment-driven configuration for the Release Genie pipelines."""

	VERSION = "1.0.0"

	# AWS Bedrock Configuration
	AWS_REGION = os.getenv("AWS_REGION", "us-east-1")
	BEDROCK_MODEL_ID = os.getenv("BEDROCK_MODEL_ID", "anthropic.claude-3-sonnet-20240229-v1:0")
	LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.3"))
	LLM_MAX_OUTPUT_TOKENS = int(os.getenv("LLM_MAX_OUTPUT_TOKENS", "1500"))
	LLM_READ_TIMEOUT_S = int(os.getenv("LLM_READ_TIMEOUT_S", "120"))

	# GitHub REST Configuration
	GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip('/')
	GITHUB_TOKEN = os.getenv("GITHUB_TOKEN") or os.getenv("GH_TOKEN")
	HTTP_TIMEOUT_S = int(os.getenv("HTTP_TIMEOUT_S", "30"))
	USER_AGENT = os.getenv("GENIE_USER_AGENT", f"release-genie/{VERSION}")

	# PR review inputs
	PR_DIFF_FILE = os.getenv("PR_DIFF_FILE", "pr_changes.txt")
	# Size guard for the diff sent to the model
	MAX_DIFF_CHARS = int(os.getenv("MAX_DIFF_CHARS", "120000"))
	REVIEW_MARKER = os.getenv("REVIEW_MARKER", "<!-- AI_PR_REVIEW -->")

	# Release notes inputs
	CONFIG_PATH = os.getenv("RELEASE_GENIE_CONFIG", ".release-genie.yml")
	MARKER_NAMESPACE = os.getenv("MARKER_NAMESPACE", "RELEASE-GENIE")
	BRANCH_PREFIX = os.getenv("BRANCH_PREFIX", "release-genie")
	DEFAULT_BASE_BRANCH = "main"
	DEFAULT_MODE = "pull-request"

	@classmethod
	def get_bedrock_config(cls) -> Dict[str, Any]:
		"""Get Bedrock configuration."""
		return {
			"region_name": cls.AWS_REGION,
			"model_id": cls.BEDROCK_MODEL_ID,
			"temperature": cls.LLM_TEMPERATURE,
			"max_tokens": cls.LLM_MAX_OUTPUT_TOKENS,
			"read_timeout_s": cls.LLM_READ_TIMEOUT_S,
		}

	@classmethod
	def get_github_config(cls) -> Dict[str, Any]:
		"""Get GitHub configuration for the REST client."""
		return {
			"base_url": cls.GITHUB_API_URL,
			"token": cls.GITHUB_TOKEN,
			"timeout_s": cls.HTTP_TIMEOUT_S,
			"user_agent": cls.USER_AGENT,
		}

	@classmethod
	def get_review_config(cls) -> Dict[str, Any]:
		"""Get PR review input configuration.

		Returns:
			Mapping with the diff file path, the diff character budget and the sticky comment marker.
		"""
		return {
			"diff_file": cls.PR_DIFF_FILE,
			"max_diff_chars": cls.MAX_DIFF_CHARS,
			"marker": cls.REVIEW_MARKER,
		}

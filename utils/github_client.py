#!/usr/bin/env python3
"""GitHub REST API client for posting reviews, comments and pull requests.

Every request carries a bearer token, a JSON content type and a descriptive
user agent. Any non-2xx response raises GithubApiError with the status code
and response body.
"""

import json
import logging
from typing import Dict, List, Any, Optional

import requests

from configs.config import Config

# Set up logging
logger = logging.getLogger(__name__)


class GithubAuthError(Exception):
    """Raised when no GitHub token is available."""
    def __init__(self, message: str, code: str = "UNAUTHORIZED") -> None:
        super().__init__(message)
        self.code = code


class GithubApiError(Exception):
    """Raised when a GitHub API call fails or returns a non-2xx status."""
    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None, code: str = "HTTP_ERROR") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.code = code


class GithubClient:
    """Minimal GitHub REST client used by the publishers."""

    def __init__(self, token: Optional[str] = None, timeout_s: Optional[int] = None,
                 base_url: Optional[str] = None, session: Optional[requests.Session] = None):
        """Initialize the GitHub client.

        Args:
            token: GitHub token (defaults to Config.GITHUB_TOKEN)
            timeout_s: Request timeout in seconds (defaults to Config.HTTP_TIMEOUT_S)
            base_url: API root (defaults to Config.GITHUB_API_URL)
            session: Optional pre-built session, mainly for tests

        Raises:
            GithubAuthError: If no token is provided
        """
        github_config = Config.get_github_config()
        self.token = token or github_config["token"]
        self.timeout_s = timeout_s or github_config["timeout_s"]
        self.base_url = (base_url or github_config["base_url"]).rstrip("/")

        if not self.token:
            raise GithubAuthError("GitHub token not found. Pass --github-token or set GITHUB_TOKEN.")

        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "Content-Type": "application/json",
            "User-Agent": github_config["user_agent"],
        })
        logger.debug("GitHub client initialized")

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None,
                 params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                data=json.dumps(payload) if payload is not None else None,
                timeout=self.timeout_s,
            )
        except requests.RequestException as e:
            raise GithubApiError(f"GitHub API request failed: {method} {url}: {e}", code="NETWORK")

        text = response.text or ""
        try:
            body = response.json() if text else None
        except ValueError:
            body = {"raw": text}

        if not 200 <= response.status_code < 300:
            code = "UNAUTHORIZED" if response.status_code in (401, 403) else "HTTP_ERROR"
            raise GithubApiError(
                f"GitHub API error {response.status_code} {response.reason or ''}: {json.dumps(body)}".strip(),
                status_code=response.status_code,
                body=body,
                code=code,
            )
        return body

    # ---- Pull request reviews ----
    def create_review(self, owner: str, repo: str, pr_number: int, body: str, event: str = "COMMENT") -> Dict[str, Any]:
        """POST /repos/{owner}/{repo}/pulls/{pr_number}/reviews"""
        logger.info(f"Posting {event} review on {owner}/{repo}#{pr_number}")
        return self._request("POST", f"/repos/{owner}/{repo}/pulls/{pr_number}/reviews",
                             {"body": body, "event": event}) or {}

    # ---- Issue comments (PR conversation tab) ----
    def list_issue_comments(self, owner: str, repo: str, pr_number: int) -> List[Dict[str, Any]]:
        """GET /repos/{owner}/{repo}/issues/{pr_number}/comments"""
        data = self._request("GET", f"/repos/{owner}/{repo}/issues/{pr_number}/comments", params={"per_page": 100})
        return data if isinstance(data, list) else []

    def create_issue_comment(self, owner: str, repo: str, pr_number: int, body: str) -> Dict[str, Any]:
        return self._request("POST", f"/repos/{owner}/{repo}/issues/{pr_number}/comments", {"body": body}) or {}

    def update_issue_comment(self, owner: str, repo: str, comment_id: int, body: str) -> Dict[str, Any]:
        return self._request("PATCH", f"/repos/{owner}/{repo}/issues/comments/{comment_id}", {"body": body}) or {}

    # ---- Pull requests ----
    def create_pull_request(self, owner: str, repo: str, *, head: str, base: str, title: str, body: str) -> Dict[str, Any]:
        """POST /repos/{owner}/{repo}/pulls"""
        logger.info(f"Opening PR {head} -> {base} on {owner}/{repo}")
        return self._request("POST", f"/repos/{owner}/{repo}/pulls",
                             {"head": head, "base": base, "title": title, "body": body}) or {}

    def close(self) -> None:
        self.session.close()

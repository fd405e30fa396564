from typing import Dict, List, Optional

import pytest


@pytest.fixture(autouse=True)
def _no_tracing(monkeypatch):
    monkeypatch.setenv("LANGSMITH_TRACING", "false")
    monkeypatch.setenv("LANGCHAIN_TRACING_V2", "false")


class FakeGit:
    """Records git invocations and answers from a canned table."""

    def __init__(self, responses: Optional[Dict[tuple, str]] = None, fail_on: Optional[tuple] = None):
        self.responses = responses or {}
        self.fail_on = fail_on
        self.calls: List[tuple] = []

    def run(self, *args: str) -> str:
        from utils.git_runner import GitCommandError

        self.calls.append(args)
        if self.fail_on is not None and args[: len(self.fail_on)] == self.fail_on:
            raise GitCommandError(f"Command failed: git {' '.join(args)}")
        for prefix, output in self.responses.items():
            if args[: len(prefix)] == prefix:
                return output
        return ""


class FakeCompletion:
    def __init__(self, reply: str):
        self.reply = reply
        self.requests: List[dict] = []

    def complete(self, messages, *, model_id=None, temperature=None, max_tokens=None):
        self.requests.append({"messages": messages, "model_id": model_id, "temperature": temperature})
        return self.reply


class FakeGithub:
    def __init__(self, comments: Optional[List[dict]] = None):
        self.calls: List[tuple] = []
        self.comments = comments or []

    def create_review(self, owner, repo, pr_number, body, event="COMMENT"):
        self.calls.append(("create_review", owner, repo, pr_number, body, event))
        return {"id": 11, "html_url": "https://github.com/o/r/pull/7#pullrequestreview-11"}

    def list_issue_comments(self, owner, repo, pr_number):
        self.calls.append(("list_issue_comments", owner, repo, pr_number))
        return list(self.comments)

    def create_issue_comment(self, owner, repo, pr_number, body):
        self.calls.append(("create_issue_comment", owner, repo, pr_number, body))
        return {"id": 21, "html_url": "https://github.com/o/r/pull/7#issuecomment-21"}

    def update_issue_comment(self, owner, repo, comment_id, body):
        self.calls.append(("update_issue_comment", owner, repo, comment_id, body))
        return {"id": comment_id, "html_url": f"https://github.com/o/r/pull/7#issuecomment-{comment_id}"}

    def create_pull_request(self, owner, repo, *, head, base, title, body):
        self.calls.append(("create_pull_request", owner, repo, head, base, title, body))
        return {"number": 42, "html_url": "https://github.com/o/r/pull/42"}

    def close(self):
        pass


@pytest.fixture
def fake_git_cls():
    return FakeGit


@pytest.fixture
def fake_completion_cls():
    return FakeCompletion


@pytest.fixture
def fake_github_cls():
    return FakeGithub

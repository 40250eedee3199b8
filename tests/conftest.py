"""Shared test fixtures and configuration."""

import json
from typing import Any, Dict, List, Optional, Union

import pytest
from git import Actor, Repo
from loguru import logger

from git_msg.ai_backends.base import AIBackend


class FakeResponse:
    """Stand-in for an aiohttp response used as an async context manager."""

    def __init__(self, body: Union[str, bytes], status: int = 200):
        self.body = body
        self.status = status

    async def text(self, encoding: Optional[str] = None, errors: str = "strict") -> str:
        if isinstance(self.body, bytes):
            return self.body.decode(encoding or "utf-8", errors)
        return self.body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Records outgoing requests and replies with a canned body."""

    def __init__(self, body: Any = "", status: int = 200, error: Optional[Exception] = None):
        self.body = body if isinstance(body, (str, bytes)) else json.dumps(body)
        self.status = status
        self.error = error
        self.requests: List[Dict[str, Any]] = []

    def post(self, url, json=None, headers=None, params=None):
        self.requests.append({
            "url": url,
            "json": json,
            "headers": headers,
            "params": params,
        })
        if self.error is not None:
            raise self.error
        return FakeResponse(self.body, self.status)


class RecordingBackend(AIBackend):
    """Test double that records prompts and returns a canned response."""

    display_name = "Recording"

    def __init__(self, response: str = "", error: Optional[Exception] = None):
        super().__init__(api_url="http://recording.invalid", model="recording")
        self.response = response
        self.error = error
        self.calls: List[str] = []

    async def generate_text(self, prompt: str) -> str:
        self.calls.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fake_session():
    """Factory for fake aiohttp sessions."""
    return FakeSession


@pytest.fixture
def recording_backend():
    """Factory for recording backends."""
    return RecordingBackend


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep user configuration and credentials out of the tests."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.chdir(tmp_path)
    for name in ("GIT_MSG_API_KEY", "GIT_MSG_AI__API_KEY", "GIT_MSG_AI__PROVIDER",
                 "GIT_MSG_AI__MODEL", "GIT_MSG_AI__API_URL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def git_repo(tmp_path):
    """Create a git repository with one commit on branch ``main``."""
    repo_dir = tmp_path / "repo"
    repo_dir.mkdir()
    repo = Repo.init(repo_dir)
    repo.git.checkout("-b", "main")

    author = Actor("Test User", "test@example.com")
    (repo_dir / "README.md").write_text("# Test Project\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit", author=author, committer=author)

    return repo


@pytest.fixture
def commit_file():
    """Helper that writes, stages and commits a file."""

    def _commit(repo: Repo, name: str, content: str, message: str):
        author = Actor("Test User", "test@example.com")
        path = f"{repo.working_dir}/{name}"
        with open(path, "w") as f:
            f.write(content)
        repo.index.add([name])
        return repo.index.commit(message, author=author, committer=author)

    return _commit


@pytest.fixture
def log_records():
    """Capture loguru records emitted during the test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG", format="{message}")
    yield records
    logger.remove(handler_id)

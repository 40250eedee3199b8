"""Tests for git_msg.core module."""

import pytest

from git_msg.ai_backends.base import BackendAPIError, BackendConnectionError
from git_msg.config.settings import Settings
from git_msg.core import (
    CommitMessageGenerator,
    GenerationRequest,
    GitMsg,
    GitMsgError,
    NoStagedChangesError,
)


def make_request(**overrides):
    values = {
        "diff": "--- a/app.py\n+++ b/app.py\n+print('hi')",
        "branch_name": "feature/greeting",
        "requested_count": 1,
    }
    values.update(overrides)
    return GenerationRequest(**values)


class TestGenerationRequest:
    """Tests for the GenerationRequest dataclass."""

    def test_defaults(self):
        request = GenerationRequest(diff="d", branch_name="main")
        assert request.requested_count == 1
        assert request.additional_instructions is None
        assert request.recent_commit_titles == ()

    def test_is_immutable(self):
        request = make_request()
        with pytest.raises(AttributeError):
            request.diff = "other"


class TestCommitMessageGenerator:
    """Tests for CommitMessageGenerator."""

    @pytest.mark.asyncio
    async def test_single_message(self, recording_backend):
        backend = recording_backend("feat(auth): implement user authentication")
        generator = CommitMessageGenerator(backend)

        messages = await generator.generate(make_request())

        assert messages == ["feat(auth): implement user authentication"]
        assert len(backend.calls) == 1

    @pytest.mark.asyncio
    async def test_multiple_messages(self, recording_backend):
        backend = recording_backend("1. feat(auth): implement login\n2. fix(api): resolve timeout issue")
        generator = CommitMessageGenerator(backend)

        messages = await generator.generate(make_request(requested_count=2))

        assert messages == ["feat(auth): implement login", "fix(api): resolve timeout issue"]

    @pytest.mark.asyncio
    async def test_prompt_carries_request_context(self, recording_backend):
        backend = recording_backend("fix: x")
        generator = CommitMessageGenerator(backend)
        request = make_request(
            requested_count=3,
            additional_instructions="Focus on security",
            recent_commit_titles=("chore: bump deps",),
        )

        await generator.generate(request)

        prompt = backend.calls[0]
        assert prompt == generator.build_prompt(request)
        assert "Generate 3 commit message(s)" in prompt
        assert "Branch name: feature/greeting" in prompt
        assert "Additional context: Focus on security" in prompt
        assert "- chore: bump deps" in prompt
        assert "print('hi')" in prompt

    @pytest.mark.asyncio
    async def test_empty_response(self, recording_backend):
        generator = CommitMessageGenerator(recording_backend(""))
        assert await generator.generate(make_request()) == []

    @pytest.mark.asyncio
    async def test_backend_error_propagates_unchanged(self, recording_backend):
        error = BackendAPIError("OpenAI", "OpenAI API error: Invalid API key")
        backend = recording_backend(error=error)
        generator = CommitMessageGenerator(backend)

        with pytest.raises(BackendAPIError) as exc_info:
            await generator.generate(make_request())

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_one_backend_call_per_generation(self, recording_backend):
        backend = recording_backend("1. feat(a): a\n2. feat(b): b\n3. feat(c): c")
        generator = CommitMessageGenerator(backend)

        await generator.generate(make_request(requested_count=3))
        await generator.generate(make_request(requested_count=1))

        assert len(backend.calls) == 2

    def test_parse_response_zero_count(self, recording_backend):
        generator = CommitMessageGenerator(recording_backend())
        assert generator.parse_response("feat(x): y", 0) == []


class TestGitMsg:
    """Tests for the GitMsg engine."""

    def test_not_a_repository(self, tmp_path):
        with pytest.raises(GitMsgError, match="Failed to open git repository"):
            GitMsg(Settings(), tmp_path / "missing")

    def test_build_request(self, git_repo, commit_file):
        commit_file(git_repo, "a.txt", "a\n", "feat(a): add a")
        with open(f"{git_repo.working_dir}/b.txt", "w") as f:
            f.write("b\n")
        git_repo.index.add(["b.txt"])

        settings = Settings()
        settings.generation.count = 2
        settings.generation.instructions = ""
        git_msg = GitMsg(settings, git_repo.working_dir)

        request = git_msg.build_request()

        assert request.branch_name == "main"
        assert "+b" in request.diff
        assert request.requested_count == 2
        assert request.additional_instructions == ""
        assert request.recent_commit_titles == ("feat(a): add a", "Initial commit")

    def test_build_request_without_staged_changes(self, git_repo):
        git_msg = GitMsg(Settings(), git_repo.working_dir)

        with pytest.raises(NoStagedChangesError):
            git_msg.build_request()

    def test_initialize_missing_key(self, git_repo):
        settings = Settings()
        settings.ai.provider = "openai"
        git_msg = GitMsg(settings, git_repo.working_dir)

        with pytest.raises(GitMsgError, match="API key is required for OpenAI"):
            git_msg.initialize()

    @pytest.mark.asyncio
    async def test_run(self, git_repo, recording_backend):
        with open(f"{git_repo.working_dir}/new.py", "w") as f:
            f.write("print('new')\n")
        git_repo.index.add(["new.py"])

        git_msg = GitMsg(Settings(), git_repo.working_dir)
        git_msg.ai_backend = recording_backend("feat(new): add new module")

        assert await git_msg.run() == ["feat(new): add new module"]
        assert "print('new')" in git_msg.ai_backend.calls[0]

    @pytest.mark.asyncio
    async def test_run_wraps_backend_errors(self, git_repo, recording_backend):
        with open(f"{git_repo.working_dir}/new.py", "w") as f:
            f.write("x = 1\n")
        git_repo.index.add(["new.py"])

        git_msg = GitMsg(Settings(), git_repo.working_dir)
        cause = BackendConnectionError("Ollama", "Connection to Ollama failed: refused")
        git_msg.ai_backend = recording_backend(error=cause)

        with pytest.raises(GitMsgError, match="Failed to generate commit message: Connection to Ollama failed") as exc_info:
            await git_msg.run()

        assert exc_info.value.__cause__ is cause

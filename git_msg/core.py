"""
Core engine: prompt construction, provider call and response parsing.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from loguru import logger

from .ai_backends.base import AIBackend, AIBackendError
from .ai_backends.factory import BackendFactory
from .config.settings import Settings
from .git_ops.repository import GitRepository, GitRepositoryError
from .ui.console import GitMsgConsole
from .utils.message_extractor import MessageExtractor
from .utils.prompts import PromptBuilder


@dataclass(frozen=True)
class GenerationRequest:
    """Inputs for one generation run."""

    diff: str
    branch_name: str
    requested_count: int = 1
    additional_instructions: Optional[str] = None
    recent_commit_titles: Tuple[str, ...] = ()


class CommitMessageGenerator:
    """Turn a generation request into commit message candidates.

    All candidates come from a single backend call. Backend errors
    propagate unchanged; parsing never fails.
    """

    def __init__(
        self,
        ai_backend: AIBackend,
        prompt_builder: Optional[PromptBuilder] = None,
        extractor: Optional[MessageExtractor] = None,
    ):
        self.ai_backend = ai_backend
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.extractor = extractor or MessageExtractor()

    async def generate(self, request: GenerationRequest) -> List[str]:
        """Generate up to ``request.requested_count`` commit messages."""
        prompt = self.build_prompt(request)
        logger.debug(f"Built prompt of {len(prompt)} characters")

        response = await self.ai_backend.generate_text(prompt)

        messages = self.parse_response(response, request.requested_count)
        logger.info(f"Generated {len(messages)} commit message(s)")
        return messages

    def build_prompt(self, request: GenerationRequest) -> str:
        return self.prompt_builder.build_commit_prompt(
            diff=request.diff,
            branch_name=request.branch_name,
            count=request.requested_count,
            additional_instructions=request.additional_instructions,
            recent_commits=request.recent_commit_titles,
        )

    def parse_response(self, response: str, count: int) -> List[str]:
        return self.extractor.extract_commit_messages(response, count)


class GitMsg:
    """Application engine tying repository, backend and generator together."""

    def __init__(self, settings: Optional[Settings] = None, repo_path: Optional[Path] = None):
        """Initialize with settings and repository."""
        self.settings = settings or Settings()
        self.console = GitMsgConsole(self.settings)
        self.ai_backend: Optional[AIBackend] = None

        try:
            self.git_repo = GitRepository(repo_path, diff_tool=self.settings.git.diff_tool)
        except GitRepositoryError as e:
            raise GitMsgError(f"Failed to open git repository: {e}") from e

        logger.info("git-msg initialized")

    def initialize(self) -> None:
        """Build the AI backend selected in the settings."""
        try:
            self.ai_backend = BackendFactory.create_backend(self.settings.provider_config())
        except AIBackendError as e:
            raise GitMsgError(str(e)) from e

        logger.info(f"Initialized {self.ai_backend.backend_type} backend")

    def build_request(self) -> GenerationRequest:
        """Collect branch, staged diff and recent history from git."""
        try:
            branch_name = self.git_repo.get_branch_name()
            logger.info(f"Current branch: {branch_name}")

            logger.info("Reading staged changes...")
            diff = self.git_repo.get_staged_diff()
        except GitRepositoryError as e:
            raise GitMsgError(str(e)) from e

        if not diff:
            raise NoStagedChangesError(
                "No staged changes found. Stage some changes first with 'git add'"
            )

        recent_titles = self.git_repo.get_recent_commit_titles(
            self.settings.generation.recent_commits
        )
        if self.settings.ui.verbose:
            self.console.show_recent_commits(recent_titles)

        return GenerationRequest(
            diff=diff,
            branch_name=branch_name,
            requested_count=self.settings.generation.count,
            additional_instructions=self.settings.generation.instructions,
            recent_commit_titles=tuple(recent_titles),
        )

    async def run(self) -> List[str]:
        """Generate commit message candidates for the staged changes."""
        request = self.build_request()

        if self.ai_backend is None:
            self.initialize()

        if self.settings.ui.verbose:
            self.console.show_ai_backend_info(
                self.ai_backend.backend_type,
                self.ai_backend.api_url,
                self.ai_backend.model
            )

        generator = CommitMessageGenerator(self.ai_backend)
        try:
            with self.console.show_progress_spinner("Generating commit message(s)"):
                return await generator.generate(request)
        except AIBackendError as e:
            raise GitMsgError(f"Failed to generate commit message: {e}") from e


class GitMsgError(Exception):
    """Custom exception for git-msg operations."""


class NoStagedChangesError(GitMsgError):
    """Nothing is staged, so there is nothing to describe."""

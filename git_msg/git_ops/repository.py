"""
Git repository access: branch name, staged diff and recent history.
"""

from pathlib import Path
from typing import List, Optional

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo
from loguru import logger


DETACHED_HEAD = "detached-head"


class GitRepository:
    """Read-only view of the repository the commit is being prepared in."""

    def __init__(self, repo_path: Optional[Path] = None, diff_tool: Optional[str] = None):
        """Initialize Git repository."""
        self.repo_path = repo_path or Path.cwd()
        self.diff_tool = diff_tool
        self.repo: Optional[Repo] = None
        self._initialize_repo()

    def _initialize_repo(self) -> None:
        """Initialize the Git repository object."""
        try:
            self.repo = Repo(self.repo_path, search_parent_directories=True)
            logger.debug(f"Initialized Git repository at {self.repo.working_dir}")
        except (InvalidGitRepositoryError, NoSuchPathError):
            raise GitRepositoryError(f"Not a Git repository: {self.repo_path}")

    def get_branch_name(self) -> str:
        """Return the current branch name, or ``detached-head``."""
        if self.repo.head.is_detached:
            return DETACHED_HEAD

        try:
            return self.repo.active_branch.name
        except TypeError as e:
            raise GitRepositoryError(f"Failed to get branch name: {e}")

    def get_staged_diff(self) -> str:
        """Return the diff of the index against HEAD.

        Runs through the configured external diff program when there is one.
        """
        args = ["--cached"]
        kwargs = {}
        if self.diff_tool:
            args.append("--ext-diff")
            kwargs["env"] = {"GIT_EXTERNAL_DIFF": self.diff_tool}
            logger.debug(f"Using external diff tool: {self.diff_tool}")
        else:
            args.append("--no-ext-diff")

        try:
            diff = self.repo.git.diff(*args, **kwargs)
        except GitCommandError as e:
            raise GitRepositoryError(f"Failed to get staged diff: {e}")

        if not diff:
            self._debug_staging_status()

        return diff

    def _debug_staging_status(self) -> None:
        """Log the working tree status when nothing is staged."""
        logger.debug("No changes detected in staging area. Checking repository status:")
        try:
            status_output = self.repo.git.status("--porcelain")
        except GitCommandError as e:
            logger.debug(f"Could not read repository status: {e}")
            return

        entries = [line for line in status_output.split('\n') if line.strip()]
        if not entries:
            logger.debug("No changes in the repository")
            return

        logger.debug(f"Found {len(entries)} changed files:")
        for entry in entries:
            staged = entry[0] not in (' ', '?')
            logger.debug(f"{entry[3:]} - staged: {staged}, status: {entry[:2]!r}")

    def get_recent_commit_titles(self, count: int = 3) -> List[str]:
        """Return up to ``count`` recent commit titles, newest first.

        Best effort: an empty list when there is no history or git fails.
        """
        if count <= 0:
            return []

        try:
            return [commit.summary for commit in self.repo.iter_commits(max_count=count)]
        except (GitCommandError, ValueError) as e:
            logger.debug(f"Failed to get recent commits: {e}")
            return []


class GitRepositoryError(Exception):
    """Custom exception for Git repository operations."""

"""
Prompt templates for commit message generation.
"""

from typing import Optional, Sequence


COMMIT_TYPES = [
    "feat", "fix", "docs", "style", "refactor",
    "perf", "test", "build", "ci", "chore", "revert"
]


class PromptBuilder:
    """Build the commit message prompt from repository context."""

    def __init__(self, subject_limit: int = 72):
        """Initialize prompt builder with conventional commit standards."""
        self.subject_limit = subject_limit

    def build_commit_prompt(
        self,
        diff: str,
        branch_name: str,
        count: int,
        additional_instructions: Optional[str] = None,
        recent_commits: Sequence[str] = (),
    ) -> str:
        """Build the prompt asking for ``count`` commit messages.

        The output depends only on the arguments. ``additional_instructions``
        is included whenever it is not None, even when it is empty.
        """
        sections = [
            f"Generate {count} commit message(s) for the following changes.",
            self._style_guidance(),
            f"Branch name: {branch_name}",
        ]

        if recent_commits:
            sections.append(self._recent_commits_section(recent_commits))

        if additional_instructions is not None:
            sections.append(f"Additional context: {additional_instructions}")

        sections.append(f"Diff:\n```\n{diff}\n```")
        sections.append(
            f"Provide exactly {count} commit message(s) in the format "
            f"'type(scope): subject', numbered if more than one."
        )

        return "\n\n".join(sections)

    def _style_guidance(self) -> str:
        return "\n".join([
            "Follow the Conventional Commits specification (https://www.conventionalcommits.org/):",
            "- Format: type(scope): subject",
            f"- Types: {', '.join(COMMIT_TYPES)}",
            f"- Keep the subject concise (under {self.subject_limit} characters)",
            "- Use imperative mood (\"add\" not \"added\")",
        ])

    def _recent_commits_section(self, recent_commits: Sequence[str]) -> str:
        lines = ["Recent commits (match their style where it makes sense):"]
        lines.extend(f"- {title}" for title in recent_commits)
        return "\n".join(lines)

"""
Console output with Rich components.

Diagnostics go to stderr so that stdout carries nothing but the generated
commit messages, one per line.
"""

from typing import List, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

from ..ai_backends.factory import ProviderVariant
from ..config.settings import Settings


class GitMsgConsole:
    """Console interface for git-msg."""

    def __init__(self, settings: Settings):
        """Initialize console with settings."""
        self.settings = settings
        self._setup_styles()
        self.console = Console(stderr=True, theme=self.theme)
        self.output = Console(highlight=False, soft_wrap=True)

    def _setup_styles(self) -> None:
        """Setup custom styles for consistent theming."""
        self.styles = {
            "muted": "dim",
        }

        self.theme = Theme(self.styles)

    def print_commit_messages(self, messages: Sequence[str]) -> None:
        """Print generated messages to stdout, one per line."""
        for message in messages:
            self.output.print(message, markup=False)

    def show_ai_backend_info(self, backend_type: str, api_url: str, model: str) -> None:
        """Show AI backend information."""
        backend_panel = Panel(
            f"[bold]{backend_type.title()}[/bold] @ {api_url}\n"
            f"Model: [cyan]{model}[/cyan]",
            title="AI Backend",
            box=box.ROUNDED,
            style="blue"
        )
        self.console.print(backend_panel)

    def show_recent_commits(self, titles: List[str]) -> None:
        """Show recent commit titles passed as context."""
        if not titles:
            return

        self.console.print("[bold blue]Recent Commits (for context):[/bold blue]")
        for title in titles:
            self.console.print(f"  [muted]{escape(title)}[/muted]")

    def show_providers(self) -> None:
        """Show supported providers and their defaults."""
        table = Table(title="AI Providers", box=box.SIMPLE_HEAD)
        table.add_column("Provider", style="bold cyan")
        table.add_column("Default model")
        table.add_column("Default URL", style="dim")
        table.add_column("API key")

        for variant in ProviderVariant:
            table.add_row(
                variant.value,
                variant.default_model,
                variant.default_api_url,
                "required" if variant.requires_api_key else "-",
            )

        self.output.print(table)

    def show_configuration(self) -> None:
        """Show current configuration."""
        ai = self.settings.ai
        api_key = "(not set)"
        if ai.api_key:
            api_key = f"{ai.api_key[:4]}..." if len(ai.api_key) > 8 else "****"

        self.output.print("[bold blue]git-msg Configuration[/bold blue]")
        self.output.print()
        self.output.print("[bold]AI Provider:[/bold]")
        self.output.print(f"  Provider: {ai.provider.value}")
        self.output.print(f"  Model: {ai.model or ai.provider.default_model}")
        self.output.print(f"  URL: {ai.api_url or ai.provider.default_api_url}")
        self.output.print(f"  API key: {api_key}")
        self.output.print()
        self.output.print("[bold]Generation:[/bold]")
        self.output.print(f"  Messages: {self.settings.generation.count}")
        self.output.print(f"  Recent commits as context: {self.settings.generation.recent_commits}")
        self.output.print(f"  Diff tool: {self.settings.git.diff_tool or '(git default)'}")

    def show_progress_spinner(self, description: str):
        """Create a progress spinner context manager."""
        return self.console.status(f"[blue]{description}...[/blue]", spinner="dots")

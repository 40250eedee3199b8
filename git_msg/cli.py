"""
Command-line interface using Typer with Rich integration.
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape

from .ai_backends.base import AIBackendError
from .ai_backends.factory import ProviderVariant
from .config.settings import Settings
from .core import GitMsg, GitMsgError, NoStagedChangesError
from .git_ops.repository import GitRepositoryError
from .ui.console import GitMsgConsole


app = typer.Typer(
    name="git-msg",
    help="AI-powered git commit message generator",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=False
)

# Global console for error handling
console = Console(stderr=True)


def setup_logging(log_level: str = "WARNING", log_file: Optional[Path] = None):
    """Setup logging configuration."""
    logger.remove()  # Remove default handler

    logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        colorize=True
    )

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            rotation="1 MB",
            retention="7 days"
        )


def load_settings(config_file: Optional[Path]) -> Settings:
    if config_file:
        return Settings.from_file(config_file)
    return Settings()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    number: Optional[int] = typer.Option(
        None, "--number", "-n",
        help="Number of commit messages to generate (1-5)"
    ),
    instructions: Optional[str] = typer.Option(
        None, "--instructions", "-i",
        help="Additional context or instructions for the AI"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Enable verbose output"
    ),
    debug: bool = typer.Option(
        False, "--debug", "-d",
        help="Enable debug logging (includes verbose)"
    ),
    provider: Optional[ProviderVariant] = typer.Option(
        None, "--provider", "-p",
        case_sensitive=False,
        help="AI provider to use"
    ),
    model: Optional[str] = typer.Option(
        None, "--model", "-m",
        help="Model name to use"
    ),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", "-k",
        help="API key for the provider (not needed for Ollama)"
    ),
    api_url: Optional[str] = typer.Option(
        None, "--api-url", "-u",
        help="API base URL (defaults to the provider's standard URL)"
    ),
    diff_tool: Optional[str] = typer.Option(
        None, "--diff-tool",
        help="External diff program used to render the staged diff"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Path to configuration file"
    ),
    repo_path: Optional[Path] = typer.Option(
        None, "--repo", "-r",
        help="Git repository path (default: current directory)"
    ),
    version: bool = typer.Option(
        False, "--version",
        help="Show version information"
    )
):
    """
    Generate commit messages for the staged changes.

    [bold blue]Examples:[/bold blue]

    [green]git-msg[/green]                                  # One message from local Ollama
    [green]git-msg -n 3[/green]                             # Three candidates
    [green]git-msg -p openai -k $OPENAI_API_KEY[/green]     # Use OpenAI
    [green]git-msg -p gemini -i "mention the ticket"[/green] # Extra instructions
    [green]git-msg providers[/green]                        # List providers
    """
    if version:
        from . import __version__
        console.print(f"[bold blue]git-msg[/bold blue] version [green]{__version__}[/green]")
        return

    if ctx.invoked_subcommand is not None:
        return

    if number is not None and not 1 <= number <= 5:
        console.print("[red]Error:[/red] Number of messages must be between 1 and 5")
        raise typer.Exit(1)

    try:
        settings = load_settings(config_file)
    except Exception as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    # Command-line flags win over configuration
    if number is not None:
        settings.generation.count = number
    if instructions is not None:
        settings.generation.instructions = instructions
    if provider is not None:
        settings.ai.provider = provider
    if model is not None:
        settings.ai.model = model
    if api_key is not None:
        settings.ai.api_key = api_key
    if api_url is not None:
        settings.ai.api_url = api_url
    if diff_tool is not None:
        settings.git.diff_tool = diff_tool
    if verbose or debug:
        settings.ui.verbose = True

    # debug overrides verbose
    if debug:
        setup_logging("DEBUG", settings.log_file)
    elif settings.ui.verbose:
        setup_logging("INFO")
    else:
        setup_logging(settings.ui.log_level)

    asyncio.run(_run_generate(settings, repo_path))


@app.command()
def providers():
    """List supported AI providers and their defaults."""
    GitMsgConsole(Settings()).show_providers()


@app.command()
def config(
    show: bool = typer.Option(
        False, "--show", "-s",
        help="Show current configuration"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Path to configuration file"
    ),
):
    """
    Show git-msg configuration.

    [bold blue]Examples:[/bold blue]

    [green]git-msg config --show[/green]                     # Show resolved config
    [green]git-msg config --show -c ./git-msg.json[/green]   # Show a specific file
    """
    try:
        settings = load_settings(config_file)
    except Exception as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if not show:
        console.print("Use [green]--show[/green] to see current configuration")
        return

    GitMsgConsole(settings).show_configuration()


async def _run_generate(settings: Settings, repo_path: Optional[Path]):
    """Run the generate workflow."""
    try:
        git_msg = GitMsg(settings, repo_path)
        messages = await git_msg.run()
        git_msg.console.print_commit_messages(messages)

    except NoStagedChangesError as e:
        console.print(str(e))
        console.print("Make sure you have staged changes using 'git add <file>' before running this command")
        raise typer.Exit(1)
    except (GitMsgError, AIBackendError, GitRepositoryError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        raise typer.Exit(130)
    except Exception as e:
        logger.exception("Unexpected error occurred")
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def main():
    """Main entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()

"""
Configuration management with Pydantic validation and environment variable support.
"""

import json
import os
import platform
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from ..ai_backends.factory import ProviderConfig, ProviderVariant


API_KEY_ENV_VAR = "GIT_MSG_API_KEY"


class AISettings(BaseModel):
    """AI provider configuration."""

    model_config = {"validate_assignment": True}

    provider: ProviderVariant = Field(
        default=ProviderVariant.OLLAMA,
        description="AI provider to use"
    )
    model: Optional[str] = Field(
        default=None,
        description="Model name (defaults to the provider's default model)"
    )
    api_key: Optional[str] = Field(
        default=None,
        description="API key for hosted providers"
    )
    api_url: Optional[str] = Field(
        default=None,
        description="API base URL (defaults to the provider's standard URL)"
    )


class GenerationSettings(BaseModel):
    """Commit message generation options."""

    model_config = {"validate_assignment": True}

    count: int = Field(
        default=1,
        ge=1,
        le=5,
        description="Number of commit messages to generate"
    )
    recent_commits: int = Field(
        default=3,
        ge=0,
        le=3,
        description="Number of recent commit titles given to the model as context"
    )
    instructions: Optional[str] = Field(
        default=None,
        description="Additional context or instructions for the AI"
    )


class GitSettings(BaseModel):
    """Git operation configuration."""

    diff_tool: Optional[str] = Field(
        default=None,
        description="External diff program used to render the staged diff"
    )


class UISettings(BaseModel):
    """User interface configuration."""

    verbose: bool = Field(
        default=False,
        description="Show request and response diagnostics"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level"
    )


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    ai: AISettings = Field(default_factory=AISettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)
    git: GitSettings = Field(default_factory=GitSettings)
    ui: UISettings = Field(default_factory=UISettings)

    model_config = {
        "env_prefix": "GIT_MSG_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "extra": "ignore",
    }

    def __init__(self, **kwargs):
        # Load the default config file when nothing explicit was given
        if not kwargs:
            config_path = self._get_default_config_path()
            if config_path.exists():
                try:
                    with open(config_path) as f:
                        kwargs = json.load(f)
                except (json.JSONDecodeError, OSError):
                    pass  # Fall back to defaults

        super().__init__(**kwargs)

        # Flat credential fallback, e.g. GIT_MSG_API_KEY=sk-...
        if not self.ai.api_key and os.getenv(API_KEY_ENV_VAR):
            self.ai.api_key = os.getenv(API_KEY_ENV_VAR)

    @staticmethod
    def _get_default_config_path() -> Path:
        """Get the default config file path."""
        if platform.system() == "Windows":
            base = Path(os.environ.get("APPDATA", "~"))
        else:
            base = Path(os.environ.get("XDG_CONFIG_HOME", "~/.config"))

        return (base / "git-msg" / "config.json").expanduser()

    @classmethod
    def from_file(cls, config_path: Path) -> "Settings":
        """Load settings from a configuration file."""
        if config_path.exists():
            with open(config_path) as f:
                config_data = json.load(f)
            return cls(**config_data)
        return cls()

    def save_to_file(self, config_path: Path) -> None:
        """Save current settings to a configuration file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'w') as f:
            json.dump(self.model_dump(mode="json"), f, indent=2)

    def provider_config(self) -> ProviderConfig:
        """Build the one-shot provider configuration for the factory."""
        return ProviderConfig(
            variant=self.ai.provider,
            model=self.ai.model or self.ai.provider.default_model,
            api_key=self.ai.api_key,
            base_url=self.ai.api_url,
            verbose=self.ui.verbose,
        )

    @property
    def config_dir(self) -> Path:
        """Get the configuration directory."""
        return self._get_default_config_path().parent

    @property
    def cache_dir(self) -> Path:
        """Get the cache directory."""
        if platform.system() == "Windows":
            base = Path(os.environ.get("LOCALAPPDATA", "~"))
        else:
            base = Path(os.environ.get("XDG_CACHE_HOME", "~/.cache"))

        return (base / "git-msg").expanduser()

    @property
    def log_file(self) -> Path:
        """Get the log file path."""
        return self.cache_dir / "git-msg.log"

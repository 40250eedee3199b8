"""
AI backend factory.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import aiohttp
from loguru import logger

from .base import AIBackend, BackendConfigError
from .gemini import GeminiBackend
from .ollama import OllamaBackend
from .openai import OpenAIBackend


class ProviderVariant(str, Enum):
    """Supported AI providers."""

    OLLAMA = "ollama"
    OPENAI = "openai"
    GEMINI = "gemini"

    @property
    def default_model(self) -> str:
        return _DEFAULT_MODELS[self]

    @property
    def default_api_url(self) -> str:
        return _DEFAULT_API_URLS[self]

    @property
    def requires_api_key(self) -> bool:
        return self is not ProviderVariant.OLLAMA

    @property
    def display_name(self) -> str:
        return BackendFactory._backends[self].display_name


_DEFAULT_MODELS = {
    ProviderVariant.OLLAMA: "qwen2.5-coder",
    ProviderVariant.OPENAI: "gpt-4o-mini",
    ProviderVariant.GEMINI: "gemini-2.0-flash-lite",
}

_DEFAULT_API_URLS = {
    ProviderVariant.OLLAMA: "http://localhost:11434",
    ProviderVariant.OPENAI: "https://api.openai.com/v1",
    ProviderVariant.GEMINI: "https://generativelanguage.googleapis.com",
}


@dataclass(frozen=True)
class ProviderConfig:
    """Everything needed to build one backend for one run."""

    variant: ProviderVariant
    model: Optional[str] = None
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    verbose: bool = False


class BackendFactory:
    """Factory for creating AI backends."""

    _backends = {
        ProviderVariant.OLLAMA: OllamaBackend,
        ProviderVariant.OPENAI: OpenAIBackend,
        ProviderVariant.GEMINI: GeminiBackend,
    }

    @classmethod
    def create_backend(
        cls,
        config: ProviderConfig,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> AIBackend:
        """Create the backend selected by ``config``.

        No I/O happens here; a missing API key for a hosted provider fails
        before any request is made.
        """
        variant = ProviderVariant(config.variant)
        backend_class = cls._backends[variant]

        model = config.model or variant.default_model
        api_url = config.base_url or variant.default_api_url

        if not variant.requires_api_key:
            backend = backend_class(
                api_url=api_url,
                model=model,
                verbose=config.verbose,
                session=session,
            )
        else:
            if not config.api_key:
                raise BackendConfigError(
                    backend_class.display_name,
                    f"API key is required for {backend_class.display_name}. "
                    f"Pass --api-key or set GIT_MSG_API_KEY."
                )
            backend = backend_class(
                api_url=api_url,
                model=model,
                api_key=config.api_key,
                verbose=config.verbose,
                session=session,
            )

        logger.debug(f"Created {backend.backend_type} backend for model {model} at {backend.api_url}")
        return backend

    @classmethod
    def list_supported_backends(cls) -> list[str]:
        """List all supported backend types."""
        return [variant.value for variant in cls._backends]


def create_provider(config: ProviderConfig) -> AIBackend:
    """Create an AI backend from a provider configuration."""
    return BackendFactory.create_backend(config)

"""
Abstract base class for AI backends and the shared HTTP plumbing.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import aiohttp
from loguru import logger


class AIBackendError(Exception):
    """Base exception for AI backend failures."""

    def __init__(self, backend: str, message: str):
        super().__init__(message)
        self.backend = backend


class BackendConfigError(AIBackendError):
    """Backend cannot be constructed from the given configuration."""


class BackendConnectionError(AIBackendError):
    """The backend could not be reached."""


class BackendDecodeError(AIBackendError):
    """The backend answered with a body that is not JSON."""


class BackendAPIError(AIBackendError):
    """The backend reported an error in its JSON payload."""


class UnparseableResponseError(AIBackendError):
    """The JSON payload carries none of the expected content fields."""


class AIBackend(ABC):
    """Abstract base class for AI backends.

    A backend turns a prompt into generated text with exactly one HTTP
    request per call. Backends hold configuration only; an aiohttp session
    may be injected, otherwise a short-lived one is opened per call.
    """

    display_name = "AI"

    def __init__(
        self,
        api_url: str,
        model: str,
        verbose: bool = False,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """Initialize the AI backend."""
        self.api_url = api_url.rstrip('/')
        self.model = model
        self.verbose = verbose
        self.backend_type = self.__class__.__name__.lower().replace('backend', '')
        self._session = session

    @abstractmethod
    async def generate_text(self, prompt: str) -> str:
        """Send the prompt to the backend and return the generated text."""
        pass

    def _log(self, message: str) -> None:
        # verbose only changes visibility, never behaviour
        logger.log("INFO" if self.verbose else "DEBUG", message)

    def _log_request(self, url: str, prompt: str) -> None:
        """Log the API request details."""
        self._log(f"Sending request to {self.display_name} API...")
        logger.debug(f"URL: {url}")
        logger.debug(f"Model: {self.model}")
        logger.debug(f"Prompt length: {len(prompt)} characters")

    def _connection_hint(self) -> Optional[str]:
        """Extra advice logged when the backend cannot be reached."""
        return None

    async def _send(
        self,
        url: str,
        payload: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> str:
        """POST the JSON payload and return the raw response body."""
        try:
            if self._session is not None:
                return await self._post(self._session, url, payload, headers, params)
            async with aiohttp.ClientSession() as session:
                return await self._post(session, url, payload, headers, params)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Failed to connect to {self.display_name} API: {e}")
            hint = self._connection_hint()
            if hint:
                logger.error(hint)
            raise BackendConnectionError(
                self.display_name,
                f"Connection to {self.display_name} failed: {e}"
            ) from e

    async def _post(self, session, url, payload, headers, params) -> str:
        async with session.post(url, json=payload, headers=headers, params=params) as response:
            self._log(f"{self.display_name} API response status: {response.status}")
            text = await response.text(errors="replace")

        self._log(f"Raw response: {text}")
        return text

    def _decode(self, text: str) -> Any:
        """Decode a response body as JSON."""
        try:
            return json.loads(text)
        except ValueError as e:
            raise BackendDecodeError(
                self.display_name,
                f"Failed to decode {self.display_name} response as JSON: {e}"
            ) from e

    def _api_error(self, detail: str) -> BackendAPIError:
        return BackendAPIError(self.display_name, f"{self.display_name} API error: {detail}")

    def _unparseable(self) -> UnparseableResponseError:
        return UnparseableResponseError(
            self.display_name,
            f"Failed to parse {self.display_name} response"
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(api_url={self.api_url!r}, model={self.model!r})"

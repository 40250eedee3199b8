"""
Google Gemini generateContent backend implementation.
"""

import json
from typing import Any, Optional

import aiohttp

from .base import AIBackend


class GeminiBackend(AIBackend):
    """Gemini generative language API backend.

    The API key travels as the ``key`` query parameter, not as a header.
    """

    display_name = "Gemini"

    def __init__(
        self,
        api_url: str,
        model: str,
        api_key: str,
        verbose: bool = False,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        super().__init__(api_url, model, verbose=verbose, session=session)
        self.api_key = api_key

    async def generate_text(self, prompt: str) -> str:
        """Call the generateContent API."""
        url = f"{self.api_url}/v1beta/models/{self.model}:generateContent"
        self._log_request(url, prompt)

        payload = {"contents": [{"parts": [{"text": prompt}]}]}

        text = await self._send(url, payload, params={"key": self.api_key})
        data = self._decode(text)
        return self.extract_content(data)

    def extract_content(self, data: Any) -> str:
        """Return ``candidates[0].content.parts[0].text`` or raise."""
        if not isinstance(data, dict):
            raise self._unparseable()

        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            text = None
        if isinstance(text, str):
            return text

        if "error" in data:
            # The whole payload, so code and status survive
            raise self._api_error(json.dumps(data["error"], separators=(",", ":"), ensure_ascii=False))

        raise self._unparseable()

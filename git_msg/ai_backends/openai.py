"""
OpenAI chat-completions backend implementation.
"""

from typing import Any, Optional

import aiohttp

from .base import AIBackend


SYSTEM_PROMPT = "You are a helpful assistant that generates git commit messages."


class OpenAIBackend(AIBackend):
    """OpenAI-compatible chat completions backend."""

    display_name = "OpenAI"

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
        """Call the chat completions API."""
        url = f"{self.api_url}/chat/completions"
        self._log_request(url, prompt)

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": 0.7,
            "max_tokens": 1000,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        text = await self._send(url, payload, headers=headers)
        data = self._decode(text)
        return self.extract_content(data)

    def extract_content(self, data: Any) -> str:
        """Return ``choices[0].message.content`` or raise."""
        if not isinstance(data, dict):
            raise self._unparseable()

        choices = data.get("choices")
        if isinstance(choices, list) and choices:
            message = choices[0].get("message") if isinstance(choices[0], dict) else None
            if isinstance(message, dict) and isinstance(message.get("content"), str):
                return message["content"]

        error = data.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            raise self._api_error(error["message"])

        raise self._unparseable()

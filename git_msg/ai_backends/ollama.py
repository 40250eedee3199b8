"""
Ollama AI backend implementation.
"""

from typing import Any, Optional

from .base import AIBackend


class OllamaBackend(AIBackend):
    """Ollama AI backend implementation."""

    display_name = "Ollama"

    async def generate_text(self, prompt: str) -> str:
        """Call the Ollama generate API."""
        url = f"{self.api_url}/api/generate"
        self._log_request(url, prompt)

        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
        }

        text = await self._send(url, payload)
        data = self._decode(text)
        return self.extract_content(data, text)

    def extract_content(self, data: Any, raw_text: str) -> str:
        """Pull the generated text out of an Ollama reply.

        Ollama replies are loosely shaped, so anything unrecognised is
        handed back verbatim rather than treated as a failure.
        """
        if not isinstance(data, dict):
            return raw_text

        response = data.get("response")
        if isinstance(response, str):
            return response

        error = data.get("error")
        if isinstance(error, str):
            raise self._api_error(error)

        # chat-style reply, e.g. from /api/chat compatible proxies
        message = data.get("message")
        if isinstance(message, dict) and isinstance(message.get("content"), str):
            return message["content"]

        return raw_text

    def _connection_hint(self) -> Optional[str]:
        return f"Make sure Ollama is running on {self.api_url}"

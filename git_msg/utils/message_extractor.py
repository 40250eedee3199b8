"""
Commit message extraction from free-form AI responses.
"""

import re
from typing import List

from loguru import logger


class MessageExtractor:
    """Extract a bounded list of commit messages from an AI response.

    Parsing is best effort and never raises. Strategies are tried in order:

    1. numbered or conventional-commit lines (only when several messages
       were requested)
    2. any line containing a colon, up to the requested count
    3. the first non-empty line
    """

    # Signals only; the extractor does not validate commit types
    COMMIT_MARKERS = ("feat(", "fix(", "docs(", "style(", "refactor(")

    _NUMBER_PREFIX = re.compile(r'^[0-9.) ]+')

    def extract_commit_messages(self, raw_response: str, count: int) -> List[str]:
        """Extract at most ``count`` commit messages from ``raw_response``."""
        if count <= 0:
            return []

        lines = self._normalize_lines(raw_response)
        logger.debug(f"Extracting {count} commit message(s) from {len(lines)} line(s)")

        messages: List[str] = []

        if count > 1:
            messages = self._extract_numbered_lines(lines)
            if messages:
                logger.debug(f"Matched {len(messages)} numbered/conventional line(s)")

        if not messages:
            messages = self._extract_colon_lines(lines, count)
            if messages:
                logger.debug(f"Matched {len(messages)} line(s) containing a colon")

        if not messages and lines:
            messages = self._fallback_first_line(lines)
            logger.debug("Falling back to the first non-empty line")

        if not messages:
            logger.warning("Could not extract any commit message from response")

        return messages[:count]

    def _normalize_lines(self, response: str) -> List[str]:
        return [line.strip() for line in response.split("\n") if line.strip()]

    def _strip_number_prefix(self, line: str) -> str:
        """Drop a leading list marker such as ``1.``, ``2)`` or ``10. ``."""
        return self._NUMBER_PREFIX.sub('', line).strip()

    def _is_numbered_line(self, line: str) -> bool:
        return line[:1] in "0123456789" and ':' in line

    def _has_commit_marker(self, line: str) -> bool:
        return any(marker in line for marker in self.COMMIT_MARKERS)

    def _extract_numbered_lines(self, lines: List[str]) -> List[str]:
        """Lines that are numbered (with a colon) or carry a commit marker."""
        return [
            self._strip_number_prefix(line)
            for line in lines
            if self._is_numbered_line(line) or self._has_commit_marker(line)
        ]

    def _extract_colon_lines(self, lines: List[str], count: int) -> List[str]:
        """Lines containing a colon, stopping once ``count`` are found."""
        messages = []
        for line in lines:
            if ':' not in line:
                continue
            messages.append(self._strip_number_prefix(line))
            if len(messages) >= count:
                break
        return messages

    def _fallback_first_line(self, lines: List[str]) -> List[str]:
        return [self._strip_number_prefix(lines[0])]


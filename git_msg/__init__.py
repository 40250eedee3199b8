"""
git-msg - AI-powered Git commit message generator.

Reads the staged diff and asks a local or hosted language model
(Ollama, OpenAI, Gemini) for conventional commit message candidates.
"""

__version__ = "0.2.1"

from git_msg.core import CommitMessageGenerator, GenerationRequest, GitMsg
from git_msg.config.settings import Settings

__all__ = ["GitMsg", "CommitMessageGenerator", "GenerationRequest", "Settings"]

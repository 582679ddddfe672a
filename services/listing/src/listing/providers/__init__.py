"""Generation backend clients."""

from .ollama_client import OllamaVisionClient
from .openai_client import OpenAIChatClient

__all__ = ["OllamaVisionClient", "OpenAIChatClient"]

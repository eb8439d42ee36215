"""
Responses API backends.

OpenAIProvider talks to the public Responses API with an API key;
ChatGPTProvider talks to the ChatGPT Codex backend with session tokens.
"""
from providers.base_provider import BaseProvider
from providers.openai_provider import OpenAIProvider
from providers.chatgpt_provider import ChatGPTProvider

__all__ = [
    "BaseProvider",
    "OpenAIProvider",
    "ChatGPTProvider",
]

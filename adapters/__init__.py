"""
Adapters package - clients for external services.
"""

from adapters.openai_adapter import OpenAIClient, AIProviderError, build_client

__all__ = ["OpenAIClient", "AIProviderError", "build_client"]

"""
OpenAI chat-completions adapter.

Thin async wrapper around the HTTP API using httpx; any OpenAI-compatible
endpoint works by pointing openai_base_url at it.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from app.config import settings

logger = logging.getLogger("homehub.adapters.openai")


class AIProviderError(Exception):
    """Raised when the provider call fails or returns an unusable payload."""


class OpenAIClient:
    """Minimal chat-completions client."""

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = (base_url or settings.openai_base_url).rstrip("/")
        self._transport = transport

    async def chat_completion(
        self,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
        response_format: Optional[Dict[str, Any]] = None,
        timeout: float = 10.0,
    ) -> str:
        """
        Send one chat-completions request and return the first choice's content.

        Args:
            messages: OpenAI-style message list
            model: Model name
            temperature: Sampling temperature
            max_tokens: Completion token cap
            response_format: e.g. {"type": "json_object"}
            timeout: Total request timeout in seconds

        Returns:
            The message content string

        Raises:
            AIProviderError: On transport errors, non-2xx responses or empty content
        """
        payload: Dict[str, Any] = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if response_format:
            payload["response_format"] = response_format

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(timeout, connect=min(timeout, 10.0)),
                transport=self._transport,
            ) as client:
                resp = await client.post(
                    f"{self.base_url}/chat/completions", headers=headers, json=payload
                )
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            raise AIProviderError(
                f"OpenAI returned HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise AIProviderError(f"OpenAI request failed: {e}") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise AIProviderError("Malformed OpenAI response") from e

        if not content:
            raise AIProviderError("No response from OpenAI")

        logger.debug(f"OpenAI {model} returned {len(content)} chars")
        return content


def build_client(api_key: Optional[str] = None) -> Optional[OpenAIClient]:
    """Client for the configured key, or None when no key is available."""
    key = api_key or settings.openai_api_key
    if not key:
        return None
    return OpenAIClient(key)

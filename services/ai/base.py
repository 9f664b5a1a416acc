"""
Base class for AI-backed features.

Every feature runs through execute_with_fallback: the configured provider is
tried with retries, and a deterministic mock answers when the provider is
unavailable and the feature allows it.
"""

import inspect
import json
import logging
import re
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar, Union

import anyio

from adapters.openai_adapter import OpenAIClient, build_client
from domain.schemas.ai_schemas import AIResponse
from services.ai.config import AIConfig, AIConfigManager, ai_config_manager

logger = logging.getLogger("homehub.ai.base")

T = TypeVar("T")

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class BaseAIService:
    """Retry-with-fallback wrapper around one provider call."""

    feature: str = ""
    retry_base_delay: float = 1.0  # seconds; attempt i waits base * 2**i

    def __init__(
        self,
        config_manager: Optional[AIConfigManager] = None,
        client: Optional[OpenAIClient] = None,
    ):
        self.config_manager = config_manager or ai_config_manager
        self._client = client

    @property
    def config(self) -> AIConfig:
        return self.config_manager.get_config(self.feature)

    def get_client(self, config: AIConfig) -> Optional[OpenAIClient]:
        if self._client is not None:
            return self._client
        return build_client(config.api_key)

    async def execute_with_fallback(
        self,
        ai_call: Callable[[OpenAIClient, AIConfig], Awaitable[T]],
        mock_call: Callable[[], Union[T, Awaitable[T]]],
    ) -> AIResponse:
        """
        Run the feature through its configured provider.

        Order of preference:
        1. Feature disabled -> failure, provider "disabled"
        2. provider "openai" with a client -> ai_call with retries
        3. OpenAI failure (or no client) with fallback_to_mock -> mock_call
        4. provider "mock" -> mock_call

        Failures are reported in the response, never raised.
        """
        start = time.perf_counter()
        config = self.config

        def elapsed() -> float:
            return round((time.perf_counter() - start) * 1000, 2)

        if not config.enabled or config.provider == "disabled":
            return AIResponse(
                success=False,
                error=f"{self.feature} AI is disabled",
                provider="disabled",
                processing_time=elapsed(),
            )

        if config.provider == "openai":
            client = self.get_client(config)
            if client is not None:
                try:
                    data = await self.with_retry(
                        lambda: ai_call(client, config), config.retry_attempts
                    )
                    return AIResponse(
                        success=True, data=data, provider="openai", processing_time=elapsed()
                    )
                except Exception as ai_error:
                    logger.warning(f"{self.feature}: OpenAI failed: {ai_error}")
                    if not config.fallback_to_mock:
                        return AIResponse(
                            success=False,
                            error=f"OpenAI failed: {ai_error}",
                            provider="openai",
                            processing_time=elapsed(),
                        )
                    try:
                        data = await self._call_mock(mock_call)
                    except Exception as mock_error:
                        logger.error(f"{self.feature}: mock fallback failed: {mock_error}")
                        return AIResponse(
                            success=False,
                            error=f"Both AI and mock failed: {mock_error}",
                            provider="mock",
                            processing_time=elapsed(),
                            fallback_used=True,
                        )
                    logger.info(f"{self.feature}: served mock fallback")
                    return AIResponse(
                        success=True,
                        data=data,
                        provider="mock",
                        processing_time=elapsed(),
                        fallback_used=True,
                    )

            if config.fallback_to_mock:
                logger.info(f"{self.feature}: no OpenAI client configured, using mock")
                try:
                    data = await self._call_mock(mock_call)
                except Exception as mock_error:
                    return AIResponse(
                        success=False,
                        error=f"Mock failed: {mock_error}",
                        provider="mock",
                        processing_time=elapsed(),
                        fallback_used=True,
                    )
                return AIResponse(
                    success=True,
                    data=data,
                    provider="mock",
                    processing_time=elapsed(),
                    fallback_used=True,
                )

        if config.provider == "mock":
            try:
                data = await self._call_mock(mock_call)
            except Exception as mock_error:
                logger.error(f"{self.feature}: mock failed: {mock_error}")
                return AIResponse(
                    success=False,
                    error=f"Mock failed: {mock_error}",
                    provider="mock",
                    processing_time=elapsed(),
                )
            return AIResponse(
                success=True, data=data, provider="mock", processing_time=elapsed()
            )

        return AIResponse(
            success=False,
            error=f"No valid provider configured for {self.feature}",
            provider="disabled",
            processing_time=elapsed(),
        )

    async def with_retry(self, fn: Callable[[], Awaitable[T]], retries: int) -> T:
        """Call fn up to retries + 1 times with exponential backoff between attempts."""
        last_error: Optional[Exception] = None
        for attempt in range(retries + 1):
            try:
                return await fn()
            except Exception as e:
                last_error = e
                if attempt < retries:
                    delay = self.retry_base_delay * (2 ** attempt)
                    logger.debug(
                        f"{self.feature}: attempt {attempt + 1}/{retries + 1} failed, "
                        f"retrying in {delay:.1f}s: {e}"
                    )
                    await anyio.sleep(delay)
        raise last_error

    @staticmethod
    async def _call_mock(mock_call: Callable[[], Any]) -> Any:
        result = mock_call()
        if inspect.isawaitable(result):
            result = await result
        return result

    @staticmethod
    def create_openai_prompt(system_prompt: str, user_prompt: str) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

    @staticmethod
    def parse_ai_response(content: str, default: T) -> Union[Any, T]:
        """Parse JSON content, tolerating Markdown code fences; default on failure."""
        cleaned = _CODE_FENCE.sub("", (content or "").strip()).strip()
        try:
            return json.loads(cleaned)
        except (TypeError, ValueError) as e:
            logger.warning(f"Failed to parse AI response as JSON: {e}")
            return default

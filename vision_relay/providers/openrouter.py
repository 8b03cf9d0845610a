"""OpenRouter chat-completions provider adapter."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..errors import UpstreamError

logger = logging.getLogger("vision-relay.providers.openrouter")


class OpenRouterProvider:
    """Adapter for the OpenRouter (OpenAI-compatible) chat completions API."""

    DEFAULT_BASE_URL = "https://openrouter.ai/api/v1/chat/completions"

    @staticmethod
    async def call(
        api_key: str,
        payload: dict,
        base_url: str | None = None,
        timeout: int = 30,
        extra_headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> dict:
        """
        Call the chat completions API.

        Args:
            api_key: OpenRouter API key
            payload: Request payload (OpenAI format)
            base_url: Custom endpoint URL (optional)
            timeout: Request timeout in seconds
            extra_headers: Additional headers such as HTTP-Referer / X-Title
            transport: Custom httpx transport (optional)

        Returns:
            Decoded JSON response from the provider
        """
        url = base_url or OpenRouterProvider.DEFAULT_BASE_URL

        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        if extra_headers:
            headers.update(extra_headers)

        try:
            async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
                response = await client.post(url, headers=headers, json=payload)
        except httpx.RequestError as exc:
            logger.error(f"OpenRouter request failed: {exc!r}")
            raise UpstreamError()

        if not response.is_success:
            # 内部ログには詳細を記録、クライアントには一般的なメッセージ
            logger.warning(f"OpenRouter API error: {response.status_code} - {response.text}")
            raise UpstreamError()

        try:
            return response.json()
        except ValueError:
            logger.error(f"OpenRouter returned a non-JSON body: {response.text[:500]}")
            raise UpstreamError()

    @staticmethod
    def extract_content(response: Any) -> Optional[Any]:
        """Return ``choices[0].message.content`` or None when the shape is absent."""
        if not isinstance(response, dict):
            return None
        choices = response.get("choices")
        if not isinstance(choices, list) or not choices:
            return None
        first = choices[0]
        if not isinstance(first, dict):
            return None
        message = first.get("message")
        if not isinstance(message, dict):
            return None
        return message.get("content")

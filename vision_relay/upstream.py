from __future__ import annotations

import logging
from typing import Dict, Optional

import httpx

from .config import Settings
from .errors import UpstreamError
from .providers.openrouter import OpenRouterProvider

logger = logging.getLogger("vision-relay.upstream")


def _attribution_headers(settings: Settings) -> Dict[str, str]:
    headers = {}
    if settings.openrouter_referer:
        headers["HTTP-Referer"] = settings.openrouter_referer
    if settings.openrouter_title:
        headers["X-Title"] = settings.openrouter_title
    return headers


async def call_openrouter(
    payload: dict,
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> dict:
    if not settings.openrouter_api_key:
        logger.error("OPENROUTER_API_KEY is not configured")
        raise UpstreamError()

    return await OpenRouterProvider.call(
        api_key=settings.openrouter_api_key,
        payload=payload,
        base_url=settings.openrouter_endpoint,
        timeout=settings.request_timeout_seconds,
        extra_headers=_attribution_headers(settings),
        transport=transport,
    )

"""HTTP fetcher with retries and exponential backoff."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class FetchError(RuntimeError):
    def __init__(self, url: str, attempts: int, reason: str) -> None:
        super().__init__(f"Failed to fetch HTML from {url} after {attempts} attempts: {reason}")
        self.url = url
        self.attempts = attempts
        self.reason = reason


async def fetch_html(
    url: str,
    retries: int = 0,
    backoff_base: float = 1.0,
    timeout: float = 20.0,
    user_agent: str = "webform/0.1",
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """GET ``url`` and return its body, retrying with ``backoff_base * 2**attempt`` delays."""
    attempts = max(retries, 0) + 1
    error = "request_failed"
    async with httpx.AsyncClient(
        follow_redirects=True,
        headers={"User-Agent": user_agent},
        timeout=timeout,
        transport=transport,
    ) as client:
        for attempt in range(attempts):
            if attempt:
                logger.info("Retry attempt %d of %d for %s", attempt, retries, url)
            try:
                response = await client.get(url)
                response.raise_for_status()
                return response.text
            except httpx.InvalidURL as exc:
                raise FetchError(url, attempt + 1, str(exc)) from exc
            except httpx.HTTPError as exc:
                error = str(exc) or exc.__class__.__name__
                logger.warning("Fetch attempt %d failed for %s: %s", attempt + 1, url, error)
            if attempt < attempts - 1:
                wait = backoff_base * (2**attempt)
                logger.debug("Waiting %.1fs before retrying", wait)
                await asyncio.sleep(wait)
    raise FetchError(url, attempts, error)


__all__ = ["FetchError", "fetch_html"]

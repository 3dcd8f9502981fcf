"""
Outbound HTTP helper shared by the CRM and completion clients
"""
import asyncio
from typing import Any, Optional

import httpx

from kiosk_backend.utils.logger import get_logger

logger = get_logger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


def safe_json(response: httpx.Response) -> Any:
    """Decoded JSON body, or the raw text when the body is not JSON"""
    try:
        return response.json()
    except ValueError:
        return response.text


async def request_with_retry(
    method: str,
    url: str,
    label: str,
    timeout: float,
    max_retries: int = 0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    **kwargs
) -> httpx.Response:
    """
    Make HTTP request, retrying transient failures when max_retries > 0

    Args:
        method: HTTP method (GET, POST)
        url: Absolute URL
        label: Call description for logs (must not contain credentials)
        timeout: Per-attempt timeout in seconds
        max_retries: Extra attempts after the first one
        transport: Optional httpx transport (tests inject MockTransport)
        **kwargs: Additional arguments for httpx

    Returns:
        The final response, successful or not

    Raises:
        httpx.HTTPError: On transport failure of the last attempt
    """
    attempts = 1 + max(max_retries, 0)

    for attempt in range(attempts):
        last_attempt = attempt == attempts - 1
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
                response = await client.request(method=method, url=url, **kwargs)
        except httpx.HTTPError as e:
            if last_attempt:
                logger.error(f"{label} transport failure: {e}")
                raise
            reason = str(e)
        else:
            if response.status_code not in RETRYABLE_STATUS_CODES or last_attempt:
                logger.info(f"{label} -> {response.status_code}")
                return response
            reason = f"HTTP {response.status_code}"

        wait_time = 2 ** attempt  # Exponential backoff
        logger.warning(
            f"{label} failed (attempt {attempt + 1}/{attempts}), "
            f"retrying in {wait_time}s: {reason}"
        )
        await asyncio.sleep(wait_time)

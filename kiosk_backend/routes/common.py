"""
Shared request handling for the kiosk routes
"""
from typing import Any, Dict

from fastapi import Request

from kiosk_backend.utils.logger import get_logger

logger = get_logger(__name__)


async def read_json_object(request: Request) -> Dict[str, Any]:
    """
    Request body as a dict; empty, malformed or non-object JSON yields {}

    Each route then reports the missing fields in its own error shape
    instead of FastAPI's 422 body.
    """
    if not await request.body():
        return {}
    try:
        payload = await request.json()
    except ValueError as e:
        logger.warning(f"Malformed JSON body on {request.url.path}: {e}")
        return {}
    if not isinstance(payload, dict):
        logger.warning(f"Non-object JSON body on {request.url.path}: {type(payload).__name__}")
        return {}
    return payload

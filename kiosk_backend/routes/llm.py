"""
LLM proxy route

Keeps the OpenAI key server-side; the kiosk sends the conversation and gets
the raw assistant text back.
"""
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from kiosk_backend.config import Settings, get_settings
from kiosk_backend.errors import KioskError
from kiosk_backend.routes.common import read_json_object
from kiosk_backend.services.completion import CompletionProxy
from kiosk_backend.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["llm"])


def get_completion_proxy(settings: Settings = Depends(get_settings)) -> CompletionProxy:
    return CompletionProxy(settings)


def llm_error(status_code: int, error: str, detail: Any = None) -> JSONResponse:
    content = {"error": error}
    if detail is not None:
        content["detail"] = detail
    return JSONResponse(status_code=status_code, content=content)


@router.post("/llm")
async def proxy_completion(
    request: Request,
    proxy: CompletionProxy = Depends(get_completion_proxy)
):
    """
    Forward {messages, temperature?, model?} to the completion provider

    Returns:
        {ok: true, content} on success, {error, detail?} with 400/500/502 otherwise
    """
    payload = await read_json_object(request)
    try:
        result = await proxy.complete(
            payload.get("messages"),
            model=payload.get("model"),
            temperature=payload.get("temperature"),
        )
    except KioskError as e:
        logger.warning(f"LLM proxy rejected ({e.status_code}): {e.message}")
        return llm_error(e.status_code, e.message, e.detail)
    except Exception as e:
        logger.error(f"LLM proxy failed: {e}", exc_info=True)
        return llm_error(500, "Server error", str(e))

    return {"ok": True, "content": result.content}

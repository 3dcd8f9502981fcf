"""
Kiosk ticket API routes

POST /api/repairshopr/ticket turns a kiosk check-in into a RepairShopr
ticket, creating the customer first when no match exists.
"""
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from kiosk_backend.config import Settings, get_settings
from kiosk_backend.errors import KioskError
from kiosk_backend.models.checkin import CheckInSubmission
from kiosk_backend.routes.common import read_json_object
from kiosk_backend.services.checkin import CheckInService
from kiosk_backend.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/repairshopr", tags=["tickets"])


def get_checkin_service(settings: Settings = Depends(get_settings)) -> CheckInService:
    """Request-scoped check-in pipeline"""
    return CheckInService(settings)


def ticket_error(status_code: int, error: str, detail: Any = None) -> JSONResponse:
    content = {"ok": False, "error": error}
    if detail is not None:
        content["detail"] = detail
    return JSONResponse(status_code=status_code, content=content)


@router.post("/ticket")
async def create_ticket(
    request: Request,
    service: CheckInService = Depends(get_checkin_service)
):
    """
    Create a ticket from a kiosk check-in

    Returns:
        {ok, ticket_id, ticket_number, ticket} on success,
        {ok: false, error, detail?} with 400/500/502 otherwise
    """
    payload = await read_json_object(request)
    try:
        submission = CheckInSubmission.model_validate(payload)
        result = await service.process(submission)
    except KioskError as e:
        logger.warning(f"Check-in rejected ({e.status_code}): {e.message}")
        return ticket_error(e.status_code, e.message, e.detail)
    except Exception as e:
        logger.error(f"Check-in failed: {e}", exc_info=True)
        return ticket_error(500, "Server error", str(e))

    return {
        "ok": True,
        "ticket_id": result.ticket_id,
        "ticket_number": result.ticket_number,
        "ticket": result.ticket,
    }

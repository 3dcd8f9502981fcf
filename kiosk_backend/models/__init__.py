"""
Pydantic models for the Kiosk Check-In Backend
"""

from kiosk_backend.models.checkin import (
    CustomerId,
    ProblemCategory,
    CheckInSubmission,
    TicketComment,
    TicketPayload,
    TicketResult,
)
from kiosk_backend.models.chat import (
    ChatExchange,
    CompletionResult,
)

__all__ = [
    "CustomerId",
    "ProblemCategory",
    "CheckInSubmission",
    "TicketComment",
    "TicketPayload",
    "TicketResult",
    "ChatExchange",
    "CompletionResult",
]

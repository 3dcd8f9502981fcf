"""
Ticket composition and submission
"""
from typing import List, Optional

from kiosk_backend.models.checkin import (
    CheckInSubmission,
    CustomerId,
    TicketComment,
    TicketPayload,
    TicketResult,
)
from kiosk_backend.services.classifier import classify_problem
from kiosk_backend.services.repairshopr import RepairShoprClient
from kiosk_backend.utils.logger import get_logger
from kiosk_backend.utils.sanitize import sanitize
from kiosk_backend.utils.shape import TICKET_ID_PATHS, TICKET_NUMBER_PATHS, first_present

logger = get_logger(__name__)

DEFAULT_SUBJECT = "New Service Request"
COMMENT_SUBJECT = "Kiosk Check-In"
SUBJECT_MAX_LENGTH = 120
LONG_TEXT_MAX_LENGTH = 2000


class TicketComposer:
    """Builds the RepairShopr ticket payload for a check-in"""

    @staticmethod
    def build_subject(submission: CheckInSubmission) -> str:
        for value in (submission.visit_reason, submission.issue):
            subject = sanitize(value, SUBJECT_MAX_LENGTH)
            if subject:
                return subject
        return DEFAULT_SUBJECT

    @staticmethod
    def build_note_lines(submission: CheckInSubmission) -> List[str]:
        """
        Note lines in fixed order: Issue, Device, Preference, Contact,
        Address, Notes. Only Contact is unconditional.
        """
        lines = []

        issue = sanitize(submission.issue, LONG_TEXT_MAX_LENGTH)
        if issue:
            lines.append(f"Issue: {issue}")

        brand = sanitize(submission.device_brand, 120)
        model = sanitize(submission.device_model, 120)
        device = " ".join(part for part in (brand, model) if part)
        if device:
            lines.append(f"Device: {device}")

        preference = sanitize(submission.onsite_or_dropoff, 40)
        if preference:
            lines.append(f"Preference: {preference}")

        lines.append(
            f"Contact: {sanitize(submission.first_name, 80)} {sanitize(submission.last_name, 80)}"
            f" — {sanitize(submission.mobile, 40)} / {sanitize(submission.email, 120)}"
        )

        address_parts = [
            sanitize(part, 120)
            for part in (submission.address, submission.city, submission.state, submission.zip)
        ]
        address_parts = [part for part in address_parts if part]
        if address_parts:
            lines.append(f"Address: {', '.join(address_parts)}")

        notes = sanitize(submission.extra_notes, LONG_TEXT_MAX_LENGTH)
        if notes:
            lines.append(f"Notes: {notes}")

        return lines

    def compose(self, submission: CheckInSubmission, customer_id: CustomerId) -> TicketPayload:
        """
        Assemble subject, problem type and hidden check-in note

        Args:
            submission: Validated check-in
            customer_id: Resolved or newly created customer

        Returns:
            TicketPayload ready for submission
        """
        body = "\n".join(self.build_note_lines(submission))
        return TicketPayload(
            customer_id=customer_id,
            subject=self.build_subject(submission),
            problem_type=classify_problem(submission.reason_text),
            comments_attributes=[
                TicketComment(subject=COMMENT_SUBJECT, body=body, hidden=True)
            ],
        )


class TicketGateway:
    """Submits ticket payloads to RepairShopr"""

    def __init__(self, client: RepairShoprClient):
        self.client = client

    async def submit(self, payload: TicketPayload) -> TicketResult:
        """
        Create the ticket; each call creates a new ticket

        Raises:
            ExternalServiceError: CRM rejected the ticket
        """
        ticket = await self.client.create_ticket(payload.to_request_body())

        ticket_id: Optional[CustomerId] = first_present(ticket, TICKET_ID_PATHS)
        ticket_number = first_present(ticket, TICKET_NUMBER_PATHS)
        if ticket_number is None:
            ticket_number = ticket_id

        logger.info(f"Created ticket {ticket_id} (#{ticket_number}) for customer {payload.customer_id}")
        return TicketResult(ticket_id=ticket_id, ticket_number=ticket_number, ticket=ticket)

"""
Check-in pipeline: validate, resolve or create the customer, open the ticket
"""
from typing import Optional

from kiosk_backend.config import Settings
from kiosk_backend.errors import ConfigurationError, ValidationError
from kiosk_backend.models.checkin import CheckInSubmission, TicketResult
from kiosk_backend.services.customers import (
    CustomerProvisioner,
    CustomerResolver,
    ensure_customer_id,
)
from kiosk_backend.services.repairshopr import RepairShoprClient
from kiosk_backend.services.tickets import TicketComposer, TicketGateway
from kiosk_backend.utils.logger import get_logger

logger = get_logger(__name__)


class CheckInService:
    """
    Runs one kiosk check-in to completion

    No compensation happens if the ticket fails after a customer was
    created; the orphaned customer stays in the CRM.
    """

    def __init__(
        self,
        settings: Settings,
        client: Optional[RepairShoprClient] = None
    ):
        self.crm_configured = settings.crm_configured
        self.client = client or RepairShoprClient(settings)
        self.resolver = CustomerResolver(self.client)
        self.provisioner = CustomerProvisioner(self.client)
        self.composer = TicketComposer()
        self.gateway = TicketGateway(self.client)

    async def process(self, submission: CheckInSubmission) -> TicketResult:
        """
        Create a RepairShopr ticket for a kiosk submission

        Raises:
            ValidationError: Required contact fields missing
            ConfigurationError: CRM credentials not configured
            ExternalServiceError: CRM rejected the customer or ticket
        """
        missing = submission.missing_required_fields()
        if missing:
            raise ValidationError(f"Missing fields: {', '.join(missing)}")
        if not self.crm_configured:
            raise ConfigurationError("Missing REPAIRSHOPR_SUBDOMAIN or REPAIRSHOPR_API_KEY in .env")

        customer_id = await ensure_customer_id(self.resolver, self.provisioner, submission)
        payload = self.composer.compose(submission, customer_id)
        return await self.gateway.submit(payload)

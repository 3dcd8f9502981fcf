"""
Customer resolution and provisioning

Resolution is heuristic: one search term goes to the CRM, exact contact
matches are preferred, and the CRM's own ordering decides otherwise. When
nothing is found the provisioner creates a fresh record.
"""
from typing import Any, Dict, List, Optional

from kiosk_backend.errors import ExternalServiceError
from kiosk_backend.models.checkin import CheckInSubmission, CustomerId
from kiosk_backend.services.repairshopr import RepairShoprClient
from kiosk_backend.utils.logger import get_logger
from kiosk_backend.utils.sanitize import sanitize
from kiosk_backend.utils.shape import CUSTOMER_ID_PATHS, first_present

logger = get_logger(__name__)

SEARCH_TERM_MAX_LENGTH = 120
CONTACT_FIELDS = ("email", "mobile", "phone")

# Outbound field name -> (submission attribute, cap, omit when empty)
CUSTOMER_FIELDS = (
    ("business_name", "business_name", 120, True),
    ("firstname", "first_name", 80, False),
    ("lastname", "last_name", 80, False),
    ("email", "email", 120, False),
    ("phone", "phone", 40, True),
    ("mobile", "mobile", 40, False),
    ("address", "address", 120, True),
    ("city", "city", 80, True),
    ("state", "state", 40, True),
    ("zip", "zip", 20, True),
)


def build_search_term(contact: CheckInSubmission) -> str:
    """First non-empty of email, mobile, phone, then the full name"""
    for field in CONTACT_FIELDS:
        candidate = sanitize(getattr(contact, field), SEARCH_TERM_MAX_LENGTH)
        if candidate:
            return candidate
    full_name = f"{sanitize(contact.first_name)} {sanitize(contact.last_name)}"
    return sanitize(full_name, SEARCH_TERM_MAX_LENGTH)


def pick_candidate(
    candidates: List[Dict[str, Any]],
    contact: CheckInSubmission
) -> Optional[CustomerId]:
    """
    Choose a customer id from search results

    The first candidate sharing an email, mobile or phone value with the
    submission wins; otherwise the first candidate is trusted.

    Args:
        candidates: Customer records in CRM order
        contact: Submission being resolved

    Returns:
        Customer id, or None when no candidate carries one
    """
    wanted = {sanitize(getattr(contact, f)) for f in CONTACT_FIELDS}
    wanted.discard("")

    exact = None
    for candidate in candidates:
        pool = {str(candidate[f]) for f in CONTACT_FIELDS if candidate.get(f)}
        if pool & wanted:
            exact = candidate
            break

    if exact is not None:
        exact_id = first_present(exact, [("id",)])
        if exact_id is not None:
            return exact_id
    if candidates:
        return first_present(candidates[0], [("id",)])
    return None


class CustomerResolver:
    """Looks up an existing CRM customer for a check-in"""

    def __init__(self, client: RepairShoprClient):
        self.client = client

    async def resolve(self, contact: CheckInSubmission) -> Optional[CustomerId]:
        """
        Find a matching customer id

        A failed search is not an error here: it degrades to "not found" so
        the caller falls through to provisioning.

        Args:
            contact: Check-in submission

        Returns:
            Customer id or None
        """
        query = build_search_term(contact)
        try:
            candidates = await self.client.search_customers(query)
        except ExternalServiceError as e:
            logger.warning(f"Customer search failed, treating as not found: {e.message}")
            return None

        customer_id = pick_candidate(candidates, contact)
        if customer_id is None:
            logger.info(f"No customer found among {len(candidates)} candidates")
        else:
            logger.info(f"Resolved customer {customer_id} from {len(candidates)} candidates")
        return customer_id


class CustomerProvisioner:
    """Creates CRM customers for first-time visitors"""

    def __init__(self, client: RepairShoprClient):
        self.client = client

    @staticmethod
    def build_body(contact: CheckInSubmission) -> Dict[str, Any]:
        body = {}
        for key, attribute, cap, optional in CUSTOMER_FIELDS:
            value = sanitize(getattr(contact, attribute), cap)
            if optional and not value:
                continue
            body[key] = value
        return body

    async def create(self, contact: CheckInSubmission) -> CustomerId:
        """
        Create a customer and return its id

        Raises:
            ExternalServiceError: CRM rejected the record or returned no id
        """
        data = await self.client.create_customer(self.build_body(contact))
        customer_id = first_present(data, CUSTOMER_ID_PATHS)
        if customer_id is None:
            raise ExternalServiceError(
                "RepairShopr customer create returned no id",
                detail=data
            )
        logger.info(f"Created customer {customer_id}")
        return customer_id


async def ensure_customer_id(
    resolver: CustomerResolver,
    provisioner: CustomerProvisioner,
    contact: CheckInSubmission
) -> CustomerId:
    """Resolve an existing customer, creating one on a miss"""
    existing = await resolver.resolve(contact)
    if existing is not None:
        return existing
    return await provisioner.create(contact)

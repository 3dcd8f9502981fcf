"""
Check-in and ticket data models
"""
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kiosk_backend.utils.sanitize import sanitize

CustomerId = Union[int, str]

REQUIRED_FIELDS = ("first_name", "last_name", "email", "mobile")


class ProblemCategory(str, Enum):
    """RepairShopr problem types assigned to kiosk tickets"""
    VIRUS = "Virus"
    TUNE_UP = "TuneUp"
    OTHER = "Other"
    SOFTWARE = "Software"


class CheckInSubmission(BaseModel):
    """Visitor contact details and service request produced by the kiosk"""

    model_config = ConfigDict(extra="ignore")

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None
    phone: Optional[str] = None
    business_name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    visit_reason: Optional[str] = None
    issue: Optional[str] = None
    device_brand: Optional[str] = None
    device_model: Optional[str] = None
    onsite_or_dropoff: Optional[str] = None
    extra_notes: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def coerce_to_text(cls, value: Any) -> Optional[str]:
        """Kiosk forms may send zip codes or phone numbers as numbers"""
        if value is None or isinstance(value, str):
            return value
        return str(value)

    def missing_required_fields(self) -> List[str]:
        """Required fields that are empty once sanitized, in declaration order"""
        return [name for name in REQUIRED_FIELDS if not sanitize(getattr(self, name))]

    @property
    def reason_text(self) -> str:
        """Raw visit reason, falling back to the issue text"""
        return self.visit_reason or self.issue or ""


class TicketComment(BaseModel):
    """Comment attached to a ticket at creation"""
    subject: str
    body: str
    hidden: bool = True


class TicketPayload(BaseModel):
    """Body of the RepairShopr ticket-create call"""
    customer_id: CustomerId
    subject: str = Field(..., max_length=120)
    problem_type: ProblemCategory
    comments_attributes: List[TicketComment]

    def to_request_body(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class TicketResult(BaseModel):
    """Normalized outcome of a successful ticket creation"""
    ticket_id: Optional[CustomerId] = None
    ticket_number: Optional[CustomerId] = None
    ticket: Any = None

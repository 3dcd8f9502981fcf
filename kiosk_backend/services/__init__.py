"""
Business Logic Services
"""
from .checkin import CheckInService
from .completion import CompletionProxy
from .repairshopr import RepairShoprClient

__all__ = [
    "CheckInService",
    "CompletionProxy",
    "RepairShoprClient",
]

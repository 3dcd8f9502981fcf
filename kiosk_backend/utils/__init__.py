"""
Utility functions
"""
from kiosk_backend.utils.logger import get_logger
from kiosk_backend.utils.sanitize import sanitize, DEFAULT_MAX_LENGTH
from kiosk_backend.utils.shape import first_present

__all__ = [
    "get_logger",
    "sanitize",
    "DEFAULT_MAX_LENGTH",
    "first_present",
]

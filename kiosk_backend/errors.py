"""
Error taxonomy for the check-in and completion pipelines

Each error carries the HTTP status it maps to at the route boundary and an
optional ``detail`` holding the downstream body for diagnosis.
"""
from typing import Any, Optional


class KioskError(Exception):
    """Base class for expected pipeline failures"""

    status_code: int = 500

    def __init__(self, message: str, detail: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(KioskError):
    """Malformed or missing input, detected before any external call"""

    status_code = 400


class ExternalServiceError(KioskError):
    """A CRM or completion-provider call failed or returned an embedded error"""

    status_code = 502


class ConfigurationError(KioskError):
    """A required credential or endpoint is not configured"""

    status_code = 500

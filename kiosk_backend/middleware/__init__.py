"""
Middleware modules
"""
from .body_limit import BodySizeLimitMiddleware
from .logging_middleware import LoggingMiddleware

__all__ = ["BodySizeLimitMiddleware", "LoggingMiddleware"]

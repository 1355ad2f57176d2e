"""API middleware."""

from rms_procurement.api.middleware.error_handler import ErrorHandlerMiddleware
from rms_procurement.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]

"""Request middleware and exception handlers

CorrelationIdMiddleware tags every request with an X-Correlation-Id and
writes the access log line; register_error_handlers maps domain, storage and
request validation errors to the {"error": {...}} envelope.
"""
from .correlation import CORRELATION_HEADER, CorrelationIdMiddleware
from .error_handlers import register_error_handlers

__all__ = ["CORRELATION_HEADER", "CorrelationIdMiddleware", "register_error_handlers"]

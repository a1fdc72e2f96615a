"""Shared helpers: JSON logging, id generation, UTC time and the outbound HTTP client scope"""
from .logger import get_logger, setup_logging, get_correlation_id, set_correlation_id
from .idgen import generate_form_id, generate_submission_id, generate_correlation_id
from .time import utc_now, format_iso, parse_iso, elapsed_ms
from .http import client_scope

__all__ = [
    "get_logger",
    "setup_logging",
    "get_correlation_id",
    "set_correlation_id",
    "generate_form_id",
    "generate_submission_id",
    "generate_correlation_id",
    "utc_now",
    "format_iso",
    "parse_iso",
    "elapsed_ms",
    "client_scope",
]

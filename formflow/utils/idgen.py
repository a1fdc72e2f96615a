"""ID Generation Utilities"""
import uuid
from typing import Optional

from .time import utc_now


def generate_id(prefix: Optional[str] = None) -> str:
    """
    Generate a unique ID with optional prefix

    Args:
        prefix: Optional prefix for the ID (e.g., 'form', 'sub', 'step')

    Returns:
        Unique ID string

    Examples:
        >>> generate_id('sub')
        'sub_a1b2c3d4e5f6'
        >>> generate_id()
        'a1b2c3d4e5f6'
    """
    unique_part = uuid.uuid4().hex[:12]

    if prefix:
        return f"{prefix}_{unique_part}"
    return unique_part


def generate_form_id() -> str:
    """Generate form ID"""
    return generate_id("form")


def generate_submission_id() -> str:
    """Generate submission ID"""
    return generate_id("sub")


def generate_test_submission_id() -> str:
    """Generate ID for the mock submission of a workflow test run"""
    return generate_id("test")


def generate_step_id() -> str:
    """Generate workflow step ID"""
    return generate_id("step")


def generate_record_id() -> str:
    """Generate ID for a record written by a database action"""
    return generate_id("rec")


def generate_correlation_id() -> str:
    """
    Generate a correlation ID for request tracing

    Returns:
        Correlation ID string with timestamp prefix
    """
    timestamp = utc_now().strftime("%Y%m%d%H%M%S")
    unique_part = uuid.uuid4().hex[:8]
    return f"COR-{timestamp}-{unique_part}"

"""Repository modules - Data access layer"""
from .mongo_client import get_database, get_collection, create_indexes, health_check
from .form_repo import FormRepository
from .submission_repo import SubmissionRepository
from .workflow_log_repo import WorkflowLogRepository
from .record_repo import RecordRepository

__all__ = [
    "get_database",
    "get_collection",
    "create_indexes",
    "health_check",
    "FormRepository",
    "SubmissionRepository",
    "WorkflowLogRepository",
    "RecordRepository",
]

"""API Dependencies - Common dependencies for routes

Services are constructed per request from these providers; tests swap any
of them through app.dependency_overrides.
"""
from typing import Optional
from fastapi import Depends, Header, Request
import httpx

from ..config.settings import Settings, get_settings
from ..engine.engine import WorkflowEngine
from ..repositories.form_repo import FormRepository
from ..repositories.record_repo import RecordRepository
from ..repositories.submission_repo import SubmissionRepository
from ..repositories.workflow_log_repo import WorkflowLogRepository
from ..services.notification_service import NotificationService
from ..services.submission_service import SubmissionService
from ..services.workflow_service import WorkflowService
from ..services.workflow_tester import WorkflowTester
from ..utils.logger import set_correlation_id
from ..utils.idgen import generate_correlation_id


async def get_correlation_id_dep(
    x_correlation_id: Optional[str] = Header(None, alias="X-Correlation-Id")
) -> str:
    """
    Get or generate correlation ID for request tracing

    If client provides X-Correlation-Id, use it.
    Otherwise generate a new one.
    """
    correlation_id = x_correlation_id or generate_correlation_id()
    set_correlation_id(correlation_id)
    return correlation_id


def get_settings_dep() -> Settings:
    return get_settings()


def get_http_client_dep(request: Request) -> Optional[httpx.AsyncClient]:
    """Shared outbound client opened by the application lifespan, if any"""
    return getattr(request.app.state, "http_client", None)


# =============================================================================
# Repositories
# =============================================================================

def get_form_repository() -> FormRepository:
    return FormRepository()


def get_submission_repository() -> SubmissionRepository:
    return SubmissionRepository()


def get_workflow_log_repository() -> WorkflowLogRepository:
    return WorkflowLogRepository()


def get_record_repository() -> RecordRepository:
    return RecordRepository()


# =============================================================================
# Engine and services
# =============================================================================

def get_workflow_engine(
    settings: Settings = Depends(get_settings_dep),
    http_client: Optional[httpx.AsyncClient] = Depends(get_http_client_dep),
    records: RecordRepository = Depends(get_record_repository)
) -> WorkflowEngine:
    return WorkflowEngine(
        settings,
        http_client=http_client,
        notification_service=NotificationService(settings, http_client=http_client),
        record_sink=records,
    )


def get_workflow_service(engine: WorkflowEngine = Depends(get_workflow_engine)) -> WorkflowService:
    return WorkflowService(engine)


def get_workflow_tester(service: WorkflowService = Depends(get_workflow_service)) -> WorkflowTester:
    return WorkflowTester(service)


def get_submission_service(
    engine: WorkflowEngine = Depends(get_workflow_engine),
    forms: FormRepository = Depends(get_form_repository),
    submissions: SubmissionRepository = Depends(get_submission_repository),
    workflow_logs: WorkflowLogRepository = Depends(get_workflow_log_repository)
) -> SubmissionService:
    return SubmissionService(engine, forms=forms, submissions=submissions, workflow_logs=workflow_logs)

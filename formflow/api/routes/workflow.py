"""Workflow API Routes - Test runs, validation and status logs"""
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field

from ..deps import get_correlation_id_dep, get_submission_service, get_workflow_service, get_workflow_tester
from ...domain.models import (
    CamelModel, FormDefinition, PerformanceReport, ValidationResult, WorkflowLogEntry, WorkflowResult,
    WorkflowStep, WorkflowTestReport
)
from ...domain.enums import LogLevel
from ...domain.errors import DomainError
from ...services.submission_service import SubmissionService
from ...services.workflow_service import WorkflowService
from ...services.workflow_tester import WorkflowTester
from ...utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================

class WorkflowTestRequest(CamelModel):
    """Run a workflow against a mock submission"""
    workflow: List[WorkflowStep] = Field(default_factory=list)
    form_data: Dict[str, Any] = Field(default_factory=dict)
    form: Optional[FormDefinition] = None


class ValidateWorkflowRequest(CamelModel):
    """Validate a step list without running it"""
    workflow: List[WorkflowStep] = Field(default_factory=list)


class WorkflowTestRunRequest(CamelModel):
    """Full tester run over a form"""
    form: FormDefinition
    test_data: Optional[Dict[str, Any]] = None


class PerformanceRequest(CamelModel):
    """Repeated tester runs over a form"""
    form: FormDefinition
    iterations: int = Field(10, ge=1, le=100)


class StatusLogInput(CamelModel):
    """Entry reported by a client for a submission"""
    message: str
    level: LogLevel = LogLevel.INFO
    details: Dict[str, Any] = Field(default_factory=dict)


class AppendStatusLogRequest(CamelModel):
    """Body of a status log append"""
    log: StatusLogInput


class StatusLogResponse(CamelModel):
    """Stored log entries of a submission"""
    logs: List[WorkflowLogEntry] = Field(default_factory=list)


# ============================================================================
# Routes
# ============================================================================

@router.post("/test", response_model=WorkflowResult)
async def test_workflow(
    request: WorkflowTestRequest,
    service: WorkflowService = Depends(get_workflow_service),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """
    Execute a workflow against a mock submission

    The steps run for real (emails are sent, webhooks called); nothing is
    stored for the mock submission.
    """
    return await service.test_workflow(request.workflow, request.form_data, request.form)


@router.post("/validate", response_model=ValidationResult)
async def validate_workflow(
    request: ValidateWorkflowRequest,
    service: WorkflowService = Depends(get_workflow_service)
):
    """Static validation of a workflow"""
    return service.validate(request.workflow)


@router.post("/test-run", response_model=WorkflowTestReport)
async def run_workflow_test(
    request: WorkflowTestRunRequest,
    tester: WorkflowTester = Depends(get_workflow_tester),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Validate, dry-run and execute a form's workflow with sample data"""
    return await tester.test_workflow(request.form, request.test_data)


@router.post("/performance", response_model=PerformanceReport)
async def run_performance_test(
    request: PerformanceRequest,
    tester: WorkflowTester = Depends(get_workflow_tester),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Repeat the workflow test and aggregate timings"""
    try:
        return await tester.run_performance_test(request.form, request.iterations)
    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())


@router.get("/status/{submission_id}", response_model=StatusLogResponse)
async def get_workflow_status(
    submission_id: str,
    service: SubmissionService = Depends(get_submission_service)
):
    """Stored workflow log of a submission"""
    return StatusLogResponse(logs=service.get_status_logs(submission_id))


@router.post("/status/{submission_id}")
async def append_workflow_status(
    submission_id: str,
    request: AppendStatusLogRequest,
    service: SubmissionService = Depends(get_submission_service),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Append an entry to a submission's workflow log"""
    service.append_status_log(
        submission_id,
        request.log.message,
        level=request.log.level,
        details=request.log.details,
    )
    logger.info(f"Status log appended for {submission_id}", extra={"submission_id": submission_id})
    return {"success": True}

"""Form API Routes - Form definitions and submissions"""
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, status

from ..deps import get_correlation_id_dep, get_form_repository, get_submission_service
from ...domain.models import FormDefinition, Submission, SubmissionResponse
from ...domain.errors import DomainError, ValidationError, WorkflowValidationError
from ...engine.workflow_validator import validate_workflow
from ...repositories.form_repo import FormRepository
from ...services.submission_service import SubmissionService
from ...utils.idgen import generate_form_id
from ...utils.logger import get_logger
from ...utils.time import parse_iso

logger = get_logger(__name__)
router = APIRouter()


# ============================================================================
# Helpers
# ============================================================================

def _check_workflow(form: FormDefinition) -> None:
    """Reject forms whose workflow would not pass validation"""
    result = validate_workflow(form.workflow)
    if not result.valid:
        raise WorkflowValidationError(
            "Workflow validation failed",
            details={"errors": result.errors, "warnings": result.warnings}
        )


def _parse_since(since: Optional[str]):
    if not since:
        return None
    try:
        return parse_iso(since)
    except (ValueError, OverflowError):
        raise ValidationError(f"Invalid since timestamp: {since}", details={"since": since})


def _client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("x-real-ip") or (request.client.host if request.client else None)


# ============================================================================
# Form Definitions
# ============================================================================

@router.post("", response_model=FormDefinition, status_code=status.HTTP_201_CREATED)
async def create_form(
    form: FormDefinition,
    forms: FormRepository = Depends(get_form_repository),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """
    Create a form definition

    Designer drafts carry temporary ids (temp_*); those and missing ids are
    replaced by a generated form id.
    """
    try:
        if not form.id or form.id.startswith("temp_"):
            form = form.model_copy(update={"id": generate_form_id()})
        _check_workflow(form)
        return forms.create_form(form)
    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())


@router.get("", response_model=List[FormDefinition])
async def list_forms(
    category: Optional[str] = Query(None, description="Template category"),
    template: Optional[bool] = Query(None, description="Only templates (true) or only forms (false)"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    forms: FormRepository = Depends(get_form_repository)
):
    """List forms, most recently updated first"""
    return forms.list_forms(category=category, is_template=template, skip=skip, limit=limit)


@router.get("/{form_id}", response_model=FormDefinition)
async def get_form(
    form_id: str,
    forms: FormRepository = Depends(get_form_repository)
):
    """Get a form definition"""
    try:
        return forms.get_form_or_raise(form_id)
    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())


@router.put("/{form_id}", response_model=FormDefinition)
async def update_form(
    form_id: str,
    form: FormDefinition,
    forms: FormRepository = Depends(get_form_repository),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Replace a form definition"""
    try:
        _check_workflow(form)
        return forms.update_form(form_id, form)
    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())


@router.delete("/{form_id}")
async def delete_form(
    form_id: str,
    forms: FormRepository = Depends(get_form_repository),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Delete a form definition"""
    try:
        forms.delete_form(form_id)
        return {"success": True}
    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())


# ============================================================================
# Submissions
# ============================================================================

@router.post("/{form_id}/submit", response_model=SubmissionResponse)
async def submit_form(
    form_id: str,
    request: Request,
    data: Dict[str, Any] = Body(...),
    service: SubmissionService = Depends(get_submission_service),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """
    Submit a form

    The submission is stored and the form's workflow runs before the
    response is returned. A failing workflow still stores the submission.
    """
    try:
        response = await service.submit_form(
            form_id,
            data,
            ip_address=_client_ip(request),
            user_agent=request.headers.get("user-agent"),
        )
    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())

    logger.info(
        f"Form {form_id} submitted: {response.message}",
        extra={"form_id": form_id, "submission_id": response.submission_id}
    )
    return response


@router.get("/{form_id}/submit", response_model=List[Submission])
async def list_submissions(
    form_id: str,
    since: Optional[str] = Query(None, description="ISO-8601 lower bound on submittedAt"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    service: SubmissionService = Depends(get_submission_service)
):
    """Submissions of a form, newest first"""
    try:
        return service.list_submissions(form_id, since=_parse_since(since), skip=skip, limit=limit)
    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())

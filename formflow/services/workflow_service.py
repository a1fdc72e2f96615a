"""Workflow Service - Validation and test runs of workflows"""
from typing import Any, Dict, List, Optional

from ..domain.models import FormDefinition, Submission, ValidationResult, WorkflowResult, WorkflowStep
from ..domain.enums import SubmissionStatus
from ..engine.engine import WorkflowEngine
from ..engine.workflow_validator import validate_workflow
from ..utils.idgen import generate_test_submission_id
from ..utils.logger import get_logger

logger = get_logger(__name__)


class WorkflowService:
    """Service for workflow operations"""

    def __init__(self, engine: WorkflowEngine):
        self.engine = engine

    def validate(self, steps: List[WorkflowStep]) -> ValidationResult:
        """Static validation of a step list"""
        result = validate_workflow(steps)
        if not result.valid:
            logger.info(f"Workflow validation found {len(result.errors)} error(s)")
        return result

    async def test_workflow(
        self,
        steps: List[WorkflowStep],
        form_data: Dict[str, Any],
        form: Optional[FormDefinition] = None
    ) -> WorkflowResult:
        """
        Run a workflow against a mock submission

        Nothing is persisted for the mock submission; the steps still perform
        their side effects (emails, webhooks, ...).
        """
        form = form or FormDefinition(id="test_form", title="Test Form")
        submission = Submission(
            id=generate_test_submission_id(),
            form_id=form.id,
            data=form_data,
            status=SubmissionStatus.PENDING,
        )
        logger.info(
            f"Test run of {len(steps)} step(s)",
            extra={"form_id": form.id, "submission_id": submission.id}
        )
        return await self.engine.execute_workflow(steps, submission, form)

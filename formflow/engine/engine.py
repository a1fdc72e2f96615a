"""
Workflow Engine - Runs a form's workflow against one submission

=============================================================================
EXECUTION MODEL
=============================================================================

1. A WorkflowContext is built once per run from the submission, the form
   and the injected settings.
2. Steps are sorted by `order` (stable: ties keep list position).
3. Steps run strictly one after another:
   - disabled steps are logged and skipped
   - enabled steps are dispatched to the executor for their type
   - a failure (reported or raised) is recorded and the run continues
   - a reported redirect URL replaces any earlier one
4. The run succeeds when no step recorded an error.

=============================================================================
DEPENDENCIES
=============================================================================

Executors:
    - ConditionExecutor: Field comparisons
    - NotificationExecutor: Email / SMS / Slack / push (NotificationService)
    - ActionExecutor: Webhook / redirect / database (RecordRepository) / calculation
    - IntegrationExecutor: Zapier / custom endpoints

=============================================================================
"""
from typing import Dict, List, Optional

import httpx

from ..config.settings import Settings
from ..domain.models import FormDefinition, Submission, WorkflowResult, WorkflowStep
from ..domain.enums import StepType
from ..repositories.record_repo import RecordRepository
from ..services.notification_service import NotificationService
from ..utils.logger import get_logger
from .action_executor import ActionExecutor
from .condition_executor import ConditionExecutor
from .context import WorkflowContext
from .integration_executor import IntegrationExecutor
from .notification_executor import NotificationExecutor
from .step_executor import StepExecutor

logger = get_logger(__name__)


class WorkflowEngine:
    """
    Sequential executor for workflow steps

    Collaborators are injected at construction; defaults are built from the
    settings. The engine keeps no per-run state, so one instance can serve
    concurrent submissions.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: Optional[httpx.AsyncClient] = None,
        notification_service: Optional[NotificationService] = None,
        record_sink: Optional[RecordRepository] = None
    ):
        self.settings = settings
        self.executors: Dict[str, StepExecutor] = {
            StepType.CONDITION.value: ConditionExecutor(settings, http_client),
            StepType.NOTIFICATION.value: NotificationExecutor(
                settings, http_client, notification_service=notification_service
            ),
            StepType.ACTION.value: ActionExecutor(settings, http_client, record_sink=record_sink),
            StepType.INTEGRATION.value: IntegrationExecutor(settings, http_client),
        }

    @staticmethod
    def order_steps(steps: List[WorkflowStep]) -> List[WorkflowStep]:
        """Steps by ascending order; equal orders keep their list position"""
        return sorted(steps, key=lambda step: step.order)

    async def execute_workflow(
        self,
        steps: List[WorkflowStep],
        submission: Submission,
        form: FormDefinition
    ) -> WorkflowResult:
        """
        Execute every enabled step of a workflow

        Args:
            steps: Workflow steps in any order
            submission: The submission being processed (not modified)
            form: Form snapshot the submission belongs to

        Returns:
            WorkflowResult with success flag, errors, logs and redirect URL
        """
        context = WorkflowContext.build(submission, form, self.settings)
        errors: List[str] = []
        logs: List[str] = []
        redirect_url: Optional[str] = None

        log_extra = {"form_id": form.id, "submission_id": submission.id}
        logger.info(f"Starting workflow with {len(steps)} step(s)", extra=log_extra)

        for step in self.order_steps(steps):
            if not step.enabled:
                logs.append(f"Skipping disabled step: {step.title}")
                continue

            logs.append(f"Executing step: {step.title}")
            extra = {**log_extra, "step_id": step.id, "step_type": StepType(step.type).value}
            logger.info(f"Executing step: {step.title}", extra=extra)

            try:
                outcome = await self.executors[StepType(step.type).value].execute(step, context)
            except Exception as e:
                logger.exception(f'Step "{step.title}" error: {e}', extra=extra)
                errors.append(f'Step "{step.title}" threw error: {e}')
                logs.append(f'Step "{step.title}" error: {e}')
                logs.append(f'Step "{step.title}" completed: false')
                continue

            if not outcome.success:
                logger.warning(f'Step "{step.title}" failed: {outcome.error}', extra=extra)
                errors.append(f'Step "{step.title}" failed: {outcome.error}')

            logs.extend(outcome.logs)
            logs.append(f'Step "{step.title}" completed: {"true" if outcome.success else "false"}')

            if outcome.redirect_url:
                redirect_url = outcome.redirect_url

        result = WorkflowResult(
            success=not errors,
            errors=errors,
            logs=logs,
            redirect_url=redirect_url,
        )
        logger.info(
            f"Workflow finished: success={result.success}, errors={len(errors)}",
            extra={**log_extra, "status": "completed" if result.success else "failed"}
        )
        return result

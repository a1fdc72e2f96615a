"""Workflow Tester - Dry-run checks, sample data and timing runs for a form's workflow"""
import json
import time
from typing import Any, Dict, List, Optional

from ..domain.models import (
    FormDefinition, FormElement, PerformanceReport, StepTestResult, Submission, WorkflowStep,
    WorkflowTestReport
)
from ..domain.enums import ActionType, NotificationType, StepType
from ..domain.errors import FormulaError, ValidationError
from ..engine.condition_evaluator import ConditionEvaluator
from ..engine.context import WorkflowContext
from ..engine.formula import evaluate_formula
from ..engine.step_executor import is_absolute_url
from ..engine.template_resolver import resolve
from ..utils.logger import get_logger
from ..utils.time import elapsed_ms, utc_today
from .workflow_service import WorkflowService

logger = get_logger(__name__)

# Elements that carry no value
LAYOUT_ELEMENT_TYPES = frozenset({"heading", "paragraph", "divider", "image", "submit"})

SAMPLE_TEXT = {
    "text": "Sample text input",
    "email": "test@example.com",
    "textarea": "Sample textarea content with multiple lines\nLine 2\nLine 3",
    "url": "https://example.com",
    "tel": "+1234567890",
}


class StepCheckFailed(Exception):
    """Raised inside a dry-run check; message becomes the step's error"""


class WorkflowTester:
    """
    Exercise a form's workflow without a real submission

    test_workflow validates the steps, checks each one without touching the
    network, then runs the whole workflow through the engine against
    generated (or supplied) data.
    """

    def __init__(self, workflow_service: WorkflowService):
        self.workflow_service = workflow_service
        self.evaluator = ConditionEvaluator()

    # =========================================================================
    # Sample data
    # =========================================================================

    def generate_test_data(self, form: FormDefinition) -> Dict[str, Any]:
        """Deterministic sample value for every input element of the form"""
        test_data: Dict[str, Any] = {}
        for element in form.elements():
            if element.type in LAYOUT_ELEMENT_TYPES:
                continue
            value = self._sample_value(element)
            if value is not None:
                test_data[element.id] = value
        return test_data

    def _sample_value(self, element: FormElement) -> Any:
        if element.type in SAMPLE_TEXT:
            return SAMPLE_TEXT[element.type]
        if element.type == "number":
            return 42
        if element.type == "date":
            return utc_today().isoformat()
        if element.type in ("radio", "select"):
            return element.options[0] if element.options else None
        if element.type == "checkbox":
            return [element.options[0]] if element.options else None
        if element.type == "rating":
            return 5
        if element.type == "range":
            low = element.properties.get("min", 0) or 0
            high = element.properties.get("max", 100) or 100
            return (low + high) // 2
        return f"Sample {element.type} value"

    # =========================================================================
    # Full test
    # =========================================================================

    async def test_workflow(
        self,
        form: FormDefinition,
        test_data: Optional[Dict[str, Any]] = None
    ) -> WorkflowTestReport:
        """Validate, dry-run each step, then execute the workflow"""
        started = time.perf_counter()
        logs: List[str] = []
        errors: List[str] = []
        step_results: List[StepTestResult] = []

        form_data = test_data if test_data is not None else self.generate_test_data(form)
        logs.append(f"Generated test data: {json.dumps(form_data, default=str)}")

        validation = self.workflow_service.validate(form.workflow)
        if not validation.valid:
            errors.extend(validation.errors)
            return WorkflowTestReport(
                success=False,
                message="Workflow validation failed",
                errors=errors,
                logs=logs,
                execution_time=elapsed_ms(started, time.perf_counter()),
            )
        logs.append("Workflow validation passed")

        for step in form.workflow:
            result = self.test_step(step, form_data, form)
            step_results.append(result)
            logs.append(f"Step {step.title}: {'PASSED' if result.success else 'FAILED'}")
            if not result.success:
                errors.append(f'Step "{step.title}" failed: {result.error}')

        workflow_result = await self.workflow_service.test_workflow(form.workflow, form_data, form)

        success = all(result.success for result in step_results) and workflow_result.success
        report = WorkflowTestReport(
            success=success,
            message="All tests passed successfully" if success else "Some tests failed",
            errors=errors + workflow_result.errors,
            logs=logs + workflow_result.logs,
            execution_time=elapsed_ms(started, time.perf_counter()),
            step_results=step_results,
        )
        logger.info(
            f"Workflow test finished: {report.message}",
            extra={"form_id": form.id, "status": "completed" if success else "failed"}
        )
        return report

    # =========================================================================
    # Dry-run checks
    # =========================================================================

    def test_step(self, step: WorkflowStep, form_data: Dict[str, Any], form: FormDefinition) -> StepTestResult:
        """Check one step's configuration without side effects"""
        started = time.perf_counter()
        step_type = StepType(step.type).value
        checks = {
            StepType.CONDITION.value: self._check_condition,
            StepType.NOTIFICATION.value: self._check_notification,
            StepType.ACTION.value: self._check_action,
            StepType.INTEGRATION.value: self._check_integration,
        }

        try:
            message = checks[step_type](step, form_data, form)
        except StepCheckFailed as e:
            return StepTestResult(
                step_id=step.id,
                step_type=step_type,
                step_title=step.title,
                success=False,
                message=f"{step_type.capitalize()} test failed",
                execution_time=elapsed_ms(started, time.perf_counter()),
                error=str(e),
            )

        return StepTestResult(
            step_id=step.id,
            step_type=step_type,
            step_title=step.title,
            success=True,
            message=message,
            execution_time=elapsed_ms(started, time.perf_counter()),
        )

    def _check_condition(self, step: WorkflowStep, form_data: Dict[str, Any], form: FormDefinition) -> str:
        condition = step.config.condition
        if condition is None:
            raise StepCheckFailed("Condition configuration is missing")
        result = self.evaluator.evaluate(form_data.get(condition.field), condition.operator, condition.value)
        return f"Condition evaluated to: {'true' if result else 'false'}"

    def _check_notification(self, step: WorkflowStep, form_data: Dict[str, Any], form: FormDefinition) -> str:
        notification = step.config.notification
        if notification is None:
            raise StepCheckFailed("Notification configuration is missing")
        if not notification.recipients:
            raise StepCheckFailed("No recipients specified")
        if not notification.message:
            raise StepCheckFailed("No message specified")

        if notification.type == NotificationType.EMAIL.value:
            missing = self.workflow_service.engine.settings.missing_smtp_settings
            if missing:
                raise StepCheckFailed(f"Missing environment variables: {', '.join(missing)}")

        return f"Notification configuration is valid ({len(notification.recipients)} recipients)"

    def _check_action(self, step: WorkflowStep, form_data: Dict[str, Any], form: FormDefinition) -> str:
        action = step.config.action
        if action is None:
            raise StepCheckFailed("Action configuration is missing")

        if action.type in (ActionType.WEBHOOK.value, ActionType.REDIRECT.value):
            if not action.endpoint:
                raise StepCheckFailed("No endpoint specified")
            if not is_absolute_url(action.endpoint):
                raise StepCheckFailed("Invalid endpoint URL")
            return f"Action configuration is valid ({action.method or 'POST'} {action.endpoint})"

        if action.type == ActionType.CALCULATION.value:
            context = self._context(form_data, form)
            try:
                value = evaluate_formula(resolve(action.formula or action.body, context))
            except FormulaError as e:
                raise StepCheckFailed(e.message)
            return f"Formula evaluates to {value}"

        return f"Action configuration is valid ({action.type})"

    def _check_integration(self, step: WorkflowStep, form_data: Dict[str, Any], form: FormDefinition) -> str:
        integration = step.config.integration
        if integration is None:
            raise StepCheckFailed("Integration configuration is missing")
        if not integration.endpoint:
            raise StepCheckFailed("No endpoint specified")
        if not is_absolute_url(integration.endpoint):
            raise StepCheckFailed("Invalid endpoint URL")
        return f"Integration configuration is valid ({integration.service})"

    def _context(self, form_data: Dict[str, Any], form: FormDefinition) -> WorkflowContext:
        submission = Submission(id="dry_run", form_id=form.id, data=form_data)
        return WorkflowContext.build(submission, form, self.workflow_service.engine.settings)

    # =========================================================================
    # Performance
    # =========================================================================

    async def run_performance_test(self, form: FormDefinition, iterations: int = 10) -> PerformanceReport:
        """Repeat test_workflow and aggregate timings"""
        if iterations < 1:
            raise ValidationError("iterations must be at least 1", details={"iterations": iterations})

        results = [await self.test_workflow(form) for _ in range(iterations)]
        times = [result.execution_time for result in results]
        success_count = sum(1 for result in results if result.success)

        return PerformanceReport(
            average_time=round(sum(times) / len(times), 2),
            min_time=min(times),
            max_time=max(times),
            success_rate=success_count / iterations * 100,
            results=results,
        )

"""Condition Step - Evaluate a comparison and record the requested form actions"""
from ..domain.enums import StepType
from ..domain.models import ConditionConfig, WorkflowStep
from ..utils.logger import get_logger
from .condition_evaluator import ConditionEvaluator, KNOWN_OPERATORS
from .context import WorkflowContext
from .step_executor import StepExecutor, StepOutcome

logger = get_logger(__name__)


class ConditionExecutor(StepExecutor):
    """
    Evaluate a condition against one submitted field

    Matching actions (show, hide, setValue, ...) target the live form, which
    lives in the browser; here they are only recorded in the run log.
    """

    step_type = StepType.CONDITION.value

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.evaluator = ConditionEvaluator()

    async def execute(self, step: WorkflowStep, context: WorkflowContext) -> StepOutcome:
        config = step.config.condition
        if not isinstance(config, ConditionConfig):
            return self.missing_config()

        if not config.field:
            return StepOutcome.fail("Condition field is not specified")

        if config.field not in context.form_data and config.field not in context.form.element_ids():
            return StepOutcome.fail(f"Unknown condition field: {config.field}")

        if config.operator not in KNOWN_OPERATORS:
            return StepOutcome.fail(f"Unknown condition operator: {config.operator or '(empty)'}")

        field_value = context.form_data.get(config.field)
        condition_met = self.evaluator.evaluate(field_value, config.operator, config.value)

        if not condition_met:
            return StepOutcome.ok(f"Condition not met: {config.field} {config.operator} {config.value!r}")

        logs = [f"Condition met: {config.field} {config.operator} {config.value!r}"]
        for action in config.actions:
            target = action.target_id or "-"
            logs.append(f"Condition met, recording action: {action.type} -> {target}")
            logger.debug(
                f"Recorded condition action {action.type}",
                extra={"step_id": step.id, "submission_id": context.submission.id}
            )

        return StepOutcome.ok(*logs)

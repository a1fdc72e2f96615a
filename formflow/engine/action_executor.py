"""Action Step - Webhooks, redirects, database writes and calculations"""
import json
from typing import Any, Dict, Optional

import httpx
from pymongo.errors import PyMongoError

from ..domain.enums import ActionType, StepType
from ..domain.errors import FormulaError, StepConfigurationError
from ..domain.models import ActionConfig, WorkflowStep
from ..repositories.record_repo import RecordRepository
from ..utils.logger import get_logger
from .context import WorkflowContext
from .formula import evaluate_formula
from .step_executor import StepExecutor, StepOutcome, http_method, is_absolute_url
from .template_resolver import resolve, stringify

logger = get_logger(__name__)


class ActionExecutor(StepExecutor):
    """Perform a side effect for the submission"""

    step_type = StepType.ACTION.value

    def __init__(self, *args, record_sink: Optional[RecordRepository] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.records = record_sink or RecordRepository()

    async def execute(self, step: WorkflowStep, context: WorkflowContext) -> StepOutcome:
        config = step.config.action
        if not isinstance(config, ActionConfig):
            return self.missing_config()

        if config.type == ActionType.WEBHOOK.value:
            return await self._webhook(config, context)
        if config.type == ActionType.REDIRECT.value:
            return self._redirect(config, context)
        if config.type == ActionType.DATABASE.value:
            return self._database(step, config, context)
        if config.type == ActionType.CALCULATION.value:
            return self._calculation(config, context)

        return StepOutcome.fail(f"Unsupported action type: {config.type}")

    # =========================================================================
    # Webhook
    # =========================================================================

    def _webhook_body(self, config: ActionConfig, context: WorkflowContext) -> str:
        template = config.body or config.template
        if template:
            return resolve(template, context)
        return json.dumps({
            "formId": context.form.id,
            "formTitle": context.form.title,
            "submissionId": context.submission.id,
            "formData": context.form_data,
        }, default=str)

    async def _webhook(self, config: ActionConfig, context: WorkflowContext) -> StepOutcome:
        if not config.endpoint:
            return StepOutcome.fail("Webhook endpoint is required")

        url = resolve(config.endpoint, context)
        if not is_absolute_url(url):
            return StepOutcome.fail(f"Invalid webhook URL: {url}")

        method = http_method(config.method)
        if method is None:
            return StepOutcome.fail(f"Unsupported HTTP method: {config.method}")
        headers = {"Content-Type": "application/json", **config.headers}
        body = self._webhook_body(config, context) if method != "GET" else None

        try:
            async with self.http_client() as client:
                response = await client.request(method, url, headers=headers, content=body)
        except httpx.HTTPError as e:
            return StepOutcome.fail(f"Webhook error: {e}")

        if not response.is_success:
            return StepOutcome.fail(f"Webhook failed: {response.status_code} {response.reason_phrase}")

        return StepOutcome.ok(f"Webhook {method} {url} returned {response.status_code}")

    # =========================================================================
    # Redirect
    # =========================================================================

    def _redirect(self, config: ActionConfig, context: WorkflowContext) -> StepOutcome:
        if not config.endpoint:
            return StepOutcome.ok("Redirect has no URL; nothing set")
        url = resolve(config.endpoint, context)
        return StepOutcome.ok(f"Redirect set to {url}", redirect_url=url)

    # =========================================================================
    # Database
    # =========================================================================

    def _database(self, step: WorkflowStep, config: ActionConfig, context: WorkflowContext) -> StepOutcome:
        record: Dict[str, Any] = {
            "formData": dict(context.form_data),
            "submittedAt": context.submission.submitted_at,
        }
        record.update(config.additional_fields)

        try:
            record_id = self.records.save_record(
                context.form.id,
                context.submission.id,
                record,
                table_name=config.table_name,
            )
        except StepConfigurationError as e:
            return StepOutcome.fail(f"Database save error: {e.message}")
        except PyMongoError as e:
            logger.warning(
                f"Database action failed: {e}",
                extra={"step_id": step.id, "submission_id": context.submission.id}
            )
            return StepOutcome.fail(f"Database save error: {e}")

        return StepOutcome.ok(f"Saved record {record_id} to {config.table_name or 'form_submissions'}")

    # =========================================================================
    # Calculation
    # =========================================================================

    def _calculation(self, config: ActionConfig, context: WorkflowContext) -> StepOutcome:
        formula = config.formula or config.body
        target = config.target_field or "result"

        try:
            value = evaluate_formula(resolve(formula, context))
        except FormulaError as e:
            return StepOutcome.fail(f"Calculation failed: {e.message}")

        return StepOutcome.ok(f"Calculated {target} = {stringify(value)}")

"""Integration Step - Push the submission to a third-party automation service"""
from typing import Any, Dict

import httpx

from ..domain.enums import IntegrationService, StepType
from ..domain.models import IntegrationConfig, WorkflowStep
from ..utils.logger import get_logger
from ..utils.time import format_iso
from .context import WorkflowContext
from .step_executor import StepExecutor, StepOutcome, http_method, is_absolute_url
from .template_resolver import resolve_object

logger = get_logger(__name__)

SUPPORTED_SERVICES = (IntegrationService.ZAPIER.value, IntegrationService.CUSTOM.value)


class IntegrationExecutor(StepExecutor):
    """
    Send the submission to Zapier or a custom endpoint

    The payload carries the form and submission identity, the raw form data,
    the resolved field mapping and any additional data. Every string in the
    payload is passed through template substitution.
    """

    step_type = StepType.INTEGRATION.value

    async def execute(self, step: WorkflowStep, context: WorkflowContext) -> StepOutcome:
        config = step.config.integration
        if not isinstance(config, IntegrationConfig):
            return self.missing_config()

        if config.service not in SUPPORTED_SERVICES:
            return StepOutcome.fail(f"Unsupported integration service: {config.service}")

        if not config.endpoint:
            return StepOutcome.fail("Integration endpoint not configured")
        if not is_absolute_url(config.endpoint):
            return StepOutcome.fail("Invalid endpoint URL")

        label = config.service.capitalize()
        payload = resolve_object(self.build_payload(config, context), context)

        headers = {"Content-Type": "application/json"}
        method = "POST"
        if config.service == IntegrationService.CUSTOM.value:
            headers.update(config.headers)
            method = http_method(config.method)
            if method is None:
                return StepOutcome.fail(f"Unsupported HTTP method: {config.method}")
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"

        try:
            async with self.http_client() as client:
                response = await client.request(method, config.endpoint, headers=headers, json=payload)
        except httpx.HTTPError as e:
            logger.warning(
                f"{label} integration error: {e}",
                extra={"step_id": step.id, "submission_id": context.submission.id}
            )
            return StepOutcome.fail(f"{label} integration error: {e}")

        if not response.is_success:
            return StepOutcome.fail(f"{label} integration failed: {response.status_code}")

        return StepOutcome.ok(f"{label} integration delivered ({response.status_code})")

    def build_payload(self, config: IntegrationConfig, context: WorkflowContext) -> Dict[str, Any]:
        """Unresolved payload: identity, form data, mapping, additional data"""
        payload: Dict[str, Any] = {
            "formId": context.form.id,
            "formTitle": context.form.title,
            "submissionId": context.submission.id,
            "submittedAt": format_iso(context.submission.submitted_at),
            "formData": dict(context.form_data),
        }
        payload.update(config.mapping)
        payload.update(config.additional_data)
        return payload

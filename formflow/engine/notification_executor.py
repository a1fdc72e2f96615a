"""Notification Step - Email, SMS, Slack and push notifications"""
import json
from typing import Optional

from ..domain.enums import NotificationType, StepType
from ..domain.errors import NotificationSendError
from ..domain.models import NotificationConfig, WorkflowStep
from ..services.notification_service import NotificationService
from ..utils.logger import get_logger
from .context import WorkflowContext
from .step_executor import StepExecutor, StepOutcome
from .template_resolver import resolve

logger = get_logger(__name__)


class NotificationExecutor(StepExecutor):
    """
    Send a notification for the submission

    Recipients and message are checked before any transport is touched;
    missing transport configuration is reported as a step failure.
    """

    step_type = StepType.NOTIFICATION.value

    def __init__(self, *args, notification_service: Optional[NotificationService] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.notifications = notification_service or NotificationService(
            self.settings, http_client=self._http_client
        )

    async def execute(self, step: WorkflowStep, context: WorkflowContext) -> StepOutcome:
        config = step.config.notification
        if not isinstance(config, NotificationConfig):
            return self.missing_config()

        recipients = [resolve(r, context).strip() for r in config.recipients]
        recipients = [r for r in recipients if r]
        if not recipients:
            return StepOutcome.fail("No recipients specified")

        if not config.message:
            return StepOutcome.fail("No message specified")

        handlers = {
            NotificationType.EMAIL.value: self._send_email,
            NotificationType.SMS.value: self._send_sms,
            NotificationType.SLACK.value: self._send_slack,
            NotificationType.PUSH.value: self._send_push,
        }
        handler = handlers.get(config.type)
        if handler is None:
            return StepOutcome.fail(f"Unsupported notification type: {config.type}")

        try:
            summary = await handler(config, recipients, context)
        except NotificationSendError as e:
            logger.warning(
                f"Notification failed: {e.message}",
                extra={"step_id": step.id, "submission_id": context.submission.id, "error_code": e.error_code}
            )
            return StepOutcome.fail(e.message)

        return StepOutcome.ok(summary)

    async def _send_email(self, config: NotificationConfig, recipients, context: WorkflowContext) -> str:
        subject = resolve(config.subject, context) or f"New submission: {context.form.title}"
        body = resolve(config.message, context)
        attachments = [{
            "filename": "submission-data.json",
            "content": json.dumps(context.form_data, indent=2, default=str),
            "content_type": "application/json",
        }]
        await self.notifications.send_email(recipients, subject, body, attachments)
        return f"Email sent to {len(recipients)} recipient(s)"

    async def _send_sms(self, config: NotificationConfig, recipients, context: WorkflowContext) -> str:
        await self.notifications.send_sms(recipients, resolve(config.message, context))
        return f"SMS sent to {len(recipients)} recipient(s)"

    async def _send_slack(self, config: NotificationConfig, recipients, context: WorkflowContext) -> str:
        channel = config.channel or recipients[0]
        payload = {
            "text": resolve(config.message, context),
            "channel": channel,
            "username": config.username or "Form Builder",
            "icon_emoji": config.icon or ":robot_face:",
        }
        await self.notifications.send_slack(config.webhook_url, payload)
        return f"Slack message posted to {channel}"

    async def _send_push(self, config: NotificationConfig, recipients, context: WorkflowContext) -> str:
        title = resolve(config.subject, context) or context.form.title
        await self.notifications.send_push(recipients, title, resolve(config.message, context))
        return f"Push notification sent to {len(recipients)} recipient(s)"

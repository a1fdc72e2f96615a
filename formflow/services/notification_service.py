"""Notification Service - Outbound email, SMS, chat and push transports

Email goes out over SMTP; SMS (Twilio), Slack and push gateways are called
over HTTP with httpx. Every transport failure surfaces as a
NotificationSendError carrying a user-facing message.
"""
import asyncio
import smtplib
from email.message import EmailMessage
from typing import Any, Callable, Dict, List, Optional

import httpx

from ..config.settings import Settings
from ..domain.errors import EmailSendError, NotificationNotConfiguredError, NotificationSendError
from ..utils.http import client_scope
from ..utils.logger import get_logger

logger = get_logger(__name__)

SmtpFactory = Callable[[Settings], smtplib.SMTP]


def default_smtp_factory(settings: Settings) -> smtplib.SMTP:
    """Open an authenticated SMTP connection from settings"""
    if settings.smtp_secure:
        client = smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port, timeout=settings.http_timeout_seconds)
    else:
        client = smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=settings.http_timeout_seconds)
    try:
        if not settings.smtp_secure:
            client.ehlo()
            if client.has_extn("starttls"):
                client.starttls()
                client.ehlo()
        client.login(settings.smtp_user, settings.smtp_pass)
    except (smtplib.SMTPException, OSError):
        client.close()
        raise
    return client


class NotificationService:
    """Service for sending notifications"""

    def __init__(
        self,
        settings: Settings,
        http_client: Optional[httpx.AsyncClient] = None,
        smtp_factory: Optional[SmtpFactory] = None
    ):
        self.settings = settings
        self._http_client = http_client
        self._smtp_factory = smtp_factory or default_smtp_factory

    # =========================================================================
    # Email (SMTP)
    # =========================================================================

    def build_email(
        self,
        recipients: List[str],
        subject: str,
        html_body: str,
        attachments: Optional[List[Dict[str, Any]]] = None
    ) -> EmailMessage:
        """Build a multipart HTML message with optional attachments"""
        message = EmailMessage()
        message["From"] = self.settings.smtp_sender or ""
        message["To"] = ", ".join(recipients)
        message["Subject"] = subject
        message.set_content("This message requires an HTML capable mail client.")
        message.add_alternative(html_body, subtype="html")

        for attachment in attachments or []:
            maintype, _, subtype = attachment["content_type"].partition("/")
            message.add_attachment(
                attachment["content"].encode("utf-8"),
                maintype=maintype,
                subtype=subtype or "octet-stream",
                filename=attachment["filename"],
            )
        return message

    async def send_email(
        self,
        recipients: List[str],
        subject: str,
        html_body: str,
        attachments: Optional[List[Dict[str, Any]]] = None
    ) -> None:
        """
        Send an HTML email over SMTP

        The blocking smtplib conversation runs in a worker thread.

        Raises:
            NotificationNotConfiguredError: SMTP settings are incomplete
            EmailSendError: SMTP conversation failed
        """
        missing = self.settings.missing_smtp_settings
        if missing:
            raise NotificationNotConfiguredError(
                f"Missing environment variables: {', '.join(missing)}",
                details={"missing": missing}
            )

        message = self.build_email(recipients, subject, html_body, attachments)

        def _send() -> None:
            client = self._smtp_factory(self.settings)
            try:
                client.send_message(message)
            finally:
                client.quit()

        try:
            await asyncio.to_thread(_send)
        except (smtplib.SMTPException, OSError) as e:
            raise EmailSendError(f"Email failed: {e}")

        logger.info(f"Email sent to {len(recipients)} recipient(s)")

    # =========================================================================
    # SMS (Twilio REST API)
    # =========================================================================

    async def send_sms(self, recipients: List[str], body: str) -> None:
        """
        Send one SMS per recipient through Twilio

        Raises:
            NotificationNotConfiguredError: Twilio credentials are incomplete
            NotificationSendError: Twilio rejected a message or was unreachable
        """
        if not self.settings.sms_configured:
            raise NotificationNotConfiguredError("SMS configuration missing")

        sid = self.settings.twilio_account_sid
        url = f"{self.settings.twilio_base_url}/Accounts/{sid}/Messages.json"

        try:
            async with client_scope(self._http_client, self.settings.http_timeout_seconds) as client:
                for recipient in recipients:
                    response = await client.post(
                        url,
                        auth=(sid, self.settings.twilio_auth_token),
                        data={
                            "To": recipient,
                            "From": self.settings.twilio_from_number,
                            "Body": body,
                        },
                    )
                    if not response.is_success:
                        raise NotificationSendError(
                            f"SMS failed: {response.status_code}",
                            details={"recipient": recipient, "response": response.text[:500]}
                        )
        except httpx.HTTPError as e:
            raise NotificationSendError(f"SMS error: {e}")

        logger.info(f"SMS sent to {len(recipients)} recipient(s)")

    # =========================================================================
    # Slack (incoming webhook)
    # =========================================================================

    async def send_slack(self, webhook_url: Optional[str], payload: Dict[str, Any]) -> None:
        """
        Post a message to a Slack incoming webhook

        Raises:
            NotificationNotConfiguredError: No webhook URL configured
            NotificationSendError: Slack rejected the message or was unreachable
        """
        url = webhook_url or self.settings.slack_webhook_url
        if not url:
            raise NotificationNotConfiguredError("Slack webhook URL not configured")

        try:
            async with client_scope(self._http_client, self.settings.http_timeout_seconds) as client:
                response = await client.post(url, json=payload)
        except httpx.HTTPError as e:
            raise NotificationSendError(f"Slack notification error: {e}")

        if not response.is_success:
            raise NotificationSendError(f"Slack notification failed: {response.status_code}")

    # =========================================================================
    # Push (generic push gateway)
    # =========================================================================

    async def send_push(self, recipients: List[str], title: str, message: str) -> None:
        """
        Deliver a push notification through the configured gateway

        Raises:
            NotificationNotConfiguredError: No gateway URL configured
            NotificationSendError: Gateway rejected the message or was unreachable
        """
        url = self.settings.push_gateway_url
        if not url:
            raise NotificationNotConfiguredError("Push gateway URL not configured")

        headers = {}
        if self.settings.push_gateway_api_key:
            headers["Authorization"] = f"Bearer {self.settings.push_gateway_api_key}"

        try:
            async with client_scope(self._http_client, self.settings.http_timeout_seconds) as client:
                response = await client.post(
                    url,
                    headers=headers,
                    json={"recipients": recipients, "title": title, "message": message},
                )
        except httpx.HTTPError as e:
            raise NotificationSendError(f"Push notification error: {e}")

        if not response.is_success:
            raise NotificationSendError(f"Push notification failed: {response.status_code}")


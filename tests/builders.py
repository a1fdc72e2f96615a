"""Test builders shared across the suite"""
from typing import Any, Callable, Dict, List, Optional

import httpx

from formflow.domain.models import WorkflowStep


class RecordingTransport:
    """httpx.MockTransport wrapper that remembers every request"""

    def __init__(self, handler: Optional[Callable[[httpx.Request], httpx.Response]] = None):
        self.requests: List[httpx.Request] = []
        self._handler = handler or (lambda request: httpx.Response(200, json={"ok": True}))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


def make_step(step_type: str, title: str = "Step", order: int = 0, enabled: bool = True, **config: Any) -> WorkflowStep:
    """Build a step whose config branch matches its type"""
    data: Dict[str, Any] = {
        "type": step_type,
        "title": title,
        "order": order,
        "enabled": enabled,
        "config": {step_type: config} if config else {},
    }
    return WorkflowStep.model_validate(data)


def redirect_step(title: str, url: str, order: int = 0, enabled: bool = True) -> WorkflowStep:
    return make_step("action", title=title, order=order, enabled=enabled, type="redirect", endpoint=url)


class StubNotifications:
    """Stands in for NotificationService; records calls and can raise a prepared error"""

    def __init__(self, error=None):
        self.calls = []
        self.error = error

    async def _record(self, name, *args):
        self.calls.append((name, args))
        if self.error is not None:
            raise self.error

    async def send_email(self, recipients, subject, body, attachments=None):
        await self._record("email", recipients, subject, body, attachments)

    async def send_sms(self, recipients, body):
        await self._record("sms", recipients, body)

    async def send_slack(self, webhook_url, payload):
        await self._record("slack", webhook_url, payload)

    async def send_push(self, recipients, title, message):
        await self._record("push", recipients, title, message)

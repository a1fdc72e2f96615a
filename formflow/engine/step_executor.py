"""Step Executor - Shared contract for the four step handlers"""
from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import urlparse

import httpx

from ..config.settings import Settings
from ..domain.enums import HttpMethod
from ..domain.models import WorkflowStep
from ..utils.http import client_scope
from .context import WorkflowContext


@dataclass
class StepOutcome:
    """Result reported by a step executor"""
    success: bool
    error: Optional[str] = None
    redirect_url: Optional[str] = None
    logs: List[str] = field(default_factory=list)

    @classmethod
    def ok(cls, *logs: str, redirect_url: Optional[str] = None) -> "StepOutcome":
        return cls(success=True, redirect_url=redirect_url, logs=list(logs))

    @classmethod
    def fail(cls, error: str, *logs: str) -> "StepOutcome":
        return cls(success=False, error=error, logs=list(logs))


def is_absolute_url(url: Optional[str]) -> bool:
    """True for well-formed absolute http(s) URLs"""
    if not url:
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def http_method(value: Optional[str]) -> Optional[str]:
    """Upper-cased method name, POST when unset, None when not an HttpMethod"""
    try:
        return HttpMethod((value or HttpMethod.POST.value).upper()).value
    except ValueError:
        return None


class StepExecutor:
    """
    Base class for step executors

    Subclasses implement execute(). Configuration problems and transport
    failures are reported through StepOutcome, not raised.
    """

    step_type: str = ""

    def __init__(self, settings: Settings, http_client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self._http_client = http_client

    async def execute(self, step: WorkflowStep, context: WorkflowContext) -> StepOutcome:
        raise NotImplementedError

    def missing_config(self) -> StepOutcome:
        return StepOutcome.fail(f"No {self.step_type} configuration found")

    def http_client(self):
        """Injected client when present, otherwise a client scoped to this call"""
        return client_scope(self._http_client, self.settings.http_timeout_seconds)

"""Workflow Context - Read-only bundle visible to every step of one run"""
from dataclasses import dataclass, field
from typing import Any, Dict

from ..config.settings import Settings
from ..domain.models import FormDefinition, Submission


@dataclass(frozen=True)
class WorkflowContext:
    """Built fresh for each execute_workflow call and never shared between runs"""
    form: FormDefinition
    submission: Submission
    environment: Settings
    form_data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def build(cls, submission: Submission, form: FormDefinition, environment: Settings) -> "WorkflowContext":
        return cls(
            form=form,
            submission=submission,
            environment=environment,
            form_data=submission.data,
        )

"""Workflow Validator - Static structural checks run before a workflow is saved or tested"""
from collections import defaultdict
from typing import Dict, List

from ..domain.enums import ActionType, StepType
from ..domain.models import ValidationResult, WorkflowStep
from ..repositories.mongo_client import RESERVED_COLLECTIONS


def _step_errors(step: WorkflowStep) -> List[str]:
    errors: List[str] = []
    step_type = StepType(step.type).value

    if not step.title or not step.title.strip():
        errors.append("Title is required")

    config = step.config
    if step_type == StepType.CONDITION.value:
        condition = config.condition
        if condition is None or not condition.field:
            errors.append("Condition field is required")
        if condition is None or not condition.operator:
            errors.append("Condition operator is required")

    elif step_type == StepType.NOTIFICATION.value:
        notification = config.notification
        if notification is None or not [r for r in notification.recipients if r and r.strip()]:
            errors.append("Email recipients are required")
        if notification is None or not notification.subject:
            errors.append("Email subject is required")

    elif step_type == StepType.ACTION.value:
        action = config.action
        if action is not None and action.type == ActionType.WEBHOOK.value and not action.endpoint:
            errors.append("Webhook endpoint is required")
        if action is not None and action.type == ActionType.DATABASE.value and action.table_name in RESERVED_COLLECTIONS:
            errors.append(f'Table name "{action.table_name}" is reserved')

    elif step_type == StepType.INTEGRATION.value:
        integration = config.integration
        if integration is None or not integration.endpoint:
            errors.append("Integration endpoint is required")

    if any(branch != step_type for branch in config.populated()):
        errors.append(f'Configuration does not match step type "{step_type}"')

    return errors


def validate_workflow(steps: List[WorkflowStep]) -> ValidationResult:
    """
    Check a step list without executing it

    Every problem is collected; errors are prefixed with the step's 1-based
    position in the list. Shared order values and duplicate ids are reported
    as warnings and do not make the workflow invalid.
    """
    errors: List[str] = []
    warnings: List[str] = []

    for index, step in enumerate(steps, start=1):
        errors.extend(f"Step {index}: {message}" for message in _step_errors(step))

    by_order: Dict[int, List[int]] = defaultdict(list)
    by_id: Dict[str, List[int]] = defaultdict(list)
    for index, step in enumerate(steps, start=1):
        by_order[step.order].append(index)
        by_id[step.id].append(index)

    for order, positions in by_order.items():
        if len(positions) > 1:
            joined = ", ".join(str(p) for p in positions)
            warnings.append(f"Steps {joined} share order {order}; they run in list order")

    for step_id, positions in by_id.items():
        if len(positions) > 1:
            joined = ", ".join(str(p) for p in positions)
            warnings.append(f'Steps {joined} share id "{step_id}"')

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)

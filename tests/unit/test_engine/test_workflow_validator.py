"""Workflow validator tests"""
from formflow.domain.models import WorkflowStep
from formflow.engine.workflow_validator import validate_workflow
from tests.builders import make_step


def test_webhook_without_endpoint():
    step = WorkflowStep.model_validate({"type": "action", "title": "X", "config": {"action": {"type": "webhook"}}})
    result = validate_workflow([step])
    assert result.valid is False
    assert result.errors == ["Step 1: Webhook endpoint is required"]


def test_valid_workflow():
    steps = [
        make_step("condition", title="Check", order=1, field="age", operator="greaterThan", value="18"),
        make_step("notification", title="Mail", order=2, recipients=["a@example.com"], subject="Hi", message="m"),
        make_step("action", title="Hook", order=3, type="webhook", endpoint="https://example.com"),
        make_step("integration", title="Zap", order=4, service="zapier", endpoint="https://hooks.zapier.com/1"),
    ]
    result = validate_workflow(steps)
    assert result.valid is True
    assert result.errors == []
    assert result.warnings == []


def test_every_problem_is_reported_with_position():
    steps = [
        make_step("condition", title=" ", order=1),
        make_step("notification", title="Mail", order=2, recipients=["  "], message="m"),
        make_step("integration", title="Zap", order=3, service="zapier"),
    ]
    result = validate_workflow(steps)
    assert result.errors == [
        "Step 1: Title is required",
        "Step 1: Condition field is required",
        "Step 1: Condition operator is required",
        "Step 2: Email recipients are required",
        "Step 2: Email subject is required",
        "Step 3: Integration endpoint is required",
    ]


def test_non_webhook_actions_need_no_endpoint():
    result = validate_workflow([make_step("action", title="Store", type="database")])
    assert result.valid is True


def test_config_branch_must_match_type():
    step = WorkflowStep.model_validate({
        "type": "action",
        "title": "Mixed",
        "config": {"action": {"type": "redirect", "endpoint": "https://x.example.com"},
                   "integration": {"endpoint": "https://y.example.com"}},
    })
    result = validate_workflow([step])
    assert result.errors == ['Step 1: Configuration does not match step type "action"']


def test_shared_order_and_duplicate_ids_are_warnings():
    first = make_step("action", title="A", order=1, type="database")
    second = make_step("action", title="B", order=1, type="database").model_copy(update={"id": first.id})
    result = validate_workflow([first, second])
    assert result.valid is True
    assert result.warnings == [
        "Steps 1, 2 share order 1; they run in list order",
        f'Steps 1, 2 share id "{first.id}"',
    ]


def test_empty_workflow_is_valid():
    result = validate_workflow([])
    assert result.valid is True


def test_database_action_into_service_collection():
    result = validate_workflow([make_step("action", title="Store", type="database", tableName="forms")])
    assert result.errors == ['Step 1: Table name "forms" is reserved']

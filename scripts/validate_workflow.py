"""
Validate a workflow definition

Usage:
    python -m scripts.validate_workflow --file workflow.json
    python -m scripts.validate_workflow --form-id form_1a2b3c4d5e6f

The JSON file may hold a list of steps or a form object with a "workflow" key.
Exits with status 1 when the workflow is invalid.
"""
import argparse
import json
import sys
from typing import Any, List

from pydantic import TypeAdapter

from formflow.domain.models import WorkflowStep
from formflow.engine.workflow_validator import validate_workflow
from formflow.repositories.form_repo import FormRepository

_steps_adapter = TypeAdapter(List[WorkflowStep])


def load_steps_from_file(path: str) -> List[WorkflowStep]:
    with open(path, encoding="utf-8") as handle:
        raw: Any = json.load(handle)
    if isinstance(raw, dict):
        raw = raw.get("workflow", [])
    return _steps_adapter.validate_python(raw)


def load_steps_from_form(form_id: str) -> List[WorkflowStep]:
    return FormRepository().get_form_or_raise(form_id).workflow


def print_report(steps: List[WorkflowStep]) -> bool:
    print("=" * 60)
    print("WORKFLOW ANALYSIS")
    print("=" * 60)

    step_types = {}
    for step in steps:
        step_types[step.type.value] = step_types.get(step.type.value, 0) + 1

    print(f"\n📊 STEP SUMMARY ({len(steps)} total):")
    for step_type, count in step_types.items():
        print(f"   • {step_type}: {count}")

    print("\n" + "=" * 60)
    print("STEPS (execution order)")
    print("=" * 60)
    for step in sorted(steps, key=lambda s: s.order):
        marker = "" if step.enabled else " (disabled)"
        print(f"\n[{step.order}] {step.type.value}: {step.title or '<untitled>'}{marker}")
        print(f"   ID: {step.id}")
        branch = step.branch()
        if branch is not None:
            for key, value in branch.model_dump(exclude_none=True, exclude_defaults=True).items():
                print(f"   {key}: {value}")

    result = validate_workflow(steps)

    print("\n" + "=" * 60)
    print("VALIDATION")
    print("=" * 60)
    for error in result.errors:
        print(f"   ❌ {error}")
    for warning in result.warnings:
        print(f"   ⚠️ {warning}")
    print(f"\n{'✅ Workflow is valid' if result.valid else '❌ Workflow is invalid'}")
    return result.valid


def main() -> int:
    parser = argparse.ArgumentParser(description="Validate a form workflow")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", help="JSON file with a step list or a form definition")
    source.add_argument("--form-id", help="Id of a stored form")
    args = parser.parse_args()

    steps = load_steps_from_file(args.file) if args.file else load_steps_from_form(args.form_id)
    return 0 if print_report(steps) else 1


if __name__ == "__main__":
    sys.exit(main())

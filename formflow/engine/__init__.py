"""Workflow Engine - Step execution, templates, conditions and validation"""
from .engine import WorkflowEngine
from .context import WorkflowContext
from .step_executor import StepExecutor, StepOutcome
from .condition_evaluator import ConditionEvaluator, evaluate
from .template_resolver import resolve, resolve_object
from .workflow_validator import validate_workflow

__all__ = [
    "WorkflowEngine",
    "WorkflowContext",
    "StepExecutor",
    "StepOutcome",
    "ConditionEvaluator",
    "evaluate",
    "resolve",
    "resolve_object",
    "validate_workflow",
]

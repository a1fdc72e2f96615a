"""Template Resolver - {{placeholder}} substitution for step templates

A dedicated single-pass resolver: no eval(), and replacement text is never
re-scanned, so submitted values containing "{{...}}" stay literal.
"""
import json
import math
import re
from typing import Any, Dict, Optional

from ..utils.time import format_iso, utc_now

PLACEHOLDER_PATTERN = re.compile(r"\{\{([^{}]+)\}\}")


def stringify(value: Any) -> str:
    """
    Coerce a submitted value to text

    None becomes "", booleans "true"/"false", integral floats drop the
    ".0", lists are comma-joined and dicts are rendered as JSON.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, default=str)
    return str(value)


def system_values(context: Any) -> Dict[str, str]:
    """Fixed placeholders available to every template"""
    return {
        "timestamp": format_iso(utc_now()),
        "formTitle": context.form.title,
        "submissionId": context.submission.id,
    }


def resolve(template: Optional[str], context: Any) -> str:
    """
    Resolve field and system placeholders in a template

    Field placeholders ({{fieldId}}) take precedence and are looked up in the
    submitted data; system placeholders ({{timestamp}}, {{formTitle}},
    {{submissionId}}) come next. Unknown names stay as literal text.

    Args:
        template: Template text; None resolves to ""
        context: WorkflowContext for the current run
    """
    if not template:
        return ""

    form_data = context.form_data
    system = system_values(context)

    def replace(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name in form_data:
            return stringify(form_data[name])
        if name in system:
            return system[name]
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(replace, template)


def resolve_object(value: Any, context: Any) -> Any:
    """Resolve templates in every string leaf of a nested list/dict structure"""
    if isinstance(value, str):
        return resolve(value, context)
    if isinstance(value, list):
        return [resolve_object(item, context) for item in value]
    if isinstance(value, dict):
        return {key: resolve_object(item, context) for key, item in value.items()}
    return value

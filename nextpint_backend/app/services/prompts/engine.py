# nextpint_backend/app/services/prompts/engine.py
from __future__ import annotations

"""
{{placeholder}} substitution and variable checking for prompt templates.

Substitution is a single literal pass: each {{name}} with a provided value
is replaced once; placeholders without a value are left as-is, and text
that a value brings in is never expanded again.
"""

import json, re
from typing import Any, Dict, List, Mapping, Tuple

from nextpint_backend.app.utils.checks import is_number

_PLACEHOLDER = re.compile(r"\{\{([^{}]+?)\}\}")


class PromptVariableError(ValueError):
    """Render variables failed the template's variable definitions."""

    def __init__(self, template_id: str, errors: List[str]):
        self.template_id = template_id
        self.errors = list(errors)
        super().__init__(f"Invalid variables for {template_id}: {', '.join(self.errors)}")


def to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, set)):
        return ", ".join(to_text(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    return str(value)

def process_template(template: str, variables: Mapping[str, Any]) -> str:
    def _sub(m: re.Match) -> str:
        key = m.group(1)
        if key in variables:
            return to_text(variables[key])
        return m.group(0)
    return _PLACEHOLDER.sub(_sub, template or "")

def find_placeholders(template: str) -> List[str]:
    seen: List[str] = []
    for m in _PLACEHOLDER.finditer(template or ""):
        if m.group(1) not in seen:
            seen.append(m.group(1))
    return seen

def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False

def _check_one(var: Dict[str, Any], value: Any) -> List[str]:
    name = var.get("name")
    vtype = var.get("type", "string")
    errors: List[str] = []

    if vtype == "number" and not is_number(value):
        return [f"{name} must be a number"]
    if vtype == "boolean" and not isinstance(value, bool):
        return [f"{name} must be a boolean"]
    if vtype == "array" and not isinstance(value, (list, tuple)):
        return [f"{name} must be an array"]
    if vtype == "string" and isinstance(value, dict):
        return [f"{name} must be a string"]

    rules = var.get("validation") or {}
    if isinstance(value, (str, list, tuple)):
        if rules.get("min_length") is not None and len(value) < rules["min_length"]:
            errors.append(f"{name} must be at least {rules['min_length']} long")
        if rules.get("max_length") is not None and len(value) > rules["max_length"]:
            errors.append(f"{name} must be at most {rules['max_length']} long")
    if isinstance(value, str) and rules.get("pattern"):
        try:
            if not re.search(rules["pattern"], value):
                errors.append(f"{name} does not match the expected format")
        except re.error:
            errors.append(f"{name} has an invalid validation pattern")
    if is_number(value):
        if rules.get("min") is not None and value < rules["min"]:
            errors.append(f"{name} must be at least {rules['min']}")
        if rules.get("max") is not None and value > rules["max"]:
            errors.append(f"{name} must be at most {rules['max']}")
    return errors

def resolve_variables(definitions: List[Dict[str, Any]], provided: Mapping[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    """
    Apply defaults, then check required-ness, type and validation rules.
    Extra provided keys pass through untouched.
    Returns (resolved values, error list).
    """
    resolved: Dict[str, Any] = dict(provided or {})
    errors: List[str] = []
    for var in definitions or []:
        name = var.get("name")
        if not name:
            continue
        value = resolved.get(name)
        if value is None and "default_value" in var and var["default_value"] is not None:
            value = var["default_value"]
            resolved[name] = value
        if _is_empty(value):
            if var.get("required"):
                errors.append(f"{name} is required")
            elif value is None:
                # optional and unset: render as blank rather than a raw {{name}}
                resolved[name] = ""
            continue
        errors.extend(_check_one(var, value))
    return resolved, errors


__all__ = [
    "PromptVariableError", "to_text", "process_template", "find_placeholders", "resolve_variables",
]

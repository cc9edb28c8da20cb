# nextpint_backend/app/services/prompts/__init__.py
from __future__ import annotations

from .engine import (  # noqa: F401
    PromptVariableError,
    process_template,
    find_placeholders,
    resolve_variables,
)
from .import_parser import parse_import_data, apply_import  # noqa: F401
from .service import (  # noqa: F401
    PromptService,
    TemplateNotFound,
    get_prompt_service,
    reset_prompt_service,
)

__all__ = [
    "PromptVariableError", "process_template", "find_placeholders", "resolve_variables",
    "parse_import_data", "apply_import",
    "PromptService", "TemplateNotFound", "get_prompt_service", "reset_prompt_service",
]

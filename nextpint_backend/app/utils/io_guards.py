# nextpint_backend/app/utils/io_guards.py
from __future__ import annotations

from pathlib import Path
from typing import Iterable

from nextpint_backend.app.config.paths import get_templates_dir

_READONLY_ROOTS = {get_templates_dir().resolve()}

def _is_under(path: Path, roots: Iterable[Path]) -> bool:
    p = path.resolve()
    for r in roots:
        try:
            p.relative_to(r)
            return True
        except ValueError:
            continue
    return False

def assert_readonly(path: Path) -> None:
    """
    Raise an AssertionError if `path` is under the bundled prompt templates dir.
    Call before any write; user data belongs under DATA_DIR.
    """
    if _is_under(path, _READONLY_ROOTS):
        raise AssertionError(
            f"Attempted write under read-only templates directory: {path} "
            f"(templates={get_templates_dir()})"
        )

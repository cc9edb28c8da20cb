# nextpint_backend/app/config/paths.py
from __future__ import annotations

"""
Central path resolution for NextPint.

Env overrides:
    DATA_DIR

Defaults:
    ./data                                   (local JSON storage)
    <app_root>/services/prompts/templates    (bundled prompt templates, read-only)

DATA_DIR is read on every call so tests (and the CLI) can re-point it
without re-importing the app.
"""

import os
from pathlib import Path

_THIS_FILE = Path(__file__).resolve()
APP_ROOT: Path = _THIS_FILE.parents[1]
PACKAGE_ROOT: Path = APP_ROOT.parent
TEMPLATES_DIR: Path = (APP_ROOT / "services" / "prompts" / "templates").resolve()


def get_data_dir() -> Path:
    return Path(os.getenv("DATA_DIR", "./data")).expanduser().resolve()


def get_templates_dir() -> Path:
    return TEMPLATES_DIR


def resolve_template_file(name: str) -> Path:
    """Return absolute path of a bundled template file."""
    return TEMPLATES_DIR / name


def path_under_data(*parts: str) -> Path:
    """Return absolute path under DATA_DIR for nested parts and ensure parent exists."""
    p = get_data_dir().joinpath(*parts)
    p.parent.mkdir(parents=True, exist_ok=True)
    return p


def ensure_data_dir_exists(*parts: str) -> Path:
    """
    Ensure DATA_DIR (and optional subpaths) exist.
    Examples:
        ensure_data_dir_exists() -> <DATA_DIR>
        ensure_data_dir_exists("storage") -> <DATA_DIR>/storage
    """
    p = get_data_dir().joinpath(*parts)
    p.mkdir(parents=True, exist_ok=True)
    return p


__all__ = [
    "APP_ROOT", "PACKAGE_ROOT", "TEMPLATES_DIR",
    "get_data_dir", "get_templates_dir", "resolve_template_file",
    "path_under_data", "ensure_data_dir_exists",
]

# nextpint_backend/app/config/__init__.py
from __future__ import annotations

# Re-export config surface expected by callers across the app.

# Env settings live in manifest.py
from .manifest import (
    APP_ENV,
    DEBUG_MODE,
    LOG_LEVEL,
    APP_VERSION,
    DATA_VERSION,
    SUPPORTED_AI_SERVICES,
    default_user_id,
    top_n,
    storage_quota_bytes,
)

# Path helpers live in paths.py
from .paths import (
    APP_ROOT,
    TEMPLATES_DIR,
    get_data_dir,
    resolve_template_file,
    path_under_data,
    ensure_data_dir_exists,
)

__all__ = [
    # manifest
    "APP_ENV", "DEBUG_MODE", "LOG_LEVEL", "APP_VERSION", "DATA_VERSION",
    "SUPPORTED_AI_SERVICES", "default_user_id", "top_n", "storage_quota_bytes",
    # paths
    "APP_ROOT", "TEMPLATES_DIR", "get_data_dir", "resolve_template_file",
    "path_under_data", "ensure_data_dir_exists",
]

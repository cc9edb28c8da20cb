# nextpint_backend/app/config/manifest.py
from __future__ import annotations

import os

# ---- environment mode ----
APP_ENV: str = os.getenv("APP_ENV", "development")
DEBUG_MODE: bool = os.getenv("DEBUG", "0") not in ("", "0", "false", "False")
LOG_LEVEL: str = os.getenv("NEXTPINT_LOG_LEVEL", "INFO").upper()

# ---- app constants ----
APP_VERSION: str = "1.0.0"
DATA_VERSION: str = "1.0.0"
SUPPORTED_AI_SERVICES = ("chatgpt", "claude", "gemini")


# Read lazily; tests flip these with monkeypatch.setenv.
def default_user_id() -> str:
    return os.getenv("NEXTPINT_USER_ID", "user_local").strip() or "user_local"


def top_n() -> int:
    try:
        return max(1, int(os.getenv("NEXTPINT_TOP_N", "5")))
    except ValueError:
        return 5


def storage_quota_bytes() -> int:
    try:
        return max(0, int(os.getenv("NEXTPINT_STORAGE_QUOTA", str(10 * 1024 * 1024))))
    except ValueError:
        return 10 * 1024 * 1024


__all__ = [
    "APP_ENV", "DEBUG_MODE", "LOG_LEVEL", "APP_VERSION", "DATA_VERSION",
    "SUPPORTED_AI_SERVICES", "default_user_id", "top_n", "storage_quota_bytes",
]

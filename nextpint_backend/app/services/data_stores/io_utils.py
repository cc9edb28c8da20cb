# nextpint_backend/app/services/data_stores/io_utils.py
from __future__ import annotations

import json, os, tempfile
from pathlib import Path
from typing import Any

from nextpint_backend.app.utils.io_guards import assert_readonly

def atomic_write(path: Path, text: str) -> None:
    """
    Atomic, guarded text write. Prevents writes under the bundled templates dir.
    """
    assert_readonly(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile("w", delete=False, dir=path.parent, encoding="utf-8", suffix=".tmp") as tf:
        tf.write(text)
        tmp = Path(tf.name)
    try:
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise

def read_json(path: Path, default: Any):
    """
    Strict JSON reader. Returns `default` if the file is missing or blank;
    raises ValueError on invalid JSON so callers decide how loud to be.
    """
    if not path.exists():
        return default
    raw = path.read_text(encoding="utf-8")
    if not raw.strip():
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

def dump_json(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False, indent=2)

# nextpint_backend/app/services/prompts/template_loader.py
from __future__ import annotations

import copy
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

import yaml  # PyYAML

from nextpint_backend.app.config.paths import resolve_template_file
from nextpint_backend.app.utils.logs import get_logger
from nextpint_backend.app.utils.timefmt import now_iso

log = get_logger("template_loader")

DEFAULT_TEMPLATES_FILE = "default_templates.yaml"

# -----------------------------------------------------------------------------
# Internal IO helpers
# -----------------------------------------------------------------------------
def _load_yaml_from(path: Path) -> Any:
    try:
        txt = path.read_text(encoding="utf-8")
        return yaml.safe_load(txt)
    except FileNotFoundError:
        raise
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

def _normalize_template(raw: Dict[str, Any], stamp: str) -> Dict[str, Any]:
    t = dict(raw)
    t.setdefault("description", "")
    t.setdefault("version", "1.0.0")
    t.setdefault("locale", "en-US")
    t.setdefault("examples", [])
    t["variables"] = [dict(v) for v in (t.get("variables") or [])]
    for v in t["variables"]:
        v.setdefault("type", "string")
        v.setdefault("required", False)
        v.setdefault("description", "")
    meta = dict(t.get("metadata") or {})
    meta.setdefault("supported_ai", [])
    meta.setdefault("estimated_tokens", 0)
    meta.setdefault("difficulty", "easy")
    meta.setdefault("tags", [])
    t["metadata"] = meta
    t.setdefault("created_at", stamp)
    t.setdefault("updated_at", stamp)
    return t

# -----------------------------------------------------------------------------
# Public loader API
# -----------------------------------------------------------------------------
@lru_cache(maxsize=8)
def _load_cached(name: str) -> tuple:
    path = resolve_template_file(name)
    doc = _load_yaml_from(path)
    if not isinstance(doc, dict) or not isinstance(doc.get("templates"), list):
        raise ValueError(f"Template file {path} must contain a 'templates' list")
    stamp = now_iso()
    out = []
    for raw in doc["templates"]:
        if not isinstance(raw, dict) or not raw.get("id") or not raw.get("template"):
            log.warning("Skipping malformed template entry in %s: %r", path.name, raw)
            continue
        out.append(_normalize_template(raw, stamp))
    log.info("Loaded %d prompt templates from %s", len(out), path.name)
    return tuple(out)

def load_default_templates(name: str = DEFAULT_TEMPLATES_FILE) -> List[Dict[str, Any]]:
    """Bundled templates, in file order. Callers get their own copies."""
    return [copy.deepcopy(t) for t in _load_cached(name)]

def clear_cache() -> None:
    _load_cached.cache_clear()


__all__ = ["DEFAULT_TEMPLATES_FILE", "load_default_templates", "clear_cache"]

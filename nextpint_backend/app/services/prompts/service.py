# nextpint_backend/app/services/prompts/service.py
from __future__ import annotations

"""
Prompt service: template registry + prompt generators.

The registry is in memory per instance, seeded from the bundled YAML
templates. Templates saved through save_template() are also written to the
prompt_templates_cache storage key so a fresh instance sees them.
"""

import copy, uuid
from typing import Any, Dict, Iterable, List, Optional

from nextpint_backend.app.config.manifest import APP_VERSION
from nextpint_backend.app.schemas import PROMPT_CATEGORIES
from nextpint_backend.app.services.analytics import events as analytics_events
from nextpint_backend.app.services.analytics import insights
from nextpint_backend.app.services.data_stores import kv_store, sessions
from nextpint_backend.app.utils.checks import is_blank, join_errors
from nextpint_backend.app.utils.logs import get_logger
from nextpint_backend.app.utils.timefmt import now_iso, parse_dt
from . import import_parser
from .engine import PromptVariableError, find_placeholders, process_template, resolve_variables
from .template_loader import load_default_templates

log = get_logger("prompts")

CACHE_KEY = kv_store.STORAGE_KEYS["PROMPT_TEMPLATES_CACHE"]

SESSION_TEMPLATE_ID = "beer-discovery-session"
TASTE_TEMPLATE_ID = "taste-analysis"
IMPORT_TEMPLATE_ID = "data-import"

# beers listed in a taste-analysis prompt, most recent first
_HISTORY_LINES = 50


class TemplateNotFound(KeyError):
    """No template with the requested id."""


def _join(values: Any) -> str:
    if isinstance(values, (list, tuple)):
        return ", ".join(str(v) for v in values)
    return str(values or "")


class PromptService:
    def __init__(self, load_saved: bool = True):
        self._templates: Dict[str, Dict[str, Any]] = {}
        self._defaults: Dict[str, Dict[str, Any]] = {}
        self._custom_ids: List[str] = []
        for t in load_default_templates():
            self._templates[t["id"]] = t
            self._defaults[t["id"]] = copy.deepcopy(t)
        if load_saved:
            for t in self._read_saved():
                self._templates[t["id"]] = t
                self._custom_ids.append(t["id"])

    # ---- registry ----

    def get_templates(self, category: Optional[str] = None, locale: Optional[str] = None) -> List[Dict[str, Any]]:
        out = list(self._templates.values())
        if category:
            out = [t for t in out if t.get("category") == getattr(category, "value", category)]
        if locale:
            out = [t for t in out if t.get("locale") == locale]
        return copy.deepcopy(out)

    def get_template(self, template_id: str) -> Optional[Dict[str, Any]]:
        # callers get copies; the registry only changes through save/delete
        return copy.deepcopy(self._templates.get(template_id))

    def save_template(self, template: Dict[str, Any]) -> Dict[str, Any]:
        errors = self.validate_template(template)
        if errors:
            raise ValueError(f"Invalid prompt template: {join_errors(errors)}")
        now = now_iso()
        t = copy.deepcopy(template)
        t["category"] = getattr(t["category"], "value", t["category"])
        prev = self._templates.get(t["id"])
        t["created_at"] = (prev or {}).get("created_at") or t.get("created_at") or now
        t["updated_at"] = now
        t.setdefault("variables", [])
        t.setdefault("metadata", {})
        self._templates[t["id"]] = t
        if t["id"] not in self._custom_ids:
            self._custom_ids.append(t["id"])
        self._write_saved()
        return copy.deepcopy(t)

    def delete_template(self, template_id: str) -> None:
        if template_id not in self._templates:
            raise TemplateNotFound(f"template not found: {template_id}")
        if template_id not in self._custom_ids:
            raise ValueError(f"built-in template cannot be deleted: {template_id}")
        self._custom_ids.remove(template_id)
        if template_id in self._defaults:
            # an override of a bundled template falls back to the bundled one
            self._templates[template_id] = copy.deepcopy(self._defaults[template_id])
        else:
            del self._templates[template_id]
        self._write_saved()

    @staticmethod
    def validate_template(template: Dict[str, Any]) -> List[str]:
        errors: List[str] = []
        if not isinstance(template, dict):
            return ["Template must be an object"]
        if is_blank(template.get("id")):
            errors.append("Template ID is required")
        if is_blank(template.get("name")):
            errors.append("Template name is required")
        if is_blank(template.get("template")):
            errors.append("Template text is required")
        if getattr(template.get("category"), "value", template.get("category")) not in PROMPT_CATEGORIES:
            errors.append("Invalid template category")
        if not isinstance(template.get("variables", []), list):
            errors.append("Variables must be an array")
        return errors

    def _read_saved(self) -> List[Dict[str, Any]]:
        doc = kv_store.get_item(CACHE_KEY, default={})
        items = doc.get("templates") if isinstance(doc, dict) else None
        if not isinstance(items, list):
            return []
        return [t for t in items if isinstance(t, dict) and not self.validate_template(t)]

    def _write_saved(self) -> None:
        kv_store.set_item(CACHE_KEY, {
            "version": APP_VERSION,
            "last_updated": now_iso(),
            "templates": [self._templates[i] for i in self._custom_ids],
        })

    # ---- processing ----

    def process_template(self, template: str, variables: Dict[str, Any]) -> str:
        return process_template(template, variables)

    def render_template(self, template_id: str, variables: Optional[Dict[str, Any]] = None,
                        ai_service: Optional[str] = None) -> Dict[str, Any]:
        """Check variables against the template's definitions and build a GeneratedPrompt."""
        template = self.get_template(template_id)
        if template is None:
            raise TemplateNotFound(f"template not found: {template_id}")
        resolved, errors = resolve_variables(template.get("variables") or [], variables or {})
        if errors:
            raise PromptVariableError(template_id, errors)
        content = process_template(template["template"], resolved)
        unresolved = find_placeholders(content)
        if unresolved:
            log.debug("Template %s rendered with unfilled placeholders: %s", template_id, unresolved)
        return {
            "id": str(uuid.uuid4()),
            "template_id": template_id,
            "content": content,
            "variables": resolved,
            "ai_service": ai_service,
            "generated_at": now_iso(),
            "copied_count": 0,
        }

    # ---- generators ----

    @staticmethod
    def session_variables(profile: Dict[str, Any]) -> Dict[str, str]:
        taste = profile.get("taste_preference") or {}
        constraints = profile.get("constraints") or {}
        return {
            "sessionGoal": profile.get("session_goal") or "",
            "mood": profile.get("mood") or "",
            "primaryTaste": taste.get("primary") or "",
            "avoidTastes": _join(taste.get("avoid") or []),
            "location": constraints.get("location") or "any location",
            "budget": constraints.get("budget") or "any budget",
            "keywords": _join(profile.get("search_keywords") or []),
            "constraints": _join(constraints.get("other") or []) or "none",
        }

    def generate_session_prompt(self, profile: Dict[str, Any]) -> str:
        template = self.get_template(SESSION_TEMPLATE_ID)
        if template is None:
            return self.generate_fallback_prompt(profile)
        return process_template(template["template"], self.session_variables(profile))

    @staticmethod
    def generate_fallback_prompt(profile: Dict[str, Any]) -> str:
        taste = profile.get("taste_preference") or {}
        constraints = profile.get("constraints") or {}
        return (
            "I'm looking for beer recommendations with the following preferences:\n"
            "\n"
            f"Goal: {profile.get('session_goal') or ''}\n"
            f"Mood: {profile.get('mood') or ''}\n"
            f"Primary taste preference: {taste.get('primary') or ''}\n"
            f"Tastes to avoid: {_join(taste.get('avoid') or []) or 'none'}\n"
            f"Location: {constraints.get('location') or 'any'}\n"
            f"Budget: {constraints.get('budget') or 'flexible'}\n"
            f"Additional keywords: {_join(profile.get('search_keywords') or []) or 'none'}\n"
            "\n"
            "Please provide personalized beer recommendations with detailed explanations of why "
            "each beer matches my preferences. Include brewery information, tasting notes, and "
            "where I might find these beers."
        )

    @staticmethod
    def format_beer_history(beers: Iterable[Dict[str, Any]], limit: int = _HISTORY_LINES) -> str:
        rows = sorted(
            beers,
            key=lambda b: parse_dt(b.get("checkin_date")) or parse_dt(b.get("imported_at")) or parse_dt(0),
            reverse=True,
        )
        lines = []
        for b in rows[:limit]:
            line = f"- {b.get('name')} by {b.get('brewery')} ({b.get('style')}), rated {b.get('rating', 0)}/5"
            when = parse_dt(b.get("checkin_date"))
            if when:
                line += f" on {when.date().isoformat()}"
            if b.get("notes"):
                line += f": {b['notes']}"
            lines.append(line)
        return "\n".join(lines) if lines else "No beers recorded yet."

    def generate_taste_analysis_prompt(self, beers: List[Dict[str, Any]],
                                       profile: Optional[Dict[str, Any]] = None,
                                       occasions: Optional[str] = None) -> str:
        prefs = (profile or {}).get("preferences") or {}
        favorite = prefs.get("favorite_styles") or insights.favorite_styles(beers)
        breweries = prefs.get("preferred_breweries") or insights.brewery_preferences(beers)
        rendered = self.render_template(TASTE_TEMPLATE_ID, {
            "beerHistory": self.format_beer_history(beers),
            "favoriteStyles": _join(favorite) or "not sure yet",
            "preferredBreweries": _join(breweries) or None,
            "occasions": occasions,
        })
        return rendered["content"]

    def generate_data_import_prompt(self, source: Optional[str] = None, max_beers: int = 50) -> str:
        variables: Dict[str, Any] = {"maxBeers": max_beers}
        if source:
            variables["source"] = source
            variables["sourceHint"] = f" on {source}"
        return self.render_template(IMPORT_TEMPLATE_ID, variables)["content"]

    def generate_prompt_for_session(self, session_id: str, ai_service: Optional[str] = None) -> Dict[str, Any]:
        """Build the session prompt, store it on the session and track the event."""
        session = sessions.get_session(session_id)
        if session is None:
            raise KeyError(f"session not found: {session_id}")
        profile = session.get("profile") or {}
        template_id = SESSION_TEMPLATE_ID if self.get_template(SESSION_TEMPLATE_ID) else "fallback"
        prompt = {
            "template_id": template_id,
            "content": self.generate_session_prompt(profile),
            "variables": self.session_variables(profile),
            "ai_service": ai_service,
        }
        entry = sessions.add_generated_prompt(session_id, prompt)
        analytics_events.track_event(
            "prompt_generated",
            {"template_id": template_id, "ai_service": ai_service},
            session_id=session_id,
            user_id=session.get("user_id"),
        )
        return entry

    # ---- import flow ----

    def parse_import_data(self, text: str) -> Dict[str, Any]:
        return import_parser.parse_import_data(text)

    def apply_import(self, result: Dict[str, Any]) -> Dict[str, Any]:
        return import_parser.apply_import(result)


_default_service: Optional[PromptService] = None

def get_prompt_service() -> PromptService:
    global _default_service
    if _default_service is None:
        _default_service = PromptService()
    return _default_service

def reset_prompt_service() -> None:
    global _default_service
    _default_service = None


__all__ = [
    "PromptService", "TemplateNotFound", "PromptVariableError",
    "get_prompt_service", "reset_prompt_service",
    "SESSION_TEMPLATE_ID", "TASTE_TEMPLATE_ID", "IMPORT_TEMPLATE_ID",
]

# nextpint_backend/app/routers/prompts.py
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException

from nextpint_backend.app.schemas import ImportTextIn, PromptCategory, PromptTemplateIn, RenderIn, SessionProfileIn
from nextpint_backend.app.services.data_stores import beers, profiles
from nextpint_backend.app.services.prompts.engine import PromptVariableError
from nextpint_backend.app.services.prompts.service import get_prompt_service
from nextpint_backend.app.utils.http_errors import http_errors

router = APIRouter(prefix="/prompts", tags=["prompts"])

# --- templates ---
@router.get("/templates")
def list_templates(category: Optional[PromptCategory] = None, locale: Optional[str] = None) -> Dict[str, Any]:
    return {"templates": get_prompt_service().get_templates(category, locale)}

@router.get("/templates/{template_id}")
def get_template(template_id: str) -> Dict[str, Any]:
    template = get_prompt_service().get_template(template_id)
    if template is None:
        raise HTTPException(404, f"template not found: {template_id}")
    return {"template": template}

@router.put("/templates")
def save_template(template: PromptTemplateIn) -> Dict[str, Any]:
    with http_errors("save template"):
        return {"template": get_prompt_service().save_template(template.model_dump(mode="json", exclude_none=True))}

@router.delete("/templates/{template_id}", response_model=Dict[str, bool])
def delete_template(template_id: str) -> Dict[str, bool]:
    with http_errors("delete template"):
        get_prompt_service().delete_template(template_id)
    return {"ok": True}

@router.post("/templates/{template_id}/render")
def render_template(template_id: str, body: RenderIn) -> Dict[str, Any]:
    with http_errors("render template"):
        try:
            prompt = get_prompt_service().render_template(template_id, body.variables, body.ai_service)
        except PromptVariableError as e:
            # keep the per-variable list for the client
            raise HTTPException(400, {"message": str(e), "errors": e.errors}) from e
    return {"prompt": prompt}

# --- generators ---
@router.post("/session")
def session_prompt(profile: SessionProfileIn) -> Dict[str, str]:
    return {"content": get_prompt_service().generate_session_prompt(profile.model_dump(mode="json", exclude_none=True))}

@router.get("/taste-analysis")
def taste_analysis_prompt(occasions: Optional[str] = None) -> Dict[str, str]:
    svc = get_prompt_service()
    with http_errors("build taste analysis prompt"):
        content = svc.generate_taste_analysis_prompt(beers.get_imported_beers(), profiles.get_user_profile(), occasions)
    return {"content": content}

# --- import flow ---
@router.get("/import")
def import_prompt(source: Optional[str] = None, max_beers: int = 50) -> Dict[str, str]:
    with http_errors("build import prompt"):
        return {"content": get_prompt_service().generate_data_import_prompt(source, max_beers)}

@router.post("/import")
def import_data(body: ImportTextIn) -> Dict[str, Any]:
    """Parse an assistant reply; with apply=true a valid payload is also written to storage."""
    svc = get_prompt_service()
    result = svc.parse_import_data(body.text)
    if not body.apply:
        return {"result": result}
    if not result["is_valid"]:
        raise HTTPException(400, {"message": "Invalid import data", "errors": result["errors"]})
    with http_errors("apply import"):
        applied = svc.apply_import(result)
    return {"result": result, "applied": applied}

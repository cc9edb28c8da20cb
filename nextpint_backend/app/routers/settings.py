# nextpint_backend/app/routers/settings.py
from __future__ import annotations

import json
from typing import Any, Dict

from fastapi import APIRouter

from nextpint_backend.app.schemas import CacheSettingsPatch, SettingsPatch
from nextpint_backend.app.services.data_stores import app_settings as store
from nextpint_backend.app.utils.http_errors import http_errors

router = APIRouter(prefix="/settings", tags=["settings"])

@router.get("")
def get_settings() -> Dict[str, Any]:
    return {"settings": store.get_settings(), "first_launch": store.is_first_launch()}

@router.patch("")
def update_settings(patch: SettingsPatch) -> Dict[str, Any]:
    with http_errors("update settings"):
        return {"settings": store.update_settings(patch.model_dump(exclude_none=True))}

@router.patch("/cache")
def update_cache(patch: CacheSettingsPatch) -> Dict[str, Any]:
    with http_errors("update cache settings"):
        return {"settings": store.update_cache_settings(patch.model_dump(exclude_none=True))}

@router.post("/onboarding/complete")
def complete_onboarding() -> Dict[str, Any]:
    with http_errors("complete onboarding"):
        return {"settings": store.complete_onboarding()}

@router.post("/onboarding/reset")
def reset_onboarding() -> Dict[str, Any]:
    with http_errors("reset onboarding"):
        return {"settings": store.reset_onboarding()}

@router.post("/reset")
def reset_to_defaults() -> Dict[str, Any]:
    with http_errors("reset settings"):
        return {"settings": store.reset_to_defaults()}

@router.get("/storage")
def storage_info() -> Dict[str, Any]:
    return store.get_storage_info()

@router.get("/export")
def export_settings() -> Dict[str, Any]:
    return json.loads(store.export_settings())

@router.post("/import")
def import_settings(payload: Dict[str, Any]) -> Dict[str, Any]:
    with http_errors("import settings"):
        return {"settings": store.import_settings(json.dumps(payload))}

@router.delete("", response_model=Dict[str, bool])
def clear_settings() -> Dict[str, bool]:
    with http_errors("clear settings"):
        store.clear_settings()
    return {"ok": True}

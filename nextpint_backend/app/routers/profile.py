# nextpint_backend/app/routers/profile.py
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException

from nextpint_backend.app.schemas import PreferencesPatch
from nextpint_backend.app.services.data_stores import profiles as store
from nextpint_backend.app.utils.http_errors import http_errors

router = APIRouter(prefix="/profile", tags=["profile"])

@router.get("")
def get_profile() -> Dict[str, Any]:
    profile = store.get_user_profile()
    if profile is None:
        raise HTTPException(404, "user profile not found")
    return {"profile": profile}

@router.post("")
def create_profile(preferences: Optional[PreferencesPatch] = None) -> Dict[str, Any]:
    """Create (or replace) the local profile, starting from default preferences."""
    prefs = preferences.model_dump(mode="json", exclude_none=True) if preferences else None
    with http_errors("create profile"):
        return {"profile": store.create_user_profile(prefs)}

@router.patch("/preferences")
def update_preferences(patch: PreferencesPatch) -> Dict[str, Any]:
    with http_errors("update preferences"):
        return {"profile": store.update_user_preferences(patch.model_dump(mode="json", exclude_none=True))}

@router.patch("/settings")
def update_profile_settings(patch: Dict[str, Any]) -> Dict[str, Any]:
    with http_errors("update profile settings"):
        return {"profile": store.update_user_settings(patch)}

@router.delete("", response_model=Dict[str, bool])
def delete_profile() -> Dict[str, bool]:
    with http_errors("delete profile"):
        store.delete_user_profile()
    return {"ok": True}

# nextpint_backend/app/routers/backup.py
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter

from nextpint_backend.app.services.data_stores import backup
from nextpint_backend.app.utils.http_errors import http_errors

router = APIRouter(prefix="/backup", tags=["backup"])

@router.get("")
def create_backup() -> Dict[str, Any]:
    return backup.create_backup()

@router.post("/restore")
def restore_backup(doc: Dict[str, Any], verify: bool = True) -> Dict[str, Any]:
    """Overwrites profile, beer history, sessions and settings with the document's contents."""
    with http_errors("restore backup"):
        return backup.restore_backup(doc, verify=verify)

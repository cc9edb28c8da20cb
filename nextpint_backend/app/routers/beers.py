# nextpint_backend/app/routers/beers.py
from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException

from nextpint_backend.app.schemas import BeerFilterIn, BeerIn, BeerPatch
from nextpint_backend.app.services.data_stores import beers as store
from nextpint_backend.app.utils.http_errors import http_errors

router = APIRouter(prefix="/beers", tags=["beers"])

@router.get("")
def list_beers() -> Dict[str, Any]:
    return {"beers": store.get_imported_beers()}

@router.post("")
def add_beer(beer: BeerIn) -> Dict[str, Any]:
    with http_errors("add beer"):
        return {"beer": store.add_imported_beer(beer.model_dump(mode="json", exclude_none=True))}

@router.post("/bulk")
def add_beers(items: List[BeerIn]) -> Dict[str, Any]:
    with http_errors("add beers"):
        added = store.add_imported_beers([b.model_dump(mode="json", exclude_none=True) for b in items])
    return {"beers": added, "count": len(added)}

@router.post("/filter")
def filter_beers(flt: BeerFilterIn) -> Dict[str, Any]:
    rows = store.filter_beers(flt.model_dump(mode="json", exclude_none=True))
    return {"beers": rows, "count": len(rows)}

@router.get("/stats")
def beer_stats() -> Dict[str, Any]:
    return store.get_beer_stats()

@router.get("/styles")
def unique_styles() -> Dict[str, List[str]]:
    return {"styles": store.get_unique_styles()}

@router.get("/breweries")
def unique_breweries() -> Dict[str, List[str]]:
    return {"breweries": store.get_unique_breweries()}

@router.delete("")
def clear_beers() -> Dict[str, bool]:
    with http_errors("clear beers"):
        store.clear_all_beers()
    return {"ok": True}

@router.get("/{beer_id}")
def get_beer(beer_id: str) -> Dict[str, Any]:
    doc = store.get_imported_beer(beer_id)
    if doc is None:
        raise HTTPException(404, f"beer not found: {beer_id}")
    return {"beer": doc}

@router.patch("/{beer_id}")
def update_beer(beer_id: str, patch: BeerPatch) -> Dict[str, Any]:
    with http_errors("update beer"):
        return {"beer": store.update_imported_beer(beer_id, patch.model_dump(mode="json", exclude_none=True))}

@router.delete("/{beer_id}")
def delete_beer(beer_id: str) -> Dict[str, bool]:
    with http_errors("delete beer"):
        store.delete_imported_beer(beer_id)
    return {"ok": True}

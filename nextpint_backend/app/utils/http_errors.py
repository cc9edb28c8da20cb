# nextpint_backend/app/utils/http_errors.py
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from fastapi import HTTPException, status

from nextpint_backend.app.services.data_stores.kv_store import StorageError
from nextpint_backend.app.utils.logs import get_logger

log = get_logger("http")

def _msg(e: Exception) -> str:
    # KeyError str() wraps the message in quotes
    return str(e.args[0]) if isinstance(e, KeyError) and e.args else str(e)

@contextmanager
def http_errors(action: str) -> Iterator[None]:
    """
    Map store/service exceptions onto HTTP errors:
    KeyError -> 404, ValueError/TypeError -> 400, StorageError -> 500.
    """
    try:
        yield
    except HTTPException:
        raise
    except KeyError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_msg(e))
    except (ValueError, TypeError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_msg(e))
    except StorageError as e:
        log.exception("%s failed", action)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"{action} failed: {e}")

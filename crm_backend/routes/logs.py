from __future__ import annotations

from fastapi import APIRouter, Query

from ..errors import http_error
from ..logs import search_logs

router = APIRouter()


@router.get("/api/logs/search")
def api_logs_search(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=200),
    action: str | None = None,
    query: str | None = None,
    entity_type: str | None = None,
    entity_id: str | None = None,
    result: str | None = None,
    ts_from: str | None = None,
    ts_to: str | None = None,
):
    try:
        total, items = search_logs(
            query, action, ts_from, ts_to, page, size,
            entity_type=entity_type, entity_id=entity_id, result=result,
        )
    except Exception as e:
        raise http_error(e)
    return {"total": total, "items": items}

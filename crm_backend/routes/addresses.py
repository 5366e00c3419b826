from __future__ import annotations

from fastapi import APIRouter

from ..errors import http_error
from ..logs import LogContext
from ..services.address_svc import delete_address, get_address, list_cities, update_address
from .customers import AddressBody

router = APIRouter()


@router.get("/api/addresses/{address_id}")
def api_address_get(address_id: int):
    try:
        return {"message": "success", "data": get_address(address_id)}
    except Exception as e:
        raise http_error(e)


@router.put("/api/addresses/{address_id}")
def api_address_update(address_id: int, body: AddressBody):
    log = LogContext("ADDRESS_UPDATE")
    log.set_entity("ADDRESS", address_id)
    log.set_payload(body.model_dump())
    try:
        data = update_address(address_id, body.model_dump(), log)
        log.write("OK")
        return {"message": "Address updated successfully", "data": data}
    except Exception as e:
        raise http_error(e, log)


@router.delete("/api/addresses/{address_id}")
def api_address_delete(address_id: int):
    log = LogContext("ADDRESS_DELETE")
    log.set_entity("ADDRESS", address_id)
    try:
        delete_address(address_id, log)
        log.write("OK")
        return {"message": "Address deleted successfully"}
    except Exception as e:
        raise http_error(e, log)


@router.get("/api/cities")
def api_cities():
    try:
        return {"message": "success", "data": list_cities()}
    except Exception as e:
        raise http_error(e)

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from ..errors import http_error
from ..logs import LogContext
from ..services.customer_svc import (
    create_customer,
    delete_customer,
    get_customer,
    list_customers,
    update_customer,
)
from ..services.address_svc import add_address, list_addresses

router = APIRouter()


# Fields are optional here so a missing field reaches service validation (400)
class CustomerBody(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None


class AddressBody(BaseModel):
    address_details: str | None = None
    city: str | None = None
    state: str | None = None
    pin_code: str | None = None


@router.get("/api/customers")
def api_customers_list(
    search: str | None = None,
    city: str | None = None,
    page: int = 1,
    limit: int | None = None,
):
    try:
        rows, pagination = list_customers(search=search, city=city, page=page, page_size=limit)
        return {"message": "success", "data": rows, "pagination": pagination}
    except Exception as e:
        raise http_error(e)


@router.get("/api/customers/{customer_id}")
def api_customer_get(customer_id: int):
    try:
        return {"message": "success", "data": get_customer(customer_id)}
    except Exception as e:
        raise http_error(e)


@router.post("/api/customers", status_code=201)
def api_customer_create(body: CustomerBody):
    log = LogContext("CUSTOMER_CREATE")
    log.set_payload(body.model_dump())
    try:
        data = create_customer(body.model_dump(), log)
        log.write("OK")
        return {"message": "Customer created successfully", "data": data}
    except Exception as e:
        raise http_error(e, log)


@router.put("/api/customers/{customer_id}")
def api_customer_update(customer_id: int, body: CustomerBody):
    log = LogContext("CUSTOMER_UPDATE")
    log.set_entity("CUSTOMER", customer_id)
    log.set_payload(body.model_dump())
    try:
        data = update_customer(customer_id, body.model_dump(), log)
        log.write("OK")
        return {"message": "Customer updated successfully", "data": data}
    except Exception as e:
        raise http_error(e, log)


@router.delete("/api/customers/{customer_id}")
def api_customer_delete(customer_id: int):
    log = LogContext("CUSTOMER_DELETE")
    log.set_entity("CUSTOMER", customer_id)
    try:
        delete_customer(customer_id, log)
        log.write("OK")
        return {"message": "Customer deleted successfully"}
    except Exception as e:
        raise http_error(e, log)


@router.get("/api/customers/{customer_id}/addresses")
def api_customer_addresses(customer_id: int):
    try:
        return {"message": "success", "data": list_addresses(customer_id)}
    except Exception as e:
        raise http_error(e)


@router.post("/api/customers/{customer_id}/addresses", status_code=201)
def api_customer_address_add(customer_id: int, body: AddressBody):
    log = LogContext("ADDRESS_CREATE")
    log.set_payload({"customer_id": customer_id, **body.model_dump()})
    try:
        data = add_address(customer_id, body.model_dump(), log)
        log.write("OK")
        return {"message": "Address added successfully", "data": data}
    except Exception as e:
        raise http_error(e, log)

from __future__ import annotations

import re
from typing import Any, Mapping

from ..errors import ValidationError

PHONE_RE = re.compile(r"[0-9]{10}")
PIN_CODE_RE = re.compile(r"[0-9]{6}")

CUSTOMER_FIELDS = ("first_name", "last_name", "phone_number")
ADDRESS_FIELDS = ("address_details", "city", "state", "pin_code")


def _require(payload: Mapping[str, Any], fields: tuple[str, ...]) -> dict[str, str]:
    """Pick `fields` out of payload, trimmed; raise if any is missing or blank."""
    out: dict[str, str] = {}
    missing = []
    for f in fields:
        v = payload.get(f)
        v = "" if v is None else str(v).strip()
        if not v:
            missing.append(f)
        else:
            out[f] = v
    if missing:
        raise ValidationError(f"All fields ({', '.join(fields)}) are required; missing: {', '.join(missing)}")
    return out


def clean_customer(payload: Mapping[str, Any]) -> dict[str, str]:
    """Trimmed customer fields; surrounding whitespace (phone included) is dropped before validation."""
    data = _require(payload, CUSTOMER_FIELDS)
    if not PHONE_RE.fullmatch(data["phone_number"]):
        raise ValidationError("phone_number must be exactly 10 digits")
    return data


def clean_address(payload: Mapping[str, Any]) -> dict[str, str]:
    data = _require(payload, ADDRESS_FIELDS)
    if not PIN_CODE_RE.fullmatch(data["pin_code"]):
        raise ValidationError("pin_code must be exactly 6 digits")
    return data


def clean_filter(value: str | None) -> str | None:
    """Blank search/city values mean no filter."""
    if value is None:
        return None
    value = value.strip()
    return value or None

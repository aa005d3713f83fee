"""
Request validation shared by every form endpoint.

Request models use `Text` fields: values are normalised to trimmed strings
(numbers sent as JSON numbers included) and empty strings count as missing.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Annotated, Any, Iterable

from fastapi import Request
from pydantic import BaseModel, BeforeValidator
from starlette.datastructures import UploadFile

from .errors import INVALID_EMAIL, MISSING_FIELDS, bad_request

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Bounded digit counts keep parsing cheap; INTEGER columns are 32-bit and
# money columns are NUMERIC(10, 2).
INT_RE = re.compile(r"[+-]?\d{1,10}(\.0{1,10})?")
INT_MIN, INT_MAX = -(2**31), 2**31 - 1
DECIMAL_RE = re.compile(r"[+-]?(\d{1,8}(\.\d{1,2})?|\.\d{1,2})")


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    # Files and nested objects never belong in a text field.
    return None


Text = Annotated[str | None, BeforeValidator(_as_text)]


def is_valid_email(email: str | None) -> bool:
    return bool(email) and EMAIL_RE.match(email) is not None


def require_fields(form: BaseModel, fields: Iterable[str]) -> None:
    for name in fields:
        if not getattr(form, name, None):
            raise bad_request(MISSING_FIELDS)


def require_email(email: str | None) -> None:
    if not is_valid_email(email):
        raise bad_request(INVALID_EMAIL)


def _not_a_number(field_name: str):
    return bad_request(f"El campo {field_name} debe ser un número")


def to_int(value: str | None, field_name: str) -> int | None:
    if value is None or value == "":
        return None
    # "2.0" from a number input is still a whole number; exponents are not accepted.
    if INT_RE.fullmatch(value) is None:
        raise _not_a_number(field_name)
    number = int(value.split(".", 1)[0])
    if not INT_MIN <= number <= INT_MAX:
        raise _not_a_number(field_name)
    return number


def to_decimal(value: str | None, field_name: str) -> Decimal | None:
    if value is None or value == "":
        return None
    value = value.replace(",", ".")
    if DECIMAL_RE.fullmatch(value) is None:
        raise _not_a_number(field_name)
    return Decimal(value)


async def read_payload(request: Request) -> dict[str, Any]:
    """
    Return the request body as a flat dict.

    Accepts JSON objects, urlencoded forms and multipart forms (file parts are
    left out; read them from `request.form()`).
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            data = await request.json()
        except ValueError:
            raise bad_request(MISSING_FIELDS)
        return data if isinstance(data, dict) else {}

    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        return {k: v for (k, v) in form.items() if not isinstance(v, UploadFile)}

    return {}

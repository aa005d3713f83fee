"""
The uniform JSON envelope: `{success, message, ...}`.
"""

from __future__ import annotations

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def envelope(message: str, *, status_code: int = 200, success: bool = True, **extra: Any) -> JSONResponse:
    body: dict[str, Any] = {"success": success, "message": message}
    body.update(extra)
    # Rows carry Decimal/datetime values straight from asyncpg.
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def created(message: str, record_id: int) -> JSONResponse:
    return envelope(message, status_code=201, id=record_id)


def failure(status_code: int, message: str) -> JSONResponse:
    return envelope(message, status_code=status_code, success=False)


def rows(data: list[dict[str, Any]]) -> JSONResponse:
    return JSONResponse(
        content=jsonable_encoder({"success": True, "count": len(data), "data": data}),
    )

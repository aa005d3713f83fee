"""
Serves stored proof files.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import FileResponse

from core.errors import ApiError

from . import service

router = APIRouter()


@router.get("/uploads/{filename}")
async def get_upload(filename: str) -> FileResponse:
    path = service.resolve_stored_file(filename)
    if path is None:
        raise ApiError(404, "Archivo no encontrado")
    return FileResponse(path)

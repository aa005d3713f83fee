"""
Proof-of-payment upload handling.

This file contains logic that is independent of FastAPI's routing layer:
- Validate the upload (MIME type allow-list)
- Read file bytes with a size limit
- Write the file to the upload directory and build its public URL

Nothing touches the disk until every check has passed.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path, PurePosixPath, PureWindowsPath
from urllib.parse import quote

from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from core import config
from core.errors import bad_request

ALLOWED_CONTENT_TYPES = {
    "image/jpeg",
    "image/png",
    "image/gif",
    "application/pdf",
}

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredUpload:
    filename: str
    path: Path
    url: str
    content_type: str
    size_bytes: int


def validate_upload(file: UploadFile | None) -> str:
    """
    Return the normalized content type if this upload is acceptable.
    """
    if file is None or not file.filename:
        raise bad_request("Por favor, adjunta el comprobante de pago")

    content_type = (file.content_type or "").split(";", 1)[0].strip().lower()
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise bad_request("Tipo de archivo no permitido. Solo se aceptan JPG, PNG, GIF o PDF")
    return content_type


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    """
    Read the upload into memory, enforcing a maximum size.
    """
    chunk_size = 1024 * 1024  # 1 MiB
    buf = bytearray()

    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise bad_request(
                f"El archivo es demasiado grande. Máximo {max(1, max_bytes // (1024 * 1024))} MB"
            )

    return bytes(buf)


def stored_filename(original: str, *, now_ms: int | None = None) -> str:
    """
    `<epoch ms>-<original name>`, keeping only the last path component.
    """
    # Browsers on Windows may send the full client path.
    name = PureWindowsPath(PurePosixPath(original).name).name
    name = re.sub(r"\s+", "_", name).lstrip(".") or "comprobante"
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{stamp}-{name}"


def public_url(filename: str) -> str:
    return f"{config.public_base_url()}/uploads/{quote(filename)}"


def _write(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


async def store_upload(file: UploadFile | None) -> StoredUpload:
    """
    Validate and persist a single proof file. Raises ApiError(400) before any
    write when the file is missing, of a disallowed type, or too large.
    """
    content_type = validate_upload(file)
    data = await read_upload_bytes(file, max_bytes=config.max_upload_bytes())

    filename = stored_filename(file.filename)
    path = config.upload_dir() / filename
    await run_in_threadpool(_write, path, data)

    stored = StoredUpload(
        filename=filename,
        path=path,
        url=public_url(filename),
        content_type=content_type,
        size_bytes=len(data),
    )
    logger.info("upload_stored filename=%s size_bytes=%s", stored.filename, stored.size_bytes)
    return stored


def resolve_stored_file(filename: str) -> Path | None:
    """
    Path of a previously stored upload, or None for unknown or unsafe names.
    """
    if not filename or filename != PurePosixPath(filename).name or filename.startswith("."):
        return None
    path = config.upload_dir() / filename
    return path if path.is_file() else None

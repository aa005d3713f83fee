"""
Error taxonomy for the HTTP surface.

- `ApiError` carries a status code and a user-facing (Spanish) message.
  Validation and file-policy problems are raised as 400s.
- `persistence_errors` turns database/disk failures into a 500 with a generic
  message, keeping the detail in the server log only.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import asyncpg

logger = logging.getLogger(__name__)

MISSING_FIELDS = "Por favor, completa todos los campos"
INVALID_EMAIL = "Por favor, ingresa un email válido"
NOT_FOUND = "Ruta no encontrada"
INTERNAL_ERROR = "Error interno del servidor"


class ApiError(Exception):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def bad_request(message: str) -> ApiError:
    return ApiError(400, message)


# Anything the pool or the filesystem can raise for an otherwise valid request.
PERSISTENCE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, RuntimeError)


@asynccontextmanager
async def persistence_errors(message: str) -> AsyncIterator[None]:
    try:
        yield
    except ApiError:
        raise
    except PERSISTENCE_ERRORS as e:
        logger.exception("persistence_failed message=%r", message)
        raise ApiError(500, message) from e

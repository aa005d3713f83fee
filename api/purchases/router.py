"""
FastAPI router for purchases and proof-of-payment uploads.

One handler per operation, parameterised by the `{category}` path segment
(ticket, vip, parking).
"""

from __future__ import annotations

import logging

import asyncpg
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from core import db, responses, validation
from core.errors import bad_request, persistence_errors

from . import repository, schemas, service
from .categories import PurchaseCategory, get_category

logger = logging.getLogger(__name__)

router = APIRouter()

PROOF_FIELD = "comprobante"


@router.post("/api/{category}-purchase")
async def create_purchase(
    request: Request,
    category: PurchaseCategory = Depends(get_category),
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> JSONResponse:
    form = schemas.PurchaseRequest.model_validate(await validation.read_payload(request))
    values = service.purchase_values(form, category)

    async with persistence_errors("Error al registrar la compra"):
        purchase_id = await repository.insert_purchase(pool, category, values)

    logger.info("purchase_saved category=%s id=%s", category.slug, purchase_id)
    return responses.created(f"¡Compra de {category.label} registrada exitosamente!", purchase_id)


@router.post("/api/{category}-purchase-proof")
async def upload_purchase_proof(
    request: Request,
    category: PurchaseCategory = Depends(get_category),
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> JSONResponse:
    """
    Upload a payment proof and link it to the buyer's purchase.

    Only form and file validation can fail this request; see
    `service.attach_proof` for what happens after the file is stored.
    """
    payload = await validation.read_payload(request)
    form = schemas.ProofRequest.model_validate(payload)

    file = None
    if request.headers.get("content-type", "").startswith("multipart/form-data"):
        parts = (await request.form()).getlist(PROOF_FIELD)
        files = [p for p in parts if isinstance(p, UploadFile)]
        if len(parts) > 1 or len(files) > 1:
            raise bad_request("Por favor, adjunta un solo comprobante")
        file = files[0] if files else None

    async with persistence_errors("Error al guardar el comprobante"):
        result = await service.attach_proof(pool, category, form, file)

    return responses.envelope(
        "¡Comprobante recibido! Verificaremos tu pago pronto.",
        comprobante_url=result.comprobante_url,
    )


@router.get("/api/{category}-purchases")
async def list_purchases(
    category: PurchaseCategory = Depends(get_category),
    pool: asyncpg.Pool = Depends(db.get_pool),
    limit: int | None = Query(None, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> JSONResponse:
    async with persistence_errors("Error al obtener compras"):
        rows = await repository.list_purchases(pool, category, limit=limit, offset=offset)
    return responses.rows(rows)


@router.get("/api/{category}-purchase-proofs")
async def list_purchase_proofs(
    category: PurchaseCategory = Depends(get_category),
    pool: asyncpg.Pool = Depends(db.get_pool),
    limit: int | None = Query(None, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> JSONResponse:
    async with persistence_errors("Error al obtener comprobantes"):
        rows = await repository.list_proof_records(pool, category, limit=limit, offset=offset)
    return responses.rows(rows)

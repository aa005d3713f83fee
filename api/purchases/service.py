"""
Purchase "service layer": form checks and proof reconciliation.

Proof reconciliation, in order:
1. validate the form, then validate and store the file (hard failure -> 400)
2. target = explicit `compra_id`, else the newest purchase with the same
   nombre + email (ambiguous when a buyer has several purchases)
3. point the target's `comprobante` at the new URL (overwrites)
4. append a proof record to the category's audit table
Steps 2-4 are best-effort: they are logged and never change the response, so
an uploaded proof is never lost because linking it failed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import asyncpg
from starlette.datastructures import UploadFile

from core import validation
from core.outcomes import Outcome, best_effort
from uploads import service as uploads_service

from . import repository, schemas
from .categories import PurchaseCategory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProofResult:
    comprobante_url: str
    purchase_id: int | None
    link: Outcome
    audit: Outcome


def _required_purchase_fields(category: PurchaseCategory) -> tuple[str, ...]:
    return (*schemas.PurchaseRequest.required, *category.extra_fields)


def _coerce_extras(form: schemas.PurchaseRequest, category: PurchaseCategory) -> dict[str, Any]:
    extras: dict[str, Any] = {}
    for name in category.extra_fields:
        value = getattr(form, name) or None
        if name in category.int_fields:
            value = validation.to_int(value, name)
        extras[name] = value
    return extras


def purchase_values(form: schemas.PurchaseRequest, category: PurchaseCategory) -> dict[str, Any]:
    """
    Validate a purchase form and return the column values to insert.
    """
    validation.require_fields(form, _required_purchase_fields(category))
    validation.require_email(form.email)
    return {
        "nombre": form.nombre,
        "email": form.email,
        "telefono": form.telefono,
        "cantidad": validation.to_int(form.cantidad, "cantidad"),
        "fecha_evento": form.fecha_evento,
        "precio": validation.to_decimal(form.precio, "precio"),
        **_coerce_extras(form, category),
    }


def proof_values(form: schemas.ProofRequest, category: PurchaseCategory) -> dict[str, Any]:
    """
    Validate a proof form. Category extras are optional here.
    """
    validation.require_fields(form, form.required)
    validation.require_email(form.email)
    return {
        "nombre": form.nombre,
        "email": form.email,
        "telefono": form.telefono,
        "cantidad": validation.to_int(form.cantidad, "cantidad"),
        "fecha_evento": form.fecha_evento,
        "total": validation.to_decimal(form.total, "total"),
        "compra_id": validation.to_int(form.compra_id, "compra_id"),
        **_coerce_extras(form, category),
    }


async def _link_proof(
    pool: asyncpg.Pool,
    category: PurchaseCategory,
    values: dict[str, Any],
    url: str,
) -> int | None:
    purchase_id = values.get("compra_id")
    if purchase_id is None:
        purchase_id = await repository.find_latest_purchase_id(
            pool,
            category,
            nombre=values["nombre"],
            email=values["email"],
        )
        if purchase_id is None:
            return None

    if not await repository.set_purchase_proof(pool, category, purchase_id, url):
        return None
    return purchase_id


async def attach_proof(
    pool: asyncpg.Pool,
    category: PurchaseCategory,
    form: schemas.ProofRequest,
    file: UploadFile | None,
) -> ProofResult:
    values = proof_values(form, category)
    stored = await uploads_service.store_upload(file)
    url = stored.url

    link = await best_effort(f"link:{category.slug}", _link_proof(pool, category, values, url))
    purchase_id = link.value if link.ok else None
    if link.ok and purchase_id is None:
        link = Outcome.soft_failure(link.step, "no matching purchase")
    if link.ok:
        logger.info("proof_linked category=%s purchase_id=%s url=%s", category.slug, purchase_id, url)
    else:
        logger.warning(
            "proof_not_linked category=%s compra_id=%s email=%s reason=%s",
            category.slug,
            values.get("compra_id"),
            values["email"],
            link.error,
        )

    audit = await best_effort(
        f"audit:{category.slug}",
        repository.insert_proof_record(pool, category, values, comprobante_url=url),
    )
    if audit.soft_failed:
        logger.warning("proof_record_failed category=%s url=%s error=%s", category.slug, url, audit.error)

    return ProofResult(comprobante_url=url, purchase_id=purchase_id, link=link, audit=audit)

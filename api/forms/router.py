"""
FastAPI router for the contact, VIP registration and inscription forms.
"""

from __future__ import annotations

import logging

import asyncpg
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from core import db, responses, validation
from core.errors import persistence_errors

from . import repository, schemas

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/contact")
async def create_contact(request: Request, pool: asyncpg.Pool = Depends(db.get_pool)) -> JSONResponse:
    form = schemas.ContactRequest.model_validate(await validation.read_payload(request))
    validation.require_fields(form, form.required)
    validation.require_email(form.email)

    async with persistence_errors("Error al guardar el contacto"):
        contact_id = await repository.insert_contact(
            pool,
            nombre=form.nombre,
            email=form.email,
            telefono=form.telefono,
            mensaje=form.mensaje,
            instagram=form.instagram or None,
            facebook=form.facebook or None,
            tiktok=form.tiktok or None,
        )

    logger.info("contact_saved id=%s", contact_id)
    return responses.created("¡Gracias por tu mensaje! Nos pondremos en contacto pronto.", contact_id)


@router.get("/api/contacts")
async def list_contacts(
    pool: asyncpg.Pool = Depends(db.get_pool),
    limit: int | None = Query(None, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> JSONResponse:
    async with persistence_errors("Error al obtener contactos"):
        rows = await repository.list_rows(pool, repository.CONTACTS, limit=limit, offset=offset)
    return responses.rows(rows)


@router.post("/api/vip")
async def create_vip_registration(request: Request, pool: asyncpg.Pool = Depends(db.get_pool)) -> JSONResponse:
    form = schemas.VipRegistrationRequest.model_validate(await validation.read_payload(request))
    validation.require_fields(form, form.required)
    validation.require_email(form.email)

    async with persistence_errors("Error al guardar el registro VIP"):
        registration_id = await repository.insert_vip_registration(
            pool,
            nombre=form.nombre,
            email=form.email,
            contacto=form.contacto,
            boletos=form.boletos,
        )

    logger.info("vip_registration_saved id=%s", registration_id)
    return responses.created("¡Registro VIP recibido! Te contactaremos pronto.", registration_id)


@router.get("/api/vip-registrations")
async def list_vip_registrations(
    pool: asyncpg.Pool = Depends(db.get_pool),
    limit: int | None = Query(None, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> JSONResponse:
    async with persistence_errors("Error al obtener registros VIP"):
        rows = await repository.list_rows(pool, repository.VIP_REGISTRATIONS, limit=limit, offset=offset)
    return responses.rows(rows)


@router.post("/api/inscripcion")
async def create_inscription(request: Request, pool: asyncpg.Pool = Depends(db.get_pool)) -> JSONResponse:
    form = schemas.InscriptionRequest.model_validate(await validation.read_payload(request))
    validation.require_fields(form, form.required)
    validation.require_email(form.email)
    edad = validation.to_int(form.edad, "edad")

    async with persistence_errors("Error al guardar la inscripción"):
        inscription_id = await repository.insert_inscription(
            pool,
            nombre=form.nombre,
            email=form.email,
            telefono=form.telefono,
            edad=edad,
            placa=form.placa,
            licencia=form.licencia,
            categoria=form.categoria or None,
        )

    logger.info("inscription_saved id=%s", inscription_id)
    return responses.created("¡Inscripción exitosa! Nos vemos en el evento.", inscription_id)


@router.get("/api/inscripciones")
async def list_inscriptions(
    pool: asyncpg.Pool = Depends(db.get_pool),
    limit: int | None = Query(None, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> JSONResponse:
    async with persistence_errors("Error al obtener inscripciones"):
        rows = await repository.list_rows(pool, repository.INSCRIPTIONS, limit=limit, offset=offset)
    return responses.rows(rows)

"""
Request models for the contact, VIP registration and inscription forms.

Field names are the ones the site's HTML forms post.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict

from core.validation import Text


class FormRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    required: ClassVar[tuple[str, ...]] = ()


class ContactRequest(FormRequest):
    required: ClassVar[tuple[str, ...]] = ("nombre", "email", "telefono", "mensaje")

    nombre: Text = None
    email: Text = None
    telefono: Text = None
    mensaje: Text = None
    instagram: Text = None
    facebook: Text = None
    tiktok: Text = None


class VipRegistrationRequest(FormRequest):
    required: ClassVar[tuple[str, ...]] = ("nombre", "email", "contacto", "boletos")

    nombre: Text = None
    email: Text = None
    # Instagram/WhatsApp handle the team replies to.
    contacto: Text = None
    # Ticket-count tier as chosen in the form ("1", "2-4", "5+").
    boletos: Text = None


class InscriptionRequest(FormRequest):
    required: ClassVar[tuple[str, ...]] = ("nombre", "email", "telefono", "edad", "placa", "licencia")

    nombre: Text = None
    email: Text = None
    telefono: Text = None
    edad: Text = None
    placa: Text = None
    licencia: Text = None
    categoria: Text = None

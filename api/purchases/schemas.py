"""
Request models for purchase and proof-of-payment forms.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict

from core.validation import Text


class PurchaseRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Category extras are added per category (see categories.py).
    required: ClassVar[tuple[str, ...]] = ("nombre", "email", "telefono", "cantidad", "fecha_evento")

    nombre: Text = None
    email: Text = None
    telefono: Text = None
    cantidad: Text = None
    fecha_evento: Text = None
    precio: Text = None

    tipo_entrada: Text = None
    paquete: Text = None
    placa: Text = None
    duracion: Text = None


class ProofRequest(PurchaseRequest):
    required: ClassVar[tuple[str, ...]] = ("nombre", "email", "telefono", "cantidad", "fecha_evento", "total")

    total: Text = None
    # Explicit target purchase. Without it the latest purchase by nombre+email is used.
    compra_id: Text = None

"""
Purchase categories and the tables behind them.

Every purchase route is parameterised by one of these entries instead of being
written out once per category.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.errors import ApiError


@dataclass(frozen=True)
class PurchaseCategory:
    slug: str
    label: str
    table: str
    proof_table: str
    # Category-specific form fields, required on the purchase form and stored
    # (when sent) on the proof record.
    extra_fields: tuple[str, ...] = ()
    # Subset of extra_fields stored as integers.
    int_fields: tuple[str, ...] = ()


TICKET = PurchaseCategory(
    slug="ticket",
    label="boletos",
    table="ticket_purchases",
    proof_table="comprobantes_generales",
    extra_fields=("tipo_entrada",),
)

VIP = PurchaseCategory(
    slug="vip",
    label="VIP",
    table="vip_purchases",
    proof_table="comprobantes_vip",
    extra_fields=("paquete",),
)

PARKING = PurchaseCategory(
    slug="parking",
    label="estacionamiento",
    table="parking_purchases",
    proof_table="comprobantes_estacionamiento",
    extra_fields=("placa", "duracion"),
    int_fields=("duracion",),
)

CATEGORIES: dict[str, PurchaseCategory] = {c.slug: c for c in (TICKET, VIP, PARKING)}


def get_category(category: str) -> PurchaseCategory:
    """
    FastAPI dependency: resolve the `{category}` path segment.
    """
    try:
        return CATEGORIES[category]
    except KeyError:
        raise ApiError(404, "Categoría de compra no encontrada")

"""Types and validation helpers for the shipments resource."""

from __future__ import annotations

from typing import Any, Literal, TypedDict, get_args
from typing_extensions import ReadOnly

ShipmentStatus = Literal["pending", "processing", "label_purchased", "cancelled"]
SHIPMENT_STATUSES: tuple[ShipmentStatus, ...] = get_args(ShipmentStatus)

# The dashboard calls unshipped orders "awaiting_shipment"; the API calls them "pending".
_STATUS_ALIASES: dict[str, ShipmentStatus] = {"awaiting_shipment": "pending"}

MAX_PAGE_SIZE = 500


class ShipmentItem(TypedDict, total=False):
    """Line item on a shipment."""
    name: ReadOnly[str]
    sku: ReadOnly[str | None]
    quantity: ReadOnly[int]
    unit_price: ReadOnly[Any]


class ShipmentTag(TypedDict, total=False):
    name: ReadOnly[str]


class ShipmentResponse(TypedDict, total=False):
    """Readonly shipment dict returned by shipment endpoints."""
    shipment_id: ReadOnly[str]
    shipment_number: ReadOnly[str]
    shipment_status: ReadOnly[ShipmentStatus]
    created_at: ReadOnly[str]
    items: ReadOnly[list[ShipmentItem]]
    tags: ReadOnly[list[ShipmentTag]]


class ShipmentPage(TypedDict, total=False):
    """One page of shipments."""
    shipments: ReadOnly[list[ShipmentResponse]]
    total: ReadOnly[int]
    page: ReadOnly[int]
    pages: ReadOnly[int]


def _normalize_shipment_status(value: object) -> ShipmentStatus | None:
    """Map a status filter to an API status, or ``None`` when unsupported."""
    if not isinstance(value, str):
        return None
    candidate = value.strip().lower()
    candidate = _STATUS_ALIASES.get(candidate, candidate)
    if candidate in SHIPMENT_STATUSES:
        return candidate  # type: ignore[return-value]
    return None


def _normalize_page(value: object, *, maximum: int | None = None) -> int | None:
    """Return a positive page/page-size integer, or ``None`` when invalid."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            return None
    if not isinstance(value, int) or value < 1:
        return None
    if maximum is not None and value > maximum:
        return None
    return value


__all__ = [
    "MAX_PAGE_SIZE",
    "SHIPMENT_STATUSES",
    "ShipmentItem",
    "ShipmentPage",
    "ShipmentResponse",
    "ShipmentStatus",
]

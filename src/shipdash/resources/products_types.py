"""Types and validation helpers for the products resource."""

from __future__ import annotations

from typing import Any, TypedDict
from typing_extensions import ReadOnly


class ProductResponse(TypedDict, total=False):
    """Readonly product dict returned by product endpoints."""
    product_id: ReadOnly[int]
    sku: ReadOnly[str | None]
    name: ReadOnly[str]
    active: ReadOnly[bool]
    price: ReadOnly[Any]


class ProductPage(TypedDict, total=False):
    products: ReadOnly[list[ProductResponse]]
    total: ReadOnly[int]
    page: ReadOnly[int]
    pages: ReadOnly[int]


def _normalize_active(value: object) -> bool | None:
    """Accept bools or the strings ``"true"``/``"false"``; anything else means no filter."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return None


__all__ = ["ProductPage", "ProductResponse"]

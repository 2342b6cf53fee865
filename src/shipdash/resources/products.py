"""Product resource wrapper."""

from __future__ import annotations

from typing import Optional, cast

from .base import Resource
from .products_types import ProductPage, _normalize_active
from .shipments_types import MAX_PAGE_SIZE, _normalize_page
from ._common_types import ValidationMode


class Products(Resource):
    """Product catalogue operations."""

    def list(
        self,
        *,
        page: int = 1,
        page_size: int = 100,
        active: object = None,
        sku: Optional[str] = None,
        name: Optional[str] = None,
        validation: ValidationMode = "warn",
        timeout: Optional[int] = None,
    ) -> ProductPage | None:
        """Fetch one page of products.

        Parameters
        ----------
        page
            1-based page number.
        page_size
            Products per page (1-500).
        active
            ``True``/``False`` (or ``"true"``/``"false"``) to filter by status;
            anything else disables the filter.
        sku
            Optional SKU filter.
        name
            Optional name filter.
        validation
            Validation mode: ``"off"`` sends inputs as-is, ``"warn"`` drops invalid
            inputs with warnings, and ``"strict"`` raises on invalid inputs.
        timeout
            Request timeout in seconds.

        Returns
        -------
        ProductPage or None
            Page dict with ``products``, or ``None`` on error.
        """
        if validation == "off":
            params: dict[str, object] = {"page": page, "page_size": page_size, "active": active}
        else:
            normalized_page = _normalize_page(page)
            normalized_size = _normalize_page(page_size, maximum=MAX_PAGE_SIZE)
            if normalized_page is None or normalized_size is None:
                if validation == "strict":
                    raise ValueError(f"Invalid product paging: page={page!r}, page_size={page_size!r}")
                self._logger.warning("Invalid product paging: page=%s, page_size=%s", page, page_size)
                return None
            params = {
                "page": normalized_page,
                "page_size": normalized_size,
                "active": _query_bool(_normalize_active(active)),
            }
        params.update(sku=sku or None, name=name or None)

        response = self._get("/products", params=params, timeout=timeout)
        if not isinstance(response, dict):
            return None
        if isinstance(response.get("products"), list):
            return cast(ProductPage, response)
        self._logger.warning("Products response missing expected products list.")
        return None


def _query_bool(value: bool | None) -> str | None:
    if value is None:
        return None
    return "true" if value else "false"

"""Shipment (order) resource wrapper."""

from __future__ import annotations

from typing import Optional, cast
from urllib.parse import quote

from .base import Resource
from .shipments_types import (
    MAX_PAGE_SIZE,
    ShipmentPage,
    _normalize_page,
    _normalize_shipment_status,
)
from ._common_types import OrderId, ValidationMode, _normalize_order_id
from ..errors import ValidationError


class Shipments(Resource):
    """Shipment operations, including per-order tag attach/detach."""

    def list(
        self,
        *,
        page: int = 1,
        page_size: int = 20,
        shipment_status: Optional[str] = None,
        tag: Optional[str] = None,
        sort_by: Optional[str] = None,
        validation: ValidationMode = "warn",
        timeout: Optional[int] = None,
    ) -> ShipmentPage | None:
        """Fetch one page of shipments.

        Parameters
        ----------
        page
            1-based page number.
        page_size
            Shipments per page (1-500).
        shipment_status
            Optional status filter. ``"awaiting_shipment"`` is accepted as an
            alias for ``"pending"``.
        tag
            Optional tag name filter.
        sort_by
            Optional sort field, passed through to the API.
        validation
            Validation mode: ``"off"`` sends inputs as-is, ``"warn"`` drops invalid
            inputs with warnings, and ``"strict"`` raises on invalid inputs.
        timeout
            Request timeout in seconds.

        Returns
        -------
        ShipmentPage or None
            Page dict with ``shipments`` and pagination totals, or ``None`` on error.
        """
        params: dict[str, object] = {
            "page": page,
            "page_size": page_size,
            "shipment_status": shipment_status,
            "tag": tag,
            "sort_by": sort_by,
        }
        if validation != "off":
            normalized_page = _normalize_page(page)
            normalized_size = _normalize_page(page_size, maximum=MAX_PAGE_SIZE)
            normalized_status = (
                _normalize_shipment_status(shipment_status) if shipment_status is not None else None
            )
            problems = []
            if normalized_page is None:
                problems.append(f"page={page!r}")
            if normalized_size is None:
                problems.append(f"page_size={page_size!r}")
            if shipment_status is not None and normalized_status is None:
                problems.append(f"shipment_status={shipment_status!r}")
            if problems:
                if validation == "strict":
                    raise ValueError(f"Invalid shipment list filters: {', '.join(problems)}")
                self._logger.warning("Invalid shipment list filters: %s", ", ".join(problems))
                return None
            params.update(page=normalized_page, page_size=normalized_size, shipment_status=normalized_status)

        response = self._get("/shipments", params=params, timeout=timeout)
        if not isinstance(response, dict):
            return None
        if isinstance(response.get("shipments"), list):
            return cast(ShipmentPage, response)
        self._logger.warning("Shipments response missing expected shipments list.")
        return None

    def add_tag(
        self,
        shipment_id: OrderId,
        tag_name: str,
        *,
        timeout: Optional[int] = None,
    ) -> None:
        """Attach an existing tag to one shipment.

        Raises
        ------
        ValidationError
            If the identifier or tag name is unusable.
        UpstreamError
            If the API rejects the call, including when the tag is already attached.
        """
        path = self._tag_path(shipment_id, tag_name)
        self._post(path, timeout=timeout, raise_on_error=True)

    def remove_tag(
        self,
        shipment_id: OrderId,
        tag_name: str,
        *,
        timeout: Optional[int] = None,
    ) -> None:
        """Detach a tag from one shipment.

        Raises
        ------
        ValidationError
            If the identifier or tag name is unusable.
        UpstreamError
            If the API rejects the call.
        """
        path = self._tag_path(shipment_id, tag_name)
        self._delete(path, timeout=timeout, raise_on_error=True)

    @staticmethod
    def _tag_path(shipment_id: OrderId, tag_name: str) -> str:
        normalized_id = _normalize_order_id(shipment_id)
        if normalized_id is None:
            raise ValidationError(f"Invalid shipment_id: {shipment_id!r}")
        if not isinstance(tag_name, str) or not tag_name.strip():
            raise ValidationError(f"Invalid tag_name: {tag_name!r}")
        return f"/shipments/{quote(str(normalized_id), safe='')}/tags/{quote(tag_name.strip(), safe='')}"

"""Auto-tag newly imported orders from ShipStation webhooks."""

from __future__ import annotations

import logging
import re
from typing import Any, Literal, Mapping, Optional, Sequence, TypedDict

from ..errors import ShipdashError, UpstreamError

_logger = logging.getLogger(__name__)

ORDER_NOTIFY = "ORDER_NOTIFY"
DEFAULT_TAG_COLOR = "#3b82f6"
MAX_TAG_WORDS = 3

_UNSAFE_CHARS = re.compile(r"[^\w\s]|_")

WebhookStatus = Literal["ignored", "processed", "processed_with_errors"]


class WebhookReport(TypedDict):
    status: WebhookStatus
    orders: int
    tagged: int
    failed: int
    skipped: int


def derive_tag_name(item_name: object) -> Optional[str]:
    """Build a short tag name from an item name.

    Keeps letters, digits and whitespace, then the first three words.
    Returns ``None`` when nothing usable is left.
    """
    if not isinstance(item_name, str):
        return None
    safe_name = _UNSAFE_CHARS.sub("", item_name).strip()
    words = safe_name.split()[:MAX_TAG_WORDS]
    return " ".join(words) or None


def _empty_report(status: WebhookStatus) -> WebhookReport:
    return {"status": status, "orders": 0, "tagged": 0, "failed": 0, "skipped": 0}


def tag_orders(
    client: Any,
    orders: Sequence[Mapping[str, Any]],
    *,
    attempted_tags: Optional[set[str]] = None,
    color: str = DEFAULT_TAG_COLOR,
) -> WebhookReport:
    """Tag each order with names derived from its items.

    Parameters
    ----------
    client
        A :class:`~shipdash.client.ShipStation` (``tags.create`` and ``shipments.add_tag``).
    orders
        List of order dicts as returned by the webhook resource (``orderId``, ``items``).
        Anything other than a list, and items that are not lists, are treated as empty.
    attempted_tags
        Names whose creation was already attempted in this run. Creation is tried at
        most once per name, whether or not it succeeded. Updated in place.
    color
        Color for newly created tags.

    Returns
    -------
    WebhookReport
        Counts of tagged, failed and skipped items.
    """
    attempted = attempted_tags if attempted_tags is not None else set()
    report = _empty_report("processed")

    for order in orders if isinstance(orders, (list, tuple)) else []:
        if not isinstance(order, Mapping):
            continue
        report["orders"] += 1
        order_id = order.get("orderId")
        order_label = order.get("orderNumber") or order_id

        items = order.get("items")
        for item in items if isinstance(items, list) else []:
            tag_name = derive_tag_name(item.get("name") if isinstance(item, Mapping) else None)
            if tag_name is None:
                report["skipped"] += 1
                continue

            if tag_name not in attempted:
                attempted.add(tag_name)
                try:
                    client.tags.create(tag_name, color)
                except ShipdashError as exc:
                    # Usually "already exists"; attaching still works.
                    _logger.debug("Tag %r not created: %s", tag_name, exc)

            try:
                client.shipments.add_tag(order_id, tag_name)
            except Exception as exc:  # noqa: BLE001 - keep tagging sibling items
                report["failed"] += 1
                _logger.error("Failed to tag order %s with %r: %s", order_label, tag_name, exc)
                continue
            report["tagged"] += 1
            _logger.info("Tagged order %s with %r", order_label, tag_name)

    if report["failed"]:
        report["status"] = "processed_with_errors"
    return report


def handle_webhook(
    client: Any,
    payload: Mapping[str, Any],
    *,
    color: str = DEFAULT_TAG_COLOR,
) -> WebhookReport:
    """Process one webhook delivery.

    Only ``ORDER_NOTIFY`` events are handled; anything else is ignored. Errors are
    logged and reported, never raised, so the delivery can always be acknowledged.
    """
    resource_type = payload.get("resource_type") if isinstance(payload, Mapping) else None
    resource_url = payload.get("resource_url") if isinstance(payload, Mapping) else None
    _logger.info("Webhook received: %s %s", resource_type, resource_url)

    if resource_type != ORDER_NOTIFY:
        return _empty_report("ignored")
    if not isinstance(resource_url, str) or not resource_url:
        _logger.error("ORDER_NOTIFY webhook without resource_url")
        return _empty_report("processed_with_errors")

    try:
        data = client.fetch_resource(resource_url, raise_on_error=True)
    except UpstreamError as exc:
        _logger.error("Webhook processing error: %s", exc)
        return _empty_report("processed_with_errors")

    orders = data.get("orders") if isinstance(data, dict) else None
    if orders is not None and not isinstance(orders, list):
        _logger.error("Webhook resource has malformed orders: %r", orders)
        return _empty_report("processed_with_errors")
    return tag_orders(client, orders or [], attempted_tags=set(), color=color)


__all__ = [
    "DEFAULT_TAG_COLOR",
    "ORDER_NOTIFY",
    "WebhookReport",
    "derive_tag_name",
    "handle_webhook",
    "tag_orders",
]

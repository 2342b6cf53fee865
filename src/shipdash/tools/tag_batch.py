"""Apply or remove one tag across a batch of orders.

The API has no bulk-tag endpoint, so a batch becomes one call per order. Calls
run one at a time by default to stay under the account's rate limit; a failure
on one order is recorded and the batch carries on.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Literal, Mapping, Optional, Sequence, TypedDict, get_args

from tqdm.auto import tqdm

from ..errors import PartialBatchFailure, ValidationError
from ..resources._common_types import OrderId, _normalize_order_ids

_logger = logging.getLogger(__name__)

TagAction = Literal["attach", "detach"]
TAG_ACTIONS: tuple[TagAction, ...] = get_args(TagAction)

OutcomeStatus = Literal["success", "failed"]
OUTCOME_STATUSES: tuple[OutcomeStatus, ...] = get_args(OutcomeStatus)

MAX_IN_FLIGHT_ENV = "SHIPDASH_MAX_IN_FLIGHT"


def _default_max_in_flight() -> int:
    raw = os.environ.get(MAX_IN_FLIGHT_ENV, "1")
    try:
        return int(raw)
    except ValueError as exc:
        raise ValidationError(f"{MAX_IN_FLIGHT_ENV} must be a positive integer, got {raw!r}") from exc


class TagBatchRequest(TypedDict):
    orderIds: list[OrderId]
    tagName: str
    action: TagAction


class OrderTagOutcome(TypedDict, total=False):
    """Result of the tag call for one order."""
    orderId: OrderId
    status: OutcomeStatus
    errorMessage: str


class TagBatchReport(TypedDict, total=False):
    """Aggregated result of a batch, returned to the caller as-is."""
    outcomes: list[OrderTagOutcome]
    overallStatus: OutcomeStatus
    message: str
    error: str


def validate_tag_batch_request(payload: Mapping[str, Any]) -> TagBatchRequest:
    """Check a raw batch payload and return its normalized form.

    Raises
    ------
    ValidationError
        If ``orderIds`` is missing, empty, not a sequence or holds an unusable id,
        if ``tagName`` is missing or blank, or if ``action`` is not attach/detach.
    """
    if not isinstance(payload, Mapping):
        raise ValidationError("Invalid payload: expected an object with orderIds, tagName and action.")

    order_ids = _normalize_order_ids(payload.get("orderIds"))
    if order_ids is None:
        raise ValidationError("Invalid payload: orderIds must be a non-empty list of order ids.")

    tag_name = payload.get("tagName")
    if not isinstance(tag_name, str) or not tag_name.strip():
        raise ValidationError("Invalid payload: tagName is required.")

    action = payload.get("action")
    if action not in TAG_ACTIONS:
        raise ValidationError(
            f"Invalid payload: action must be one of {', '.join(TAG_ACTIONS)}, got {action!r}."
        )

    return {"orderIds": order_ids, "tagName": tag_name.strip(), "action": action}


def _apply_one(
    shipments: Any,
    order_id: OrderId,
    tag_name: str,
    action: TagAction,
    timeout: Optional[int],
) -> OrderTagOutcome:
    try:
        if action == "attach":
            shipments.add_tag(order_id, tag_name, timeout=timeout)
        else:
            shipments.remove_tag(order_id, tag_name, timeout=timeout)
    except Exception as exc:  # noqa: BLE001 - one order never fails the batch
        message = getattr(exc, "message", None) or str(exc) or exc.__class__.__name__
        _logger.warning("Failed to %s tag %r for order %s: %s", action, tag_name, order_id, message)
        return {"orderId": order_id, "status": "failed", "errorMessage": message}
    return {"orderId": order_id, "status": "success"}


def run_tag_batch(
    client: Any,
    payload: Mapping[str, Any],
    *,
    max_in_flight: Optional[int] = None,
    show_progress: bool = False,
    timeout: Optional[int] = None,
) -> list[OrderTagOutcome]:
    """Run the tag action for every order in ``payload``.

    Parameters
    ----------
    client
        A :class:`~shipdash.client.ShipStation` (anything with ``shipments.add_tag``
        and ``shipments.remove_tag``).
    payload
        Mapping with ``orderIds``, ``tagName`` and ``action``.
    max_in_flight
        Upstream calls allowed at once. ``1`` (the default, see
        ``SHIPDASH_MAX_IN_FLIGHT``) runs strictly in sequence.
    show_progress
        Display a tqdm progress bar.
    timeout
        Per-call timeout in seconds.

    Returns
    -------
    list[OrderTagOutcome]
        One outcome per input id, in input order.

    Raises
    ------
    ValidationError
        If the payload is malformed. Nothing is sent upstream in that case.
    """
    request = validate_tag_batch_request(payload)
    order_ids = request["orderIds"]
    tag_name = request["tagName"]
    action = request["action"]

    workers = _default_max_in_flight() if max_in_flight is None else max_in_flight
    if not isinstance(workers, int) or isinstance(workers, bool) or workers < 1:
        raise ValidationError(f"max_in_flight must be a positive integer, got {workers!r}")

    shipments = client.shipments
    desc = f"{action.capitalize()} {tag_name!r}"

    if workers == 1 or len(order_ids) == 1:
        outcomes: list[OrderTagOutcome] = []
        for order_id in tqdm(order_ids, desc=desc, unit=" orders", disable=not show_progress):
            outcomes.append(_apply_one(shipments, order_id, tag_name, action, timeout))
        return outcomes

    slots: list[Optional[OrderTagOutcome]] = [None] * len(order_ids)
    with ThreadPoolExecutor(max_workers=min(workers, len(order_ids))) as executor:
        futures = {
            executor.submit(_apply_one, shipments, order_id, tag_name, action, timeout): index
            for index, order_id in enumerate(order_ids)
        }
        with tqdm(total=len(futures), desc=desc, unit=" orders", disable=not show_progress) as pbar:
            for future in as_completed(futures):
                index = futures[future]
                slots[index] = future.result()
                pbar.update(1)

    return [outcome for outcome in slots if outcome is not None]


def aggregate_outcomes(outcomes: Sequence[OrderTagOutcome]) -> TagBatchReport:
    """Fold per-order outcomes into one report.

    When any order failed the report is ``"failed"`` and ``error`` carries the
    message of the last failure in input order. All outcomes are always included.
    """
    outcomes = list(outcomes)
    failures = [outcome for outcome in outcomes if outcome.get("status") == "failed"]
    if not failures:
        return {
            "outcomes": outcomes,
            "overallStatus": "success",
            "message": "Tag update process complete",
        }

    last_error = failures[-1].get("errorMessage") or "Tag update failed"
    return {
        "outcomes": outcomes,
        "overallStatus": "failed",
        "message": f"Tag update failed for {len(failures)} of {len(outcomes)} orders",
        "error": last_error,
    }


def apply_tag_batch(
    client: Any,
    payload: Mapping[str, Any],
    *,
    max_in_flight: Optional[int] = None,
    show_progress: bool = False,
    timeout: Optional[int] = None,
) -> TagBatchReport:
    """Validate, run and aggregate a tag batch in one call.

    Partial failures are returned as a report with ``overallStatus == "failed"``;
    use :func:`raise_for_status` to turn them into :class:`PartialBatchFailure`.
    """
    outcomes = run_tag_batch(
        client,
        payload,
        max_in_flight=max_in_flight,
        show_progress=show_progress,
        timeout=timeout,
    )
    report = aggregate_outcomes(outcomes)
    if report["overallStatus"] == "failed":
        _logger.warning("%s: %s", report["message"], report.get("error"))
    return report


def raise_for_status(report: TagBatchReport) -> TagBatchReport:
    """Raise :class:`PartialBatchFailure` if ``report`` failed, else return it."""
    if report.get("overallStatus") == "failed":
        raise PartialBatchFailure(report)
    return report


__all__ = [
    "OUTCOME_STATUSES",
    "TAG_ACTIONS",
    "OrderTagOutcome",
    "OutcomeStatus",
    "TagAction",
    "TagBatchReport",
    "TagBatchRequest",
    "aggregate_outcomes",
    "apply_tag_batch",
    "raise_for_status",
    "run_tag_batch",
    "validate_tag_batch_request",
]

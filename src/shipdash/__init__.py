"""Public package surface for the shipdash ShipStation client."""

from .client import DEFAULT_BASE_URL, ShipStation
from .errors import PartialBatchFailure, ShipdashError, UpstreamError, ValidationError
from .tools.tag_batch import aggregate_outcomes, apply_tag_batch, run_tag_batch
from .tools.webhooks import derive_tag_name, handle_webhook, tag_orders

__all__ = [
    "DEFAULT_BASE_URL",
    "PartialBatchFailure",
    "ShipStation",
    "ShipdashError",
    "UpstreamError",
    "ValidationError",
    "aggregate_outcomes",
    "apply_tag_batch",
    "derive_tag_name",
    "handle_webhook",
    "run_tag_batch",
    "tag_orders",
]

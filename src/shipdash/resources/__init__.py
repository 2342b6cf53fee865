"""Resource module exports."""

from .products import Products
from .shipments import Shipments
from .tags import Tags

__all__ = [
    "Products",
    "Shipments",
    "Tags",
]

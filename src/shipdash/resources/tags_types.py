"""Types for the tags resource.

Tag inputs are simple primitives (name, color); validation stays inline in tags.py.
"""

from __future__ import annotations

from typing import TypedDict
from typing_extensions import ReadOnly


class TagResponse(TypedDict, total=False):
    """Readonly tag dict returned by tag endpoints."""
    tag_id: ReadOnly[int]
    name: ReadOnly[str]
    color: ReadOnly[str]

__all__ = ["TagResponse"]

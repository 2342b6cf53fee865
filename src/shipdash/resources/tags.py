"""Tag resource wrapper."""

from __future__ import annotations

from typing import Optional, cast
from urllib.parse import quote

from .base import Resource
from .tags_types import TagResponse
from ._common_types import ValidationMode, _normalize_color
from ..errors import UpstreamError, ValidationError


class Tags(Resource):
    """Tag operations."""

    def list(
        self,
        *,
        timeout: Optional[int] = None,
    ) -> list[TagResponse] | None:
        """Fetch all tags defined on the account.

        Returns
        -------
        list[TagResponse] or None
            List of tag dicts, or ``None`` on error.
        """
        response = self._get("/tags", timeout=timeout)
        if isinstance(response, list):
            return cast(list[TagResponse], response)
        if not isinstance(response, dict):
            return None

        tags = response.get("tags")
        if isinstance(tags, list):
            return tags
        self._logger.warning("Tags response missing expected tags list.")
        return None

    def create(
        self,
        name: str,
        color: object = None,
        *,
        validation: ValidationMode = "strict",
        timeout: Optional[int] = None,
    ) -> TagResponse:
        """Create a new tag.

        Parameters
        ----------
        name
            Tag name; surrounding whitespace is trimmed.
        color
            Optional color as a hex string, RGB tuple or packed int.
        validation
            Applies to ``color`` only: ``"off"`` sends it as-is, ``"warn"`` drops an
            unparseable color with a warning, and ``"strict"`` raises. A blank name
            always raises.
        timeout
            Request timeout in seconds.

        Returns
        -------
        TagResponse
            Created tag dict.

        Raises
        ------
        ValidationError
            If the name is blank, or the color is invalid in strict mode.
        UpstreamError
            If the API rejects the tag, e.g. because the name already exists.
        """
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Tag name is required")
        name = name.strip()

        if validation == "off":
            hex_color = color
        else:
            try:
                hex_color = _normalize_color(color)
            except ValueError as exc:
                if validation == "strict":
                    raise ValidationError(f"Invalid color: {color!r}") from exc
                self._logger.warning("Invalid color for tag %s: %s", name, color)
                hex_color = None

        payload = {"color": hex_color} if hex_color is not None else None
        response = self._post(f"/tags/{quote(name, safe='')}", json=payload, timeout=timeout, raise_on_error=True)
        if isinstance(response, dict) and isinstance(response.get("tag"), dict):
            return cast(TagResponse, response["tag"])
        if isinstance(response, dict) and "name" in response:
            return cast(TagResponse, response)
        if response is None:
            # Some accounts answer 201 with an empty body.
            created: TagResponse = {"name": name}
            if isinstance(hex_color, str):
                created = {"name": name, "color": hex_color}
            return created
        self._logger.warning("Create tag response missing expected data. Response was %s", response)
        raise UpstreamError(f"Unexpected response creating tag {name!r}")

"""Core ShipStation client with a raw-request escape hatch."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

import requests

from .errors import UpstreamError
from .resources.products import Products
from .resources.shipments import Shipments
from .resources.tags import Tags

DEFAULT_BASE_URL = os.environ.get("SS_BASE_URL", "https://api.shipstation.com/v2")
DEFAULT_API_KEY = os.environ.get("SS_API_KEY")


def _server_message(response: Any) -> Optional[str]:
    """Pull a human readable message out of an error body, if there is one."""
    try:
        body = response.json()
    except (ValueError, AttributeError):
        return None
    if not isinstance(body, dict):
        return None
    # Try common error message fields
    for key in ("message", "error", "detail"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
    errors = body.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        value = errors[0].get("message")
        if isinstance(value, str) and value:
            return value
    return None


class ShipStation:
    """Resource-grouped client for the ShipStation API."""

    shipments: Shipments
    tags: Tags
    products: Products

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        default_timeout: int = 20,
        session: Optional[requests.Session] = None,
        raise_on_error: bool = False,
    ) -> None:
        """Create a ShipStation client bound to an API account.

        Parameters
        ----------
        base_url
            API root, including the version segment.
        api_key
            Account API key, sent in the ``api-key`` header.
        default_timeout
            Default request timeout in seconds.
        session
            Optional requests session to reuse connections.
        raise_on_error
            If True, raise :class:`UpstreamError` instead of returning None.
        """
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else DEFAULT_API_KEY
        self.default_timeout = default_timeout
        self.raise_on_error = raise_on_error
        self._logger = logging.getLogger(__name__)
        self._session = session

        self.shipments: Shipments = Shipments(self)
        self.tags: Tags = Tags(self)
        self.products: Products = Products(self)

    @property
    def headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["api-key"] = self.api_key
        return headers

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
        timeout: Optional[int] = None,
        raise_on_error: Optional[bool] = None,
    ) -> Optional[dict[str, Any] | list[Any]]:
        """Send a raw request to the ShipStation API.

        Parameters
        ----------
        method
            HTTP method (GET, POST, PUT, DELETE).
        path
            Endpoint path relative to ``base_url``.
        params
            Query parameters; ``None`` values are dropped.
        json
            JSON payload for the request.
        timeout
            Timeout in seconds for this request.
        raise_on_error
            Overrides the client-wide setting for this call.

        Returns
        -------
        dict | list | None
            Parsed JSON payload, or None if the response is empty or non-JSON.

        Raises
        ------
        UpstreamError
            When the request fails and raising is enabled.
        """
        if not path.startswith("/"):
            path = "/" + path
        return self._send(
            method,
            f"{self.base_url}{path}",
            params=params,
            json=json,
            timeout=timeout,
            raise_on_error=raise_on_error,
        )

    def fetch_resource(
        self,
        url: str,
        *,
        timeout: Optional[int] = None,
        raise_on_error: Optional[bool] = None,
    ) -> Optional[dict[str, Any] | list[Any]]:
        """GET an absolute URL handed out by the API, such as a webhook ``resource_url``."""
        return self._send("GET", url, timeout=timeout, raise_on_error=raise_on_error)

    def _send(
        self,
        method: str,
        url: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
        timeout: Optional[int] = None,
        raise_on_error: Optional[bool] = None,
    ) -> Optional[dict[str, Any] | list[Any]]:
        should_raise = self.raise_on_error if raise_on_error is None else raise_on_error
        if params is not None:
            params = {key: value for key, value in params.items() if value is not None}

        requester = self._session or requests
        response = None
        try:
            response = requester.request(
                method,
                url,
                params=params,
                json=json,
                headers=self.headers,
                timeout=timeout or self.default_timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            status_code = getattr(response, "status_code", None)
            error_msg = _server_message(response) or str(exc)
            self._logger.warning("Request failed for %s %s: %s", method, url, error_msg)
            if should_raise:
                raise UpstreamError(error_msg, status_code=status_code) from exc
            return None
        except Exception as exc:  # noqa: BLE001 - surface request failures
            self._logger.warning("Request failed for %s %s: %s", method, url, exc)
            if should_raise:
                raise UpstreamError(str(exc) or "ShipStation API Connection Failed") from exc
            return None

        if not response.content:
            return None
        try:
            payload = response.json()
        except ValueError:  # noqa: PERF203 - only attempt JSON when present
            self._logger.warning("Response from %s %s was not JSON", method, url)
            return None
        if isinstance(payload, (dict, list)):
            return payload
        return None

import logging
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

import requests

# Ensure src/ is on sys.path so we can import the package without installation
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from shipdash.client import ShipStation  # noqa: E402
from shipdash.errors import UpstreamError  # noqa: E402


logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stdout,
    force=True,
)


class FakeResponse:
    def __init__(self, *, content=b"{}", json_payload=None, json_error=False, status_error=None, status_code=200):
        self.content = content
        self.status_code = status_code
        self._json_payload = json_payload
        self._json_error = json_error
        self._status_error = status_error

    def raise_for_status(self):
        if self._status_error:
            raise self._status_error

    def json(self):
        if self._json_error:
            raise ValueError("bad json")
        return self._json_payload


class FakeSession:
    def __init__(self, response: FakeResponse):
        self.response = response
        self.calls = []

    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        self.calls.append((method, url, params, json, headers, timeout))
        return self.response


def _http_error(payload, status_code=400, json_error=False):
    return FakeResponse(
        json_payload=payload,
        json_error=json_error,
        status_error=requests.HTTPError(f"{status_code} Client Error"),
        status_code=status_code,
    )


class ClientTests(unittest.TestCase):
    def test_request_builds_url_and_headers(self):
        session = FakeSession(FakeResponse(json_payload={"ok": True}))
        client = ShipStation(base_url="https://example.com/v2/", api_key="secret", session=session)
        client.request("GET", "shipments")
        self.assertEqual(len(session.calls), 1)
        method, url, params, json, headers, timeout = session.calls[0]
        self.assertEqual(method, "GET")
        self.assertEqual(url, "https://example.com/v2/shipments")
        self.assertIsNone(params)
        self.assertIsNone(json)
        self.assertEqual(headers["api-key"], "secret")
        self.assertEqual(timeout, client.default_timeout)

    def test_request_without_api_key_omits_header(self):
        session = FakeSession(FakeResponse(json_payload={}))
        client = ShipStation(base_url="https://example.com", api_key="", session=session)
        client.request("GET", "/tags")
        self.assertNotIn("api-key", session.calls[0][4])

    def test_request_drops_none_params(self):
        session = FakeSession(FakeResponse(json_payload={}))
        client = ShipStation(base_url="https://example.com", session=session)
        client.request("GET", "/shipments", params={"page": 1, "tag": None})
        self.assertEqual(session.calls[0][2], {"page": 1})

    def test_request_empty_body_returns_none(self):
        client = ShipStation(session=FakeSession(FakeResponse(content=b"")))
        self.assertIsNone(client.request("POST", "/tags/VIP"))

    def test_request_non_json_returns_none(self):
        client = ShipStation(session=FakeSession(FakeResponse(content=b"nope", json_error=True)))
        self.assertIsNone(client.request("GET", "/tags"))

    def test_request_json_dict_and_list(self):
        response = FakeResponse(json_payload={"data": 1})
        client = ShipStation(session=FakeSession(response))
        self.assertEqual(client.request("GET", "/tags"), {"data": 1})
        response._json_payload = [1, 2]
        self.assertEqual(client.request("GET", "/tags"), [1, 2])
        response._json_payload = "not dict"
        self.assertIsNone(client.request("GET", "/tags"))

    def test_request_http_error_returns_none(self):
        client = ShipStation(session=FakeSession(_http_error({"message": "problem"})))
        self.assertIsNone(client.request("GET", "/tags"))

    def test_request_http_error_raises_with_server_message(self):
        client = ShipStation(session=FakeSession(_http_error({"message": "Tag not found"}, 404)), raise_on_error=True)
        with self.assertRaises(UpstreamError) as ctx:
            client.request("POST", "/shipments/1/tags/VIP")
        self.assertEqual(ctx.exception.message, "Tag not found")
        self.assertEqual(ctx.exception.status_code, 404)

    def test_request_http_error_uses_errors_list(self):
        payload = {"errors": [{"message": "tag already exists"}]}
        client = ShipStation(session=FakeSession(_http_error(payload)))
        with self.assertRaises(UpstreamError) as ctx:
            client.request("POST", "/tags/VIP", raise_on_error=True)
        self.assertEqual(str(ctx.exception), "tag already exists")

    def test_request_http_error_uses_detail_field(self):
        client = ShipStation(session=FakeSession(_http_error({"detail": "nope"})), raise_on_error=True)
        with self.assertRaises(UpstreamError) as ctx:
            client.request("GET", "/tags")
        self.assertEqual(ctx.exception.message, "nope")

    def test_request_http_error_bad_json_body_falls_back(self):
        client = ShipStation(session=FakeSession(_http_error(None, 500, json_error=True)), raise_on_error=True)
        with self.assertRaises(UpstreamError) as ctx:
            client.request("GET", "/tags")
        self.assertEqual(ctx.exception.message, "500 Client Error")

    def test_per_call_override_disables_raising(self):
        client = ShipStation(session=FakeSession(_http_error({"message": "x"})), raise_on_error=True)
        self.assertIsNone(client.request("GET", "/tags", raise_on_error=False))

    def test_request_other_exception_returns_none(self):
        client = ShipStation()
        with patch("shipdash.client.requests.request", side_effect=RuntimeError("boom")):
            self.assertIsNone(client.request("GET", "/tags"))

    def test_request_other_exception_raises_when_enabled(self):
        client = ShipStation(raise_on_error=True)
        with patch("shipdash.client.requests.request", side_effect=RuntimeError("boom")):
            with self.assertRaises(UpstreamError) as ctx:
                client.request("GET", "/tags")
        self.assertEqual(ctx.exception.message, "boom")
        self.assertIsNone(ctx.exception.status_code)

    def test_fetch_resource_uses_absolute_url(self):
        session = FakeSession(FakeResponse(json_payload={"orders": []}))
        client = ShipStation(base_url="https://example.com/v2", api_key="k", session=session)
        result = client.fetch_resource("https://ssapi.shipstation.com/orders?importBatch=1")
        self.assertEqual(result, {"orders": []})
        self.assertEqual(session.calls[0][0], "GET")
        self.assertEqual(session.calls[0][1], "https://ssapi.shipstation.com/orders?importBatch=1")
        self.assertEqual(session.calls[0][4]["api-key"], "k")


if __name__ == "__main__":
    unittest.main()

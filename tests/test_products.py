import logging
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

# Ensure src/ is on sys.path so we can import the package without installation
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from shipdash.resources.products import Products  # noqa: E402
from shipdash.resources.products_types import _normalize_active  # noqa: E402


class DummyClient:
    def __init__(self) -> None:
        self._logger = logging.getLogger("shipdash.tests")

    def request(self, method, path, params=None, json=None, timeout=None, raise_on_error=None):
        return None


class ProductsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.products = Products(DummyClient())  # type: ignore[arg-type]

    def test_list_success(self):
        page = {"products": [{"sku": "TS-1"}], "total": 1}
        with patch.object(self.products, "_get", return_value=page) as mocked_get:
            self.assertEqual(self.products.list(active="true", sku="TS-1"), page)
        params = mocked_get.call_args.kwargs["params"]
        self.assertEqual(params["active"], "true")
        self.assertEqual(params["sku"], "TS-1")
        self.assertEqual(params["page_size"], 100)
        self.assertIsNone(params["name"])

    def test_list_active_unrecognised_is_dropped(self):
        with patch.object(self.products, "_get", return_value={"products": []}) as mocked_get:
            self.products.list(active="maybe")
        self.assertIsNone(mocked_get.call_args.kwargs["params"]["active"])

    def test_list_missing_products(self):
        with patch.object(self.products, "_get", return_value={}):
            self.assertIsNone(self.products.list())

    def test_list_invalid_paging(self):
        with patch.object(self.products, "_get") as mocked_get:
            self.assertIsNone(self.products.list(page=-1))
        mocked_get.assert_not_called()
        with self.assertRaises(ValueError):
            self.products.list(page_size=0, validation="strict")

    def test_normalize_active(self):
        self.assertTrue(_normalize_active(True))
        self.assertFalse(_normalize_active("False"))
        self.assertIsNone(_normalize_active(None))
        self.assertIsNone(_normalize_active(1))

#!/usr/bin/env python3
"""
Tests for the child product catalog.
"""

import json
import os
import tempfile
import unittest
from decimal import Decimal

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from quote_bom.catalog import (
    DEFAULT_CATALOG, CareTier, ChildProductCatalog, ChildProductDefinition, load_catalog,
)
from quote_bom.exceptions import CatalogError

CATALOG_DATA = {
    "XL": {
        "software": {"code": "VDP-SW-P-10-XL", "description": "XL software"},
        "support": {"code": "HW-Support-XL-NBD", "description": "XL support", "fixed_price": "4.50"},
    }
}


class TestChildProductCatalog(unittest.TestCase):

    def test_default_catalog(self):
        self.assertEqual(sorted(DEFAULT_CATALOG), ["C", "HP"])
        self.assertEqual(DEFAULT_CATALOG.get("HP").support.fixed_price, Decimal("3.00"))
        self.assertEqual(DEFAULT_CATALOG.get("C").support.fixed_price, Decimal("0.30"))
        self.assertEqual(DEFAULT_CATALOG.get("HP").software.code, "VDP-SW-P-10-HP")
        self.assertIsNone(DEFAULT_CATALOG.get("HP").software.fixed_price)
        self.assertNotIn("XL", DEFAULT_CATALOG)
        self.assertIsNone(DEFAULT_CATALOG.get("XL"))

    def test_from_dict(self):
        catalog = ChildProductCatalog.from_dict(CATALOG_DATA)
        self.assertEqual(len(catalog), 1)
        tier = catalog.get("XL")
        self.assertEqual(tier.support, ChildProductDefinition("HW-Support-XL-NBD", "XL support", Decimal("4.50")))
        self.assertEqual(tier.software.code, "VDP-SW-P-10-XL")

    def test_from_dict_accepts_numeric_prices(self):
        data = json.loads(json.dumps(CATALOG_DATA).replace('"4.50"', '0.3'))
        catalog = ChildProductCatalog.from_dict(data)
        self.assertEqual(catalog.get("XL").support.fixed_price, Decimal("0.3"))

    def test_invalid_catalogs(self):
        invalid = [
            ["not", "a", "mapping"],
            {"XL": "nope"},
            {"XL": {"software": {"code": "A"}}},
            {"XL": {"software": {"code": "A"}, "support": {"code": "B"}}},
            {"XL": {"software": {"code": "A"}, "support": {"code": "B", "fixed_price": "cheap"}}},
        ]
        for data in invalid:
            with self.subTest(data=data):
                with self.assertRaises(CatalogError):
                    ChildProductCatalog.from_dict(data)

    def test_support_requires_fixed_price(self):
        with self.assertRaises(CatalogError):
            ChildProductCatalog({
                "HP": CareTier(
                    software=ChildProductDefinition("A", "a"),
                    support=ChildProductDefinition("B", "b"),
                ),
            })

    def test_catalog_is_not_affected_by_source_changes(self):
        tiers = {"HP": DEFAULT_CATALOG.get("HP")}
        catalog = ChildProductCatalog(tiers)
        tiers["C"] = DEFAULT_CATALOG.get("C")
        self.assertNotIn("C", catalog)


class TestLoadCatalog(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)

    def _write(self, name, content):
        path = os.path.join(self.temp_dir.name, name)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        return path

    def test_load_catalog(self):
        path = self._write("catalog.json", json.dumps(CATALOG_DATA))
        catalog = load_catalog(path)
        self.assertIn("XL", catalog)

    def test_invalid_json(self):
        path = self._write("broken.json", "{not json")
        with self.assertRaises(CatalogError):
            load_catalog(path)

    def test_missing_file(self):
        with self.assertRaises(CatalogError):
            load_catalog(os.path.join(self.temp_dir.name, "missing.json"))


if __name__ == '__main__':
    unittest.main()

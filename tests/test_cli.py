#!/usr/bin/env python3
"""
Tests for the quote-bom command line interface.
"""

import json
import tempfile
import unittest
from unittest.mock import patch

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from click.testing import CliRunner

from quote_bom.cli import cli
from quote_bom.csv_generator import CSV_HEADERS
from sample_data import OPPORTUNITY_ID, RAW_QUOTE_TEXT


@patch('quote_bom.cli.configure_logging')
class TestCLI(unittest.TestCase):

    def setUp(self):
        self.runner = CliRunner()
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.quote_path = Path(self.tmp.name) / "quote.txt"
        self.quote_path.write_text(RAW_QUOTE_TEXT, encoding='utf-8')

    def test_convert_to_stdout(self, mock_logging):
        result = self.runner.invoke(cli, ['convert', str(self.quote_path), '-i', OPPORTUNITY_ID, '--stdout'])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn(','.join(CSV_HEADERS), result.output)
        self.assertIn("VDP-SW-P-10-C,VDP-VDURACare-10-C,9.70,0.00,9.70,4,36,1396.80", result.output)
        mock_logging.assert_called_once_with(False)

    def test_convert_writes_file(self, mock_logging):
        output_dir = Path(self.tmp.name) / "out"
        result = self.runner.invoke(cli, ['convert', str(self.quote_path), '-i', OPPORTUNITY_ID,
                                          '-o', str(output_dir)])
        self.assertEqual(result.exit_code, 0, result.output)

        written = list(output_dir.glob("Quote_Number_10178-12345_BOM_*.csv"))
        self.assertEqual(len(written), 1)
        lines = written[0].read_text(encoding='utf-8').split('\n')
        self.assertEqual(len(lines), 9)
        self.assertIn("CSV saved to", result.output)

    def test_invalid_opportunity_id(self, mock_logging):
        result = self.runner.invoke(cli, ['convert', str(self.quote_path), '-i', 'SHORT', '--stdout'])
        self.assertEqual(result.exit_code, 2)
        self.assertIn("18 characters", result.output)

    def test_missing_opportunity_id(self, mock_logging):
        result = self.runner.invoke(cli, ['convert', str(self.quote_path), '--stdout'])
        self.assertEqual(result.exit_code, 2)

    def test_no_line_items_aborts(self, mock_logging):
        empty_quote = Path(self.tmp.name) / "empty.txt"
        empty_quote.write_text("Quote Number 1 Thank you", encoding='utf-8')
        result = self.runner.invoke(cli, ['convert', str(empty_quote), '-i', OPPORTUNITY_ID, '--stdout'])
        self.assertEqual(result.exit_code, 1)
        self.assertNotIn("Quote Date,Opportunity ID", result.output)

    def test_undecodable_text_input_aborts(self, mock_logging):
        bad_quote = Path(self.tmp.name) / "bad.txt"
        bad_quote.write_bytes(b"\xff\xfe\x00Quote Number 1")
        for command in (['convert', str(bad_quote), '-i', OPPORTUNITY_ID, '--stdout'],
                        ['inspect', str(bad_quote)]):
            with self.subTest(command=command[0]):
                result = self.runner.invoke(cli, command)
                self.assertEqual(result.exit_code, 1)
                self.assertNotIsInstance(result.exception, UnicodeDecodeError)
                self.assertIn("Error", result.output)

    @patch('quote_bom.cli.ConversionResult.write', side_effect=PermissionError("read-only directory"))
    def test_write_failure_aborts(self, mock_write, mock_logging):
        result = self.runner.invoke(cli, ['convert', str(self.quote_path), '-i', OPPORTUNITY_ID,
                                          '-o', self.tmp.name])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("read-only directory", result.output)
        mock_write.assert_called_once()

    def test_custom_catalog(self, mock_logging):
        catalog_path = Path(self.tmp.name) / "catalog.json"
        catalog_path.write_text(json.dumps({
            "C": {
                "software": {"code": "SW-C", "description": "Software"},
                "support": {"code": "SUP-C", "description": "Support", "fixed_price": "1.00"},
            }
        }), encoding='utf-8')
        result = self.runner.invoke(cli, ['convert', str(self.quote_path), '-i', OPPORTUNITY_ID,
                                          '--catalog', str(catalog_path), '--stdout'])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("SW-C,VDP-VDURACare-10-C,9.00,0.00,9.00,4,36,1296.00", result.output)
        self.assertNotIn("VDP-SW-P-10-HP", result.output)

    def test_inspect_prints_json(self, mock_logging):
        result = self.runner.invoke(cli, ['inspect', str(self.quote_path)])
        self.assertEqual(result.exit_code, 0, result.output)
        data = json.loads(result.output)
        self.assertEqual(data["header"]["quote_number"], "10178-12345")
        self.assertEqual(len(data["lineItems"]), 4)
        self.assertEqual(data["rowCount"], 8)


if __name__ == '__main__':
    unittest.main()

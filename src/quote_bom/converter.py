#!/usr/bin/env python3
"""
Quote BOM Converter
Runs the extraction pipeline over one quotation and decides which gaps are fatal.
"""

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .catalog import ChildProductCatalog
from .config import ConverterSettings
from .csv_generator import generate_csv, generate_filename, write_csv
from .exceptions import NoLineItemsError
from .header_extractor import extract_base_product_code, extract_header
from .line_item_extractor import LineItemExtractor
from .models import LineItem, OutputRow, QuoteHeader
from .normalizer import TextNormalizer
from .pdf_extractor import extract_pdf_text
from .pricing import PricingTransformer, format_price

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    header: QuoteHeader
    line_items: List[LineItem]
    rows: List[OutputRow]
    base_product_code: str
    warnings: List[str] = field(default_factory=list)

    def to_csv(self) -> str:
        return generate_csv(self.rows)

    def filename(self, now: Optional[datetime] = None) -> str:
        return generate_filename(self.header.quote_number, now)

    def write(self, output_dir: Union[str, Path], now: Optional[datetime] = None) -> Path:
        return write_csv(self.rows, output_dir, self.header.quote_number, now)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe view of the extracted data."""
        return {
            "header": asdict(self.header),
            "baseProductCode": self.base_product_code,
            "lineItems": [
                {
                    "partNo": item.part_no,
                    "description": item.description,
                    "qty": item.qty,
                    "months": item.months,
                    "listPrice": format_price(item.list_price),
                    "discountPrice": format_price(item.discount_price),
                    "extendedPrice": format_price(item.extended_price),
                }
                for item in self.line_items
            ],
            "rowCount": len(self.rows),
            "warnings": list(self.warnings),
        }


class QuoteConverter:
    """Converts quotation text (or PDFs) into BOM rows."""

    def __init__(self, settings: Optional[ConverterSettings] = None,
                 catalog: Optional[ChildProductCatalog] = None,
                 normalizer: Optional[TextNormalizer] = None):
        self.settings = settings or ConverterSettings()
        self.normalizer = normalizer or TextNormalizer()
        self.extractor = LineItemExtractor(self.settings.window_size)
        self.transformer = PricingTransformer(catalog, self.settings)

    def convert_text(self, raw_text: str, opportunity_id: str,
                     base_product_code: Optional[str] = None) -> ConversionResult:
        """
        Convert raw quotation text into output rows.

        Args:
            raw_text: Text decoded from the PDF
            opportunity_id: Opportunity ID stamped on every row
            base_product_code: Overrides the code found in the document

        Returns:
            ConversionResult

        Raises:
            NoLineItemsError: if no line item could be recovered
        """
        text = self.normalizer.normalize(raw_text)
        logger.info(f"Normalized text: {len(text)} characters")

        header = extract_header(text)
        line_items = self.extractor.extract(text)
        if not line_items:
            logger.error("No line items found in document")
            raise NoLineItemsError()

        if base_product_code is None:
            base_product_code = extract_base_product_code(text, self.settings.base_product_code)

        warnings = []
        missing = header.missing_fields()
        if missing:
            warnings.append(f"Header fields not found: {', '.join(missing)}")
            logger.warning(warnings[-1])

        rows = self.transformer.transform(header, line_items, opportunity_id, base_product_code)
        logger.info(f"Quote {header.quote_number or 'unknown'}: "
                    f"{len(line_items)} line items, {len(rows)} rows")

        return ConversionResult(
            header=header,
            line_items=line_items,
            rows=rows,
            base_product_code=base_product_code,
            warnings=warnings,
        )

    def convert_pdf(self, pdf_path: Union[str, Path], opportunity_id: str,
                    base_product_code: Optional[str] = None) -> ConversionResult:
        logger.info(f"Converting quote PDF: {pdf_path}")
        raw_text = extract_pdf_text(pdf_path)
        return self.convert_text(raw_text, opportunity_id, base_product_code)


def convert_text(raw_text: str, opportunity_id: str, base_product_code: Optional[str] = None,
                 settings: Optional[ConverterSettings] = None,
                 catalog: Optional[ChildProductCatalog] = None) -> ConversionResult:
    """Convenience function to convert quotation text with a fresh converter."""
    return QuoteConverter(settings, catalog).convert_text(raw_text, opportunity_id, base_product_code)

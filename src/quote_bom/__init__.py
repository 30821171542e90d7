"""
Quote BOM Converter

Converts vendor quotation PDFs into a normalized CSV bill of materials.
"""

__version__ = "1.0.0"

from .catalog import DEFAULT_CATALOG, ChildProductCatalog, load_catalog
from .config import ConverterSettings
from .converter import ConversionResult, QuoteConverter, convert_text
from .csv_generator import generate_csv, generate_filename
from .exceptions import NoLineItemsError, QuoteConversionError
from .header_extractor import extract_header
from .line_item_extractor import extract_line_items
from .normalizer import normalize_text
from .pricing import transform

__all__ = [
    "DEFAULT_CATALOG",
    "ChildProductCatalog",
    "load_catalog",
    "ConverterSettings",
    "ConversionResult",
    "QuoteConverter",
    "convert_text",
    "generate_csv",
    "generate_filename",
    "NoLineItemsError",
    "QuoteConversionError",
    "extract_header",
    "extract_line_items",
    "normalize_text",
    "transform",
]

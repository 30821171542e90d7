#!/usr/bin/env python3
"""
Exceptions raised by the quote conversion pipeline.

Extractors never raise on malformed text; only the orchestration layer and the
I/O adapters use these.
"""


class QuoteConversionError(Exception):
    """Base class for conversion failures surfaced to the user."""
    pass


class NoLineItemsError(QuoteConversionError):
    """Raised when no line items could be recovered from a document."""

    def __init__(self, message: str = "No line items found in PDF. Please check the PDF format."):
        super().__init__(message)


class PDFExtractionError(QuoteConversionError):
    """Raised when no text could be extracted from a PDF."""
    pass


class CatalogError(QuoteConversionError):
    """Raised when a child product catalog file cannot be loaded."""
    pass

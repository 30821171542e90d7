#!/usr/bin/env python3
"""
PDF text extraction for quotation documents.

Produces the single text blob the conversion pipeline works on. Layout is not
preserved; the normalizer repairs the spacing artifacts afterwards.
"""

import pdfplumber
import logging
import shutil
import subprocess
from pathlib import Path
from typing import Union

from .exceptions import PDFExtractionError

logger = logging.getLogger(__name__)


class PDFTextExtractor:
    """PDF text extractor with a command-line fallback."""

    def __init__(self):
        self.extraction_methods = [
            self._extract_with_pdfplumber,
            self._extract_with_pdftotext,
        ]

    def extract_text(self, pdf_path: Union[str, Path]) -> str:
        """
        Extract text from PDF, trying each method until one yields text.

        Args:
            pdf_path: Path to the PDF file

        Returns:
            Extracted text, one page per line group
        """
        pdf_path = str(pdf_path)
        for method in self.extraction_methods:
            try:
                text = method(pdf_path)
            except Exception as e:
                logger.warning(f"Method {method.__name__} failed: {e}")
                continue

            if text and text.strip():
                logger.info(f"Extracted {len(text)} characters using {method.__name__}")
                return text

        raise PDFExtractionError(f"No text could be extracted from {pdf_path}")

    def _extract_with_pdfplumber(self, pdf_path: str) -> str:
        pages = []
        with pdfplumber.open(pdf_path) as pdf:
            for page in pdf.pages:
                page_text = page.extract_text()
                if page_text:
                    pages.append(page_text)
        return '\n'.join(pages)

    def _extract_with_pdftotext(self, pdf_path: str) -> str:
        """Extract text using the pdftotext command-line tool."""
        if shutil.which('pdftotext') is None:
            logger.warning("pdftotext not available")
            return ""

        result = subprocess.run(
            ['pdftotext', '-raw', pdf_path, '-'],
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            logger.warning(f"pdftotext failed: {result.stderr.strip()}")
            return ""
        return result.stdout


def extract_pdf_text(pdf_path: Union[str, Path]) -> str:
    """
    Convenience function to extract text from PDF.

    Args:
        pdf_path: Path to the PDF file

    Returns:
        Extracted text
    """
    return PDFTextExtractor().extract_text(pdf_path)

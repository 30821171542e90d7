#!/usr/bin/env python3
"""
Header extractor for quotation metadata.

Every field is located by its printed label and bounded by the label that
follows it in the vendor's layout. A field whose label is missing is left as
None; the caller decides whether that matters.
"""

import re
import logging
from typing import List, Optional

from .models import QuoteHeader

logger = logging.getLogger(__name__)


MONTHS = {
    'january': '01', 'february': '02', 'march': '03', 'april': '04',
    'may': '05', 'june': '06', 'july': '07', 'august': '08',
    'september': '09', 'october': '10', 'november': '11', 'december': '12',
    'jan': '01', 'feb': '02', 'mar': '03', 'apr': '04', 'jun': '06',
    'jul': '07', 'aug': '08', 'sep': '09', 'sept': '09', 'oct': '10',
    'nov': '11', 'dec': '12',
}

# Longer bounded captures mean the boundary label was never found
MAX_FIELD_LENGTH = 200

NUMERIC_DATE = re.compile(r'^\d{1,2}/\d{1,2}/\d{4}$')
MONTH_NAME_DATE = re.compile(r'^([A-Za-z]+)\.?\s+(\d{1,2}),?\s+(\d{4})$')
DATE_VALUE = r'([A-Za-z]+\.?\s+\d{1,2},?\s+\d{4}|\d{1,2}/\d{1,2}/\d{4})'
EMAIL_VALUE = r'([A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,})'

QUOTE_NUMBER_PATTERN = re.compile(
    r'Quote\s+Number\s*:?\s*(?!(?:Quote|Customer|Partner|Prepared|Email)\b)([A-Za-z0-9][\w./-]*)',
    re.IGNORECASE,
)
QUOTE_DATE_PATTERN = re.compile(r'Quote\s+Date\s*:?\s*' + DATE_VALUE, re.IGNORECASE)
QUOTE_EXPIRES_PATTERN = re.compile(r'Quote\s+Expires\s*:?\s*' + DATE_VALUE, re.IGNORECASE)
CUSTOMER_PATTERN = re.compile(
    r'Customer\s+Name\s*:?\s*(.+?)'
    r'(?=\s+(?:Quote\s+(?:Number|Date|Expires)|Partner\s+Name|Prepared\s+By|Email)\b)',
    re.IGNORECASE,
)
PARTNER_PATTERN = re.compile(
    r'Partner\s+Name\s*:?\s*(.+?)'
    r'(?=\s+(?:SOFTWARE|COMMODITY|PART\s+NO|Prepared\s+By|Quote\s+(?:Number|Date|Expires)|Email)\b)',
    re.IGNORECASE,
)
PREPARED_BY_PATTERN = re.compile(r'Prepared\s+By\s*:?\s*(.+?)(?=\s+Email\b)', re.IGNORECASE)
EMAIL_LABEL_PATTERN = re.compile(r'Email\s*:?\s*' + EMAIL_VALUE, re.IGNORECASE)
EMAIL_AFTER_PREPARER_PATTERN = re.compile(r'Prepared\s+By\b.{0,200}?' + EMAIL_VALUE, re.IGNORECASE)
EMAIL_ANYWHERE_PATTERN = re.compile(EMAIL_VALUE)

BASE_PRODUCT_PATTERN = re.compile(r'\bV(\d+)\s+Configuration', re.IGNORECASE)


def parse_date(date_str: str) -> str:
    """
    Convert a month-name date ("January 30, 2026") to MM/DD/YYYY.

    Dates already in MM/DD/YYYY are returned unchanged, and anything that
    cannot be parsed is returned verbatim.
    """
    if not date_str:
        return ""

    date_str = date_str.strip()
    if NUMERIC_DATE.match(date_str):
        return date_str

    match = MONTH_NAME_DATE.match(date_str)
    if not match:
        logger.debug(f"Unparsable date kept verbatim: {date_str}")
        return date_str

    month = MONTHS.get(match.group(1).lower())
    if not month:
        logger.debug(f"Unknown month name kept verbatim: {date_str}")
        return date_str

    day = match.group(2).zfill(2)
    return f"{month}/{day}/{match.group(3)}"


def _bounded(pattern: re.Pattern, text: str) -> Optional[str]:
    match = pattern.search(text)
    if not match:
        return None
    value = match.group(1).strip()
    if not value or len(value) > MAX_FIELD_LENGTH:
        return None
    return value


def _extract_email(text: str) -> Optional[str]:
    for pattern in (EMAIL_LABEL_PATTERN, EMAIL_AFTER_PREPARER_PATTERN, EMAIL_ANYWHERE_PATTERN):
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def extract_header(text: str) -> QuoteHeader:
    """
    Extract quote metadata from normalized text.

    Args:
        text: Normalized quotation text

    Returns:
        QuoteHeader with None for every field that was not found
    """
    quote_number = _bounded(QUOTE_NUMBER_PATTERN, text)
    if quote_number:
        quote_number = quote_number.rstrip('.,;:')

    quote_date = _bounded(QUOTE_DATE_PATTERN, text)
    quote_expires = _bounded(QUOTE_EXPIRES_PATTERN, text)

    header = QuoteHeader(
        quote_number=quote_number,
        quote_date=parse_date(quote_date) if quote_date else None,
        quote_expires=parse_date(quote_expires) if quote_expires else None,
        customer_name=_bounded(CUSTOMER_PATTERN, text),
        partner_name=_bounded(PARTNER_PATTERN, text),
        prepared_by=_bounded(PREPARED_BY_PATTERN, text),
        email=_extract_email(text),
    )

    missing: List[str] = header.missing_fields()
    if missing:
        logger.debug(f"Header fields not found: {', '.join(missing)}")
    return header


def extract_base_product_code(text: str, default: str = "v5000") -> str:
    """Read the base product code from a "V<digits> Configuration" note."""
    match = BASE_PRODUCT_PATTERN.search(text)
    if match:
        return f"v{match.group(1)}"
    return default

#!/usr/bin/env python3
"""
Line-item extractor for vendor quotation text.

Product codes are found with a single scan and dispatched by product family.
Each family has its own row grammar, because subscription rows carry a month
count between the quantity and the prices while one-time rows do not:

    care subscription:  CODE description QTY MONTHS $LIST $DISCOUNT $EXTENDED
    service, hardware:  CODE description QTY $LIST $DISCOUNT $EXTENDED
    other:              CODE description QTY [MONTHS] $LIST $DISCOUNT $EXTENDED
"""

import re
import logging
from decimal import Decimal
from typing import List, Optional, Set, Tuple

from .config import LINE_ITEM_WINDOW
from .models import LineItem, ProductFamily

logger = logging.getLogger(__name__)


_SEGMENTS = r'[A-Za-z0-9]+(?:-[A-Za-z0-9]+)*'

PRODUCT_CODE_SCAN = re.compile(
    r'(?<![\w-])(?:'
    r'(?P<care>VDP-VDURACare-\d+-\w+)(?![\w-])'
    r'|(?P<service>SVC-' + _SEGMENTS + r')'
    r'|(?P<hardware>VCH-[A-Za-z0-9]+(?:[.-][A-Za-z0-9]+)*|HW-(?!Support\b)' + _SEGMENTS + r')'
    r'|(?P<other>VDP-' + _SEGMENTS + r')'
    r')'
)

FAMILY_GROUPS = {
    'care': ProductFamily.CARE_SUBSCRIPTION,
    'service': ProductFamily.SERVICE,
    'hardware': ProductFamily.HARDWARE,
    'other': ProductFamily.OTHER,
}

# A price needs a "$" or a decimal part so it cannot be mistaken for a quantity
_PRICE = r'(?:\$\d[\d,]*(?:\.\d+)?|\d[\d,]*\.\d+)(?=\s|$)'
PLAIN_AMOUNT = re.compile(r'\d+(?:\.\d+)?')
_DESCRIPTION = r'\s+(?:(?P<description>[^$]*?)\s+)?'
_PRICES = (
    r'\s+(?P<list_price>' + _PRICE + r')'
    r'\s+(?P<discount_price>' + _PRICE + r')'
    r'\s+(?P<extended_price>' + _PRICE + r')'
)

SUBSCRIPTION_GRAMMAR = re.compile(_DESCRIPTION + r'(?P<qty>\d+)\s+(?P<months>\d+)' + _PRICES)
ONE_TIME_GRAMMAR = re.compile(_DESCRIPTION + r'(?P<qty>\d+)' + _PRICES)
OPTIONAL_MONTHS_GRAMMAR = re.compile(_DESCRIPTION + r'(?P<qty>\d+)(?:\s+(?P<months>\d+))?' + _PRICES)

FAMILY_GRAMMARS = {
    ProductFamily.CARE_SUBSCRIPTION: SUBSCRIPTION_GRAMMAR,
    ProductFamily.SERVICE: ONE_TIME_GRAMMAR,
    ProductFamily.HARDWARE: ONE_TIME_GRAMMAR,
    ProductFamily.OTHER: OPTIONAL_MONTHS_GRAMMAR,
}

# Table headings that bleed into a description across page breaks
HEADER_LEAKAGE = re.compile(
    r'\s*(?:\bPART\s+NO\.'
    r'|\b(?:DESCRIPTION|QTY|MONTHS|LIST\s+PRICE|DISCOUNTED\s+PRICE|EXTENDED\s+PRICE'
    r'|SOFTWARE\s+AND\s+SUPPORT|COMMODITY\s+HARDWARE)\b'
    r'|\b(?i:Total\s+(?:Software|Hardware))\b).*$'
)


def parse_currency(value: Optional[str]) -> Decimal:
    """Parse "$15,180.00" style text; anything unparsable is 0."""
    if not value:
        return Decimal('0')

    cleaned = re.sub(r'[\s$,]', '', value)
    # Decimal alone would also take "NaN", "Infinity" and exponents
    if not PLAIN_AMOUNT.fullmatch(cleaned):
        logger.debug(f"Unparsable currency treated as 0: {value}")
        return Decimal('0')
    return Decimal(cleaned)


def clean_description(description: Optional[str], part_no: str) -> str:
    """Strip heading leakage from a description, falling back to the part number."""
    if not description:
        return part_no
    description = HEADER_LEAKAGE.sub('', description)
    description = re.sub(r'\s+', ' ', description).strip()
    return description or part_no


class LineItemExtractor:
    """Extracts typed line items from normalized quotation text."""

    def __init__(self, window_size: int = LINE_ITEM_WINDOW):
        self.window_size = window_size

    def extract(self, text: str) -> List[LineItem]:
        """
        Extract line items in order of first appearance.

        Args:
            text: Normalized quotation text

        Returns:
            List of unique line items; empty if no product row was recognized
        """
        items: List[LineItem] = []
        seen: Set[Tuple[str, int, Decimal]] = set()
        skipped = 0

        codes = self.find_product_codes(text)
        for index, (part_no, family, start) in enumerate(codes):
            # a row ends where the next product code starts
            end = codes[index + 1][2] if index + 1 < len(codes) else len(text)
            item = self.parse_row(text, part_no, family, start, min(end, start + self.window_size))
            if item is None:
                skipped += 1
                continue
            if item.identity in seen:
                logger.debug(f"Dropping repeated row for {part_no} (qty {item.qty}, extended {item.extended_price})")
                continue
            seen.add(item.identity)
            items.append(item)
            logger.debug(f"Parsed {family.value} item {part_no}: qty={item.qty} months={item.months}")

        logger.info(f"Extracted {len(items)} line items ({skipped} product codes without row data)")
        return items

    def find_product_codes(self, text: str) -> List[Tuple[str, ProductFamily, int]]:
        """Return (code, family, offset) for every product code occurrence."""
        found = []
        for match in PRODUCT_CODE_SCAN.finditer(text):
            group = match.lastgroup
            found.append((match.group(group), FAMILY_GROUPS[group], match.start()))
        return found

    def parse_row(self, text: str, part_no: str, family: ProductFamily,
                  start: int = 0, end: Optional[int] = None) -> Optional[LineItem]:
        """
        Apply the family's row grammar to text[start:end], which begins with part_no.

        A row whose last price runs past end was cut off by the window and
        is rejected rather than read as a shorter amount.
        """
        if end is None:
            end = len(text)

        grammar = FAMILY_GRAMMARS[family]
        match = grammar.match(text, start + len(part_no), end)
        if not match:
            logger.debug(f"No row data after product code {part_no}")
            return None

        if match.end() < len(text) and not text[match.end()].isspace():
            logger.warning(f"Row for {part_no} is cut off after {end - start} characters; skipping it")
            return None

        qty = int(match.group('qty'))
        if qty <= 0:
            logger.debug(f"Ignoring {part_no} with zero quantity")
            return None

        months = match.groupdict().get('months')
        return LineItem(
            part_no=part_no,
            description=clean_description(match.group('description'), part_no),
            qty=qty,
            months=int(months) if months is not None else None,
            list_price=parse_currency(match.group('list_price')),
            discount_price=parse_currency(match.group('discount_price')),
            extended_price=parse_currency(match.group('extended_price')),
        )


def extract_line_items(text: str, window_size: int = LINE_ITEM_WINDOW) -> List[LineItem]:
    """
    Convenience function to extract line items from normalized text.

    Args:
        text: Normalized quotation text
        window_size: Characters scanned after each product code

    Returns:
        List of line items
    """
    return LineItemExtractor(window_size).extract(text)

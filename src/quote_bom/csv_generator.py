#!/usr/bin/env python3
"""
CSV projection of transformed rows.
"""

import logging
from dataclasses import astuple
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from .models import OutputRow

logger = logging.getLogger(__name__)


CSV_HEADERS = [
    'Quote Date',
    'Opportunity ID',
    'Customer Name',
    'Partner Name',
    'Prepared By',
    'Email',
    'Quote Number',
    'Base Product Code',
    'Base Description',
    'Product Code',
    'Parent Product Code',
    'List Price',
    'Discount Percentage',
    'Discount Price',
    'Option QTY',
    'Month',
    'Extended Price',
    'Option Description',
    'Quote Expires',
    'Status',
]


def escape_csv_value(value: Any) -> str:
    """Quote a value if it contains a comma, double quote or newline."""
    if value is None:
        return ''

    text = str(value)
    if ',' in text or '"' in text or '\n' in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def row_to_csv_line(row: OutputRow) -> str:
    return ','.join(escape_csv_value(value) for value in astuple(row))


def generate_csv(rows: Iterable[OutputRow]) -> str:
    """
    Generate CSV content from transformed rows.

    Args:
        rows: Output rows

    Returns:
        Header line followed by one line per row, joined by newlines
    """
    lines = [','.join(CSV_HEADERS)]
    lines.extend(row_to_csv_line(row) for row in rows)
    return '\n'.join(lines)


def generate_filename(quote_number: Optional[str], now: Optional[datetime] = None) -> str:
    """
    Build the download filename, e.g.
    Quote_Number_10178-12345_BOM_2026-01-30T17-04-05-123Z.csv
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)

    timestamp = now.strftime('%Y-%m-%dT%H:%M:%S') + f'.{now.microsecond // 1000:03d}Z'
    timestamp = timestamp.replace(':', '-').replace('.', '-')
    return f"Quote_Number_{quote_number or 'unknown'}_BOM_{timestamp}.csv"


def write_csv(rows: Iterable[OutputRow], output_dir: Union[str, Path],
              quote_number: Optional[str], now: Optional[datetime] = None) -> Path:
    """Write the CSV under its generated filename and return the path."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    path = output_dir / generate_filename(quote_number, now)
    with open(path, 'w', encoding='utf-8', newline='') as f:
        f.write(generate_csv(rows))

    logger.info(f"CSV saved to: {path}")
    return path

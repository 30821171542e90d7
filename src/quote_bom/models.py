"""
Data models for the Quote BOM Converter.
"""

import re
from dataclasses import dataclass, fields
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple, Union


CARE_CODE_PATTERN = re.compile(r'VDP-VDURACare-(\d+)-(\w+)')
SERVICE_CODE_PATTERN = re.compile(r'SVC-')
HARDWARE_CODE_PATTERN = re.compile(r'(?:VCH|HW)-')


@dataclass(frozen=True)
class QuoteHeader:
    """Quote metadata. A field is None when its label was not found."""
    quote_number: Optional[str] = None
    quote_date: Optional[str] = None
    quote_expires: Optional[str] = None
    customer_name: Optional[str] = None
    partner_name: Optional[str] = None
    prepared_by: Optional[str] = None
    email: Optional[str] = None

    def missing_fields(self) -> List[str]:
        return [f.name for f in fields(self) if getattr(self, f.name) is None]


@dataclass(frozen=True)
class LineItem:
    """Represents a single priced line on a quotation."""
    part_no: str
    description: str
    qty: int
    months: Optional[int]
    list_price: Decimal
    discount_price: Decimal
    extended_price: Decimal

    @property
    def identity(self) -> Tuple[str, int, Decimal]:
        """Key used to drop repeated occurrences of the same row."""
        return (self.part_no, self.qty, self.extended_price)


class ProductFamily(Enum):
    CARE_SUBSCRIPTION = "care_subscription"
    SERVICE = "service"
    HARDWARE = "hardware"
    OTHER = "other"


@dataclass(frozen=True)
class ProductClassification:
    family: ProductFamily
    tier: Optional[str] = None


def classify_product_code(part_no: str) -> ProductClassification:
    """Tag a part number with its product family (and tier for care codes)."""
    # whole code only: "VDP-VDURACare-10-HP-EXT" is not a care subscription
    care_match = CARE_CODE_PATTERN.fullmatch(part_no)
    if care_match:
        return ProductClassification(ProductFamily.CARE_SUBSCRIPTION, care_match.group(2))
    if SERVICE_CODE_PATTERN.match(part_no):
        return ProductClassification(ProductFamily.SERVICE)
    if HARDWARE_CODE_PATTERN.match(part_no):
        return ProductClassification(ProductFamily.HARDWARE)
    return ProductClassification(ProductFamily.OTHER)


@dataclass(frozen=True)
class OutputRow:
    """One CSV line. Field order matches the CSV column order."""
    quote_date: str
    opportunity_id: str
    customer_name: str
    partner_name: str
    prepared_by: str
    email: str
    quote_number: str
    base_product_code: str
    base_description: str
    product_code: str
    parent_product_code: str
    list_price: str
    discount_percentage: str
    discount_price: str
    option_qty: int
    month: Union[int, str]
    extended_price: str
    option_description: str
    quote_expires: str
    status: str

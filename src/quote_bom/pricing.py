#!/usr/bin/env python3
"""
Pricing transformer.

Turns extracted line items into billable CSV rows. Care subscriptions are
billed as a parent row plus two derived child rows (software, then support);
every other item becomes a single row.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Sequence, Union

from .catalog import DEFAULT_CATALOG, CareTier, ChildProductCatalog, ChildProductDefinition
from .config import ConverterSettings
from .models import LineItem, OutputRow, ProductFamily, QuoteHeader, classify_product_code

logger = logging.getLogger(__name__)

CENTS = Decimal('0.01')


def format_price(value: Union[Decimal, int, float, str, None]) -> str:
    """Format a monetary value with exactly two decimal places."""
    if value is None or value == '':
        return ''
    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    return str(amount.quantize(CENTS, rounding=ROUND_HALF_UP))


def calculate_discount_percentage(list_price: Decimal, discount_price: Decimal) -> Decimal:
    """((List - Discounted) / List) x 100, or 0 when there is no list price."""
    if list_price == 0:
        return Decimal('0')
    return (list_price - discount_price) / list_price * 100


class PricingTransformer:
    """Expands line items into output rows using a child product catalog."""

    def __init__(self, catalog: Optional[ChildProductCatalog] = None,
                 settings: Optional[ConverterSettings] = None):
        self.catalog = catalog if catalog is not None else DEFAULT_CATALOG
        self.settings = settings or ConverterSettings()

    def transform(self, header: QuoteHeader, items: Sequence[LineItem],
                  opportunity_id: str, base_product_code: Optional[str] = None) -> List[OutputRow]:
        """
        Build output rows for every line item, in item order.

        Args:
            header: Quote metadata shared by every row
            items: Extracted line items
            opportunity_id: Caller-supplied opportunity ID
            base_product_code: Base product code; defaults to the configured one

        Returns:
            List of output rows
        """
        if base_product_code is None:
            base_product_code = self.settings.base_product_code

        rows: List[OutputRow] = []
        for item in items:
            rows.append(self._standard_row(header, item, opportunity_id, base_product_code))

            classification = classify_product_code(item.part_no)
            if classification.family is not ProductFamily.CARE_SUBSCRIPTION:
                continue

            tier = self.catalog.get(classification.tier)
            if tier is None:
                logger.warning(f"Unknown care tier '{classification.tier}' for {item.part_no}; "
                               f"billing as a single row")
                continue

            rows.extend(self._child_rows(header, item, tier, opportunity_id, base_product_code))

        logger.info(f"Transformed {len(items)} line items into {len(rows)} rows")
        return rows

    def _child_rows(self, header: QuoteHeader, item: LineItem, tier: CareTier,
                    opportunity_id: str, base_product_code: str) -> List[OutputRow]:
        support_price = tier.support.fixed_price
        software_price = item.discount_price - support_price
        if software_price < 0:
            logger.warning(f"{item.part_no} discount price {item.discount_price} is below the "
                           f"support price {support_price}")

        return [
            self._child_row(header, item, tier.software, software_price, opportunity_id, base_product_code),
            self._child_row(header, item, tier.support, support_price, opportunity_id, base_product_code),
        ]

    def _standard_row(self, header: QuoteHeader, item: LineItem,
                      opportunity_id: str, base_product_code: str) -> OutputRow:
        discount_percentage = calculate_discount_percentage(item.list_price, item.discount_price)
        return self._row(
            header, opportunity_id, base_product_code,
            product_code=item.part_no,
            parent_product_code='',
            list_price=format_price(item.list_price),
            discount_percentage=format_price(discount_percentage),
            discount_price=format_price(item.discount_price),
            option_qty=item.qty,
            month=item.months if item.months is not None else '',
            extended_price=format_price(item.extended_price),
            option_description=item.description,
        )

    def _child_row(self, header: QuoteHeader, parent: LineItem, child: ChildProductDefinition,
                   price: Decimal, opportunity_id: str, base_product_code: str) -> OutputRow:
        # children bill per month; a parent without a month count bills one
        months = parent.months if parent.months is not None else 1
        return self._row(
            header, opportunity_id, base_product_code,
            product_code=child.code,
            parent_product_code=parent.part_no,
            list_price=format_price(price),
            discount_percentage=format_price(0),
            discount_price=format_price(price),
            option_qty=parent.qty,
            month=months,
            extended_price=format_price(price * parent.qty * months),
            option_description=child.description,
        )

    def _row(self, header: QuoteHeader, opportunity_id: str, base_product_code: str, **line) -> OutputRow:
        return OutputRow(
            quote_date=header.quote_date or '',
            opportunity_id=opportunity_id,
            customer_name=header.customer_name or '',
            partner_name=header.partner_name or '',
            prepared_by=header.prepared_by or '',
            email=header.email or '',
            quote_number=header.quote_number or '',
            base_product_code=base_product_code,
            base_description=self.settings.base_description,
            quote_expires=header.quote_expires or '',
            status=self.settings.default_status,
            **line,
        )


def transform(header: QuoteHeader, items: Sequence[LineItem], opportunity_id: str,
              base_product_code: Optional[str] = None,
              catalog: Optional[ChildProductCatalog] = None,
              settings: Optional[ConverterSettings] = None) -> List[OutputRow]:
    """Convenience function wrapping PricingTransformer.transform."""
    return PricingTransformer(catalog, settings).transform(header, items, opportunity_id, base_product_code)

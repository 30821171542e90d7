#!/usr/bin/env python3
"""
Child product catalog for care subscriptions.

Each care tier bills as two child products: a support product with a fixed
monthly price and a software product priced at the parent's discounted price
minus the support price.
"""

import json
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Union

from .exceptions import CatalogError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChildProductDefinition:
    code: str
    description: str
    # None for the software role, whose price is derived from the parent
    fixed_price: Optional[Decimal] = None


@dataclass(frozen=True)
class CareTier:
    software: ChildProductDefinition
    support: ChildProductDefinition


class ChildProductCatalog:
    """Read-only mapping of tier code (e.g. "HP") to its child products."""

    def __init__(self, tiers: Mapping[str, CareTier]):
        for tier, definition in tiers.items():
            if definition.support.fixed_price is None:
                raise CatalogError(f"Support product for tier {tier} has no fixed price")
        self._tiers = MappingProxyType(dict(tiers))

    def get(self, tier: str) -> Optional[CareTier]:
        return self._tiers.get(tier)

    def __contains__(self, tier: object) -> bool:
        return tier in self._tiers

    def __iter__(self) -> Iterator[str]:
        return iter(self._tiers)

    def __len__(self) -> int:
        return len(self._tiers)

    def __repr__(self) -> str:
        return f"ChildProductCatalog(tiers={sorted(self._tiers)})"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChildProductCatalog":
        """
        Build a catalog from plain data, e.g. parsed JSON.

        Args:
            data: {tier: {"software": {...}, "support": {..., "fixed_price": "3.00"}}}

        Returns:
            ChildProductCatalog
        """
        if not isinstance(data, dict):
            raise CatalogError("Catalog must be a JSON object keyed by tier")

        tiers = {}
        for tier, roles in data.items():
            try:
                software = roles["software"]
                support = roles["support"]
                tiers[tier] = CareTier(
                    software=ChildProductDefinition(
                        code=software["code"],
                        description=software.get("description", ""),
                    ),
                    support=ChildProductDefinition(
                        code=support["code"],
                        description=support.get("description", ""),
                        fixed_price=Decimal(str(support["fixed_price"])),
                    ),
                )
            except (KeyError, TypeError, AttributeError) as e:
                raise CatalogError(f"Invalid catalog entry for tier {tier}: missing {e}") from e
            except InvalidOperation as e:
                raise CatalogError(f"Invalid support price for tier {tier}") from e

        return cls(tiers)


DEFAULT_CATALOG = ChildProductCatalog({
    "HP": CareTier(
        software=ChildProductDefinition(
            code="VDP-SW-P-10-HP",
            description="VDURA Data Platform – Physical, 10TB, High Performance Tier, One Month Subscription Term",
        ),
        support=ChildProductDefinition(
            code="HW-Support-HP-NBD",
            description="VDURA Care – Physical 10TB, High Performance Tier, Basic Support",
            fixed_price=Decimal("3.00"),
        ),
    ),
    "C": CareTier(
        software=ChildProductDefinition(
            code="VDP-SW-P-10-C",
            description="VDURA Data Platform – Physicial, 10TB, Capacity Tier, One Month Subscription Term",
        ),
        support=ChildProductDefinition(
            code="HW-Support-C-NBD",
            description="VDURA Care – Physical 10TB, Capacity Tier, Basic Support",
            fixed_price=Decimal("0.30"),
        ),
    ),
})


def load_catalog(path: Union[str, Path]) -> ChildProductCatalog:
    """
    Load a child product catalog from a JSON file.

    Args:
        path: Path to the JSON catalog

    Returns:
        ChildProductCatalog
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except OSError as e:
        raise CatalogError(f"Cannot read catalog file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Catalog file {path} is not valid JSON: {e}") from e

    catalog = ChildProductCatalog.from_dict(data)
    logger.info(f"Loaded {len(catalog)} care tiers from {path}")
    return catalog

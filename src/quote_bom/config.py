"""
Runtime settings for the converter.
"""

from dataclasses import dataclass


DEFAULT_STATUS = "New"
BASE_PRODUCT_CODE = "v5000"
BASE_DESCRIPTION = "v5000"
LINE_ITEM_WINDOW = 500
OPPORTUNITY_ID_LENGTH = 18


@dataclass(frozen=True)
class ConverterSettings:
    default_status: str = DEFAULT_STATUS
    base_product_code: str = BASE_PRODUCT_CODE
    base_description: str = BASE_DESCRIPTION
    # characters scanned after each product code for its row fields
    window_size: int = LINE_ITEM_WINDOW
    opportunity_id_length: int = OPPORTUNITY_ID_LENGTH

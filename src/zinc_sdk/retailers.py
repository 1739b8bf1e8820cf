from __future__ import annotations

from enum import Enum
from typing import Union

from .client_base import InvalidRetailerError


class Retailer(str, Enum):
    """Marketplaces the Zinc API can query and order from."""

    AMAZON = "amazon"
    AMAZON_UK = "amazon_uk"
    AMAZON_CA = "amazon_ca"
    AMAZON_MX = "amazon_mx"
    WALMART = "walmart"
    ALIEXPRESS = "aliexpress"

    def __str__(self) -> str:
        return self.value


def get_retailer(retailer: Union[str, Retailer]) -> Retailer:
    """
    Parse a retailer string.

    Raises InvalidRetailerError for anything outside the supported set;
    no default retailer is ever substituted.
    """
    if isinstance(retailer, Retailer):
        return retailer
    try:
        return Retailer(retailer)
    except ValueError as e:
        valid = sorted(r.value for r in Retailer)
        raise InvalidRetailerError(
            f"Invalid retailer string {retailer!r}. Valid: {valid}"
        ) from e

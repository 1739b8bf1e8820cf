"""
zinc-sdk - Typed client for the Zinc e-commerce automation API

Look up products and place orders on Amazon, Walmart and Aliexpress
through a single authenticated JSON API.

Usage:
------
    from zinc_sdk import ZincClient, ProductOptions

    client = ZincClient("my-client-token")

    details = client.get_product_details("B00EXAMPLE", "amazon")
    offers = client.get_product_offers(
        "B00EXAMPLE", "amazon", ProductOptions(max_age=3600)
    )

    # Both at once (runs in parallel, fails if either fails)
    offers, details = client.get_product_info("B00EXAMPLE", "amazon")

Failed lookups:
---------------
When the API answers with status "failed", a ZincAPIError is raised and the
partially parsed body is kept on `error.response`. For ambiguous product ids,
`error.variant_product_ids` lists the concrete variants to retry with.

Configuration:
--------------
`ZincClient.from_env()` reads:

    ZINC_CLIENT_TOKEN   - API credential (required)
    ZINC_BASE_URL       - Endpoint override (default: https://api.zinc.io/v1)
    ZINC_TIMEOUT_SEC    - Default product request timeout (default: 90)
    ZINC_VERIFY_TLS     - "false" skips certificate verification (default: true)
"""

# -----------------------------------------------------------------------------
# Base client and errors
# -----------------------------------------------------------------------------
from .client_base import (
    BaseAPIClient,
    InvalidRetailerError,
    ZincAPIError,
    ZincConfigError,
    ZincDecodeError,
    ZincError,
    ZincHTTPError,
    ZincOrderError,
    ZincTimeout,
    ZincTransportError,
    sanitize_response_body,
)

# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------
from .config import ZincSettings

# -----------------------------------------------------------------------------
# Retailers
# -----------------------------------------------------------------------------
from .retailers import Retailer, get_retailer

# -----------------------------------------------------------------------------
# Request and response models
# -----------------------------------------------------------------------------
from .schema import (
    Address,
    ErrorData,
    OrderEcho,
    OrderProduct,
    OrderRequest,
    OrderResponse,
    PaymentMethod,
    ProductDetails,
    ProductOffer,
    ProductOffers,
    ProductOptions,
    RetailerCredentials,
    SellerSelectionCriteria,
    ShippingPreferences,
    Webhooks,
)

# -----------------------------------------------------------------------------
# Zinc API client
# -----------------------------------------------------------------------------
from .zinc_api import ZincClient, build_product_params


__all__ = [
    # Base client and errors
    "BaseAPIClient",
    "InvalidRetailerError",
    "ZincAPIError",
    "ZincConfigError",
    "ZincDecodeError",
    "ZincError",
    "ZincHTTPError",
    "ZincOrderError",
    "ZincTimeout",
    "ZincTransportError",
    "sanitize_response_body",
    # Configuration
    "ZincSettings",
    # Retailers
    "Retailer",
    "get_retailer",
    # Models
    "Address",
    "ErrorData",
    "OrderEcho",
    "OrderProduct",
    "OrderRequest",
    "OrderResponse",
    "PaymentMethod",
    "ProductDetails",
    "ProductOffer",
    "ProductOffers",
    "ProductOptions",
    "RetailerCredentials",
    "SellerSelectionCriteria",
    "ShippingPreferences",
    "Webhooks",
    # Client
    "ZincClient",
    "build_product_params",
]

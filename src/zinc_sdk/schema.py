from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .config import DEFAULT_PRODUCT_TIMEOUT
from .retailers import Retailer


FAILED_STATUS = "failed"


class ResponseModel(BaseModel):
    """
    Base for everything decoded from the API.

    Every field has a default, so missing keys (or explicit nulls) decode to
    empty values instead of failing validation. Unknown keys are ignored.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, values: Any) -> Any:
        if isinstance(values, dict):
            return {k: v for k, v in values.items() if v is not None}
        return values


# ------------------------------
# Error payloads
# ------------------------------


class VariantSpecific(ResponseModel):
    dimension: str = ""
    value: str = ""


class Variant(ResponseModel):
    variant_specifics: List[VariantSpecific] = Field(default_factory=list)
    product_id: str = ""


class ValidatorError(ResponseModel):
    message: str = ""
    path: str = ""
    value: str = ""

    @field_validator("value", mode="before")
    @classmethod
    def stringify_value(cls, v):
        # The API echoes back whatever was rejected, not always a string.
        return v if isinstance(v, str) else str(v)


class ErrorData(ResponseModel):
    """The `data` envelope carried by failed responses."""

    message: str = ""
    validator_errors: List[ValidatorError] = Field(default_factory=list)
    all_variants: List[Variant] = Field(default_factory=list)


class StatusResponse(ResponseModel):
    code: str = ""
    data: ErrorData = Field(default_factory=ErrorData)
    status: str = ""
    retailer: str = ""

    @property
    def failed(self) -> bool:
        return self.status == FAILED_STATUS


# ------------------------------
# Product details
# ------------------------------


class ExternalProductId(ResponseModel):
    type: str = ""
    value: str = ""


class ProductDetails(StatusResponse):
    product_description: str = ""
    post_description: str = ""
    epids: List[ExternalProductId] = Field(default_factory=list)
    product_details: List[str] = Field(default_factory=list)
    title: str = ""
    variant_specifics: List[VariantSpecific] = Field(default_factory=list)
    product_id: str = ""
    main_image: str = ""
    brand: str = ""
    mpn: str = ""
    images: List[str] = Field(default_factory=list)
    feature_bullets: List[str] = Field(default_factory=list)


# ------------------------------
# Product offers
# ------------------------------


class ShippingOption(ResponseModel):
    price: int = 0


class HandlingDays(ResponseModel):
    max: int = 0
    min: int = 0


class Seller(ResponseModel):
    num_ratings: int = 0
    percent_positive: int = 0
    first_party: bool = False
    name: str = ""
    id: str = ""


class ProductOffer(ResponseModel):
    available: bool = False
    addon: bool = False
    condition: str = ""
    shipping_options: List[ShippingOption] = Field(default_factory=list)
    handling_days: HandlingDays = Field(default_factory=HandlingDays)
    prime_only: bool = False
    marketplace_fulfilled: bool = False
    currency: str = ""
    seller: Seller = Field(default_factory=Seller)
    buy_box_winner: bool = False
    international: bool = False
    offer_id: str = ""
    # Minor currency units (cents).
    price: int = 0


class ProductOffers(StatusResponse):
    offers: List[ProductOffer] = Field(default_factory=list)


# ------------------------------
# Product query options
# ------------------------------


class ProductOptions(BaseModel):
    """
    Per-call options for product lookups.

    Zero or None for max_age/priority means "not specified" and is left out
    of the query string. timeout is in seconds; None disables the timeout.
    """

    model_config = ConfigDict(frozen=True)

    max_age: Optional[int] = Field(None, ge=0, description="Max cache age in seconds")
    newer_than: Optional[datetime] = Field(
        None, description="Only accept data scraped after this moment"
    )
    timeout: Optional[float] = Field(
        DEFAULT_PRODUCT_TIMEOUT, gt=0, description="Request timeout in seconds"
    )
    priority: Optional[int] = Field(None, description="Queue priority")

    @field_validator("timeout", mode="before")
    @classmethod
    def validate_timeout(cls, v):
        if isinstance(v, timedelta):
            return v.total_seconds()
        return v

    def newer_than_unix(self) -> Optional[int]:
        if self.newer_than is None:
            return None
        moment = self.newer_than
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return int(moment.timestamp())


# ------------------------------
# Orders
# ------------------------------


class SellerSelectionCriteria(BaseModel):
    prime: bool = False


class OrderProduct(BaseModel):
    product_id: str
    quantity: int = Field(1, ge=1)
    seller_selection_criteria: Optional[SellerSelectionCriteria] = None


class ShippingPreferences(BaseModel):
    order_by: Optional[str] = None
    max_days: int = 0
    max_price: int = 0


class Address(BaseModel):
    first_name: str = ""
    last_name: str = ""
    address_line1: str = ""
    address_line2: str = ""
    zip_code: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    phone_number: str = ""


class PaymentMethod(BaseModel):
    name_on_card: Optional[str] = None
    number: Optional[str] = Field(None, repr=False)
    security_code: Optional[str] = Field(None, repr=False)
    expiration_month: Optional[int] = None
    expiration_year: Optional[int] = None
    use_gift: bool = False


class RetailerCredentials(BaseModel):
    email: str
    password: str = Field(..., repr=False)
    verification_code: Optional[str] = None


class Webhooks(BaseModel):
    request_succeeded: Optional[str] = None
    request_failed: Optional[str] = None
    tracking_obtained: Optional[str] = None
    status_updated: Optional[str] = None


class OrderRequest(BaseModel):
    """
    Order placement body.

    Optional parts left as None are omitted from the JSON payload;
    is_gift, max_price, bundled, addax and shipping_address are always sent.
    """

    retailer: Retailer
    products: List[OrderProduct]
    shipping_method: Optional[str] = None
    shipping: Optional[ShippingPreferences] = None
    shipping_address: Address = Field(default_factory=Address)
    billing_address: Optional[Address] = None
    payment_method: Optional[PaymentMethod] = None
    retailer_credentials: Optional[RetailerCredentials] = None
    gift_message: Optional[str] = None
    is_gift: bool = False
    # Minor currency units; the order is aborted above this total.
    max_price: int = 0
    webhooks: Optional[Webhooks] = None
    bundled: bool = False
    addax: bool = False

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)


# ------------------------------
# Order responses
# ------------------------------


class EchoedProduct(ResponseModel):
    product_id: str = ""
    quantity: int = 0
    seller_selection_criteria: Optional[SellerSelectionCriteria] = None


class EchoedAddress(Address, ResponseModel):
    pass


class EchoedShipping(ShippingPreferences, ResponseModel):
    pass


class EchoedPaymentMethod(PaymentMethod, ResponseModel):
    pass


class EchoedCredentials(ResponseModel):
    email: str = ""
    password: str = Field("", repr=False)
    verification_code: str = ""


class EchoedWebhooks(Webhooks, ResponseModel):
    pass


class OrderEcho(ResponseModel):
    """
    The order as the API echoes it back.

    Unlike OrderRequest nothing is required: the echo may be partial, carry
    redacted secrets or name retailers this package does not know yet.
    """

    retailer: str = ""
    products: List[EchoedProduct] = Field(default_factory=list)
    shipping_method: str = ""
    shipping: Optional[EchoedShipping] = None
    shipping_address: Optional[EchoedAddress] = None
    billing_address: Optional[EchoedAddress] = None
    payment_method: Optional[EchoedPaymentMethod] = None
    retailer_credentials: Optional[EchoedCredentials] = None
    gift_message: str = ""
    is_gift: bool = False
    max_price: int = 0
    webhooks: Optional[EchoedWebhooks] = None
    bundled: bool = False
    addax: bool = False


class PriceComponents(ResponseModel):
    shipping: int = 0
    subtotal: int = 0
    tax: int = 0
    total: int = 0


class MerchantOrderId(ResponseModel):
    merchant_order_id: str = ""
    merchant: str = ""
    account: str = ""
    placed_at: Optional[datetime] = None


class Tracking(ResponseModel):
    merchant_order_id: str = ""
    obtained_at: Optional[datetime] = None
    carrier: str = ""
    tracking_number: str = ""
    product_ids: List[str] = Field(default_factory=list)
    tracking_url: str = ""


class OrderResponse(ResponseModel):
    """
    Response to an order submission.

    The status is not checked by the client: callers read `code` and `type`
    to tell a placed order from a rejected one.
    """

    request_id: str = ""
    type: str = Field("", alias="_type")
    code: str = ""
    data: ErrorData = Field(default_factory=ErrorData)
    error_message: str = Field("", alias="message")
    price_components: PriceComponents = Field(default_factory=PriceComponents)
    merchant_order_ids: List[MerchantOrderId] = Field(default_factory=list)
    tracking: List[Tracking] = Field(default_factory=list)
    request: Optional[OrderEcho] = None

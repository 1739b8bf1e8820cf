from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TypeVar, Union
from urllib.parse import quote

from pydantic import ValidationError

from .client_base import (
    BaseAPIClient,
    ZincAPIError,
    ZincConfigError,
    ZincError,
    ZincOrderError,
)
from .config import (
    DEFAULT_BASE_URL,
    DEFAULT_PRODUCT_TIMEOUT,
    ORDER_TIMEOUT,
    ZincSettings,
)
from .retailers import Retailer, get_retailer
from .schema import (
    OrderRequest,
    OrderResponse,
    ProductDetails,
    ProductOffers,
    ProductOptions,
    StatusResponse,
)


logger = logging.getLogger(__name__)

StatusT = TypeVar("StatusT", bound=StatusResponse)

OFFERS_API_VERSION = "2"


def build_product_params(
    retailer: Retailer,
    options: ProductOptions,
    version: Optional[str] = None,
) -> Dict[str, str]:
    """
    Build the query string for a product lookup.

    max_age and priority are only sent when non-zero; zero and None both
    mean "not specified".
    """
    params: Dict[str, str] = {"retailer": retailer.value}
    if version is not None:
        params["version"] = version
    if options.max_age:
        params["max_age"] = str(options.max_age)
    newer_than = options.newer_than_unix()
    if newer_than is not None:
        params["newer_than"] = str(newer_than)
    if options.priority:
        params["priority"] = str(options.priority)
    return params


class ZincClient(BaseAPIClient):
    """
    Client for the Zinc product and order API.

    Holds only the credential and endpoint, both read-only, so one instance
    can be shared between threads.
    """

    def __init__(
        self,
        client_token: str,
        base_url: str = DEFAULT_BASE_URL,
        verify_tls: bool = True,
        default_timeout: Optional[float] = DEFAULT_PRODUCT_TIMEOUT,
    ) -> None:
        if not client_token:
            raise ZincConfigError("A Zinc client token is required.")

        super().__init__(
            base_url=base_url,
            client_token=client_token,
            verify_tls=verify_tls,
        )
        try:
            self._default_options = ProductOptions(timeout=default_timeout)
        except ValidationError as e:
            raise ZincConfigError(
                f"default_timeout must be positive or None, got {default_timeout!r}."
            ) from e
        logger.info("ZincClient initialized for %s", self.base_url)

    @classmethod
    def from_env(cls) -> "ZincClient":
        """Build a client from ZINC_* environment variables."""
        return cls.from_settings(ZincSettings.from_env())

    @classmethod
    def from_settings(cls, settings: ZincSettings) -> "ZincClient":
        return cls(
            client_token=settings.client_token,
            base_url=settings.base_url,
            verify_tls=settings.verify_tls,
            default_timeout=settings.timeout,
        )

    @property
    def default_options(self) -> ProductOptions:
        return self._default_options

    # -------------------------------------------------
    # Products
    # -------------------------------------------------
    def get_product_details(
        self,
        product_id: str,
        retailer: Union[str, Retailer],
        options: Optional[ProductOptions] = None,
    ) -> ProductDetails:
        """
        Fetch title, description, images and identifiers for a product.

        Raises ZincAPIError (with the parsed body on `.response`) when the
        API reports status "failed".
        """
        retailer = get_retailer(retailer)
        if options is None:
            options = self._default_options
        return self._fetch_product(
            f"products/{quote(product_id, safe='')}",
            params=build_product_params(retailer, options),
            timeout=options.timeout,
            response_model=ProductDetails,
        )

    def get_product_offers(
        self,
        product_id: str,
        retailer: Union[str, Retailer],
        options: Optional[ProductOptions] = None,
    ) -> ProductOffers:
        """Fetch every seller's offer for a product. Failed status as above."""
        retailer = get_retailer(retailer)
        if options is None:
            options = self._default_options
        return self._fetch_product(
            f"products/{quote(product_id, safe='')}/offers",
            params=build_product_params(retailer, options, version=OFFERS_API_VERSION),
            timeout=options.timeout,
            response_model=ProductOffers,
        )

    def get_product_info(
        self,
        product_id: str,
        retailer: Union[str, Retailer],
        options: Optional[ProductOptions] = None,
    ) -> Tuple[ProductOffers, ProductDetails]:
        """
        Fetch offers and details in parallel.

        Both requests always run to completion before this returns. If either
        fails, the first error observed is raised and both results are
        discarded; use the single fetches for partial results.
        """
        retailer = get_retailer(retailer)

        first_error: Optional[BaseException] = None
        with ThreadPoolExecutor(
            max_workers=2, thread_name_prefix="zinc-product"
        ) as pool:
            offers_future = pool.submit(
                self.get_product_offers, product_id, retailer, options
            )
            details_future = pool.submit(
                self.get_product_details, product_id, retailer, options
            )
            for future in as_completed((offers_future, details_future)):
                error = future.exception()
                if error is not None and first_error is None:
                    first_error = error

        if first_error is not None:
            raise first_error
        return offers_future.result(), details_future.result()

    def _fetch_product(
        self,
        path: str,
        *,
        params: Dict[str, str],
        timeout: Optional[float],
        response_model: Type[StatusT],
    ) -> StatusT:
        resp = self.execute(
            "GET",
            path,
            params=params,
            timeout=timeout,
            response_model=response_model,
        )
        if resp.failed:
            msg = (
                f"Zinc API returned status 'failed' code={resp.code} "
                f"data={resp.data.model_dump_json()}"
            )
            logger.info("%s: %s", path, msg)
            raise ZincAPIError(msg, code=resp.code, data=resp.data, response=resp)
        return resp

    # -------------------------------------------------
    # Orders
    # -------------------------------------------------
    def send_order(
        self, order: Union[OrderRequest, Mapping[str, Any]]
    ) -> OrderResponse:
        """
        Place an order.

        Every failure (bad order body, transport, undecodable response) is
        raised as ZincOrderError. The response is returned without looking at
        its status: check `code`/`type` for order-level failures.
        """
        try:
            if not isinstance(order, OrderRequest):
                order = OrderRequest.model_validate(order)
            body = order.to_json()
        except ValidationError as e:
            raise ZincOrderError(str(e)) from e

        try:
            return self.execute(
                "POST",
                "orders",
                body=body,
                timeout=ORDER_TIMEOUT,
                response_model=OrderResponse,
            )
        except ZincError as e:
            raise ZincOrderError(str(e), code=e.code, data=e.data) from e

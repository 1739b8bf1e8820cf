from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Type, TypeVar

import requests
from pydantic import BaseModel

if TYPE_CHECKING:
    from .schema import ErrorData


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Upstream occasionally appends a second HTTP response to the body.
DUPLICATE_RESPONSE_MARKER = b"HTTP/1.1 200 OK"


class ZincError(RuntimeError):
    """Base error for Zinc client failures."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        data: Optional["ErrorData"] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.data = data


class ZincTransportError(ZincError):
    """Raised when the request could not be sent or the connection failed."""


class ZincTimeout(ZincTransportError):
    """Raised when request times out."""


class ZincHTTPError(ZincError):
    """Raised for non-success HTTP responses whose body cannot be decoded."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class ZincDecodeError(ZincError):
    """Raised when a response body is not valid JSON for the expected model."""

    def __init__(self, message: str, body: str = "") -> None:
        super().__init__(message)
        self.body = body


class ZincAPIError(ZincError):
    """
    Raised when the API answers with status "failed".

    The body parsed fine, so the partially populated model is kept on
    `response` for callers that want to inspect it (e.g. `data.all_variants`).
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        data: Optional["ErrorData"] = None,
        response: Optional[BaseModel] = None,
    ) -> None:
        super().__init__(message, code=code, data=data)
        self.response = response

    @property
    def variant_product_ids(self) -> List[str]:
        """Product ids the API suggested when the requested one was ambiguous."""
        if self.data is None:
            return []
        return [v.product_id for v in self.data.all_variants if v.product_id]


class ZincOrderError(ZincError):
    """Raised for any failure while submitting an order."""


class InvalidRetailerError(ZincError, ValueError):
    """Raised for retailer strings outside the supported set."""


class ZincConfigError(RuntimeError):
    """Raised when required configuration is missing or invalid."""


def sanitize_response_body(body: bytes) -> bytes:
    """
    Drop everything from the first duplicated status line onward.

    Bodies without the marker are returned unchanged.
    """
    index = body.find(DUPLICATE_RESPONSE_MARKER)
    if index == -1:
        return body
    return body[:index]


class BaseAPIClient:
    """
    Reusable base HTTP client for JSON APIs using HTTP Basic auth.

    Features:
    - Basic auth with the client token as username and an empty password
    - Fresh session per request (nothing mutable is shared between calls)
    - Per-call timeout (None means no explicit timeout)
    - Body sanitizing and typed decoding into pydantic models
    """

    USER_AGENT = "zinc-sdk/0.1"

    def __init__(
        self,
        base_url: str,
        client_token: str,
        verify_tls: bool = True,
        default_headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client_token = client_token
        self._verify_tls = verify_tls

        headers = {
            "User-Agent": self.USER_AGENT,
            "Accept": "application/json",
        }
        if default_headers:
            headers.update(default_headers)
        self._headers = headers

        if not verify_tls:
            logger.warning(
                "TLS certificate verification is disabled for %s", self._base_url
            )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def client_token(self) -> str:
        return self._client_token

    @property
    def verify_tls(self) -> bool:
        return self._verify_tls

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self._base_url!r})"

    def _create_session(self) -> requests.Session:
        """Create a requests session carrying auth and default headers."""
        session = requests.Session()
        session.auth = (self._client_token, "")
        session.verify = self._verify_tls
        session.headers.update(self._headers)
        return session

    # ---------------------------------------------------
    # Core request method
    # ---------------------------------------------------
    def execute(
        self,
        method: str,
        path: str,
        *,
        response_model: Type[ModelT],
        params: Optional[Dict[str, Any]] = None,
        body: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> ModelT:
        """
        Send a request and decode the sanitized body into `response_model`.
        Raises clean, structured errors.
        """
        url = f"{self._base_url}/{path.lstrip('/')}"
        headers = {"Content-Type": "application/json"} if body is not None else None

        logger.debug("%s %s params=%s", method, url, params)

        session = self._create_session()
        try:
            response = session.request(
                method,
                url,
                params=params,
                data=body,
                headers=headers,
                timeout=timeout,
            )
        except requests.Timeout as e:
            raise ZincTimeout(f"Request timed out calling {url}: {e}") from e
        except requests.RequestException as e:
            raise ZincTransportError(f"Request failed calling {url}: {e}") from e
        finally:
            session.close()

        if response.status_code >= 400:
            logger.warning("HTTP %s returned from %s", response.status_code, url)

        cleaned = sanitize_response_body(response.content)

        try:
            payload = json.loads(cleaned)
            return response_model.model_validate(payload)
        except ValueError as e:
            text = cleaned.decode("utf-8", errors="replace")
            logger.error(
                "Unable to decode response request_path=%s body=%s", url, text
            )
            if response.status_code >= 400:
                raise ZincHTTPError(
                    f"HTTP {response.status_code} returned from {url}",
                    status_code=response.status_code,
                ) from e
            raise ZincDecodeError(str(e), body=text) from e

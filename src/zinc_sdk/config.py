"""
Configuration for the Zinc client.

Defines endpoint and timeout constants plus the environment-driven
settings used by `ZincClient.from_env()` and the `zinc` command.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from .client_base import ZincConfigError

DEFAULT_BASE_URL = "https://api.zinc.io/v1"

# seconds
DEFAULT_PRODUCT_TIMEOUT = 90.0
ORDER_TIMEOUT = 30.0

ENV_CLIENT_TOKEN = "ZINC_CLIENT_TOKEN"
ENV_BASE_URL = "ZINC_BASE_URL"
ENV_TIMEOUT_SEC = "ZINC_TIMEOUT_SEC"
ENV_VERIFY_TLS = "ZINC_VERIFY_TLS"

_FALSY = {"0", "false", "no", "off"}
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ZincSettings:
    """Connection settings for a Zinc client."""

    client_token: str = field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    timeout: Optional[float] = DEFAULT_PRODUCT_TIMEOUT
    verify_tls: bool = True

    @classmethod
    def from_env(cls) -> "ZincSettings":
        token = (os.getenv(ENV_CLIENT_TOKEN) or "").strip()
        if not token:
            raise ZincConfigError(f"{ENV_CLIENT_TOKEN} must be set.")

        base_url = (os.getenv(ENV_BASE_URL) or "").strip() or DEFAULT_BASE_URL

        timeout_raw = os.getenv(ENV_TIMEOUT_SEC, str(DEFAULT_PRODUCT_TIMEOUT)).strip()
        try:
            timeout = float(timeout_raw)
        except ValueError as e:
            raise ZincConfigError(
                f"{ENV_TIMEOUT_SEC} must be a number, got '{timeout_raw}'."
            ) from e
        if timeout <= 0:
            raise ZincConfigError(
                f"{ENV_TIMEOUT_SEC} must be positive, got '{timeout_raw}'."
            )

        verify_raw = os.getenv(ENV_VERIFY_TLS, "true").strip().lower()
        if verify_raw in _FALSY:
            verify_tls = False
        elif verify_raw in _TRUTHY:
            verify_tls = True
        else:
            raise ZincConfigError(
                f"{ENV_VERIFY_TLS} must be true or false, got '{verify_raw}'."
            )

        return cls(
            client_token=token,
            base_url=base_url,
            timeout=timeout,
            verify_tls=verify_tls,
        )

"""
Base API Client - Common HTTP request pattern with retry and rate limiting.

Shared by the IEEE Xplore, Semantic Scholar and web-search providers:
- Automatic retry on 429 (rate limit) with Retry-After support
- Rate limiting (configurable interval between requests)
- Uniform error mapping: every failure surfaces as a
  ``ProviderUnavailableError`` subclass so the orchestrator can fall back
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

import httpx
from typing_extensions import Self

from research_organizer.shared.exceptions import (
    AuthenticationError,
    ProviderUnavailableError,
    RateLimitError,
)

logger = logging.getLogger(__name__)

USER_AGENT = "research-organizer-mcp/0.1"


class BaseAPIClient:
    """
    Base class for external API clients.

    Provides common infrastructure:
    - httpx.Client management (an explicit client may be injected)
    - Rate limiting with configurable interval
    - Retry on 429 and transport errors with exponential backoff
    - Consistent error handling

    Subclasses should set ``_service_name`` and can override
    ``_prepare_headers()`` to add service-specific headers.

    Example:
        class MyClient(BaseAPIClient):
            _service_name = "MyAPI"

            def __init__(self):
                super().__init__(base_url="https://api.example.com", min_interval=0.1)

            def get_item(self, item_id: str) -> dict:
                return self._make_request(f"/items/{item_id}")
    """

    _service_name: str = "API"
    _MAX_RETRIES: int = 2

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 30.0,
        min_interval: float = 0.0,
        headers: dict[str, str] | None = None,
        client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize base client.

        Args:
            base_url: Base URL for the API (optional, can pass full URLs)
            timeout: Request timeout in seconds
            min_interval: Minimum seconds between requests (rate limiting)
            headers: Default headers for all requests
            client: Pre-built httpx.Client (tests pass one with a MockTransport)
            sleep: Sleep function used for rate limiting and backoff
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._min_interval = min_interval
        self._last_request_time = 0.0
        self._sleep = sleep
        default_headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
        default_headers.update(headers or {})
        self._client = client or httpx.Client(timeout=self._timeout, headers=default_headers)
        self._owns_client = client is None

    def _rate_limit(self) -> None:
        """Enforce minimum interval between requests."""
        elapsed = time.monotonic() - self._last_request_time
        if self._min_interval and elapsed < self._min_interval:
            self._sleep(self._min_interval - elapsed)
        self._last_request_time = time.monotonic()

    def _build_url(self, url: str) -> str:
        """Build full URL from path or full URL."""
        if url.startswith(("http://", "https://")):
            return url
        return f"{self._base_url}{url}"

    def _prepare_headers(self) -> dict[str, str]:
        """Per-request headers. Override to add credentials."""
        return {}

    def _make_request(self, url: str, *, params: dict[str, Any] | None = None) -> Any:
        """
        GET ``url`` and return the decoded JSON body.

        Raises:
            AuthenticationError: 401 / 403
            RateLimitError: 429 after all retries
            ProviderUnavailableError: any other HTTP, transport or decoding failure
        """
        full_url = self._build_url(url)

        for attempt in range(self._MAX_RETRIES + 1):
            self._rate_limit()
            try:
                response = self._client.get(full_url, params=params, headers=self._prepare_headers())
            except httpx.RequestError as e:
                if attempt < self._MAX_RETRIES:
                    logger.warning(f"{self._service_name} request error (attempt {attempt + 1}): {e}")
                    self._sleep(2 ** (attempt + 1))
                    continue
                raise ProviderUnavailableError(self._service_name, f"request failed: {e}") from e

            if response.status_code in (401, 403):
                raise AuthenticationError(self._service_name, f"credential rejected (HTTP {response.status_code})")

            if response.status_code == 429:
                retry_after = self._get_retry_after(response, attempt)
                if attempt < self._MAX_RETRIES:
                    logger.warning(
                        f"{self._service_name}: Rate limited (429), "
                        f"retry {attempt + 1}/{self._MAX_RETRIES} in {retry_after:.1f}s"
                    )
                    self._sleep(retry_after)
                    continue
                raise RateLimitError(self._service_name, retry_after=retry_after)

            try:
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise ProviderUnavailableError(
                    self._service_name,
                    f"HTTP error {e.response.status_code}: {e.response.reason_phrase}",
                ) from e

            try:
                return response.json()
            except ValueError as e:
                raise ProviderUnavailableError(self._service_name, f"invalid JSON response: {e}") from e

        raise ProviderUnavailableError(self._service_name, "request failed after retries")

    @staticmethod
    def _get_retry_after(response: httpx.Response, attempt: int) -> float:
        """Extract Retry-After from response headers, with exponential backoff fallback."""
        try:
            return float(response.headers.get("Retry-After", 2 ** (attempt + 1)))
        except (ValueError, TypeError):
            return float(2 ** (attempt + 1))

    def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

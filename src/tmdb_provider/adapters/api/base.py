"""
Shared HTTP utilities for API clients.

A thin HTTPX wrapper: a fresh :class:`httpx.Client` is opened per request so a
single client object can be shared across threads without locking. Only
rate-limit responses (HTTP 429) are retried, honouring the upstream quota;
every other failure is surfaced to the caller immediately.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from logging import LoggerAdapter
from typing import Any, Mapping, MutableMapping, Optional

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ...core.logging import get_logger, log_progress
from ..base import AdapterError

DEFAULT_TIMEOUT = 10.0
DEFAULT_RATE_LIMIT_ATTEMPTS = 3


class APIError(AdapterError):
    """Raised when an HTTP API call fails."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, status_message: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.status_message = status_message


class RateLimitedError(APIError):
    """Raised for HTTP 429 responses; retried before being surfaced."""


@dataclass(slots=True)
class BaseAPIClient:
    """
    Base synchronous HTTP client.

    Parameters
    ----------
    base_url:
        Root URL for the upstream service.
    timeout:
        Request timeout in seconds.
    default_headers:
        Headers automatically attached to every request.
    default_params:
        Query parameters automatically attached to every request.
    rate_limit_attempts:
        Total attempts for a request answered with HTTP 429.
    transport:
        Optional HTTPX transport, mainly for tests.
    """

    base_url: str
    timeout: float = DEFAULT_TIMEOUT
    default_headers: MutableMapping[str, str] = field(default_factory=dict)
    default_params: MutableMapping[str, str] = field(default_factory=dict, repr=False)
    rate_limit_attempts: int = DEFAULT_RATE_LIMIT_ATTEMPTS
    transport: Optional[httpx.BaseTransport] = field(default=None, repr=False)
    logger: LoggerAdapter = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.logger = get_logger(
            f"{self.__class__.__module__}.{self.__class__.__name__}",
            extra={"base_url": self.base_url},
        )

    def _build_client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=dict(self.default_headers),
            params=dict(self.default_params),
            transport=self.transport,
            follow_redirects=True,
        )

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return
        status_message = _extract_status_message(response)
        request = response.request
        message = f"HTTP {response.status_code} error for {request.method} {request.url.copy_remove_param('api_key')}"
        if status_message:
            message = f"{message}: {status_message}"
        error_cls = RateLimitedError if response.status_code == 429 else APIError
        raise error_cls(message, status_code=response.status_code, status_message=status_message)

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        log_progress(self.logger, "HTTP request", level=logging.DEBUG, extra={"method": method, "url": url})

        @retry(
            retry=retry_if_exception_type(RateLimitedError),
            wait=wait_exponential(multiplier=1, min=1, max=8),
            stop=stop_after_attempt(max(1, self.rate_limit_attempts)),
            reraise=True,
        )
        def _send() -> httpx.Response:
            with self._build_client() as client:
                response = client.request(method, url, **kwargs)
            self._raise_for_status(response)
            return response

        try:
            response = _send()
        except httpx.HTTPError as exc:
            log_progress(self.logger, "HTTP error during request", level=logging.ERROR, extra={"method": method, "url": url, "error": str(exc)})
            raise APIError(f"HTTP error while calling {method} {url}: {exc}") from exc

        log_progress(self.logger, "HTTP response", level=logging.DEBUG, extra={"status_code": response.status_code, "url": url})
        return response

    def _get_json(self, url: str, *, params: Optional[Mapping[str, Any]] = None) -> Any:
        response = self._request("GET", url, params=params)
        try:
            return response.json()
        except ValueError as exc:
            raise APIError(f"Failed to decode JSON from {url}: {exc}", status_code=response.status_code) from exc


def _extract_status_message(response: httpx.Response) -> Optional[str]:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict):
        message = payload.get("status_message")
        if isinstance(message, str) and message:
            return message
    return None

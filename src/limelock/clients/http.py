# src/limelock/clients/http.py
"""HTTP transport for the Limelock service.

Every Limelock endpoint is a JSON POST, so this transport exposes a single
post_json() method. Network failures (httpx.HTTPError) are NOT caught:
they propagate to the caller unchanged. Non-2xx responses are returned,
not raised - deciding what a status means is the caller's job.
"""

from __future__ import annotations

import json
import math
import time
from json import JSONDecodeError
from typing import Any

import httpx

from limelock.contracts.records import TransportResponse
from limelock.core.logging import get_logger, redact

logger = get_logger(__name__)


def _contains_non_finite(obj: Any) -> bool:
    """Recursively check if object contains NaN or Infinity float values."""
    if isinstance(obj, float):
        return math.isnan(obj) or math.isinf(obj)
    if isinstance(obj, dict):
        return any(_contains_non_finite(v) for v in obj.values())
    if isinstance(obj, list):
        return any(_contains_non_finite(v) for v in obj)
    return False


def _parse_json_strict(text: str) -> tuple[Any, str | None]:
    """Parse JSON with strict rejection of NaN/Infinity.

    Returns:
        Tuple of (parsed_value, error_message)
        - On success: (parsed_value, None)
        - On failure: (None, error_message)
    """
    try:
        parsed = json.loads(text)
    except JSONDecodeError as e:
        return None, str(e)

    if _contains_non_finite(parsed):
        return None, "JSON contains non-finite values (NaN or Infinity)"

    return parsed, None


class HTTPTransport:
    """JSON-over-HTTP transport backed by a shared httpx.Client.

    Example:
        transport = HTTPTransport(base_url="https://api.limelock.io", timeout=10.0)
        response = transport.post_json("/data/get", {"authToken": token, "txId": tx_id})
        if response.ok:
            print(response.body)
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize transport.

        Args:
            base_url: Service base URL; request paths are appended to it
            timeout: Request timeout in seconds (default: 30.0)
            headers: Default headers for all requests
            client: Pre-built httpx.Client (e.g. with a mock transport).
                The transport takes ownership and closes it in close().
        """
        self._base_url = base_url
        self._timeout = timeout
        self._default_headers = headers or {}
        # One pooled client for connection reuse across calls
        self._client = client if client is not None else httpx.Client(timeout=self._timeout)

    @property
    def base_url(self) -> str:
        return self._base_url

    def _resolve_url(self, path: str) -> str:
        """Join base_url with path, handling slash combinations."""
        base = self._base_url.rstrip("/")
        return f"{base}/{path.lstrip('/')}"

    def _parse_response_body(self, response: httpx.Response, full_url: str) -> Any:
        """Decode the body: strict JSON when possible, text otherwise.

        The service does not always label JSON with a JSON content type, so
        any body is tried as JSON first.
        """
        text = response.text
        if not text:
            return None

        parsed, error = _parse_json_strict(text)
        if error is None:
            return parsed

        if "application/json" in response.headers.get("content-type", ""):
            logger.warning(
                "json_parse_failed",
                url=full_url,
                status_code=response.status_code,
                body_preview=text[:200],
                error=error,
            )
        return text

    def post_json(self, path: str, body: dict[str, Any]) -> TransportResponse:
        """POST a JSON body and return the status code and parsed body.

        Args:
            path: Endpoint path (appended to base_url)
            body: JSON-serializable request body

        Returns:
            TransportResponse

        Raises:
            httpx.HTTPError: For network errors and timeouts
        """
        full_url = self._resolve_url(path)
        start = time.perf_counter()
        try:
            response = self._client.post(
                full_url,
                json=body,
                headers=self._default_headers,
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            logger.debug(
                "http_request_failed",
                url=full_url,
                request=redact(body),
                error=str(e),
                error_type=type(e).__name__,
                latency_ms=(time.perf_counter() - start) * 1000,
            )
            raise

        latency_ms = (time.perf_counter() - start) * 1000
        logger.debug(
            "http_request_completed",
            url=full_url,
            request=redact(body),
            status_code=response.status_code,
            body_size=len(response.content),
            latency_ms=latency_ms,
        )
        return TransportResponse(
            status_code=response.status_code,
            body=self._parse_response_body(response, full_url),
        )

    def close(self) -> None:
        """Close the underlying httpx client and release connections."""
        self._client.close()

# src/limelock/contracts/transport.py
"""Transport protocol: send a JSON request, receive a JSON response.

The client depends only on this interface. HTTPTransport
(limelock.clients.http) is the production implementation; tests may
substitute any object with a matching post_json().
"""

from typing import Any, Protocol, runtime_checkable

from limelock.contracts.records import TransportResponse


@runtime_checkable
class Transport(Protocol):
    """Protocol for request/response transports."""

    def post_json(self, path: str, body: dict[str, Any]) -> TransportResponse:
        """POST a JSON body to path and return the response.

        Args:
            path: Endpoint path relative to the service base URL
            body: JSON-serializable request body

        Returns:
            TransportResponse with status code and parsed body

        Raises:
            httpx.HTTPError: If the request could not be completed
        """
        ...

    def close(self) -> None:
        """Release any held connections."""
        ...

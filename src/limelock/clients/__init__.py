"""Clients for the Limelock service.

Example:
    from limelock.clients import LimelockClient

    with LimelockClient(token) as client:
        receipt = client.put(b"hello")
        record = client.get(receipt["txId"])
        print(record.payload())

For tests, pass any object satisfying limelock.contracts.Transport:

    client = LimelockClient(token, transport=fake_transport, file_access=False)
"""

from limelock.clients.http import HTTPTransport
from limelock.clients.storage import LimelockClient

__all__ = [
    "HTTPTransport",
    "LimelockClient",
]

"""
Limelock: client for a content-addressable blob storage service.

Blobs are stored together with their content fingerprint and fetched
back by transaction id. Fetched data is never handed to the caller
unless its integrity is established.
"""

__version__ = "0.2.0"

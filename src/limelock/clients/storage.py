# src/limelock/clients/storage.py
"""Limelock storage client.

Each public operation issues at most one request and blocks until it
completes. Failures propagate as exceptions:

- httpx.HTTPError: the request could not be completed (unchanged)
- RemoteRejectionError: the service answered with a non-2xx status
- IntegrityViolationError: fetched data is present but untrusted
- OSError: local file I/O failed (unchanged)

Nothing is retried.
"""

from __future__ import annotations

from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING, Any

from limelock.contracts.errors import (
    MalformedResponseError,
    MissingCredentialError,
    RemoteRejectionError,
    UnsupportedOperationError,
)
from limelock.contracts.records import FetchedRecord
from limelock.core.config import DEFAULT_BASE_URL
from limelock.core.filesystem import LocalFileSystem
from limelock.core.fingerprint import DEFAULT_CHUNK_SIZE, fingerprint, fingerprint_file
from limelock.core.integrity import require_integrity
from limelock.core.logging import get_logger

if TYPE_CHECKING:
    from limelock.contracts.filesystem import FileSystem
    from limelock.contracts.transport import Transport
    from limelock.core.config import LimelockSettings

logger = get_logger(__name__)


def local_filename(remote_filename: str | None) -> Path:
    """Turn a service-supplied filename into a bare name in the working directory.

    Only the final path component is kept, so a record named "../x" or
    "/etc/x" is written as "x" and never outside the working directory.

    Raises:
        MalformedResponseError: If no usable name remains
    """
    if remote_filename is None:
        raise MalformedResponseError("Fetched record has no filename and no destination was given")
    name = Path(remote_filename.replace("\\", "/")).name
    if name in ("", ".", ".."):
        raise MalformedResponseError(f"Fetched record filename is not a usable file name: {remote_filename!r}")
    return Path(name)


class LimelockClient:
    """Client for the Limelock content-addressable storage service.

    Example:
        with LimelockClient() as client:
            client.login("me@example.com", "hunter2")
            receipt = client.put("hello")
            record = client.get(receipt["txId"], expected_hash=fingerprint("hello"))

    File access:
        upload() and download() need a file system. A client built with
        file_access=False has none and those methods raise
        UnsupportedOperationError before doing any I/O or network work.

    Session token:
        The token is the only mutable state. login() replaces it; when
        several logins race, the last successful one wins.
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: Transport | None = None,
        file_access: bool = True,
        filesystem: FileSystem | None = None,
        verify_local_fingerprint: bool = True,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        """Initialize client.

        Args:
            token: Session token for authenticated operations (optional)
            base_url: Service base URL (ignored when transport is given)
            timeout: Request timeout in seconds (ignored when transport is given)
            transport: Transport to use instead of a new HTTPTransport
            file_access: Whether upload/download may touch files
            filesystem: File-system backend (defaults to LocalFileSystem)
            verify_local_fingerprint: Recompute fetched fingerprints locally
                when an expected hash is known
            chunk_size: Read size for streamed file fingerprints
        """
        if transport is None:
            from limelock.clients.http import HTTPTransport

            transport = HTTPTransport(base_url, timeout=timeout)
        self._transport = transport
        self._filesystem: FileSystem | None = None
        if file_access:
            self._filesystem = filesystem if filesystem is not None else LocalFileSystem()
        self._verify_local = verify_local_fingerprint
        self._chunk_size = chunk_size
        self.token = token

    @classmethod
    def from_settings(
        cls,
        settings: LimelockSettings,
        *,
        transport: Transport | None = None,
        filesystem: FileSystem | None = None,
    ) -> LimelockClient:
        """Build a client from validated settings."""
        return cls(
            settings.auth_token,
            base_url=settings.base_url,
            timeout=settings.timeout_seconds,
            transport=transport,
            file_access=settings.file_access,
            filesystem=filesystem,
            verify_local_fingerprint=settings.verify_local_fingerprint,
            chunk_size=settings.chunk_size,
        )

    @property
    def file_access(self) -> bool:
        return self._filesystem is not None

    # -- plumbing -----------------------------------------------------------

    def _require_token(self, token: str | None) -> str:
        effective = token if token is not None else self.token
        if not effective:
            raise MissingCredentialError("No auth token: log in first or pass token=")
        return effective

    def _require_filesystem(self, operation: str) -> FileSystem:
        if self._filesystem is None:
            raise UnsupportedOperationError(f"{operation} is not supported in this environment (no file access)")
        return self._filesystem

    def _call(self, operation: str, path: str, body: dict[str, Any]) -> Any:
        """Send one request; return the body on 2xx, raise otherwise."""
        response = self._transport.post_json(path, body)
        if not response.ok:
            logger.warning(
                "remote_rejection",
                operation=operation,
                path=path,
                status_code=response.status_code,
            )
            raise RemoteRejectionError(operation, response.status_code, response.body)
        return response.body

    # -- fingerprints -------------------------------------------------------

    def hash(self, data: bytes | str) -> str:
        """Fingerprint an in-memory payload."""
        return fingerprint(data)

    def hash_file(self, path: Path | str) -> str:
        """Stream-fingerprint a file.

        Raises:
            UnsupportedOperationError: If the client has no file access
            OSError: If the file cannot be read
        """
        filesystem = self._require_filesystem("hash_file")
        return fingerprint_file(path, chunk_size=self._chunk_size, filesystem=filesystem)

    # -- accounts -----------------------------------------------------------

    def login(self, email: str, password: str) -> str:
        """Log in and remember the returned session token.

        Returns:
            The new auth token

        Raises:
            RemoteRejectionError: If the credentials were refused
            MalformedResponseError: If the response carries no token
        """
        body = self._call("log in", "/accounts/login", {"email": email, "password": password})
        token = body.get("authToken") if isinstance(body, dict) else None
        if not isinstance(token, str) or not token:
            raise MalformedResponseError("Login response has no 'authToken'")
        self.token = token
        logger.info("login_succeeded", email=email)
        return token

    def register(self, email: str, password: str) -> None:
        """Register a new account.

        Raises:
            RemoteRejectionError: If registration was refused
        """
        self._call("register", "/accounts/register", {"email": email, "password": password})
        logger.info("account_registered", email=email)

    def me(self, *, token: str | None = None) -> Any:
        """Return the account details for the session token, verbatim."""
        auth_token = self._require_token(token)
        return self._call("get details", "/accounts/me", {"authToken": auth_token})

    # -- store / fetch ------------------------------------------------------

    def put(self, data: bytes | str, name: str | None = None, *, token: str | None = None) -> Any:
        """Store a payload together with its fingerprint.

        Text is sent as given (typically already hex-encoded). Bytes are
        hex-encoded for the JSON wire. The fingerprint always covers the
        transmitted data string, and doubles as the name when none is
        given.

        Returns:
            The service's acknowledgment body, verbatim (carries the
            transaction id)

        Raises:
            MissingCredentialError: If no token is available
            RemoteRejectionError: If the service refused the payload
        """
        auth_token = self._require_token(token)
        wire_data = data.hex() if isinstance(data, bytes | bytearray) else data
        content_hash = fingerprint(wire_data)
        effective_name = name if name is not None else content_hash

        result = self._call(
            "put data",
            "/data/put",
            {
                "authToken": auth_token,
                "data": wire_data,
                "name": effective_name,
                "hash": content_hash,
            },
        )
        logger.info("data_put", name=effective_name, hash=content_hash, data_length=len(wire_data))
        return result

    def get(
        self,
        tx_id: str,
        *,
        expected_hash: str | None = None,
        token: str | None = None,
    ) -> FetchedRecord:
        """Fetch a stored record and gate it on integrity.

        Args:
            tx_id: Transaction id returned by put()
            expected_hash: Fingerprint the caller expects, for local
                verification (falls back to the record's own hash field)
            token: Auth token override

        Returns:
            FetchedRecord whose integrity has been established

        Raises:
            MissingCredentialError: If no token is available
            RemoteRejectionError: If the service refused the request
            MalformedResponseError: If the response lacks a data field
            IntegrityViolationError: If the record cannot be trusted
        """
        auth_token = self._require_token(token)
        body = self._call("get data", "/data/get", {"authToken": auth_token, "txId": tx_id})
        record = FetchedRecord.from_response(body)
        require_integrity(record, expected_hash, verify_local=self._verify_local)
        logger.info("data_fetched", tx_id=tx_id, filename=record.filename, data_length=len(record.data))
        return record

    # -- file wrappers ------------------------------------------------------

    def upload(self, path: Path | str, filename: str | None = None, *, token: str | None = None) -> Any:
        """Upload a local file as a hex-encoded payload.

        Args:
            path: File to upload
            filename: Name to store under (defaults to the fingerprint)
            token: Auth token override

        Returns:
            The put() acknowledgment

        Raises:
            UnsupportedOperationError: If the client has no file access
            OSError: If the file cannot be read
        """
        filesystem = self._require_filesystem("upload")
        auth_token = self._require_token(token)
        hex_data = filesystem.read_bytes(Path(path)).hex()
        content_hash = fingerprint(hex_data)
        logger.debug("file_fingerprinted", path=str(path), hash=content_hash)
        result = self.put(hex_data, filename if filename is not None else content_hash, token=auth_token)
        logger.info("file_uploaded", path=str(path), hash=content_hash)
        return result

    def download(
        self,
        tx_id: str,
        filename: Path | str | None = None,
        *,
        expected_hash: str | None = None,
        token: str | None = None,
    ) -> FetchedRecord:
        """Fetch a record and write its decoded payload to disk.

        The integrity gate runs before anything is written. The payload is
        written to filename. Without one, it goes to the final component of
        the record's filename in the working directory; a stored name never
        selects a directory.

        Returns:
            The FetchedRecord

        Raises:
            UnsupportedOperationError: If the client has no file access
            IntegrityViolationError: If the record cannot be trusted
            MalformedResponseError: If the data is not valid hex or no usable
                destination name is known
            OSError: If the file cannot be written
        """
        filesystem = self._require_filesystem("download")
        record = self.get(tx_id, expected_hash=expected_hash, token=token)
        payload = record.payload()
        destination = Path(filename) if filename is not None else local_filename(record.filename)
        filesystem.write_bytes(destination, payload)
        logger.info("file_downloaded", tx_id=tx_id, path=str(destination), size=len(payload))
        return record

    # -- lifecycle ----------------------------------------------------------

    def close(self) -> None:
        """Close the transport and release connections."""
        self._transport.close()

    def __enter__(self) -> LimelockClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

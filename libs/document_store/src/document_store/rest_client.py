"""REST document store client.

This module provides a small aiohttp client for a Firestore-style REST
documents API. It is responsible for:
- Building the document URL from the project (namespace) and document path.
- Performing the HTTP GET with a bounded timeout.
- Mapping HTTP/transport failures onto the document store error types.
- Decoding typed field values into plain Python values.
"""

import asyncio
import json
import logging
from collections.abc import Mapping
from types import TracebackType
from typing import Any
from urllib.parse import quote

import aiohttp

from document_store.base import DocumentStoreClient, ReferenceDocument
from document_store.config import DocumentStoreConfig
from document_store.errors import (
    ConfigurationError,
    DocumentNotFoundError,
    DocumentTransportError,
    MalformedDocumentError,
)

logger = logging.getLogger(__name__)


def decode_value(value: Any) -> Any:
    """Decode a single typed REST value (e.g. ``{"integerValue": "3"}``).

    Raises:
        MalformedDocumentError: If the value is not a recognised typed value.
    """
    if not isinstance(value, Mapping) or len(value) != 1:
        raise MalformedDocumentError(f"Invalid typed value: {value!r}")

    kind, raw = next(iter(value.items()))
    match kind:
        case "nullValue":
            return None
        case "booleanValue":
            return bool(raw)
        case "integerValue":
            try:
                return int(raw)
            except (TypeError, ValueError) as e:
                raise MalformedDocumentError(f"Invalid integerValue: {raw!r}") from e
        case "doubleValue":
            try:
                return float(raw)
            except (TypeError, ValueError) as e:
                raise MalformedDocumentError(f"Invalid doubleValue: {raw!r}") from e
        case "stringValue" | "timestampValue" | "referenceValue" | "bytesValue":
            return raw
        case "geoPointValue":
            return dict(raw)
        case "mapValue":
            return decode_fields((raw or {}).get("fields", {}))
        case "arrayValue":
            return [decode_value(v) for v in (raw or {}).get("values", [])]
        case _:
            raise MalformedDocumentError(f"Unknown value type '{kind}'")


def decode_fields(fields: Any) -> dict[str, Any]:
    """Decode a REST ``fields`` object into a plain dictionary."""
    if not isinstance(fields, Mapping):
        raise MalformedDocumentError(f"Document fields must be an object, got {type(fields).__name__}")
    return {name: decode_value(value) for name, value in fields.items()}


class RestDocumentStoreClient(DocumentStoreClient):
    """HTTP client for REST document reads.

    Args:
        config: Connection settings. Defaults to ``DocumentStoreConfig()``.
        session: Optional aiohttp-style session supporting ``session.get(...)``
            as an async context manager. When omitted, a session is created
            lazily and closed by ``close()``.
    """

    def __init__(
        self,
        config: DocumentStoreConfig | None = None,
        *,
        session: aiohttp.ClientSession | Any | None = None,
    ) -> None:
        self.config = config or DocumentStoreConfig()
        self._session = session
        self._owns_session = session is None
        self._timeout = aiohttp.ClientTimeout(total=self.config.timeout_seconds)

    def document_url(self, path: str, namespace: str | None = None) -> str:
        """Build the REST URL of the document at ``path``.

        Raises:
            ConfigurationError: If no namespace is given and no default project is configured.
        """
        project = namespace or self.config.project
        if not project:
            raise ConfigurationError(
                "No project configured: pass a namespace or set DOCUMENT_STORE_PROJECT"
            )
        return (
            f"{self.config.base_url}/projects/{quote(project, safe='')}"
            f"/databases/{self.config.database}/documents/{quote(path.strip('/'), safe='/')}"
        )

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.config.auth_token:
            headers["Authorization"] = f"Bearer {self.config.auth_token}"
        return headers

    def _get_session(self) -> Any:
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True
        return self._session

    async def read(
        self, path: str, *, namespace: str | None = None
    ) -> ReferenceDocument:
        url = self.document_url(path, namespace)
        session = self._get_session()

        try:
            async with session.get(
                url, headers=self._headers(), timeout=self._timeout
            ) as response:
                if response.status == 404:
                    raise DocumentNotFoundError(path, namespace)
                if response.status != 200:
                    logger.debug(f"Document store HTTP {response.status} for {url}")
                    raise DocumentTransportError(
                        f"HTTP {response.status} reading '{path}'"
                    )
                try:
                    payload = await response.json(content_type=None)
                except (aiohttp.ContentTypeError, json.JSONDecodeError, ValueError) as e:
                    raise MalformedDocumentError(
                        f"Response for '{path}' is not valid JSON"
                    ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DocumentTransportError(
                f"Request for '{path}' failed: {e.__class__.__name__}: {e}"
            ) from e

        if not isinstance(payload, Mapping):
            raise MalformedDocumentError(f"Response for '{path}' is not a document object")

        return ReferenceDocument(path=path, fields=decode_fields(payload.get("fields", {})))

    async def close(self) -> None:
        """Close the underlying session if this client created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> "RestDocumentStoreClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

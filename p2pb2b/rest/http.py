"""HTTP transport for the P2PB2B REST API.

Issues a single GET or POST and returns a `TransportResponse` whose body has
not been read yet. POST bodies are read fully into memory because the
signature covers the exact body bytes.

Redirects are never followed: a 3xx is returned to the caller as-is so a
signed body is never re-sent to another host.

This transport uses `httpx`; `HttpTransport` is blocking and
`AsyncHttpTransport` is its asyncio counterpart.
"""
from typing import AsyncIterator, BinaryIO, Dict, Iterator, Mapping, Optional, Union
import logging

import httpx

from p2pb2b.common.config import HTTP_TIMEOUT
from p2pb2b.common.errors import StatusMismatchError, TransportError
from p2pb2b.rest.signer import HEADER_PAYLOAD, Signer, encode_payload

logger = logging.getLogger("p2pb2b.http")

CONTENT_TYPE_JSON = "application/json"

Body = Union[bytes, bytearray, BinaryIO]


class TransportResponse:
    """Status, headers and an unconsumed body stream for one HTTP exchange.

    The body is meant to be drained once with `read()` (or `aread()`), which
    also releases the connection.
    """

    def __init__(self, response: httpx.Response):
        self._response = response
        self.status_code: int = response.status_code
        self.status_text: str = f"{response.status_code} {response.reason_phrase}".strip()
        self.headers: Mapping[str, str] = response.headers

    def iter_bytes(self) -> Iterator[bytes]:
        return self._response.iter_bytes()

    def aiter_bytes(self) -> AsyncIterator[bytes]:
        return self._response.aiter_bytes()

    def read(self) -> bytes:
        try:
            return self._response.read()
        except httpx.HTTPError as e:
            raise TransportError(f"error reading response body, {e}") from e
        finally:
            self._response.close()

    async def aread(self) -> bytes:
        try:
            return await self._response.aread()
        except httpx.HTTPError as e:
            raise TransportError(f"error reading response body, {e}") from e
        finally:
            await self._response.aclose()

    def __repr__(self) -> str:
        return f"<TransportResponse [{self.status_text}]>"


def check_status(response: TransportResponse, *expected: int) -> None:
    """Raise `StatusMismatchError` unless the status code is one of `expected`."""
    if response.status_code in expected:
        return
    raise StatusMismatchError(expected, response.status_code)


def merge_headers(
    preferred: Optional[Mapping[str, str]],
    defaults: Optional[Mapping[str, str]],
) -> Dict[str, str]:
    """Merge two header maps; `preferred` wins on (case-insensitive) key conflicts."""
    merged: Dict[str, str] = dict(defaults or {})
    for key, value in (preferred or {}).items():
        for existing in [k for k in merged if k.lower() == key.lower()]:
            del merged[existing]
        merged[key] = value
    return merged


def _read_body(body: Body) -> bytes:
    if body is None:
        return b""
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    if not callable(getattr(body, "read", None)):
        raise TypeError(f"request body must be bytes or a binary stream, got {type(body).__name__}")
    try:
        data = body.read()
    except OSError as e:
        raise TransportError(f"error reading request body, {e}") from e
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError(f"request body stream must yield bytes, got {type(data).__name__}")
    return bytes(data)


class _BaseTransport:
    def __init__(self, signer: Optional[Signer] = None):
        self.signer = signer

    def _post_headers(self, body: bytes, additional_headers: Optional[Mapping[str, str]]) -> Dict[str, str]:
        computed = {"Content-Type": CONTENT_TYPE_JSON}
        if self.signer is not None:
            computed.update(self.signer.headers(body))
        else:
            computed[HEADER_PAYLOAD] = encode_payload(body)
        return merge_headers(additional_headers, computed)

    def _get_headers(self, additional_headers: Optional[Mapping[str, str]]) -> Dict[str, str]:
        return merge_headers(additional_headers, {"Content-Type": CONTENT_TYPE_JSON})

    @staticmethod
    def _build_request(
        client: Union[httpx.Client, httpx.AsyncClient],
        method: str,
        url: str,
        headers: Dict[str, str],
        content: Optional[bytes] = None,
    ) -> httpx.Request:
        try:
            return client.build_request(method, url, headers=headers, content=content)
        except (httpx.InvalidURL, ValueError, TypeError) as e:
            raise TransportError(f"error creating {method} request, {e}") from e


class HttpTransport(_BaseTransport):
    """Blocking transport built on `httpx.Client`.

    Args:
        signer: computes authentication headers for POST bodies; when None only
            the payload header is attached
        http_client: optional preconfigured client (timeouts, proxies, mocks);
            it is not closed by this transport
        timeout: request timeout in seconds for the client created here
    """

    def __init__(
        self,
        signer: Optional[Signer] = None,
        http_client: Optional[httpx.Client] = None,
        timeout: Optional[float] = HTTP_TIMEOUT,
    ):
        super().__init__(signer)
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=timeout, follow_redirects=False)

    def send_post(
        self,
        url: str,
        additional_headers: Optional[Mapping[str, str]] = None,
        body: Body = b"",
    ) -> TransportResponse:
        body_bytes = _read_body(body)
        headers = self._post_headers(body_bytes, additional_headers)
        request = self._build_request(self._client, "POST", url, headers, body_bytes)
        return self._send(request)

    def send_get(
        self,
        url: str,
        additional_headers: Optional[Mapping[str, str]] = None,
    ) -> TransportResponse:
        request = self._build_request(self._client, "GET", url, self._get_headers(additional_headers))
        return self._send(request)

    def _send(self, request: httpx.Request) -> TransportResponse:
        logger.debug(f"{request.method} {request.url}")
        try:
            response = self._client.send(request, stream=True, follow_redirects=False)
        except httpx.HTTPError as e:
            logger.debug(f"{request.method} {request.url} failed: {type(e).__name__}: {e}")
            raise TransportError(f"error sending {request.method} request, {e}") from e
        logger.debug(f"{request.method} {request.url} -> {response.status_code}")
        return TransportResponse(response)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class AsyncHttpTransport(_BaseTransport):
    """Asyncio counterpart of `HttpTransport` built on `httpx.AsyncClient`."""

    def __init__(
        self,
        signer: Optional[Signer] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = HTTP_TIMEOUT,
    ):
        super().__init__(signer)
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout, follow_redirects=False)

    async def send_post(
        self,
        url: str,
        additional_headers: Optional[Mapping[str, str]] = None,
        body: Body = b"",
    ) -> TransportResponse:
        body_bytes = _read_body(body)
        headers = self._post_headers(body_bytes, additional_headers)
        request = self._build_request(self._client, "POST", url, headers, body_bytes)
        return await self._send(request)

    async def send_get(
        self,
        url: str,
        additional_headers: Optional[Mapping[str, str]] = None,
    ) -> TransportResponse:
        request = self._build_request(self._client, "GET", url, self._get_headers(additional_headers))
        return await self._send(request)

    async def _send(self, request: httpx.Request) -> TransportResponse:
        logger.debug(f"{request.method} {request.url}")
        try:
            response = await self._client.send(request, stream=True, follow_redirects=False)
        except httpx.HTTPError as e:
            logger.debug(f"{request.method} {request.url} failed: {type(e).__name__}: {e}")
            raise TransportError(f"error sending {request.method} request, {e}") from e
        logger.debug(f"{request.method} {request.url} -> {response.status_code}")
        return TransportResponse(response)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "AsyncHttpTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


__all__ = [
    "TransportResponse",
    "HttpTransport",
    "AsyncHttpTransport",
    "check_status",
    "merge_headers",
]

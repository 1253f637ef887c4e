"""
HTTP transport for the KairosDB client.

Thin wrapper around urllib: one request per call, body always read to
completion, non-2xx responses returned as values rather than raised. Only
transport and read failures raise, already classified as KairosError.
"""

import http.client
import logging
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Dict, Optional

from .errors import KairosError

logger = logging.getLogger("kairosdb.http")


@dataclass(frozen=True)
class HttpResponse:
    status: int
    body: bytes = b""


class NoRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Hand 3xx answers back as HTTPError instead of issuing a second request."""

    def redirect_request(self, req, fp, code, msg, headers, newurl):
        return None


class HttpTransport:
    """Blocking HTTP transport; holds no per-request state and may be shared."""

    def __init__(self, timeout: Optional[float] = None, ssl_context: Optional[ssl.SSLContext] = None):
        """
        Initialize transport.

        Args:
            timeout: Socket timeout in seconds; None keeps urllib's global default
            ssl_context: Optional SSL context used for https:// URLs
        """
        self.timeout = timeout
        self.ssl_context = ssl_context
        handlers = [NoRedirectHandler()]
        if ssl_context is not None:
            handlers.append(urllib.request.HTTPSHandler(context=ssl_context))
        self._opener = urllib.request.build_opener(*handlers)

    def request(
        self,
        method: str,
        url: str,
        body: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> HttpResponse:
        """
        Perform a single HTTP request. Redirects are not followed.

        Args:
            method: HTTP method (GET, POST, DELETE)
            url: Absolute URL
            body: Optional request payload (already JSON-encoded)
            headers: Optional additional headers

        Returns:
            HttpResponse with status code and full body

        Raises:
            KairosError: TRANSPORT if the request could not be completed,
                IO if the response body could not be read
        """
        hdrs = {"Connection": "close"}
        if body is not None:
            hdrs["Content-Type"] = "application/json"
        hdrs.update(headers or {})

        kwargs = {}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout

        logger.debug("%s %s (%d bytes)", method, url, len(body or b""))
        try:
            req = urllib.request.Request(url, data=body, headers=hdrs, method=method)
            resp = self._opener.open(req, **kwargs)
        except urllib.error.HTTPError as e:
            # Non-2xx: still a complete response, drain it and hand it back
            try:
                raw = self._read(e)
            finally:
                e.close()
            logger.debug("%s %s -> %s", method, url, e.code)
            return HttpResponse(status=e.code, body=raw)
        except (urllib.error.URLError, http.client.HTTPException, OSError, ValueError) as e:
            raise KairosError.from_transport(e) from e

        with resp:
            status = resp.status
            raw = self._read(resp)
        logger.debug("%s %s -> %s (%d bytes)", method, url, status, len(raw))
        return HttpResponse(status=status, body=raw)

    @staticmethod
    def _read(stream) -> bytes:
        try:
            return stream.read() or b""
        except (OSError, http.client.HTTPException) as e:
            raise KairosError.from_io(e) from e

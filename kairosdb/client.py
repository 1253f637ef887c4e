"""
KairosDB client.

Each operation maps onto exactly one HTTP round-trip:

    version        GET    /api/v1/version               200
    health         GET    /api/v1/health/status         200
    add            POST   /api/v1/datapoints            204
    query          POST   /api/v1/datapoints/query      200 (results) / 204 (empty)
    delete         POST   /api/v1/datapoints/delete     200 / 204
    metricnames    GET    /api/v1/metricnames           200
    tagnames       GET    /api/v1/tagnames              200
    tagvalues      GET    /api/v1/tagvalues             200
    delete_metric  DELETE /api/v1/metric/<name>         204

Any other status raises KairosError(PROTOCOL). No retries, no caching.
"""

import json
import logging
from http import HTTPStatus
from typing import Any, FrozenSet, List, Optional
from urllib.parse import quote

from .datapoints import SampleSet
from .errors import KairosError
from .http_client import HttpResponse, HttpTransport
from .query import Query
from .result import (
    ResultMap,
    parse_error_messages,
    parse_health,
    parse_name_list,
    parse_query_result,
    parse_version,
)

logger = logging.getLogger("kairosdb.client")

API_PREFIX = "/api/v1"

OK = frozenset({HTTPStatus.OK})
NO_CONTENT = frozenset({HTTPStatus.NO_CONTENT})
OK_OR_NO_CONTENT = OK | NO_CONTENT


class Client:
    """
    Synchronous client for the KairosDB HTTP API.

    Example:
        client = Client("localhost", 8080)
        client.version()  # "KairosDB 1.2.3"
    """

    def __init__(self, host: str, port: int, transport: Optional[HttpTransport] = None):
        """
        Initialize client. No network I/O happens here.

        Args:
            host: KairosDB host name or address
            port: KairosDB HTTP port
            transport: Object with a ``request(method, url, body, headers)`` method;
                defaults to an HttpTransport without explicit timeout
        """
        if not 0 <= port <= 2**32 - 1:
            raise ValueError(f"port out of range: {port}")
        self._base_url = f"http://{host}:{port}"
        self._transport = transport if transport is not None else HttpTransport()
        logger.info("create new client host: %s port: %s", host, port)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def transport(self):
        return self._transport

    # ---------------- Server info ----------------

    def version(self) -> str:
        """Return the server version string, e.g. ``"KairosDB 1.2.3"``."""
        response = self._call("version", "GET", "/version", OK)
        version = parse_version(response.body)
        logger.info("get server version %s", version)
        return version

    def health(self) -> List[str]:
        """Return the server's health status messages."""
        response = self._call("health", "GET", "/health/status", OK)
        return parse_health(response.body)

    # ---------------- Datapoints ----------------

    def add(self, datapoints: SampleSet) -> None:
        """Store a SampleSet; samples are sent in insertion order."""
        logger.info("add datapoints for metric %s (%d samples)", datapoints.name, len(datapoints.datapoints))
        self._call("add datapoints", "POST", "/datapoints", NO_CONTENT, payload=[datapoints.to_wire()])

    def query(self, query: Query) -> ResultMap:
        """Run a query; a 204 answer yields an empty ResultMap."""
        response = self._call("query", "POST", "/datapoints/query", OK_OR_NO_CONTENT, payload=query.to_wire())
        if response.status == HTTPStatus.NO_CONTENT:
            return {}
        return parse_query_result(response.body)

    def delete(self, query: Query) -> None:
        """Delete the datapoints selected by ``query``."""
        self._call("delete", "POST", "/datapoints/delete", OK_OR_NO_CONTENT, payload=query.to_wire())

    # ---------------- Catalog ----------------

    def metricnames(self) -> List[str]:
        """Return all metric names known to the server."""
        return self._names("metricnames")

    list_metrics = metricnames

    def tagnames(self) -> List[str]:
        return self._names("tagnames")

    def tagvalues(self) -> List[str]:
        return self._names("tagvalues")

    def delete_metric(self, name: str) -> None:
        """Delete a metric with all of its datapoints."""
        logger.info("delete metric %s", name)
        self._call("delete metric", "DELETE", f"/metric/{quote(name, safe='')}", NO_CONTENT)

    # ---------------- Internals ----------------

    def _names(self, endpoint: str) -> List[str]:
        response = self._call(endpoint, "GET", f"/{endpoint}", OK)
        return parse_name_list(response.body)

    def _call(
        self,
        operation: str,
        method: str,
        path: str,
        success: FrozenSet[int],
        payload: Any = None,
    ) -> HttpResponse:
        body = None
        if payload is not None:
            body = self._encode(payload)
            logger.debug("%s request body: %s", operation, body)

        response = self._transport.request(method, f"{self._base_url}{API_PREFIX}{path}", body=body)

        if response.status not in success:
            raise KairosError.protocol(
                response.status,
                f"{operation} returned bad response code: {response.status}",
                parse_error_messages(response.body),
            )
        return response

    @staticmethod
    def _encode(payload: Any) -> bytes:
        try:
            return json.dumps(payload, allow_nan=False).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise KairosError.from_encoding(e) from e

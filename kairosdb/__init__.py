"""
kairosdb - client library for the KairosDB HTTP API.
"""

from .client import Client
from .config import ClientConfig
from .datapoints import SampleSet
from .errors import ErrorKind, KairosError
from .query import Aggregator, AggregatorType, Metric, Query, RelativeTime
from .result import ResultMap, ResultSample
from .timeref import UTC, Local, Milliseconds, Relative, TimeUnit

__version__ = "0.1.0"

__all__ = [
    "Aggregator",
    "AggregatorType",
    "Client",
    "ClientConfig",
    "ErrorKind",
    "KairosError",
    "Local",
    "Metric",
    "Milliseconds",
    "Query",
    "Relative",
    "RelativeTime",
    "ResultMap",
    "ResultSample",
    "SampleSet",
    "TimeUnit",
    "UTC",
]

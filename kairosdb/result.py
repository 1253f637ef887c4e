"""
Response parsing for query and catalog endpoints.

Query responses arrive as::

    {"queries": [{"sample_size": 2, "results": [{"name": "cpu", "values": [[ts, value], ...]}]}]}

and are flattened into a ResultMap: metric name -> ordered samples. When a
name appears in several query groups the last one wins.
"""

import json
from dataclasses import dataclass
from typing import Annotated, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, StrictFloat, StrictInt, TypeAdapter, ValidationError

from .errors import KairosError


@dataclass(frozen=True)
class ResultSample:
    """One returned sample. ``value`` is None for gaps filled by the server."""
    time: int  # epoch milliseconds
    value: Optional[float]


ResultMap = Dict[str, List[ResultSample]]


# epoch milliseconds, unsigned 64-bit
SampleTime = Annotated[int, Field(strict=True, ge=0, le=2**64 - 1)]
# JSON numbers only; null marks a gap
SampleValue = Optional[Union[StrictInt, StrictFloat]]


class SeriesResult(BaseModel):
    name: str
    values: List[Tuple[SampleTime, SampleValue]] = []


class QueryGroup(BaseModel):
    sample_size: int = 0
    results: List[SeriesResult] = []


class QueryResponse(BaseModel):
    queries: List[QueryGroup]


class NameList(BaseModel):
    results: List[str]


class Version(BaseModel):
    version: str


_health_adapter = TypeAdapter(List[str])


def _validate(model, body: Union[str, bytes]):
    try:
        if isinstance(model, TypeAdapter):
            return model.validate_json(body)
        return model.model_validate_json(body)
    except (ValidationError, ValueError) as e:
        raise KairosError.from_encoding(e) from e


def parse_version(body: Union[str, bytes]) -> str:
    return _validate(Version, body).version


def parse_health(body: Union[str, bytes]) -> List[str]:
    """Health status is a bare JSON array of strings."""
    return _validate(_health_adapter, body)


def parse_query_result(body: Union[str, bytes]) -> ResultMap:
    """Flatten a query response body into a ResultMap."""
    response = _validate(QueryResponse, body)

    result: ResultMap = {}
    for group in response.queries:
        for series in group.results:
            result[series.name] = [
                ResultSample(time=int(ts), value=None if value is None else float(value))
                for ts, value in series.values
            ]
    return result


def parse_name_list(body: Union[str, bytes]) -> List[str]:
    """Parse ``{"results": [...]}`` from the metricnames/tagnames/tagvalues endpoints."""
    return _validate(NameList, body).results


def parse_error_messages(body: bytes) -> List[str]:
    """Best-effort extraction of ``{"errors": [...]}`` from an error response."""
    if not body:
        return []
    try:
        data = json.loads(body)
    except ValueError:
        return []
    if isinstance(data, dict) and isinstance(data.get("errors"), list):
        return [str(e) for e in data["errors"]]
    return []

"""
Query document: a time range plus an ordered list of metric selectors.

Wire shape::

    {
      "start_absolute": 1,
      "end_relative": {"value": 1, "unit": "WEEKS"},
      "metrics": [
        {"name": "cpu", "tags": {"host": ["a", "b"]},
         "aggregators": [{"name": "avg", "sampling": {"value": 1, "unit": "SECONDS"}}]}
      ]
    }

Exactly one of ``*_absolute`` / ``*_relative`` is present for each side.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .timeref import TimeRef, TimeUnit

# tag name -> allowed values (OR within a tag, AND across tags)
Tags = Dict[str, List[str]]


class AggregatorType(str, Enum):
    AVG = "avg"
    DEV = "dev"
    COUNT = "count"
    FIRST = "first"
    GAPS = "gaps"
    HISTOGRAM = "histogram"


class RelativeTime(BaseModel):
    value: int
    unit: TimeUnit

    def __init__(self, value: int, unit: TimeUnit, **data: Any):
        super().__init__(value=value, unit=unit, **data)


class Aggregator(BaseModel):
    name: AggregatorType
    sampling: RelativeTime

    def __init__(self, name: AggregatorType, sampling: RelativeTime, **data: Any):
        super().__init__(name=name, sampling=sampling, **data)


class Metric(BaseModel):
    """Selects one series: metric name, tag filter and aggregator pipeline."""
    name: str
    tags: Tags = Field(default_factory=dict)
    aggregators: List[Aggregator] = Field(default_factory=list)

    def __init__(
        self,
        name: str,
        tags: Optional[Tags] = None,
        aggregators: Optional[List[Aggregator]] = None,
        **data: Any,
    ):
        super().__init__(name=name, tags=tags or {}, aggregators=aggregators or [], **data)

    def add_aggregator(self, aggregator: Aggregator) -> "Metric":
        """Append to the pipeline; aggregators run in insertion order."""
        self.aggregators.append(aggregator)
        return self

    def add_tag(self, name: str, *values: str) -> "Metric":
        """Allow additional values for a tag."""
        self.tags.setdefault(name, []).extend(values)
        return self


class QueryRequest(BaseModel):
    """Serialized form of a Query; unset range fields are dropped on dump."""
    start_absolute: Optional[int] = None
    start_relative: Optional[RelativeTime] = None
    end_absolute: Optional[int] = None
    end_relative: Optional[RelativeTime] = None
    metrics: List[Metric] = Field(default_factory=list)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class Query:
    """
    Builder for query and delete requests.

    Example:
        query = Query(Milliseconds(1), Relative(1, TimeUnit.WEEKS))
        query.add(Metric("cpu", {"host": ["a"]}))
    """

    def __init__(self, start: TimeRef, end: TimeRef):
        self.start = start
        self.end = end
        self.metrics: List[Metric] = []

    def add(self, metric: Metric) -> "Query":
        self.metrics.append(metric)
        return self

    def to_request(self) -> QueryRequest:
        fields: Dict[str, Any] = {}
        fields.update(self.start.wire_field("start"))
        fields.update(self.end.wire_field("end"))
        return QueryRequest(metrics=list(self.metrics), **fields)

    def to_wire(self) -> Dict[str, Any]:
        return self.to_request().to_wire()

    def __repr__(self) -> str:
        return f"Query(start={self.start!r}, end={self.end!r}, metrics={len(self.metrics)})"

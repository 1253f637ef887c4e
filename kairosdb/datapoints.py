"""
Ingestion document: one metric name, its samples, tags and TTL.

Serialized as::

    {"name": "cpu", "datapoints": [[1475513259000, 11.0]], "tags": {"host": "a"}, "ttl": 0}
"""

from datetime import datetime
from typing import Any, Dict, List, Tuple, Union

from pydantic import BaseModel, Field

from .timeref import instant_to_ms

U32_MAX = 2**32 - 1


class SampleSet(BaseModel):
    name: str
    datapoints: List[Tuple[int, float]] = Field(default_factory=list)
    tags: Dict[str, str] = Field(default_factory=dict)
    ttl: int = Field(0, ge=0, le=U32_MAX)  # seconds, 0 = server default

    def __init__(self, name: str, ttl: int = 0, **data: Any):
        super().__init__(name=name, ttl=ttl, **data)

    def add_ms(self, ms: int, value: float) -> None:
        """Append a sample keyed by epoch milliseconds."""
        self.datapoints.append((int(ms), float(value)))

    def add(self, timestamp: Union[datetime, int], value: float) -> None:
        """Append a sample keyed by a datetime (whole seconds) or epoch milliseconds."""
        if isinstance(timestamp, datetime):
            timestamp = instant_to_ms(timestamp)
        self.add_ms(timestamp, value)

    def add_tag(self, name: str, value: str) -> None:
        """Insert or overwrite a tag."""
        self.tags[name] = value

    set_tag = add_tag

    def to_wire(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "datapoints": [[ts, value] for ts, value in self.datapoints],
            "tags": dict(self.tags),
            "ttl": self.ttl,
        }

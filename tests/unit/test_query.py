"""Unit tests for the query document builder

Tests:
- Exclusive absolute/relative field selection per side
- Datetime conversion (whole seconds)
- Metric selector and aggregator serialization
"""
import itertools
from datetime import datetime, timedelta, timezone

import pytest

from kairosdb import (
    UTC, Aggregator, AggregatorType, Local, Metric, Milliseconds, Query, Relative,
    RelativeTime, TimeUnit,
)


SIDE_VARIANTS = [
    Milliseconds(1147724326000),
    UTC(datetime(2006, 5, 15, 20, 18, 46, tzinfo=timezone.utc)),
    Local(datetime(2006, 5, 15, 20, 18, 46, tzinfo=timezone.utc)),
    Relative(3, TimeUnit.DAYS),
]


class TestTimeRange:
    """Test range serialization"""

    def test_absolute_start_relative_end(self):
        query = Query(Milliseconds(1), Relative(1, TimeUnit.WEEKS))
        body = query.to_wire()

        assert body["start_absolute"] == 1
        assert body["end_relative"] == {"value": 1, "unit": "WEEKS"}
        assert "end_absolute" not in body
        assert "start_relative" not in body

    @pytest.mark.parametrize("start,end", list(itertools.product(SIDE_VARIANTS, SIDE_VARIANTS)))
    def test_exactly_one_field_per_side(self, start, end):
        body = Query(start, end).to_wire()
        for side in ("start", "end"):
            present = [k for k in (f"{side}_absolute", f"{side}_relative") if k in body]
            assert len(present) == 1

    def test_utc_datetime_drops_subseconds(self):
        start = datetime(2006, 5, 15, 20, 18, 46, 500000, tzinfo=timezone.utc)
        body = Query(UTC(start), Milliseconds(0)).to_wire()
        assert body["start_absolute"] == 1147724326000

    def test_naive_utc_datetime_is_taken_as_utc(self):
        body = Query(UTC(datetime(2006, 5, 15, 20, 18, 46)), Milliseconds(0)).to_wire()
        assert body["start_absolute"] == 1147724326000

    def test_local_aware_datetime_keeps_instant(self):
        tz = timezone(timedelta(hours=2))
        instant = datetime(2006, 5, 15, 22, 18, 46, tzinfo=tz)
        body = Query(Milliseconds(0), Local(instant)).to_wire()
        assert body["end_absolute"] == 1147724326000

    def test_local_naive_datetime_matches_timestamp(self):
        instant = datetime(2006, 5, 15, 22, 18, 46)
        body = Query(Milliseconds(0), Local(instant)).to_wire()
        assert body["end_absolute"] == int(instant.timestamp()) * 1000

    def test_no_ordering_validation(self):
        body = Query(Milliseconds(10), Milliseconds(1)).to_wire()
        assert body["start_absolute"] == 10
        assert body["end_absolute"] == 1


class TestMetricSelectors:
    """Test metric, tag filter and aggregator serialization"""

    def test_simple_metric(self):
        query = Query(Milliseconds(1147724326000), Milliseconds(1147724326040))
        query.add(Metric("second", {"test": ["second"]}))

        assert query.to_wire() == {
            "start_absolute": 1147724326000,
            "end_absolute": 1147724326040,
            "metrics": [{"name": "second", "tags": {"test": ["second"]}, "aggregators": []}],
        }

    def test_aggregator_wire_shape(self):
        aggregator = Aggregator(AggregatorType.AVG, RelativeTime(10, TimeUnit.MINUTES))
        query = Query(Milliseconds(1147724326000), Milliseconds(1147724326040))
        query.add(Metric("second", {"test": ["second"]}, [aggregator]))

        metric = query.to_wire()["metrics"][0]
        assert metric["aggregators"] == [{"name": "avg", "sampling": {"value": 10, "unit": "MINUTES"}}]

    def test_aggregator_order_preserved(self):
        kinds = [AggregatorType.HISTOGRAM, AggregatorType.AVG, AggregatorType.GAPS,
                 AggregatorType.DEV, AggregatorType.FIRST, AggregatorType.COUNT]
        metric = Metric("cpu")
        for i, kind in enumerate(kinds):
            metric.add_aggregator(Aggregator(kind, RelativeTime(i + 1, TimeUnit.SECONDS)))

        body = Query(Milliseconds(0), Milliseconds(1)).add(metric).to_wire()
        names = [a["name"] for a in body["metrics"][0]["aggregators"]]
        values = [a["sampling"]["value"] for a in body["metrics"][0]["aggregators"]]
        assert names == ["histogram", "avg", "gaps", "dev", "first", "count"]
        assert values == [1, 2, 3, 4, 5, 6]

    def test_metric_order_preserved(self):
        query = Query(Milliseconds(0), Milliseconds(1))
        for name in ("c", "a", "b"):
            query.add(Metric(name))
        assert [m["name"] for m in query.to_wire()["metrics"]] == ["c", "a", "b"]

    def test_tag_filter_accumulates_values(self):
        metric = Metric("cpu").add_tag("host", "a").add_tag("host", "b")
        assert metric.tags == {"host": ["a", "b"]}

    def test_all_units_upper_case(self):
        for unit in TimeUnit:
            body = Query(Relative(1, unit), Milliseconds(0)).to_wire()
            assert body["start_relative"]["unit"] == unit.name

    def test_aggregator_kind_wire_names(self):
        assert [k.value for k in AggregatorType] == ["avg", "dev", "count", "first", "gaps", "histogram"]

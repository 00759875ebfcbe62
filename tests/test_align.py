from __future__ import annotations

import copy
import math

import pytest

from airsense_core.series.align import (
    aligned_entities,
    align_series,
    combine_observations,
    entity_points,
    resolve_point,
)
from airsense_core.series.points import TimePoint, coerce_number


def test_align_series_empty_inputs_produce_no_rows() -> None:
    assert align_series({}) == []
    assert align_series(None) == []
    assert align_series({"A": []}) == []


def test_align_series_unions_timestamps_and_keeps_entity_fields_separate() -> None:
    rows = align_series(
        {
            "B": [{"ts": "t2", "yhat": 7}],
            "A": [{"ts": "t1", "yhat": 5}],
        }
    )

    assert [row["timestamp"] for row in rows] == ["t1", "t2"]
    assert set(rows[0]) == {"timestamp", "A", "A_lo", "A_hi"}
    assert set(rows[1]) == {"timestamp", "B", "B_lo", "B_hi"}
    assert rows[0]["A"] == 5.0
    assert rows[0]["A_lo"] == 5.0
    assert rows[0]["A_hi"] == 5.0


def test_align_series_shared_timestamp_merges_into_one_row() -> None:
    rows = align_series(
        {
            "Colombo": [
                {"ts": "2024-01-01T01:00", "yhat": 3},
                {"ts": "2024-01-01T00:00", "yhat": 2},
            ],
            "Kandy": [{"ts": "2024-01-01T00:00", "yhat": 9}],
        }
    )

    assert [row["timestamp"] for row in rows] == ["2024-01-01T00:00", "2024-01-01T01:00"]
    assert rows[0]["Colombo"] == 2.0
    assert rows[0]["Kandy"] == 9.0
    assert "Kandy" not in rows[1]


def test_align_series_duplicate_timestamp_last_write_wins() -> None:
    rows = align_series({"A": [{"ts": "t1", "yhat": 1}, {"ts": "t1", "yhat": 2}]})

    assert len(rows) == 1
    assert rows[0]["A"] == 2.0


def test_align_series_clamps_bounds_end_to_end() -> None:
    rows = align_series(
        {
            "Colombo": [
                {"ts": "2024-01-01T00:00", "yhat": 10, "yhat_lower": -2, "yhat_upper": 5},
            ]
        }
    )

    assert rows == [
        {
            "timestamp": "2024-01-01T00:00",
            "Colombo": 10.0,
            "Colombo_lo": 0.0,
            "Colombo_hi": 5.0,
        }
    ]


def test_resolve_point_follows_alias_precedence() -> None:
    point = resolve_point(
        {"ts": "t", "yhat": 4, "y": 99, "yhat_lower": 1, "lower": 50, "yhat_upper": 6, "upper": 0}
    )
    assert point == TimePoint(timestamp="t", value=4.0, lower=1.0, upper=6.0)

    fallback = resolve_point({"timestamp": "t", "y": "3.5", "lower": 2, "upper": None})
    assert fallback == TimePoint(timestamp="t", value=3.5, lower=2.0, upper=3.5)


def test_resolve_point_treats_none_as_absent() -> None:
    point = resolve_point({"ts": "t", "yhat": None, "y": 8, "yhat_lower": None, "lower": 1})
    assert point == TimePoint(timestamp="t", value=8.0, lower=1.0, upper=8.0)


def test_align_series_drops_points_without_timestamp() -> None:
    points = [{"yhat": 1}, {"ts": None, "yhat": 2}, {"ts": "", "yhat": 3}, {"ts": "t", "yhat": 4}]

    rows = align_series({"A": points})

    assert rows == [{"timestamp": "t", "A": 4.0, "A_lo": 4.0, "A_hi": 4.0}]


def test_align_series_non_numeric_value_becomes_nan() -> None:
    rows = align_series({"A": [{"ts": "t", "yhat": "n/a"}]})

    assert math.isnan(rows[0]["A"])
    assert math.isnan(rows[0]["A_lo"])
    assert math.isnan(rows[0]["A_hi"])


def test_align_series_does_not_mutate_input() -> None:
    entities = {"A": [{"ts": "t2", "yhat": 1, "yhat_lower": -1}, {"ts": "t1", "yhat": 2}]}
    snapshot = copy.deepcopy(entities)

    align_series(entities)

    assert entities == snapshot


def test_align_series_is_independent_of_entity_order() -> None:
    forward = {"A": [{"ts": "t1", "yhat": 1}], "B": [{"ts": "t1", "yhat": 2}, {"ts": "t0", "y": 3}]}
    backward = dict(reversed(list(forward.items())))

    assert align_series(forward) == align_series(backward)


def test_align_series_rejects_reserved_entity_name() -> None:
    with pytest.raises(ValueError, match="reserved"):
        align_series({"timestamp": [{"ts": "t", "yhat": 1}]})


def test_combine_observations_merges_single_value_field() -> None:
    rows = combine_observations(
        {
            "Colombo": [{"ts": "2024-01-02", "pm25": 12.5}, {"ts": "2024-01-01", "pm25": 10}],
            "Galle": [{"ts": "2024-01-01", "pm25": "7"}, {"pm25": 3}],
        }
    )

    assert rows == [
        {"timestamp": "2024-01-01", "Colombo": 10.0, "Galle": 7.0},
        {"timestamp": "2024-01-02", "Colombo": 12.5},
    ]


def test_combine_observations_custom_value_field_and_empty_input() -> None:
    assert combine_observations({}) == []
    rows = combine_observations({"A": [{"ts": "t", "pm10": 4}]}, value_field="pm10")
    assert rows == [{"timestamp": "t", "A": 4.0}]


def test_entity_points_and_aligned_entities_read_back_rows() -> None:
    rows = align_series(
        {
            "A": [{"ts": "t1", "yhat": 5, "yhat_lower": 4, "yhat_upper": 6}],
            "B": [{"ts": "t2", "yhat": 7}],
        }
    )

    assert aligned_entities(rows) == ["A", "B"]
    assert entity_points(rows, "A") == [TimePoint(timestamp="t1", value=5.0, lower=4.0, upper=6.0)]
    assert entity_points(rows, "B") == [TimePoint(timestamp="t2", value=7.0, lower=7.0, upper=7.0)]
    assert entity_points(rows, "C") == []


def test_align_series_drops_non_mapping_points() -> None:
    rows = align_series({"A": [None, "t1", 5, {"ts": "t1", "yhat": 2}]})

    assert rows == [{"timestamp": "t1", "A": 2.0, "A_lo": 2.0, "A_hi": 2.0}]
    assert combine_observations({"A": [None, {"ts": "t1", "pm25": 1}]}) == [
        {"timestamp": "t1", "A": 1.0}
    ]


def test_coerce_number_rejects_digit_separators() -> None:
    assert coerce_number("12.5") == 12.5
    assert coerce_number(" 7 ") == 7.0
    assert math.isnan(coerce_number("1_000"))
    assert math.isnan(coerce_number(None))


def test_aligned_entities_keeps_names_ending_in_bound_suffixes() -> None:
    rows = align_series(
        {
            "North_lo": [{"ts": "t1", "yhat": 5}],
            "South_hi": [{"ts": "t2", "yhat": 6, "yhat_lower": 4, "yhat_upper": 8}],
            "West": [{"ts": "t1", "yhat": 1}],
        }
    )

    assert aligned_entities(rows) == ["North_lo", "West", "South_hi"]
    assert entity_points(rows, "South_hi") == [
        TimePoint(timestamp="t2", value=6.0, lower=4.0, upper=8.0)
    ]

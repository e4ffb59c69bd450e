import pytest

from flight_mode.errors import UnsupportedQueryError
from flight_mode.local_store import SessionQuery, SortOrder
from flight_mode.local_store.translator import apply_query

ROWS = [
    {"id": 1, "user_id": "a", "status": "completed", "synced_to_remote": False, "start_time": "2024-01-02T00:00:00Z"},
    {"id": 2, "user_id": "a", "status": "completed", "synced_to_remote": True, "start_time": "2024-01-01T00:00:00Z"},
    {"id": 3, "user_id": "b", "status": "completed", "synced_to_remote": False, "start_time": "2024-01-03T00:00:00Z"},
    {"id": 4, "user_id": "a", "status": "abandoned", "synced_to_remote": False, "start_time": "2024-01-04T00:00:00Z"},
]


def test_filters_are_combined_with_and():
    query = SessionQuery().where("user_id", "a").where("status", "completed")

    assert [row["id"] for row in apply_query(query, ROWS)] == [1, 2]


@pytest.mark.parametrize("flag, expected", [(0, [1, 3, 4]), (1, [2]), (False, [1, 3, 4])])
def test_synced_filter_accepts_integers_and_bools(flag, expected):
    query = SessionQuery().where("synced_to_remote", flag)

    assert [row["id"] for row in apply_query(query, ROWS)] == expected


def test_missing_synced_flag_counts_as_unsynced():
    rows = [{"id": 9, "user_id": "a"}]

    assert apply_query(SessionQuery().where("synced_to_remote", 0), rows) == rows


def test_order_then_limit():
    query = SessionQuery().where("user_id", "a").order("startTime DESC").limit_to(2)

    assert [row["id"] for row in apply_query(query, ROWS)] == [4, 1]


def test_results_are_copies():
    result = apply_query(SessionQuery().where("id", 1), ROWS)
    result[0]["status"] = "abandoned"

    assert ROWS[0]["status"] == "completed"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("startTime DESC", SortOrder.START_TIME_DESC),
        ("start_time asc", SortOrder.START_TIME_ASC),
        ("startTime", SortOrder.START_TIME_ASC),
        (SortOrder.START_TIME_DESC, SortOrder.START_TIME_DESC),
    ],
)
def test_sort_order_parsing(value, expected):
    assert SortOrder.parse(value) is expected


@pytest.mark.parametrize("value", ["duration_minutes DESC", "startTime SIDEWAYS", "a b c", ""])
def test_unsupported_orderings_raise(value):
    with pytest.raises(UnsupportedQueryError):
        SortOrder.parse(value)


@pytest.mark.parametrize("field, value", [("objective", "x"), ("synced_to_remote", "yes")])
def test_unsupported_filters_raise(field, value):
    with pytest.raises(UnsupportedQueryError):
        SessionQuery().where(field, value)


@pytest.mark.parametrize("limit", [-1, "10", True])
def test_unsupported_limits_raise(limit):
    with pytest.raises(UnsupportedQueryError):
        SessionQuery(limit=limit)


def test_unsupported_query_error_is_a_not_implemented_error():
    with pytest.raises(NotImplementedError):
        SortOrder.parse("seat ASC")


def test_id_filter_normalizes_numeric_strings():
    query = SessionQuery().where("id", "2")

    assert query.filters[0].value == 2
    assert [row["id"] for row in apply_query(query, ROWS)] == [2]


@pytest.mark.parametrize("value", ["two", True, 2.0, None])
def test_id_filter_rejects_non_integers(value):
    with pytest.raises(UnsupportedQueryError):
        SessionQuery().where("id", value)

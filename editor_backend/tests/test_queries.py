from __future__ import annotations

import pytest
from bson import ObjectId
from fastapi import HTTPException

from editor_backend.config import DEFAULT_RESPONSE_LIMIT, MAX_RESPONSE_LIMIT
from editor_backend.services.queries import (
    Window,
    combine_queries,
    ensure_object_id,
    keyword_query,
    parse_filter,
    parse_flag,
    parse_page,
    parse_range,
    parse_sort,
    resolve_window,
)


def _status(exc_info) -> int:
    return exc_info.value.status_code


def test_range_window_matches_requested_span():
    assert parse_range(["[5,8]"]) == Window(skip=5, limit=4)
    assert parse_range(["[0, 9]"]) == Window(skip=0, limit=10)


def test_range_is_clamped_to_maximum():
    window = parse_range(["[10,39]"])
    assert window.skip == 10
    assert window.limit == MAX_RESPONSE_LIMIT


def test_inverted_range_falls_back_to_default_limit():
    assert parse_range(["[10,9]"]) == Window(skip=10, limit=DEFAULT_RESPONSE_LIMIT)


def test_range_from_repeated_parameters():
    assert parse_range(["30", "39"]) == Window(skip=30, limit=10)


def test_boolean_range_means_no_range():
    assert parse_range(["true"]) is None
    assert parse_range(None) is None


@pytest.mark.parametrize(
    "values",
    [["incorrect"], ["[1]"], ["[1,2,3]"], ['["a","b"]'], ["[-1,4]"], ["[true,4]"], ["1", "2", "3"]],
)
def test_malformed_range_is_rejected(values):
    with pytest.raises(HTTPException) as exc_info:
        parse_range(values)
    assert _status(exc_info) == 400


def test_page_window():
    assert parse_page(None) == Window(skip=0, limit=DEFAULT_RESPONSE_LIMIT)
    assert parse_page("2") == Window(skip=2 * DEFAULT_RESPONSE_LIMIT, limit=DEFAULT_RESPONSE_LIMIT)
    with pytest.raises(HTTPException):
        parse_page("-1")
    with pytest.raises(HTTPException):
        parse_page("first")


def test_range_takes_precedence_over_page():
    assert resolve_window(["[100,109]"], "1") == Window(skip=100, limit=10)
    assert resolve_window(None, "1") == Window(skip=DEFAULT_RESPONSE_LIMIT, limit=DEFAULT_RESPONSE_LIMIT)


def test_sort_parsing():
    keys = {"word", "approvals"}
    assert parse_sort(None, keys, ("approvals", -1)) == [("approvals", -1), ("_id", 1)]
    assert parse_sort('["word", "asc"]', keys, ("approvals", -1)) == [("word", 1), ("_id", 1)]
    assert parse_sort('["word","DESC"]', keys, ("approvals", -1)) == [("word", -1), ("_id", 1)]


@pytest.mark.parametrize("value", ['["word_class]', '["word"]', '["unknown","asc"]', '["word","up"]', '{"word":"asc"}'])
def test_malformed_sort_is_rejected(value):
    with pytest.raises(HTTPException) as exc_info:
        parse_sort(value, {"word", "word_class"}, ("word", 1))
    assert _status(exc_info) == 400


def test_filter_builds_case_insensitive_regex_for_text_keys():
    query = parse_filter('{"word": "a.b", "word_class": "NNC"}', {"word", "word_class"}, {"word"})
    assert query == {"word": {"$regex": r"a\.b", "$options": "i"}, "word_class": "NNC"}


def test_filter_rejects_unknown_keys_and_non_objects():
    with pytest.raises(HTTPException):
        parse_filter('{"password": "x"}', {"word"}, {"word"})
    with pytest.raises(HTTPException):
        parse_filter("[1,2]", {"word"}, {"word"})
    with pytest.raises(HTTPException):
        parse_filter('{"word": {"$ne": null}}', {"word"}, {"word"})


def test_keyword_and_combined_queries():
    assert keyword_query("  ", ["word"]) == {}
    query = keyword_query("ọsọ", ["word", "definitions"])
    assert [list(part) for part in query["$or"]] == [["word"], ["definitions"]]
    assert combine_queries({}, {"a": 1}) == {"a": 1}
    assert combine_queries({"a": 1}, {"b": 2}) == {"$and": [{"a": 1}, {"b": 2}]}


def test_flags_and_object_ids():
    assert parse_flag("true") is True
    assert parse_flag("False") is False
    assert parse_flag(None) is False
    valid = str(ObjectId())
    assert ensure_object_id(valid) == ObjectId(valid)
    with pytest.raises(HTTPException) as exc_info:
        ensure_object_id("ok123")
    assert _status(exc_info) == 400


def test_range_rejects_digits_int_cannot_parse():
    with pytest.raises(HTTPException) as exc_info:
        parse_range(["²", "5"])
    assert _status(exc_info) == 400


def test_range_and_page_reject_skips_beyond_64_bits():
    with pytest.raises(HTTPException) as exc_info:
        parse_range([str(2**63), str(2**63 + 5)])
    assert _status(exc_info) == 400
    with pytest.raises(HTTPException) as exc_info:
        parse_range([f"[{2**63},{2**63 + 5}]"])
    assert _status(exc_info) == 400
    with pytest.raises(HTTPException) as exc_info:
        parse_page(str(2**62))
    assert _status(exc_info) == 400


def test_sort_always_breaks_ties_on_id():
    keys = {"word", "approvals"}
    assert parse_sort('["approvals","desc"]', keys, ("word", 1))[-1] == ("_id", 1)
    with pytest.raises(HTTPException) as exc_info:
        parse_sort('["_id","desc"]', keys, ("word", 1))
    assert _status(exc_info) == 400

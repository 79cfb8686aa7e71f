"""Parsing of list query parameters (range, page, sort, filter, keyword) into Mongo queries."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

from bson import ObjectId
from fastapi import HTTPException, status

from ..config import DEFAULT_RESPONSE_LIMIT, MAX_RESPONSE_LIMIT

SORT_DIRECTIONS = {"asc": 1, "desc": -1}
TRUE_VALUES = {"true", "1", "yes"}
# skip and limit are sent to the server as signed 64-bit integers
MAX_SKIP = 2**63 - 1

RANGE_ERROR = "Invalid range query provided. Ranges must be in the form of [start,end]"
SORT_ERROR = 'Invalid sort query provided. Sorts must be in the form of ["field","asc|desc"]'


@dataclass(frozen=True)
class Window:
    skip: int
    limit: int


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def ensure_object_id(value: str, detail: str = "Invalid id provided") -> ObjectId:
    if not ObjectId.is_valid(value):
        raise _bad_request(detail)
    return ObjectId(value)


def parse_flag(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in TRUE_VALUES


def _as_index(value: Any) -> int:
    # json.loads turns `true` into a bool, which is also an int
    if isinstance(value, bool):
        raise _bad_request(RANGE_ERROR)
    if isinstance(value, int):
        index = value
    elif isinstance(value, str) and value.strip().isdigit():
        # isdigit() also accepts characters such as superscripts that int() rejects
        try:
            index = int(value.strip())
        except ValueError as exc:
            raise _bad_request(RANGE_ERROR) from exc
    else:
        raise _bad_request(RANGE_ERROR)
    if index < 0 or index > MAX_SKIP:
        raise _bad_request(RANGE_ERROR)
    return index


def parse_range(values: list[str] | None) -> Window | None:
    """Turn ``range`` query values into a skip/limit window.

    Accepts either a single JSON value (``"[10,19]"``) or two repeated
    ``range`` parameters. A bare ``true``/``false`` means no explicit range.
    The window width falls back to the default limit when ``end < start`` and
    never exceeds the configured maximum.
    """
    if not values:
        return None

    if len(values) == 1:
        try:
            parsed = json.loads(values[0])
        except ValueError as exc:
            raise _bad_request(RANGE_ERROR) from exc
        if isinstance(parsed, bool):
            return None
    elif len(values) == 2:
        parsed = list(values)
    else:
        raise _bad_request(RANGE_ERROR)

    if not isinstance(parsed, list) or len(parsed) != 2:
        raise _bad_request(RANGE_ERROR)

    start, end = (_as_index(value) for value in parsed)
    limit = end - start + 1
    if limit <= 0:
        limit = DEFAULT_RESPONSE_LIMIT
    return Window(skip=start, limit=min(limit, MAX_RESPONSE_LIMIT))


def parse_page(value: str | None) -> Window:
    if value is None or value == "":
        return Window(skip=0, limit=DEFAULT_RESPONSE_LIMIT)
    try:
        page = int(value)
    except ValueError as exc:
        raise _bad_request("Invalid page query provided") from exc
    if page < 0 or page * DEFAULT_RESPONSE_LIMIT > MAX_SKIP:
        raise _bad_request("Invalid page query provided")
    return Window(skip=page * DEFAULT_RESPONSE_LIMIT, limit=DEFAULT_RESPONSE_LIMIT)


def resolve_window(range_values: list[str] | None, page: str | None) -> Window:
    window = parse_range(range_values)
    if window is not None:
        return window
    return parse_page(page)


def parse_sort(
    value: str | None,
    allowed_keys: set[str],
    default: tuple[str, int],
) -> list[tuple[str, int]]:
    if value is None or not value.strip():
        return [default, ("_id", 1)]
    try:
        parsed = json.loads(value)
    except ValueError as exc:
        raise _bad_request(SORT_ERROR) from exc
    if (
        not isinstance(parsed, list)
        or len(parsed) != 2
        or not all(isinstance(item, str) for item in parsed)
    ):
        raise _bad_request(SORT_ERROR)

    key, direction = parsed[0].strip(), parsed[1].strip().lower()
    if key not in allowed_keys:
        raise _bad_request(f"Unable to sort by {key}")
    if direction not in SORT_DIRECTIONS:
        raise _bad_request(f"Invalid sort direction {direction}")
    return [(key, SORT_DIRECTIONS[direction]), ("_id", 1)]


def _regex(value: str) -> dict[str, str]:
    return {"$regex": re.escape(value.strip()), "$options": "i"}


def parse_filter(
    value: str | None,
    allowed_keys: set[str],
    regex_keys: set[str],
) -> dict[str, Any]:
    if value is None or not value.strip():
        return {}
    try:
        parsed = json.loads(value)
    except ValueError as exc:
        raise _bad_request("Invalid filter query provided") from exc
    if not isinstance(parsed, dict):
        raise _bad_request("Invalid filter query provided")

    query: dict[str, Any] = {}
    for key, item in parsed.items():
        if key not in allowed_keys:
            raise _bad_request(f"Unable to filter by {key}")
        if isinstance(item, (dict, list)):
            raise _bad_request(f"Invalid filter value for {key}")
        if key in regex_keys:
            query[key] = _regex(str(item))
        else:
            query[key] = item
    return query


def keyword_query(keyword: str | None, fields: list[str]) -> dict[str, Any]:
    if not keyword or not keyword.strip():
        return {}
    return {"$or": [{field: _regex(keyword)} for field in fields]}


def combine_queries(*queries: dict[str, Any]) -> dict[str, Any]:
    parts = [query for query in queries if query]
    if not parts:
        return {}
    if len(parts) == 1:
        return parts[0]
    return {"$and": parts}


async def find_page(collection, query: dict[str, Any], sort, window: Window):
    total = await collection.count_documents(query)
    cursor = collection.find(query, sort=sort, skip=window.skip, limit=window.limit)
    docs = [doc async for doc in cursor]
    return docs, total

from __future__ import annotations

from datetime import datetime
from typing import Any

from bson import ObjectId
from fastapi import HTTPException, status

from ..models.example_suggestion_models import ExampleSuggestionFields

EXAMPLE_CONTENT_FIELDS = (
    "original_example_id",
    "igbo",
    "english",
    "associated_words",
    "pronunciation",
    "editors_notes",
    "user_comments",
)


def example_content(payload: ExampleSuggestionFields) -> dict[str, Any]:
    return {field: getattr(payload, field) for field in EXAMPLE_CONTENT_FIELDS}


def new_example_document(payload: ExampleSuggestionFields, author_id: str, now: datetime) -> dict[str, Any]:
    return {
        "_id": ObjectId(),
        **example_content(payload),
        "approvals": 0,
        "denials": 0,
        "approved_by": [],
        "denied_by": [],
        "author_id": author_id,
        "merged": None,
        "merged_by": None,
        "created_at": now,
        "updated_at": now,
    }


def build_nested_examples(incoming, author_id: str, now: datetime) -> list[dict[str, Any]]:
    return [new_example_document(item, author_id, now) for item in incoming]


def sync_nested_examples(
    existing: list[dict[str, Any]],
    incoming,
    author_id: str,
    now: datetime,
) -> list[dict[str, Any]]:
    """Diff incoming nested examples against the stored ones by id.

    Known ids are updated in place, items without an id are added and stored
    examples missing from ``incoming`` are dropped.
    """
    existing_by_id = {str(example["_id"]): example for example in existing}
    seen: set[str] = set()
    synced: list[dict[str, Any]] = []

    for item in incoming:
        if item.id is None:
            synced.append(new_example_document(item, author_id, now))
            continue
        if item.id in seen:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Duplicate example suggestion {item.id} provided",
            )
        current = existing_by_id.get(item.id)
        if current is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Example suggestion {item.id} does not belong to this word suggestion",
            )
        seen.add(item.id)
        synced.append({**current, **example_content(item), "updated_at": now})

    return synced

"""Merging reviewed suggestions into the dictionary's ``words`` and ``examples`` collections.

A merge first claims the suggestion by setting ``merged`` on it while it is
still unmerged, so only one concurrent merge can go ahead. Every referenced
original document is checked before anything is written; if a check or write
fails the claim is released.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from fastapi import HTTPException, status
from pymongo import ReturnDocument

logger = logging.getLogger(__name__)

WORD_FIELDS = (
    "word",
    "word_class",
    "definitions",
    "variations",
    "stems",
    "dialects",
    "pronunciation",
    "is_standard_igbo",
)
EXAMPLE_FIELDS = ("igbo", "english", "pronunciation")


def ensure_merger_uid(current_user: dict[str, Any] | None) -> str:
    uid = (current_user or {}).get("uid")
    if not uid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User uid is required")
    return uid


def _authors(*uids: str | None) -> list[str]:
    return [uid for uid in dict.fromkeys(uids) if uid]


async def _claim(collection, suggestion_id: ObjectId, target_id: ObjectId, merger_uid: str, label: str):
    claimed = await collection.find_one_and_update(
        {"_id": suggestion_id, "merged": None},
        {
            "$set": {
                "merged": str(target_id),
                "merged_by": merger_uid,
                "updated_at": datetime.now(timezone.utc),
            }
        },
        return_document=ReturnDocument.AFTER,
    )
    if not claimed:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"This {label} has already been merged",
        )
    return claimed


async def _release(collection, suggestion_id: ObjectId, target_id: ObjectId) -> None:
    await collection.update_one(
        {"_id": suggestion_id, "merged": str(target_id)},
        {"$set": {"merged": None, "merged_by": None}},
    )


async def _ensure_original_examples_exist(database, original_ids) -> None:
    wanted = {ObjectId(original_id) for original_id in original_ids if original_id}
    if not wanted:
        return
    cursor = database.examples.find({"_id": {"$in": list(wanted)}}, projection={"_id": 1})
    found = {doc["_id"] async for doc in cursor}
    if wanted - found:
        raise HTTPException(status_code=404, detail="No example exists with the provided original example id")


async def _merge_example(
    database,
    example: dict[str, Any],
    original_id: str | None,
    associated_words: list[str],
    merger_uid: str,
    now: datetime,
    new_id: ObjectId | None = None,
) -> ObjectId:
    fields = {field: example.get(field) for field in EXAMPLE_FIELDS}
    fields["english"] = fields["english"] or ""
    authors = _authors(example.get("author_id"), merger_uid)

    if original_id:
        example_id = ObjectId(original_id)
        await database.examples.update_one(
            {"_id": example_id},
            {
                "$set": {**fields, "updated_at": now},
                "$addToSet": {
                    "associated_words": {"$each": associated_words},
                    "authors": {"$each": authors},
                },
            },
        )
        return example_id

    doc = {
        **fields,
        "associated_words": associated_words,
        "authors": authors,
        "created_at": now,
        "updated_at": now,
    }
    if new_id is not None:
        doc["_id"] = new_id
    result = await database.examples.insert_one(doc)
    return result.inserted_id


async def _write_word(database, suggestion, word_id: ObjectId, is_existing: bool, merger_uid: str) -> None:
    now = datetime.now(timezone.utc)
    examples = suggestion.get("examples", [])
    await _ensure_original_examples_exist(database, [example.get("original_example_id") for example in examples])

    example_ids = []
    for example in examples:
        associated_words = [str(word_id)] + [
            str(associated) for associated in example.get("associated_words", []) if str(associated) != str(word_id)
        ]
        example_ids.append(
            await _merge_example(
                database,
                example,
                example.get("original_example_id"),
                associated_words,
                merger_uid,
                now,
            )
        )

    fields = {field: suggestion.get(field) for field in WORD_FIELDS}
    authors = _authors(suggestion.get("author_id"), merger_uid)
    if is_existing:
        await database.words.update_one(
            {"_id": word_id},
            {
                "$set": {**fields, "updated_at": now},
                "$addToSet": {
                    "authors": {"$each": authors},
                    "examples": {"$each": example_ids},
                },
            },
        )
    else:
        await database.words.insert_one(
            {
                "_id": word_id,
                **fields,
                "examples": example_ids,
                "authors": authors,
                "created_at": now,
                "updated_at": now,
            }
        )


async def merge_word_suggestion(
    database,
    suggestion: dict[str, Any],
    original_id: str | None,
    merger_uid: str,
) -> dict[str, Any]:
    target_id = original_id or suggestion.get("original_word_id")
    word_id = ObjectId(target_id) if target_id else ObjectId()

    claimed = await _claim(database.word_suggestions, suggestion["_id"], word_id, merger_uid, "word suggestion")
    try:
        if target_id and not await database.words.find_one({"_id": word_id}):
            raise HTTPException(status_code=404, detail="No word exists with the provided original word id")
        await _write_word(database, claimed, word_id, bool(target_id), merger_uid)
    except Exception:
        await _release(database.word_suggestions, suggestion["_id"], word_id)
        raise

    logger.info("Merged word suggestion %s into word %s", suggestion["_id"], word_id)
    return await database.words.find_one({"_id": word_id})


async def merge_example_suggestion(
    database,
    suggestion: dict[str, Any],
    original_id: str | None,
    merger_uid: str,
) -> dict[str, Any]:
    target_id = original_id or suggestion.get("original_example_id")
    example_id = ObjectId(target_id) if target_id else ObjectId()

    claimed = await _claim(database.example_suggestions, suggestion["_id"], example_id, merger_uid, "example suggestion")
    try:
        await _ensure_original_examples_exist(database, [target_id])
        await _merge_example(
            database,
            claimed,
            target_id,
            [str(word_id) for word_id in claimed.get("associated_words", [])],
            merger_uid,
            datetime.now(timezone.utc),
            new_id=None if target_id else example_id,
        )
    except Exception:
        await _release(database.example_suggestions, suggestion["_id"], example_id)
        raise

    logger.info("Merged example suggestion %s into example %s", suggestion["_id"], example_id)
    return await database.examples.find_one({"_id": example_id})

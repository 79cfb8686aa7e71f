from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pymongo import ReturnDocument

from ..auth import MERGER_ROLES, REVIEWER_ROLES, get_current_user, require_roles
from ..db import db
from ..models.dictionary_models import ExampleResponse
from ..models.example_suggestion_models import (
    DeleteResponse,
    ExampleMergeRequest,
    ExampleSuggestionCreate,
    ExampleSuggestionResponse,
    ExampleSuggestionUpdate,
)
from ..serializers import serialize_example, serialize_example_suggestion
from ..services.example_sync import example_content, new_example_document
from ..services.merge import ensure_merger_uid, merge_example_suggestion
from ..services.queries import (
    combine_queries,
    ensure_object_id,
    find_page,
    keyword_query,
    parse_filter,
    parse_sort,
    resolve_window,
)
from ..services.reviews import record_review

router = APIRouter(prefix="/example-suggestions", tags=["example-suggestions"])
logger = logging.getLogger(__name__)

SORT_KEYS = {"igbo", "english", "approvals", "denials", "created_at", "updated_at"}
FILTER_KEYS = {"igbo", "english", "author_id", "associated_words", "original_example_id"}
REGEX_FILTER_KEYS = {"igbo", "english"}
KEYWORD_FIELDS = ["igbo", "english"]
NOT_FOUND = "No example suggestion exists with the provided id"


def _ensure_object_id(value: str):
    return ensure_object_id(value, "Invalid example suggestion id provided")


async def _find_nested(example_id):
    parent = await db.word_suggestions.find_one({"examples._id": example_id})
    if not parent:
        return None, None
    for example in parent.get("examples", []):
        if example.get("_id") == example_id:
            return example, parent
    return None, None


@router.post("", response_model=ExampleSuggestionResponse)
async def create_example_suggestion(payload: ExampleSuggestionCreate, current_user=Depends(get_current_user)):
    doc = new_example_document(payload, current_user["uid"], datetime.now(timezone.utc))
    await db.example_suggestions.insert_one(doc)
    logger.info("Created example suggestion %s", doc["_id"])
    return serialize_example_suggestion(doc)


@router.get("", response_model=list[ExampleSuggestionResponse])
async def list_example_suggestions(
    response: Response,
    keyword: str | None = None,
    filter_: str | None = Query(default=None, alias="filter"),
    range_: list[str] | None = Query(default=None, alias="range"),
    page: str | None = None,
    sort: str | None = None,
    current_user=Depends(get_current_user),
):
    window = resolve_window(range_, page)
    sort_spec = parse_sort(sort, SORT_KEYS, ("approvals", -1))
    query = combine_queries(
        {"merged": None},
        keyword_query(keyword, KEYWORD_FIELDS),
        parse_filter(filter_, FILTER_KEYS, REGEX_FILTER_KEYS),
    )

    docs, total = await find_page(db.example_suggestions, query, sort_spec, window)
    response.headers["Content-Range"] = str(total)
    return [serialize_example_suggestion(doc) for doc in docs]


@router.get("/{example_suggestion_id}", response_model=ExampleSuggestionResponse)
async def get_example_suggestion(example_suggestion_id: str, current_user=Depends(get_current_user)):
    doc_id = _ensure_object_id(example_suggestion_id)
    doc = await db.example_suggestions.find_one({"_id": doc_id})
    if doc:
        return serialize_example_suggestion(doc)

    nested, parent = await _find_nested(doc_id)
    if not nested:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return serialize_example_suggestion(nested, word_suggestion_id=parent["_id"])


@router.put("/{example_suggestion_id}", response_model=ExampleSuggestionResponse)
async def update_example_suggestion(
    example_suggestion_id: str,
    payload: ExampleSuggestionUpdate,
    current_user=Depends(get_current_user),
):
    doc_id = _ensure_object_id(example_suggestion_id)
    if payload.id is not None and payload.id != example_suggestion_id:
        raise HTTPException(status_code=400, detail="Example suggestion id does not match the requested id")

    existing = await db.example_suggestions.find_one({"_id": doc_id})
    if not existing:
        nested, _ = await _find_nested(doc_id)
        if nested:
            raise HTTPException(
                status_code=400,
                detail="Nested example suggestions are edited through their word suggestion",
            )
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    if existing.get("merged"):
        raise HTTPException(status_code=400, detail="Unable to edit a merged example suggestion")

    result = await db.example_suggestions.find_one_and_update(
        {"_id": doc_id},
        {"$set": {**example_content(payload), "updated_at": datetime.now(timezone.utc)}},
        return_document=ReturnDocument.AFTER,
    )
    if not result:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return serialize_example_suggestion(result)


@router.delete("/{example_suggestion_id}", response_model=DeleteResponse)
async def delete_example_suggestion(
    example_suggestion_id: str,
    current_user=Depends(require_roles(*REVIEWER_ROLES)),
):
    doc_id = _ensure_object_id(example_suggestion_id)
    result = await db.example_suggestions.delete_one({"_id": doc_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=NOT_FOUND)
    logger.info("Deleted example suggestion %s", doc_id)
    return {"id": example_suggestion_id}


@router.put("/{example_suggestion_id}/approve", response_model=ExampleSuggestionResponse)
async def approve_example_suggestion(
    example_suggestion_id: str,
    current_user=Depends(require_roles(*REVIEWER_ROLES)),
):
    doc_id = _ensure_object_id(example_suggestion_id)
    doc = await record_review(db.example_suggestions, doc_id, current_user["uid"], True, "example suggestion")
    return serialize_example_suggestion(doc)


@router.put("/{example_suggestion_id}/deny", response_model=ExampleSuggestionResponse)
async def deny_example_suggestion(
    example_suggestion_id: str,
    current_user=Depends(require_roles(*REVIEWER_ROLES)),
):
    doc_id = _ensure_object_id(example_suggestion_id)
    doc = await record_review(db.example_suggestions, doc_id, current_user["uid"], False, "example suggestion")
    return serialize_example_suggestion(doc)


@router.post("/{example_suggestion_id}/merge", response_model=ExampleResponse)
async def merge_example_suggestion_into_example(
    example_suggestion_id: str,
    payload: ExampleMergeRequest | None = None,
    current_user=Depends(require_roles(*MERGER_ROLES)),
):
    merger_uid = ensure_merger_uid(current_user)
    doc_id = _ensure_object_id(example_suggestion_id)
    suggestion = await db.example_suggestions.find_one({"_id": doc_id})
    if not suggestion:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    example = await merge_example_suggestion(db, suggestion, payload.id if payload else None, merger_uid)
    return serialize_example(example)

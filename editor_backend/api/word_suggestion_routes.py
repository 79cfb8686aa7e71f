from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pymongo import ReturnDocument

from ..auth import MERGER_ROLES, REVIEWER_ROLES, get_current_user, require_roles
from ..db import db
from ..models.dictionary_models import WordResponse
from ..models.example_suggestion_models import DeleteResponse
from ..models.word_suggestion_models import (
    WordMergeRequest,
    WordSuggestionCreate,
    WordSuggestionListItem,
    WordSuggestionResponse,
    WordSuggestionUpdate,
)
from ..serializers import serialize_word, serialize_word_suggestion
from ..services.example_sync import build_nested_examples, sync_nested_examples
from ..services.merge import ensure_merger_uid, merge_word_suggestion
from ..services.queries import (
    combine_queries,
    ensure_object_id,
    find_page,
    keyword_query,
    parse_filter,
    parse_flag,
    parse_sort,
    resolve_window,
)
from ..services.reviews import record_review

router = APIRouter(prefix="/word-suggestions", tags=["word-suggestions"])
logger = logging.getLogger(__name__)

SORT_KEYS = {"word", "word_class", "definitions", "approvals", "denials", "created_at", "updated_at"}
FILTER_KEYS = {"word", "word_class", "author_id", "original_word_id", "is_standard_igbo"}
REGEX_FILTER_KEYS = {"word"}
KEYWORD_FIELDS = ["word", "variations", "definitions"]
NOT_FOUND = "No word suggestion exists with the provided id"


def _ensure_object_id(value: str):
    return ensure_object_id(value, "Invalid word suggestion id provided")


def _content(payload: WordSuggestionCreate) -> dict:
    return payload.model_dump(exclude={"id", "examples"})


@router.post("", response_model=WordSuggestionResponse)
async def create_word_suggestion(payload: WordSuggestionCreate, current_user=Depends(get_current_user)):
    now = datetime.now(timezone.utc)
    doc = {
        **_content(payload),
        "examples": build_nested_examples(payload.examples, current_user["uid"], now),
        "approvals": 0,
        "denials": 0,
        "approved_by": [],
        "denied_by": [],
        "author_id": current_user["uid"],
        "merged": None,
        "merged_by": None,
        "created_at": now,
        "updated_at": now,
    }
    result = await db.word_suggestions.insert_one(doc)
    doc["_id"] = result.inserted_id
    logger.info("Created word suggestion %s for %r", result.inserted_id, payload.word)
    return serialize_word_suggestion(doc)


# dialects and examples are left out of list items unless requested
@router.get("", response_model=list[WordSuggestionListItem], response_model_exclude_unset=True)
async def list_word_suggestions(
    response: Response,
    keyword: str | None = None,
    filter_: str | None = Query(default=None, alias="filter"),
    dialects: str | None = None,
    examples: str | None = None,
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

    docs, total = await find_page(db.word_suggestions, query, sort_spec, window)
    response.headers["Content-Range"] = str(total)
    include_dialects = parse_flag(dialects)
    include_examples = parse_flag(examples)
    return [
        serialize_word_suggestion(doc, include_dialects=include_dialects, include_examples=include_examples)
        for doc in docs
    ]


@router.get("/{word_suggestion_id}", response_model=WordSuggestionResponse)
async def get_word_suggestion(word_suggestion_id: str, current_user=Depends(get_current_user)):
    doc_id = _ensure_object_id(word_suggestion_id)
    doc = await db.word_suggestions.find_one({"_id": doc_id})
    if not doc:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return serialize_word_suggestion(doc)


@router.put("/{word_suggestion_id}", response_model=WordSuggestionResponse)
async def update_word_suggestion(
    word_suggestion_id: str,
    payload: WordSuggestionUpdate,
    current_user=Depends(get_current_user),
):
    doc_id = _ensure_object_id(word_suggestion_id)
    if payload.id is not None and payload.id != word_suggestion_id:
        raise HTTPException(status_code=400, detail="Word suggestion id does not match the requested id")

    existing = await db.word_suggestions.find_one({"_id": doc_id})
    if not existing:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    if existing.get("merged"):
        raise HTTPException(status_code=400, detail="Unable to edit a merged word suggestion")

    now = datetime.now(timezone.utc)
    update_data = {
        **_content(payload),
        "examples": sync_nested_examples(existing.get("examples", []), payload.examples, current_user["uid"], now),
        "updated_at": now,
    }
    result = await db.word_suggestions.find_one_and_update(
        {"_id": doc_id},
        {"$set": update_data},
        return_document=ReturnDocument.AFTER,
    )
    if not result:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    logger.info("Updated word suggestion %s", doc_id)
    return serialize_word_suggestion(result)


@router.delete("/{word_suggestion_id}", response_model=DeleteResponse)
async def delete_word_suggestion(
    word_suggestion_id: str,
    current_user=Depends(require_roles(*REVIEWER_ROLES)),
):
    doc_id = _ensure_object_id(word_suggestion_id)
    result = await db.word_suggestions.delete_one({"_id": doc_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=NOT_FOUND)
    logger.info("Deleted word suggestion %s", doc_id)
    return {"id": word_suggestion_id}


@router.put("/{word_suggestion_id}/approve", response_model=WordSuggestionResponse)
async def approve_word_suggestion(
    word_suggestion_id: str,
    current_user=Depends(require_roles(*REVIEWER_ROLES)),
):
    doc_id = _ensure_object_id(word_suggestion_id)
    doc = await record_review(db.word_suggestions, doc_id, current_user["uid"], True, "word suggestion")
    return serialize_word_suggestion(doc)


@router.put("/{word_suggestion_id}/deny", response_model=WordSuggestionResponse)
async def deny_word_suggestion(
    word_suggestion_id: str,
    current_user=Depends(require_roles(*REVIEWER_ROLES)),
):
    doc_id = _ensure_object_id(word_suggestion_id)
    doc = await record_review(db.word_suggestions, doc_id, current_user["uid"], False, "word suggestion")
    return serialize_word_suggestion(doc)


@router.post("/{word_suggestion_id}/merge", response_model=WordResponse)
async def merge_word_suggestion_into_word(
    word_suggestion_id: str,
    payload: WordMergeRequest | None = None,
    current_user=Depends(require_roles(*MERGER_ROLES)),
):
    merger_uid = ensure_merger_uid(current_user)
    doc_id = _ensure_object_id(word_suggestion_id)
    suggestion = await db.word_suggestions.find_one({"_id": doc_id})
    if not suggestion:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    word = await merge_word_suggestion(db, suggestion, payload.id if payload else None, merger_uid)
    return serialize_word(word)

from datetime import datetime
from typing import Any


def _iso(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    return dt.isoformat()


def _str_or_none(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def serialize_example_suggestion(
    doc: dict[str, Any],
    word_suggestion_id: Any = None,
) -> dict[str, Any]:
    return {
        "id": str(doc.get("_id")),
        "original_example_id": _str_or_none(doc.get("original_example_id")),
        "igbo": doc.get("igbo", ""),
        "english": doc.get("english", ""),
        "associated_words": [str(word_id) for word_id in doc.get("associated_words", [])],
        "pronunciation": doc.get("pronunciation"),
        "editors_notes": doc.get("editors_notes"),
        "user_comments": doc.get("user_comments"),
        "approvals": doc.get("approvals", 0),
        "denials": doc.get("denials", 0),
        "author_id": doc.get("author_id"),
        "word_suggestion_id": _str_or_none(word_suggestion_id),
        "merged": _str_or_none(doc.get("merged")),
        "merged_by": doc.get("merged_by"),
        "created_at": _iso(doc.get("created_at")),
        "updated_at": _iso(doc.get("updated_at")),
    }


def serialize_word_suggestion(
    doc: dict[str, Any],
    include_dialects: bool = True,
    include_examples: bool = True,
) -> dict[str, Any]:
    payload = {
        "id": str(doc.get("_id")),
        "original_word_id": _str_or_none(doc.get("original_word_id")),
        "word": doc.get("word"),
        "word_class": doc.get("word_class"),
        "definitions": doc.get("definitions", []),
        "variations": doc.get("variations", []),
        "stems": doc.get("stems", []),
        "pronunciation": doc.get("pronunciation"),
        "is_standard_igbo": doc.get("is_standard_igbo", False),
        "editors_notes": doc.get("editors_notes"),
        "user_comments": doc.get("user_comments"),
        "approvals": doc.get("approvals", 0),
        "denials": doc.get("denials", 0),
        "author_id": doc.get("author_id"),
        "merged": _str_or_none(doc.get("merged")),
        "merged_by": doc.get("merged_by"),
        "created_at": _iso(doc.get("created_at")),
        "updated_at": _iso(doc.get("updated_at")),
    }
    if include_dialects:
        payload["dialects"] = doc.get("dialects", [])
    if include_examples:
        payload["examples"] = [
            serialize_example_suggestion(example, word_suggestion_id=doc.get("_id"))
            for example in doc.get("examples", [])
        ]
    return payload


def serialize_word(doc: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": str(doc.get("_id")),
        "word": doc.get("word"),
        "word_class": doc.get("word_class"),
        "definitions": doc.get("definitions", []),
        "variations": doc.get("variations", []),
        "stems": doc.get("stems", []),
        "dialects": doc.get("dialects", []),
        "pronunciation": doc.get("pronunciation"),
        "is_standard_igbo": doc.get("is_standard_igbo", False),
        "examples": [str(example_id) for example_id in doc.get("examples", [])],
        "authors": doc.get("authors", []),
        "created_at": _iso(doc.get("created_at")),
        "updated_at": _iso(doc.get("updated_at")),
    }


def serialize_example(doc: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": str(doc.get("_id")),
        "igbo": doc.get("igbo", ""),
        "english": doc.get("english", ""),
        "associated_words": [str(word_id) for word_id in doc.get("associated_words", [])],
        "pronunciation": doc.get("pronunciation"),
        "authors": doc.get("authors", []),
        "created_at": _iso(doc.get("created_at")),
        "updated_at": _iso(doc.get("updated_at")),
    }

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from .example_suggestion_models import (
    ExampleSuggestionResponse,
    NestedExampleSuggestion,
    validate_object_id,
)

WordClass = Literal[
    "ADJ",
    "ADV",
    "AV",
    "MV",
    "PV",
    "CJN",
    "DEM",
    "ESUF",
    "ISUF",
    "FW",
    "INTJ",
    "NNC",
    "NNP",
    "NUM",
    "PREP",
    "PRN",
    "QTF",
    "CX",
]


class DialectEntry(BaseModel):
    word: str = Field(..., min_length=1)
    variations: list[str] = Field(default_factory=list)
    dialects: list[str] = Field(default_factory=list)
    pronunciation: str | None = None


class WordSuggestionCreate(BaseModel):
    original_word_id: str | None = None
    word: str = Field(..., min_length=1)
    word_class: WordClass
    definitions: list[str] = Field(..., min_length=1)
    variations: list[str] = Field(default_factory=list)
    stems: list[str] = Field(default_factory=list)
    dialects: list[DialectEntry] = Field(default_factory=list)
    pronunciation: str | None = None
    is_standard_igbo: bool = False
    editors_notes: str | None = None
    user_comments: str | None = None
    examples: list[NestedExampleSuggestion] = Field(default_factory=list)

    @field_validator("original_word_id")
    @classmethod
    def validate_original_word_id(cls, value: str | None) -> str | None:
        return validate_object_id(value, "original word")

    @field_validator("definitions")
    @classmethod
    def validate_definitions(cls, value: list[str]) -> list[str]:
        cleaned = [definition.strip() for definition in value]
        if any(not definition for definition in cleaned):
            raise ValueError("Definitions must not be empty")
        return cleaned


class WordSuggestionUpdate(WordSuggestionCreate):
    id: str | None = None

    @field_validator("id")
    @classmethod
    def validate_id(cls, value: str | None) -> str | None:
        return validate_object_id(value, "word suggestion")


class WordSuggestionListItem(BaseModel):
    id: str
    original_word_id: str | None = None
    word: str
    word_class: str
    definitions: list[str]
    variations: list[str] = []
    stems: list[str] = []
    pronunciation: str | None = None
    is_standard_igbo: bool = False
    editors_notes: str | None = None
    user_comments: str | None = None
    approvals: int = 0
    denials: int = 0
    author_id: str | None = None
    merged: str | None = None
    merged_by: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    # only present when the list request asks for them
    dialects: list[DialectEntry] | None = None
    examples: list[ExampleSuggestionResponse] | None = None


class WordSuggestionResponse(WordSuggestionListItem):
    dialects: list[DialectEntry] = []
    examples: list[ExampleSuggestionResponse] = []


class WordMergeRequest(BaseModel):
    id: str | None = None

    @field_validator("id")
    @classmethod
    def validate_id(cls, value: str | None) -> str | None:
        return validate_object_id(value, "original word")

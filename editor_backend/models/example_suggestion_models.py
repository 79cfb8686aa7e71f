from bson import ObjectId
from pydantic import BaseModel, Field, field_validator


def validate_object_id(value: str | None, label: str) -> str | None:
    if value is None:
        return value
    if not ObjectId.is_valid(value):
        raise ValueError(f"Invalid {label} id provided")
    return value


class ExampleSuggestionFields(BaseModel):
    original_example_id: str | None = None
    igbo: str = Field(..., min_length=1)
    english: str = ""
    associated_words: list[str] = Field(default_factory=list)
    pronunciation: str | None = None
    editors_notes: str | None = None
    user_comments: str | None = None

    @field_validator("original_example_id")
    @classmethod
    def validate_original_example_id(cls, value: str | None) -> str | None:
        return validate_object_id(value, "original example")

    @field_validator("associated_words")
    @classmethod
    def validate_associated_words(cls, value: list[str]) -> list[str]:
        for word_id in value:
            validate_object_id(word_id, "associated word")
        return value


class NestedExampleSuggestion(ExampleSuggestionFields):
    id: str | None = None

    @field_validator("id")
    @classmethod
    def validate_id(cls, value: str | None) -> str | None:
        return validate_object_id(value, "example suggestion")


class ExampleSuggestionCreate(ExampleSuggestionFields):
    pass


class ExampleSuggestionUpdate(ExampleSuggestionFields):
    id: str | None = None

    @field_validator("id")
    @classmethod
    def validate_id(cls, value: str | None) -> str | None:
        return validate_object_id(value, "example suggestion")


class ExampleSuggestionResponse(BaseModel):
    id: str
    original_example_id: str | None = None
    igbo: str
    english: str = ""
    associated_words: list[str] = []
    pronunciation: str | None = None
    editors_notes: str | None = None
    user_comments: str | None = None
    approvals: int = 0
    denials: int = 0
    author_id: str | None = None
    word_suggestion_id: str | None = None
    merged: str | None = None
    merged_by: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class ExampleMergeRequest(BaseModel):
    id: str | None = None

    @field_validator("id")
    @classmethod
    def validate_id(cls, value: str | None) -> str | None:
        return validate_object_id(value, "original example")


class DeleteResponse(BaseModel):
    id: str

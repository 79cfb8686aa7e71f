from pydantic import BaseModel

from .word_suggestion_models import DialectEntry


class WordResponse(BaseModel):
    id: str
    word: str
    word_class: str
    definitions: list[str]
    variations: list[str] = []
    stems: list[str] = []
    dialects: list[DialectEntry] = []
    pronunciation: str | None = None
    is_standard_igbo: bool = False
    examples: list[str] = []
    authors: list[str] = []
    created_at: str | None = None
    updated_at: str | None = None


class ExampleResponse(BaseModel):
    id: str
    igbo: str
    english: str = ""
    associated_words: list[str] = []
    pronunciation: str | None = None
    authors: list[str] = []
    created_at: str | None = None
    updated_at: str | None = None

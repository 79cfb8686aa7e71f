from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from editor_backend.api import example_suggestion_routes
from editor_backend.api import word_suggestion_routes
from editor_backend.auth import create_access_token
from editor_backend.main import app

WORD_SUGGESTION_DATA = {
    "word": "ọsọ",
    "word_class": "NNC",
    "definitions": ["running; a race"],
    "variations": ["oso"],
    "dialects": [{"word": "ọsọ", "dialects": ["Onitsha"], "variations": []}],
}
NESTED_EXAMPLE_DATA = {"igbo": "Ọ gbara ọsọ.", "english": "He ran."}
WORD_SUGGESTION_WITH_EXAMPLE_DATA = {**WORD_SUGGESTION_DATA, "examples": [NESTED_EXAMPLE_DATA]}
MALFORMED_WORD_SUGGESTION_DATA = {"word": "", "definitions": "not-a-list"}
INVALID_ID = "ok123"
MISSING_ID = "5f864d7401203866b6546dd3"


def auth_headers(role: str = "user", uid: str = "user-1") -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(uid, role)}"}


def run(coroutine):
    return asyncio.run(coroutine)


@pytest.fixture
def mock_db(monkeypatch: pytest.MonkeyPatch):
    # Swap the module-level motor handle for an in-memory database per test.
    database = AsyncMongoMockClient()["igbo_editor_test"]
    monkeypatch.setattr(word_suggestion_routes, "db", database)
    monkeypatch.setattr(example_suggestion_routes, "db", database)
    return database


@pytest.fixture
def client(mock_db) -> TestClient:
    return TestClient(app)


@pytest.fixture
def user_headers() -> dict[str, str]:
    return auth_headers("user", "user-1")


@pytest.fixture
def editor_headers() -> dict[str, str]:
    return auth_headers("editor", "editor-1")


@pytest.fixture
def merger_headers() -> dict[str, str]:
    return auth_headers("merger", "merger-1")


@pytest.fixture
def suggest_word(client, user_headers):
    def _suggest(data: dict | None = None, headers: dict | None = None):
        return client.post(
            "/word-suggestions",
            json=data if data is not None else WORD_SUGGESTION_DATA,
            headers=headers or user_headers,
        )

    return _suggest


@pytest.fixture
def many_word_suggestions(suggest_word):
    ids = []
    for index in range(40):
        res = suggest_word({**WORD_SUGGESTION_DATA, "word": f"okwu{index:02d}"})
        assert res.status_code == 200
        ids.append(res.json()["id"])
    return ids

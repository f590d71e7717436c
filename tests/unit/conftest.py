"""Shared test fixtures."""

import sqlite3

import pytest

from zenhtml.models.curriculum import Curriculum, CurriculumStep
from zenhtml.models.snippet import Difficulty, Folder, Snippet, SnippetCategory
from zenhtml.storage.sqlite_backend import SqliteStorage
from tests.unit.fakes import FORM_HTML, LANDING_HTML, NOW


@pytest.fixture
def folders() -> list[Folder]:
    return [Folder(id="f1", name="Forms"), Folder(id="f2", name="Pages")]


@pytest.fixture
def snippets() -> list[Snippet]:
    return [
        Snippet(
            id="s1",
            name="Signup",
            code=FORM_HTML,
            folder_id="f1",
            updated_at=NOW - 1000,
            category=SnippetCategory.FORM,
            tags=("form",),
            difficulty=Difficulty.BEGINNER,
        ),
        Snippet(id="s2", name="Landing", code=LANDING_HTML, folder_id="f2", updated_at=NOW),
        Snippet(id="s3", name="Empty", code="", updated_at=NOW - 20 * 86_400_000),
    ]


@pytest.fixture
def curriculum() -> Curriculum:
    return Curriculum(
        id="c1",
        name="Basics",
        description="Start here",
        created_at=NOW - 5000,
        updated_at=NOW - 5000,
        steps=(
            CurriculumStep(id="a", snippet_id="s1", order=0),
            CurriculumStep(id="b", snippet_id="s2", order=1, note="look at the nav"),
            CurriculumStep(id="c", snippet_id="gone", order=2),
        ),
    )


@pytest.fixture
def storage() -> SqliteStorage:
    """Return an empty in-memory storage backend."""
    return SqliteStorage(sqlite3.connect(":memory:"))

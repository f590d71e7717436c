"""Tests for domain models."""

from dataclasses import FrozenInstanceError

import pytest

from zenhtml.models.curriculum import Curriculum
from zenhtml.models.snippet import (
    ClassificationResult,
    Difficulty,
    Folder,
    Snippet,
    SnippetCategory,
    parse_category,
    parse_difficulty,
)
from zenhtml.models.stats import ActivityBucket, LibraryStats


def test_snippet_is_frozen() -> None:
    snippet = Snippet(id="a", name="A", code="", updated_at=0)
    with pytest.raises(FrozenInstanceError):
        snippet.name = "B"  # type: ignore[misc]


def test_snippet_classification_requires_category_and_difficulty() -> None:
    partial = Snippet(id="a", name="A", code="", updated_at=0, category=SnippetCategory.FORM)
    assert partial.classification is None

    full = Snippet(
        id="a",
        name="A",
        code="",
        updated_at=0,
        category=SnippetCategory.FORM,
        tags=("form",),
        difficulty=Difficulty.BEGINNER,
    )
    assert full.classification == ClassificationResult(
        category=SnippetCategory.FORM, tags=("form",), difficulty=Difficulty.BEGINNER
    )


def test_snippet_dict_roundtrip(snippets: list[Snippet]) -> None:
    for snippet in snippets:
        assert Snippet.from_dict(snippet.to_dict()) == snippet


def test_snippet_to_dict_uses_display_values(snippets: list[Snippet]) -> None:
    data = snippets[0].to_dict()
    assert data["category"] == "Form"
    assert data["difficulty"] == "beginner"
    assert data["tags"] == ["form"]


def test_snippet_from_dict_tolerates_unknown_values() -> None:
    snippet = Snippet.from_dict(
        {"id": "a", "name": "A", "category": "Spaceship", "difficulty": "expert"}
    )
    assert snippet.category is None
    assert snippet.difficulty is None
    assert snippet.code == ""
    assert snippet.tags == ()


def test_folder_dict_roundtrip() -> None:
    folder = Folder(id="c", name="Child", parent_id="p", is_local=True)
    assert Folder.from_dict(folder.to_dict()) == folder


def test_curriculum_dict_roundtrip(curriculum: Curriculum) -> None:
    assert Curriculum.from_dict(curriculum.to_dict()) == curriculum


def test_parse_helpers() -> None:
    assert parse_category("API Integration") == SnippetCategory.API_INTEGRATION
    assert parse_category(None) is None
    assert parse_difficulty("advanced") == Difficulty.ADVANCED
    assert parse_difficulty("Advanced") is None


def test_category_values_are_display_names() -> None:
    assert [c.value for c in SnippetCategory] == [
        "Layout",
        "Animation",
        "Form",
        "Game",
        "API Integration",
        "Data Visualization",
        "UI Component",
        "Utility",
        "Landing Page",
        "Uncategorized",
    ]


def test_library_stats_to_dict() -> None:
    stats = LibraryStats(
        total_snippets=0,
        total_folders=0,
        total_curriculums=0,
        category_distribution={},
        difficulty_distribution={},
        avg_code_length=0,
        total_code_lines=0,
        recent_activity=(ActivityBucket(date="2025-10-09", count=2),),
    )
    assert stats.to_dict()["recent_activity"] == [{"date": "2025-10-09", "count": 2}]

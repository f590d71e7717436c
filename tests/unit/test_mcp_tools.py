"""Tests for MCP tool core functions."""

from zenhtml.mcp.server import (
    curriculum_overview,
    library_stats,
    snippet_analyze,
    snippet_classify,
)
from zenhtml.models.curriculum import Curriculum
from zenhtml.models.snippet import Folder, Snippet
from tests.unit.fakes import FORM_HTML, NOW, FakeStorage


def _populated(
    snippets: list[Snippet], folders: list[Folder], curriculum: Curriculum
) -> FakeStorage:
    storage = FakeStorage()
    storage.save_snippets(snippets)
    storage.save_folders(folders)
    storage.save_curriculums([curriculum])
    return storage


def test_snippet_analyze_with_code() -> None:
    result = snippet_analyze(FakeStorage(), code="<style>a { b: c; }</style>")
    assert result["stats"]["selector_count"] == 1
    assert result["stats"]["css_lines"] == 1


def test_snippet_analyze_by_id(snippets, folders, curriculum) -> None:
    storage = _populated(snippets, folders, curriculum)
    result = snippet_analyze(storage, snippet_id="s1")
    assert result["stats"]["total_chars"] == len(FORM_HTML)


def test_snippet_analyze_unknown_id_returns_error() -> None:
    result = snippet_analyze(FakeStorage(), snippet_id="nope")
    assert "not found" in result["error"]


def test_snippet_analyze_requires_input() -> None:
    assert "error" in snippet_analyze(FakeStorage())


def test_snippet_classify_with_code() -> None:
    result = snippet_classify(FakeStorage(), code=FORM_HTML)
    assert result == {"category": "Form", "tags": ["form"], "difficulty": "beginner"}


def test_snippet_classify_by_id(snippets, folders, curriculum) -> None:
    storage = _populated(snippets, folders, curriculum)
    result = snippet_classify(storage, snippet_id="s2")
    assert result["category"] == "Landing Page"


def test_library_stats(snippets, folders, curriculum) -> None:
    storage = _populated(snippets, folders, curriculum)
    result = library_stats(storage, now=NOW)
    assert result["total_snippets"] == 3
    assert result["total_folders"] == 2
    assert result["total_curriculums"] == 1
    assert len(result["recent_activity"]) == 14
    assert result["recent_activity"][-1]["count"] == 1


def test_curriculum_overview(snippets, folders, curriculum) -> None:
    storage = _populated(snippets, folders, curriculum)
    result = curriculum_overview(storage)

    assert result["count"] == 1
    (overview,) = result["curriculums"]
    assert overview["name"] == "Basics"
    assert overview["progress"] == 0
    assert [s["snippet"] for s in overview["steps"]] == [
        "Signup",
        "Landing",
        "Unknown Snippet",
    ]
    assert overview["steps"][1]["note"] == "look at the nav"

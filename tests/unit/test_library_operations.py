"""Tests for snippet and folder collection operations."""

from zenhtml.config import DEFAULT_HTML
from zenhtml.core.library.operations import (
    apply_classification,
    create_folder,
    create_snippet,
    delete_folder,
    delete_snippet,
    find_folder,
    find_snippet,
    move_snippet,
    persistent_only,
    rename_folder,
    update_snippet_code,
)
from zenhtml.models.snippet import (
    ClassificationResult,
    Difficulty,
    Folder,
    Snippet,
    SnippetCategory,
)
from tests.unit.fakes import NOW


def test_create_snippet_defaults() -> None:
    """New snippets get a numbered name and the starter document."""
    existing = [Snippet(id="x", name="X", code="", updated_at=0)]
    result = create_snippet(existing, now=NOW, snippet_id="new")
    assert len(result) == 2
    new = result[-1]
    assert new.name == "Snippet 2"
    assert new.code == DEFAULT_HTML
    assert new.updated_at == NOW
    assert new.folder_id is None
    assert new.classification is None


def test_create_snippet_generates_unique_ids() -> None:
    first = create_snippet([], now=NOW)
    second = create_snippet(first, now=NOW)
    assert first[0].id != second[1].id


def test_create_folder_defaults() -> None:
    folders = create_folder([Folder(id="a", name="A")], folder_id="b")
    assert folders[-1] == Folder(id="b", name="Folder 2")


def test_delete_folder_moves_snippets_to_no_folder(snippets, folders) -> None:
    """Deleting a folder never deletes its snippets."""
    new_folders, new_snippets = delete_folder(folders, snippets, "f1")
    assert [f.id for f in new_folders] == ["f2"]
    assert len(new_snippets) == len(snippets)
    assert find_snippet(new_snippets, "s1").folder_id is None
    assert find_snippet(new_snippets, "s2").folder_id == "f2"


def test_delete_snippet(snippets) -> None:
    result = delete_snippet(snippets, "s2")
    assert [s.id for s in result] == ["s1", "s3"]
    assert delete_snippet(snippets, "missing") == snippets


def test_move_snippet(snippets) -> None:
    result = move_snippet(snippets, "s3", "f1")
    assert find_snippet(result, "s3").folder_id == "f1"
    result = move_snippet(result, "s3", None)
    assert find_snippet(result, "s3").folder_id is None


def test_rename_folder(folders) -> None:
    result = rename_folder(folders, "f2", "Landing pages")
    assert find_folder(result, "f2").name == "Landing pages"
    assert find_folder(result, "f1").name == "Forms"


def test_update_snippet_code_refreshes_timestamp(snippets) -> None:
    result = update_snippet_code(snippets, "s3", "<p>new</p>", now=NOW + 5)
    updated = find_snippet(result, "s3")
    assert updated.code == "<p>new</p>"
    assert updated.updated_at == NOW + 5


def test_update_snippet_code_skips_local_snippets() -> None:
    local = Snippet(id="l", name="L", code="<p>disk</p>", updated_at=0, is_local=True)
    assert update_snippet_code([local], "l", "<p>edited</p>", now=NOW) == [local]


def test_apply_classification_replaces_everything(snippets) -> None:
    """Tags are replaced wholesale, never merged."""
    result = ClassificationResult(
        category=SnippetCategory.LAYOUT, tags=("flexbox",), difficulty=Difficulty.ADVANCED
    )
    updated = apply_classification(snippets[0], result, now=NOW + 1)
    assert updated.classification == result
    assert updated.tags == ("flexbox",)
    assert updated.updated_at == NOW + 1
    assert updated.code == snippets[0].code


def test_persistent_only_drops_local_items() -> None:
    items = [
        Folder(id="a", name="A"),
        Folder(id="b", name="B", is_local=True),
    ]
    assert persistent_only(items) == [Folder(id="a", name="A")]

"""Tests for importing .html directory trees."""

from pathlib import Path

import pytest

from zenhtml.core.importer.html_import import (
    MAX_FILENAME_LENGTH,
    extract_h1_content,
    import_html_directory,
    sanitize_file_name,
)
from tests.unit.fakes import NOW


@pytest.fixture
def site(tmp_path: Path) -> Path:
    root = tmp_path / "site"
    (root / "demos").mkdir(parents=True)
    (root / "index.html").write_text("<h1>Hello <em>World</em></h1><p>hi</p>")
    (root / "demos" / "anim.HTML").write_text("<style>@keyframes a {}</style>")
    (root / "notes.txt").write_text("not html")
    return root


def test_import_creates_nested_folders(site: Path) -> None:
    """Every directory on the path becomes a folder, nested by parent_id."""
    result = import_html_directory(site, now=NOW)

    names = {f.name: f for f in result.folders}
    assert set(names) == {"site", "demos"}
    assert names["site"].parent_id is None
    assert names["demos"].parent_id == names["site"].id
    assert all(f.is_local for f in result.folders)


def test_import_snippets(site: Path) -> None:
    result = import_html_directory(site, now=NOW)

    assert result.files_skipped == 0
    by_path = {s.file_path: s for s in result.snippets}
    assert set(by_path) == {"site/index.html", "site/demos/anim.HTML"}

    index = by_path["site/index.html"]
    assert index.name == "Hello_World"
    assert index.code == "<h1>Hello <em>World</em></h1><p>hi</p>"
    assert index.updated_at == NOW
    assert index.is_local

    anim = by_path["site/demos/anim.HTML"]
    assert anim.name == "anim.HTML"
    folders = {f.id: f.name for f in result.folders}
    assert folders[anim.folder_id] == "demos"
    assert folders[index.folder_id] == "site"


def test_import_empty_directory(tmp_path: Path) -> None:
    result = import_html_directory(tmp_path, now=NOW)
    assert result.folders == []
    assert result.snippets == []


def test_import_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Import directory not found"):
        import_html_directory(tmp_path / "nope", now=NOW)


def test_import_skips_undecodable_files(tmp_path: Path) -> None:
    (tmp_path / "ok.html").write_text("<p>ok</p>")
    (tmp_path / "bad.html").write_bytes(b"\xff\xfe\xfa")
    result = import_html_directory(tmp_path, now=NOW)
    assert result.files_skipped == 1
    assert [s.name for s in result.snippets] == ["ok.html"]


def test_extract_h1_content() -> None:
    assert extract_h1_content('<h1 class="t">  Title </h1>', "x") == "Title"
    assert extract_h1_content("<H1>Upper</H1>", "x") == "Upper"
    assert extract_h1_content("<h1><img></h1>", "fallback") == "fallback"
    assert extract_h1_content("<h2>No</h2>", "fallback") == "fallback"


def test_sanitize_file_name() -> None:
    assert sanitize_file_name('a/b:c d*e?"f"') == "a_b_c_d_e__f_"
    assert sanitize_file_name("tab\tand  spaces") == "tab_and_spaces"
    assert len(sanitize_file_name("x" * 300)) == MAX_FILENAME_LENGTH


def test_import_relative_dot_keeps_root_folder(
    site: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Importing "." names the root folder after the current directory."""
    monkeypatch.chdir(site)
    result = import_html_directory(Path("."), now=NOW)

    assert "site" in {f.name for f in result.folders}
    assert {s.file_path for s in result.snippets} == {
        "site/index.html",
        "site/demos/anim.HTML",
    }
    assert all(s.folder_id is not None for s in result.snippets)

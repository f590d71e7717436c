"""Pure transformations of the snippet and folder collections."""

import uuid
from collections.abc import Sequence
from dataclasses import replace
from typing import TypeVar

from zenhtml.config import DEFAULT_HTML
from zenhtml.models.snippet import ClassificationResult, Folder, Snippet

_Item = TypeVar("_Item", Snippet, Folder)


def _new_id() -> str:
    return str(uuid.uuid4())


def persistent_only(items: Sequence[_Item]) -> list[_Item]:
    """Drop ephemeral (imported) items."""
    return [item for item in items if not item.is_local]


def find_snippet(snippets: Sequence[Snippet], snippet_id: str) -> Snippet | None:
    return next((s for s in snippets if s.id == snippet_id), None)


def find_folder(folders: Sequence[Folder], folder_id: str) -> Folder | None:
    return next((f for f in folders if f.id == folder_id), None)


def create_snippet(
    snippets: Sequence[Snippet],
    *,
    now: int,
    folder_id: str | None = None,
    name: str | None = None,
    code: str = DEFAULT_HTML,
    snippet_id: str | None = None,
) -> list[Snippet]:
    """Append a new snippet, named ``Snippet N`` unless a name is given."""
    snippet = Snippet(
        id=snippet_id or _new_id(),
        name=name or f"Snippet {len(snippets) + 1}",
        code=code,
        folder_id=folder_id,
        updated_at=now,
    )
    return [*snippets, snippet]


def create_folder(
    folders: Sequence[Folder], *, name: str | None = None, folder_id: str | None = None
) -> list[Folder]:
    """Append a new folder, named ``Folder N`` unless a name is given."""
    folder = Folder(id=folder_id or _new_id(), name=name or f"Folder {len(folders) + 1}")
    return [*folders, folder]


def delete_snippet(snippets: Sequence[Snippet], snippet_id: str) -> list[Snippet]:
    return [s for s in snippets if s.id != snippet_id]


def delete_folder(
    folders: Sequence[Folder], snippets: Sequence[Snippet], folder_id: str
) -> tuple[list[Folder], list[Snippet]]:
    """Delete a folder and move its snippets to no folder.

    Snippets are never deleted along with their folder.
    """
    new_folders = [f for f in folders if f.id != folder_id]
    new_snippets = [
        replace(s, folder_id=None) if s.folder_id == folder_id else s for s in snippets
    ]
    return new_folders, new_snippets


def move_snippet(
    snippets: Sequence[Snippet], snippet_id: str, folder_id: str | None
) -> list[Snippet]:
    return [replace(s, folder_id=folder_id) if s.id == snippet_id else s for s in snippets]


def rename_folder(folders: Sequence[Folder], folder_id: str, name: str) -> list[Folder]:
    return [replace(f, name=name) if f.id == folder_id else f for f in folders]


def update_snippet_code(
    snippets: Sequence[Snippet], snippet_id: str, code: str, *, now: int
) -> list[Snippet]:
    """Replace a snippet's code and refresh ``updated_at``.

    Ephemeral snippets mirror files on disk and are left untouched.
    """
    return [
        replace(s, code=code, updated_at=now) if s.id == snippet_id and not s.is_local else s
        for s in snippets
    ]


def apply_classification(snippet: Snippet, result: ClassificationResult, *, now: int) -> Snippet:
    """Overwrite a snippet's classification wholesale."""
    return replace(
        snippet,
        category=result.category,
        tags=tuple(result.tags),
        difficulty=result.difficulty,
        updated_at=now,
    )

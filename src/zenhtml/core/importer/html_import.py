"""Import a directory tree of .html files as ephemeral folders and snippets."""

import re
import uuid
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from zenhtml.models.snippet import Folder, Snippet

_H1 = re.compile(r"<h1[^>]*>([\s\S]*?)</h1>", re.IGNORECASE)
_INNER_TAG = re.compile(r"<[^>]*>?")
_ILLEGAL_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]')
_WHITESPACE = re.compile(r"\s+")

MAX_FILENAME_LENGTH = 255


@dataclass(frozen=True)
class ImportResult:
    """Folders and snippets read from disk, all marked ephemeral."""

    folders: list[Folder]
    snippets: list[Snippet]
    files_skipped: int = 0


def extract_h1_content(html: str, default_name: str) -> str:
    """Return the text of the first ``<h1>``, or ``default_name``."""
    match = _H1.search(html)
    if match and match.group(1):
        clean = _INNER_TAG.sub("", match.group(1)).strip()
        return clean or default_name
    return default_name


def sanitize_file_name(name: str) -> str:
    """Make a name safe to use as a file name."""
    name = _ILLEGAL_FILENAME_CHARS.sub("_", name)
    name = _WHITESPACE.sub("_", name)
    return name[:MAX_FILENAME_LENGTH]


def _html_files(source_dir: Path) -> list[Path]:
    return sorted(
        p for p in source_dir.rglob("*") if p.is_file() and p.name.lower().endswith(".html")
    )


def import_html_directory(source_dir: Path, *, now: int) -> ImportResult:
    """Read every .html file below source_dir.

    Each directory on a file's path, starting with ``source_dir`` itself,
    becomes one folder; nested directories point at their parent through
    ``parent_id``. Snippets are named after their first ``<h1>``.

    Args:
        source_dir: Root of the tree to import.
        now: Timestamp (epoch ms) given to every imported snippet.

    Returns:
        ImportResult whose folders and snippets all have ``is_local=True``.
    """
    if not source_dir.is_dir():
        msg = f"Import directory not found: {source_dir}"
        raise FileNotFoundError(msg)
    source_dir = source_dir.resolve()

    folders: list[Folder] = []
    snippets: list[Snippet] = []
    folder_ids: dict[str, str] = {}  # relative dir path -> folder id
    skipped = 0

    for html_path in _html_files(source_dir):
        relative = html_path.relative_to(source_dir.parent)
        try:
            content = html_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            logger.opt(exception=True).warning("Skipping unreadable file {}", relative)
            skipped += 1
            continue

        parent_id: str | None = None
        accumulated = ""
        for part in relative.parts[:-1]:
            accumulated = f"{accumulated}/{part}" if accumulated else part
            if accumulated not in folder_ids:
                folder = Folder(
                    id=str(uuid.uuid4()), name=part, parent_id=parent_id, is_local=True
                )
                folders.append(folder)
                folder_ids[accumulated] = folder.id
            parent_id = folder_ids[accumulated]

        title = extract_h1_content(content, html_path.name)
        snippets.append(
            Snippet(
                id=str(uuid.uuid4()),
                name=sanitize_file_name(title),
                code=content,
                folder_id=parent_id,
                updated_at=now,
                is_local=True,
                file_path=relative.as_posix(),
            )
        )
        logger.debug("Imported {} as {!r}", relative, title)

    logger.info(
        "Import complete: {} snippets in {} folders, {} skipped",
        len(snippets), len(folders), skipped,
    )
    return ImportResult(folders=folders, snippets=snippets, files_skipped=skipped)

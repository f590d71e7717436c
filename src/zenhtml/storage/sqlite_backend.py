"""SQLite-backed library storage."""

import json
import sqlite3
from pathlib import Path

from loguru import logger

from zenhtml.config import DEFAULT_HTML
from zenhtml.core.database.schema import get_metadata, migrate_schema, set_metadata
from zenhtml.core.library.operations import persistent_only
from zenhtml.models.curriculum import Curriculum, CurriculumStep
from zenhtml.models.snippet import Folder, Snippet, parse_category, parse_difficulty

_CODE_KEY = "scratchpad_code"


class SqliteStorage:
    """Store snippets, folders, curriculums and the scratchpad in SQLite.

    Every save replaces the whole collection inside one transaction.
    Ephemeral (imported) snippets and folders are never written.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        migrate_schema(conn)

    def close(self) -> None:
        self.conn.close()

    # --- Snippets ---

    def load_snippets(self) -> list[Snippet]:
        rows = self.conn.execute(
            "SELECT id, name, code, folder_id, updated_at, file_path, category, tags, "
            "difficulty FROM snippets ORDER BY position"
        ).fetchall()
        snippets: list[Snippet] = []
        for r in rows:
            try:
                tags = tuple(str(t) for t in json.loads(r[7]))
            except (json.JSONDecodeError, TypeError):
                logger.warning("Ignoring malformed tags on snippet {}", r[0])
                tags = ()
            snippets.append(
                Snippet(
                    id=r[0], name=r[1], code=r[2], folder_id=r[3], updated_at=r[4],
                    file_path=r[5], category=parse_category(r[6]), tags=tags,
                    difficulty=parse_difficulty(r[8]),
                )
            )
        return snippets

    def save_snippets(self, snippets: list[Snippet]) -> None:
        persistent = persistent_only(snippets)
        try:
            self.conn.execute("DELETE FROM snippets")
            self.conn.executemany(
                """INSERT INTO snippets
                   (id, name, code, folder_id, updated_at, file_path, category, tags,
                    difficulty, position)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                [
                    (
                        s.id, s.name, s.code, s.folder_id, s.updated_at, s.file_path,
                        s.category.value if s.category else None,
                        json.dumps(list(s.tags)),
                        s.difficulty.value if s.difficulty else None,
                        i,
                    )
                    for i, s in enumerate(persistent)
                ],
            )
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        logger.debug("Saved {} snippets", len(persistent))

    # --- Folders ---

    def load_folders(self) -> list[Folder]:
        rows = self.conn.execute(
            "SELECT id, name, parent_id FROM folders ORDER BY position"
        ).fetchall()
        return [Folder(id=r[0], name=r[1], parent_id=r[2]) for r in rows]

    def save_folders(self, folders: list[Folder]) -> None:
        persistent = persistent_only(folders)
        try:
            self.conn.execute("DELETE FROM folders")
            self.conn.executemany(
                "INSERT INTO folders (id, name, parent_id, position) VALUES (?, ?, ?, ?)",
                [(f.id, f.name, f.parent_id, i) for i, f in enumerate(persistent)],
            )
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        logger.debug("Saved {} folders", len(persistent))

    # --- Curriculums ---

    def load_curriculums(self) -> list[Curriculum]:
        rows = self.conn.execute(
            "SELECT id, name, description, created_at, updated_at FROM curriculums "
            "ORDER BY position"
        ).fetchall()
        step_rows = self.conn.execute(
            "SELECT curriculum_id, id, snippet_id, sort_order, note, is_completed "
            "FROM curriculum_steps ORDER BY curriculum_id, sort_order"
        ).fetchall()

        steps_by_curriculum: dict[str, list[CurriculumStep]] = {}
        for r in step_rows:
            steps_by_curriculum.setdefault(r[0], []).append(
                CurriculumStep(
                    id=r[1], snippet_id=r[2], order=r[3], note=r[4], is_completed=bool(r[5])
                )
            )

        return [
            Curriculum(
                id=r[0], name=r[1], description=r[2], created_at=r[3], updated_at=r[4],
                steps=tuple(steps_by_curriculum.get(r[0], [])),
            )
            for r in rows
        ]

    def save_curriculums(self, curriculums: list[Curriculum]) -> None:
        try:
            self.conn.execute("DELETE FROM curriculum_steps")
            self.conn.execute("DELETE FROM curriculums")
            self.conn.executemany(
                """INSERT INTO curriculums
                   (id, name, description, created_at, updated_at, position)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                [
                    (c.id, c.name, c.description, c.created_at, c.updated_at, i)
                    for i, c in enumerate(curriculums)
                ],
            )
            self.conn.executemany(
                """INSERT INTO curriculum_steps
                   (id, curriculum_id, snippet_id, sort_order, note, is_completed)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                [
                    (s.id, c.id, s.snippet_id, s.order, s.note, int(s.is_completed))
                    for c in curriculums
                    for s in c.steps
                ],
            )
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        logger.debug("Saved {} curriculums", len(curriculums))

    # --- Scratchpad ---

    def load_code(self) -> str:
        code = get_metadata(self.conn, _CODE_KEY)
        return code if code else DEFAULT_HTML

    def save_code(self, code: str) -> None:
        set_metadata(self.conn, _CODE_KEY, code)


def open_storage(db_path: Path | str) -> SqliteStorage:
    """Open the library storage backend for a database file.

    This is the only place that decides which backend the process uses.
    """
    if str(db_path) != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    logger.debug("Opened library database {}", db_path)
    return SqliteStorage(conn)

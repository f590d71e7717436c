"""Domain models for the snippet library."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from loguru import logger


class SnippetCategory(StrEnum):
    """Closed set of snippet categories. Values are the display names."""

    LAYOUT = "Layout"
    ANIMATION = "Animation"
    FORM = "Form"
    GAME = "Game"
    API_INTEGRATION = "API Integration"
    DATA_VISUALIZATION = "Data Visualization"
    UI_COMPONENT = "UI Component"
    UTILITY = "Utility"
    LANDING_PAGE = "Landing Page"
    UNCATEGORIZED = "Uncategorized"


class Difficulty(StrEnum):
    """Difficulty levels, easiest first."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


MAX_TAGS = 5


def parse_category(value: Any) -> SnippetCategory | None:
    """Parse a stored category string, returning None for missing or unknown values."""
    if value is None:
        return None
    try:
        return SnippetCategory(value)
    except ValueError:
        logger.warning("Ignoring unknown snippet category {!r}", value)
        return None


def parse_difficulty(value: Any) -> Difficulty | None:
    """Parse a stored difficulty string, returning None for missing or unknown values."""
    if value is None:
        return None
    try:
        return Difficulty(value)
    except ValueError:
        logger.warning("Ignoring unknown difficulty {!r}", value)
        return None


@dataclass(frozen=True)
class ClassificationResult:
    """Category, tags and difficulty derived from a snippet's code."""

    category: SnippetCategory
    tags: tuple[str, ...]
    difficulty: Difficulty

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "tags": list(self.tags),
            "difficulty": self.difficulty.value,
        }


@dataclass(frozen=True)
class Folder:
    """A named container for snippets. Imported folders may nest."""

    id: str
    name: str
    parent_id: str | None = None
    is_local: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "parent_id": self.parent_id,
            "is_local": self.is_local,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Folder":
        return cls(
            id=data["id"],
            name=data["name"],
            parent_id=data.get("parent_id"),
            is_local=bool(data.get("is_local", False)),
        )


@dataclass(frozen=True)
class Snippet:
    """One HTML/CSS/JS document plus its metadata.

    ``is_local`` marks snippets from a directory import; they are never saved.
    The classification fields stay None until the snippet is classified.
    """

    id: str
    name: str
    code: str
    updated_at: int
    folder_id: str | None = None
    is_local: bool = False
    file_path: str | None = None
    category: SnippetCategory | None = None
    tags: tuple[str, ...] = ()
    difficulty: Difficulty | None = None

    @property
    def classification(self) -> ClassificationResult | None:
        if self.category is None or self.difficulty is None:
            return None
        return ClassificationResult(
            category=self.category, tags=self.tags, difficulty=self.difficulty
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "code": self.code,
            "folder_id": self.folder_id,
            "updated_at": self.updated_at,
            "is_local": self.is_local,
            "file_path": self.file_path,
            "category": self.category.value if self.category else None,
            "tags": list(self.tags),
            "difficulty": self.difficulty.value if self.difficulty else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Snippet":
        return cls(
            id=data["id"],
            name=data["name"],
            code=data.get("code", ""),
            updated_at=int(data.get("updated_at", 0)),
            folder_id=data.get("folder_id"),
            is_local=bool(data.get("is_local", False)),
            file_path=data.get("file_path"),
            category=parse_category(data.get("category")),
            tags=tuple(str(t) for t in data.get("tags") or ()),
            difficulty=parse_difficulty(data.get("difficulty")),
        )

"""Curriculum models: ordered learning paths over snippets."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CurriculumStep:
    """A single step of a curriculum.

    ``snippet_id`` may point at a snippet that no longer exists.
    """

    id: str
    snippet_id: str
    order: int
    note: str = ""
    is_completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "snippet_id": self.snippet_id,
            "order": self.order,
            "note": self.note,
            "is_completed": self.is_completed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CurriculumStep":
        return cls(
            id=data["id"],
            snippet_id=data["snippet_id"],
            order=int(data["order"]),
            note=data.get("note", ""),
            is_completed=bool(data.get("is_completed", False)),
        )


@dataclass(frozen=True)
class Curriculum:
    """A named, ordered sequence of steps.

    Step orders are always exactly ``0..len(steps)-1``.
    """

    id: str
    name: str
    created_at: int
    updated_at: int
    description: str = ""
    steps: tuple[CurriculumStep, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "steps": [s.to_dict() for s in self.steps],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Curriculum":
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description", ""),
            created_at=int(data["created_at"]),
            updated_at=int(data["updated_at"]),
            steps=tuple(CurriculumStep.from_dict(s) for s in data.get("steps", [])),
        )

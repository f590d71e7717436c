"""Derived, non-persisted statistics records."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class CodeStats:
    """Line, tag, selector and function counts for a single code string."""

    total_chars: int
    total_lines: int
    html_lines: int
    css_lines: int
    js_lines: int
    tag_count: int
    selector_count: int
    function_count: int
    has_responsive: bool
    has_animation: bool
    has_external_resources: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ActivityBucket:
    """Number of snippets last updated within one day-long window."""

    date: str
    count: int


@dataclass(frozen=True)
class LibraryStats:
    """Snapshot of the whole library."""

    total_snippets: int
    total_folders: int
    total_curriculums: int
    category_distribution: dict[str, int]
    difficulty_distribution: dict[str, int]
    avg_code_length: int
    total_code_lines: int
    recent_activity: tuple[ActivityBucket, ...]

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["recent_activity"] = [asdict(b) for b in self.recent_activity]
        return data

"""Tests for library statistics."""

import json

from zenhtml.core.stats.aggregator import (
    ACTIVITY_DAYS,
    DAY_MS,
    compute_library_stats,
    recent_activity,
)
from zenhtml.models.curriculum import Curriculum
from zenhtml.models.snippet import Difficulty, Folder, Snippet, SnippetCategory
from tests.unit.fakes import NOW


def _snippet(sid: str, code: str = "", updated_at: int = NOW, **kwargs) -> Snippet:
    return Snippet(id=sid, name=sid, code=code, updated_at=updated_at, **kwargs)


class TestComputeLibraryStats:
    def test_empty_library(self) -> None:
        stats = compute_library_stats([], [], [], now=NOW)
        assert stats.total_snippets == 0
        assert stats.avg_code_length == 0
        assert stats.total_code_lines == 0
        assert len(stats.recent_activity) == ACTIVITY_DAYS
        assert all(b.count == 0 for b in stats.recent_activity)
        assert stats.category_distribution == {c.value: 0 for c in SnippetCategory}
        assert stats.difficulty_distribution == {
            "beginner": 0, "intermediate": 0, "advanced": 0,
        }

    def test_totals(self, snippets, folders, curriculum) -> None:
        stats = compute_library_stats(snippets, folders, [curriculum], now=NOW)
        assert stats.total_snippets == 3
        assert stats.total_folders == 2
        assert stats.total_curriculums == 1

    def test_unclassified_defaults(self) -> None:
        snippets = [
            _snippet("a", category=SnippetCategory.FORM, difficulty=Difficulty.ADVANCED),
            _snippet("b"),
        ]
        stats = compute_library_stats(snippets, [], [], now=NOW)
        assert stats.category_distribution["Form"] == 1
        assert stats.category_distribution["Uncategorized"] == 1
        assert stats.difficulty_distribution["advanced"] == 1
        assert stats.difficulty_distribution["beginner"] == 1
        assert sum(stats.category_distribution.values()) == stats.total_snippets
        assert sum(stats.difficulty_distribution.values()) == stats.total_snippets

    def test_average_rounds_half_up(self) -> None:
        stats = compute_library_stats([_snippet("a", "ab"), _snippet("b", "abc")], [], [], now=NOW)
        assert stats.avg_code_length == 3

    def test_empty_code_counts_one_line(self) -> None:
        stats = compute_library_stats(
            [_snippet("a", ""), _snippet("b", "x\ny")], [], [], now=NOW
        )
        assert stats.total_code_lines == 3

    def test_to_dict_is_json_serializable(self, snippets, folders, curriculum) -> None:
        data = compute_library_stats(snippets, folders, [curriculum], now=NOW).to_dict()
        decoded = json.loads(json.dumps(data))
        assert decoded["total_snippets"] == 3
        assert len(decoded["recent_activity"]) == 14
        assert set(decoded["recent_activity"][0]) == {"date", "count"}


class TestRecentActivity:
    def test_windows_anchored_to_now(self) -> None:
        snippets = [
            _snippet("today", updated_at=NOW),
            _snippet("yesterday", updated_at=NOW - 1),
            _snippet("oldest", updated_at=NOW - 13 * DAY_MS),
            _snippet("too-old", updated_at=NOW - 13 * DAY_MS - 1),
            _snippet("future", updated_at=NOW + DAY_MS),
        ]
        buckets = recent_activity(snippets, now=NOW)
        counts = [b.count for b in buckets]
        assert counts[0] == 1
        assert counts[12] == 1
        assert counts[13] == 1
        assert sum(counts) == 3

    def test_dates_ascending(self) -> None:
        buckets = recent_activity([], now=NOW)
        dates = [b.date for b in buckets]
        assert dates == sorted(dates)
        assert len(set(dates)) == 14
        assert dates[-1] == "2025-10-09"
        assert dates[0] == "2025-09-26"

    def test_custom_day_count(self) -> None:
        assert len(recent_activity([], now=NOW, days=3)) == 3


def test_curriculums_only_counted(curriculum: Curriculum) -> None:
    stats = compute_library_stats([], [Folder(id="f", name="F")], [curriculum], now=NOW)
    assert stats.total_curriculums == 1
    assert stats.total_folders == 1

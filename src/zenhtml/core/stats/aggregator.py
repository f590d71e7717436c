"""Library-wide statistics: distributions, sizes and recent activity."""

from collections.abc import Sequence
from datetime import UTC, datetime

from zenhtml.core.rounding import round_half_up
from zenhtml.models.curriculum import Curriculum
from zenhtml.models.snippet import Difficulty, Folder, Snippet, SnippetCategory
from zenhtml.models.stats import ActivityBucket, LibraryStats

DAY_MS = 86_400_000
ACTIVITY_DAYS = 14


def _bucket_date(day_start_ms: int) -> str:
    return datetime.fromtimestamp(day_start_ms / 1000, tz=UTC).strftime("%Y-%m-%d")


def recent_activity(
    snippets: Sequence[Snippet], *, now: int, days: int = ACTIVITY_DAYS
) -> tuple[ActivityBucket, ...]:
    """Count snippet updates per day-long window, oldest window first.

    Windows are ``[now - i * DAY_MS, now - i * DAY_MS + DAY_MS)`` for ``i``
    from ``days - 1`` down to 0. They are anchored to ``now``, not to
    calendar midnight, so each snippet lands in at most one window.
    """
    buckets: list[ActivityBucket] = []
    for i in range(days - 1, -1, -1):
        day_start = now - i * DAY_MS
        day_end = day_start + DAY_MS
        count = sum(1 for s in snippets if day_start <= s.updated_at < day_end)
        buckets.append(ActivityBucket(date=_bucket_date(day_start), count=count))
    return tuple(buckets)


def compute_library_stats(
    snippets: Sequence[Snippet],
    folders: Sequence[Folder],
    curriculums: Sequence[Curriculum],
    *,
    now: int,
) -> LibraryStats:
    """Compute a statistics snapshot for the whole library.

    Args:
        snippets: All snippets to include.
        folders: All folders to include.
        curriculums: All curriculums to include.
        now: Current time in epoch milliseconds; anchors recent activity.

    Returns:
        LibraryStats with zero-filled distributions over every category and
        difficulty.
    """
    category_distribution = {c.value: 0 for c in SnippetCategory}
    difficulty_distribution = {d.value: 0 for d in Difficulty}
    total_code_chars = 0
    total_code_lines = 0

    for snippet in snippets:
        category = snippet.category or SnippetCategory.UNCATEGORIZED
        category_distribution[category.value] += 1

        difficulty = snippet.difficulty or Difficulty.BEGINNER
        difficulty_distribution[difficulty.value] += 1

        total_code_chars += len(snippet.code)
        total_code_lines += len(snippet.code.split("\n"))

    avg_code_length = round_half_up(total_code_chars / len(snippets)) if snippets else 0

    return LibraryStats(
        total_snippets=len(snippets),
        total_folders=len(folders),
        total_curriculums=len(curriculums),
        category_distribution=category_distribution,
        difficulty_distribution=difficulty_distribution,
        avg_code_length=avg_code_length,
        total_code_lines=total_code_lines,
        recent_activity=recent_activity(snippets, now=now),
    )

"""Curriculum step ordering: add, remove, toggle and reorder steps.

Every function returns new values and leaves its inputs alone. Step orders
are kept dense, i.e. exactly ``0..N-1`` for N steps, after each operation.
"""

import uuid
from collections.abc import Callable, Sequence
from dataclasses import replace
from typing import Literal

from zenhtml.core.rounding import round_half_up
from zenhtml.models.curriculum import Curriculum, CurriculumStep
from zenhtml.models.snippet import Snippet

Direction = Literal["up", "down"]

UNKNOWN_SNIPPET_NAME = "Unknown Snippet"


def _new_id() -> str:
    return str(uuid.uuid4())


# --- Step-level functions ---


def renumber_steps(steps: Sequence[CurriculumStep]) -> tuple[CurriculumStep, ...]:
    """Assign orders ``0..N-1`` following the given sequence."""
    return tuple(
        step if step.order == i else replace(step, order=i) for i, step in enumerate(steps)
    )


def sorted_steps(steps: Sequence[CurriculumStep]) -> tuple[CurriculumStep, ...]:
    return tuple(sorted(steps, key=lambda s: s.order))


def append_step(
    steps: Sequence[CurriculumStep],
    *,
    snippet_id: str,
    note: str = "",
    step_id: str | None = None,
) -> tuple[CurriculumStep, ...]:
    """Append an uncompleted step with ``order = len(steps)``."""
    step = CurriculumStep(
        id=step_id or _new_id(),
        snippet_id=snippet_id,
        order=len(steps),
        note=note,
        is_completed=False,
    )
    return (*steps, step)


def remove_step_from(
    steps: Sequence[CurriculumStep], step_id: str
) -> tuple[CurriculumStep, ...]:
    """Drop a step and close the gap it leaves in the ordering."""
    if not any(s.id == step_id for s in steps):
        return tuple(steps)
    remaining = [s for s in sorted_steps(steps) if s.id != step_id]
    return renumber_steps(remaining)


def toggle_step_in(
    steps: Sequence[CurriculumStep], step_id: str
) -> tuple[CurriculumStep, ...]:
    """Flip ``is_completed`` on one step. Ordering is untouched."""
    return tuple(
        replace(s, is_completed=not s.is_completed) if s.id == step_id else s for s in steps
    )


def move_step(
    steps: Sequence[CurriculumStep], step_id: str, direction: Direction
) -> tuple[CurriculumStep, ...]:
    """Swap a step with its neighbour in the given direction.

    Moving the first step up or the last step down returns the steps
    unchanged; there is no wraparound.
    """
    ordered = list(sorted_steps(steps))
    index = next((i for i, s in enumerate(ordered) if s.id == step_id), None)
    if index is None:
        return tuple(steps)

    target = index - 1 if direction == "up" else index + 1
    if target < 0 or target >= len(ordered):
        return tuple(steps)

    ordered[index], ordered[target] = ordered[target], ordered[index]
    return renumber_steps(ordered)


def has_dense_order(steps: Sequence[CurriculumStep]) -> bool:
    """Check that step orders are exactly ``0..N-1``."""
    return sorted(s.order for s in steps) == list(range(len(steps)))


# --- Curriculum-level operations ---


def _update_steps(
    curriculums: Sequence[Curriculum],
    curriculum_id: str,
    transform: Callable[[tuple[CurriculumStep, ...]], tuple[CurriculumStep, ...]],
    *,
    now: int,
) -> list[Curriculum]:
    """Apply a step transform to one curriculum.

    Unknown curriculum ids pass everything through. A transform that leaves
    the steps as they were does not refresh ``updated_at``.
    """
    result: list[Curriculum] = []
    for curriculum in curriculums:
        if curriculum.id == curriculum_id:
            new_steps = transform(curriculum.steps)
            if new_steps != curriculum.steps:
                curriculum = replace(curriculum, steps=new_steps, updated_at=now)
        result.append(curriculum)
    return result


def add_step(
    curriculums: Sequence[Curriculum],
    curriculum_id: str,
    snippet_id: str,
    note: str = "",
    *,
    now: int,
    step_id: str | None = None,
) -> list[Curriculum]:
    """Append a step referencing ``snippet_id`` to a curriculum."""
    step_id = step_id or _new_id()
    return _update_steps(
        curriculums,
        curriculum_id,
        lambda steps: append_step(steps, snippet_id=snippet_id, note=note, step_id=step_id),
        now=now,
    )


def remove_step(
    curriculums: Sequence[Curriculum], curriculum_id: str, step_id: str, *, now: int
) -> list[Curriculum]:
    """Remove a step from a curriculum and renumber the rest."""
    return _update_steps(
        curriculums, curriculum_id, lambda steps: remove_step_from(steps, step_id), now=now
    )


def toggle_step(
    curriculums: Sequence[Curriculum], curriculum_id: str, step_id: str, *, now: int
) -> list[Curriculum]:
    """Flip the completion state of a step."""
    return _update_steps(
        curriculums, curriculum_id, lambda steps: toggle_step_in(steps, step_id), now=now
    )


def reorder_step(
    curriculums: Sequence[Curriculum],
    curriculum_id: str,
    step_id: str,
    direction: Direction,
    *,
    now: int,
) -> list[Curriculum]:
    """Move a step one position up or down within its curriculum."""
    return _update_steps(
        curriculums,
        curriculum_id,
        lambda steps: move_step(steps, step_id, direction),
        now=now,
    )


def create_curriculum(
    curriculums: Sequence[Curriculum],
    name: str,
    description: str = "",
    *,
    now: int,
    curriculum_id: str | None = None,
) -> list[Curriculum]:
    curriculum = Curriculum(
        id=curriculum_id or _new_id(),
        name=name,
        description=description,
        created_at=now,
        updated_at=now,
    )
    return [*curriculums, curriculum]


def delete_curriculum(
    curriculums: Sequence[Curriculum], curriculum_id: str
) -> list[Curriculum]:
    return [c for c in curriculums if c.id != curriculum_id]


def curriculum_progress(curriculum: Curriculum) -> int:
    """Percentage of completed steps, 0 for an empty curriculum."""
    if not curriculum.steps:
        return 0
    completed = sum(1 for s in curriculum.steps if s.is_completed)
    return round_half_up(completed / len(curriculum.steps) * 100)


def step_snippet_name(snippets: Sequence[Snippet], snippet_id: str) -> str:
    """Resolve a step's snippet name, tolerating deleted and unnamed snippets."""
    for snippet in snippets:
        if snippet.id == snippet_id:
            return snippet.name or UNKNOWN_SNIPPET_NAME
    return UNKNOWN_SNIPPET_NAME

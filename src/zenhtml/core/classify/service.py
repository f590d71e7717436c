"""Remote-first classification with heuristic fallback, and code improvement."""

from collections.abc import Sequence
from dataclasses import dataclass

from loguru import logger

from zenhtml.core.classify.heuristic import classify_by_heuristic
from zenhtml.core.library.operations import apply_classification
from zenhtml.models.snippet import (
    MAX_TAGS,
    ClassificationResult,
    Difficulty,
    Snippet,
    SnippetCategory,
)
from zenhtml.protocols import CodeImproverProtocol, RemoteClassifierProtocol


@dataclass(frozen=True)
class BatchClassification:
    """Outcome of classifying a whole snippet list."""

    snippets: list[Snippet]
    remote_count: int
    fallback_count: int


def _is_valid(result: object) -> bool:
    return (
        isinstance(result, ClassificationResult)
        and isinstance(result.category, SnippetCategory)
        and isinstance(result.difficulty, Difficulty)
        and len(result.tags) <= MAX_TAGS
        and all(isinstance(t, str) for t in result.tags)
    )


def _classify(
    code: str, remote: RemoteClassifierProtocol | None
) -> tuple[ClassificationResult, bool]:
    """Return (result, came_from_remote)."""
    if remote is None:
        return classify_by_heuristic(code), False

    try:
        result = remote.classify(code)
    except Exception:
        logger.opt(exception=True).warning("Remote classification failed, using heuristics")
        return classify_by_heuristic(code), False

    if not _is_valid(result):
        logger.warning("Remote classifier returned an invalid result: {!r}", result)
        return classify_by_heuristic(code), False
    return result, True


def classify_snippet(
    code: str, remote: RemoteClassifierProtocol | None = None
) -> ClassificationResult:
    """Classify code, preferring the remote classifier when one is given.

    Any remote failure, including an out-of-range category or difficulty,
    discards the remote result entirely and returns the heuristic one.
    Never raises.
    """
    result, _ = _classify(code, remote)
    return result


def classify_all(
    snippets: Sequence[Snippet],
    remote: RemoteClassifierProtocol | None = None,
    *,
    now: int,
) -> BatchClassification:
    """Classify every snippet, one remote call per snippet.

    A failure on one snippet falls back to heuristics for that snippet only;
    the batch always runs to completion.
    """
    updated: list[Snippet] = []
    remote_count = 0
    fallback_count = 0

    for snippet in snippets:
        result, from_remote = _classify(snippet.code, remote)
        if from_remote:
            remote_count += 1
        elif remote is not None:
            fallback_count += 1
        updated.append(apply_classification(snippet, result, now=now))
        logger.debug("Classified {} as {}", snippet.name, result.category.value)

    logger.info(
        "Classified {} snippets ({} remote, {} fallback)",
        len(updated), remote_count, fallback_count,
    )
    return BatchClassification(
        snippets=updated, remote_count=remote_count, fallback_count=fallback_count
    )


def improve_code(code: str, improver: CodeImproverProtocol | None = None) -> str:
    """Return an improved version of the code, or the code itself on failure."""
    if improver is None:
        return code
    try:
        improved = improver.improve(code)
    except Exception:
        logger.opt(exception=True).warning("Code improvement failed, keeping original code")
        return code
    if not isinstance(improved, str) or not improved.strip():
        return code
    return improved

"""Pattern-based snippet classifier.

Used as the default classifier and as the fallback whenever a remote
classifier is unavailable or returns garbage. Every rule is a plain regex
test, so the result is deterministic and this module never raises.
"""

import re

from zenhtml.core.analysis.analyzer import script_blocks
from zenhtml.models.snippet import MAX_TAGS, ClassificationResult, Difficulty, SnippetCategory

# Checked against the lower-cased code, in this order.
_TAG_RULES: list[tuple[str, re.Pattern[str]]] = [
    ("animation", re.compile(r"@keyframes|animation:|transition:")),
    ("responsive", re.compile(r"@media")),
    ("flexbox", re.compile(r"display:\s*flex")),
    ("css-grid", re.compile(r"display:\s*grid")),
    ("canvas", re.compile(r"<canvas")),
    ("form", re.compile(r"<form")),
    ("api", re.compile(r"fetch\(|xmlhttprequest|axios")),
    ("svg", re.compile(r"<svg")),
    ("data-viz", re.compile(r"chart|graph|plot")),
    ("storage", re.compile(r"localstorage|sessionstorage")),
]

_CANVAS = re.compile(r"<canvas")
_GAME_WORDS = re.compile(r"game|score|player|collision")
_DRAW_WORDS = re.compile(r"draw|chart")
_KEYFRAMES = re.compile(r"@keyframes", re.IGNORECASE | re.ASCII)
_FORM = re.compile(r"<form")
_INPUT = re.compile(r"<input")
_LANDMARK = re.compile(r"<nav|<header|<footer|<aside")
_CONTENT_LANDMARK = re.compile(r"<section|<main")
_LAYOUT = re.compile(r"@media|display:\s*(flex|grid)")
_WIDGET = re.compile(r"<button|<modal|<dialog|<dropdown")

_ADVANCED_LINES = 200
_ADVANCED_SCRIPT_CHARS = 2000
_ADVANCED_TAGS = 4
_INTERMEDIATE_LINES = 80
_INTERMEDIATE_SCRIPT_CHARS = 500
_INTERMEDIATE_TAGS = 2


def detect_tags(code: str) -> list[str]:
    """Return the feature tags found in the code, in checklist order."""
    lower = code.lower()
    return [tag for tag, pattern in _TAG_RULES if pattern.search(lower)]


def _detect_category(code: str, tags: list[str]) -> SnippetCategory:
    # First match wins. Games are checked before visualizations and forms
    # before layouts.
    lower = code.lower()
    has_canvas = bool(_CANVAS.search(lower))

    if has_canvas and _GAME_WORDS.search(lower):
        return SnippetCategory.GAME
    if "data-viz" in tags or (has_canvas and _DRAW_WORDS.search(lower)):
        return SnippetCategory.DATA_VISUALIZATION
    if "animation" in tags and len(_KEYFRAMES.findall(code)) > 2:
        return SnippetCategory.ANIMATION
    if _FORM.search(lower) and _INPUT.search(lower):
        return SnippetCategory.FORM
    if "api" in tags:
        return SnippetCategory.API_INTEGRATION
    if _LANDMARK.search(lower) and _CONTENT_LANDMARK.search(lower):
        return SnippetCategory.LANDING_PAGE
    if _LAYOUT.search(lower):
        return SnippetCategory.LAYOUT
    if _WIDGET.search(lower):
        return SnippetCategory.UI_COMPONENT
    return SnippetCategory.UNCATEGORIZED


def _estimate_difficulty(code: str, tag_count: int) -> Difficulty:
    line_count = len(code.split("\n"))
    script_length = sum(len(block) for block in script_blocks(code))

    if (
        line_count > _ADVANCED_LINES
        or script_length > _ADVANCED_SCRIPT_CHARS
        or tag_count > _ADVANCED_TAGS
    ):
        return Difficulty.ADVANCED
    if (
        line_count > _INTERMEDIATE_LINES
        or script_length > _INTERMEDIATE_SCRIPT_CHARS
        or tag_count > _INTERMEDIATE_TAGS
    ):
        return Difficulty.INTERMEDIATE
    return Difficulty.BEGINNER


def classify_by_heuristic(code: str) -> ClassificationResult:
    """Classify a snippet using pattern rules only.

    Args:
        code: The document text. May be empty.

    Returns:
        ClassificationResult with at most five tags.
    """
    tags = detect_tags(code)
    return ClassificationResult(
        category=_detect_category(code, tags),
        tags=tuple(tags[:MAX_TAGS]),
        difficulty=_estimate_difficulty(code, len(tags)),
    )

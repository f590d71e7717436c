"""Gemini API client for snippet classification and code improvement."""

import json
import logging
import os
import re
from typing import Any

import requests

from zenhtml.config import (
    API_KEY_ENV_VARS,
    API_KEY_FILES,
    GEMINI_ENDPOINT,
    GEMINI_MODEL,
    PROMPT_CODE_LIMIT,
    REQUEST_TIMEOUT,
)
from zenhtml.models.snippet import MAX_TAGS, ClassificationResult, Difficulty, SnippetCategory

_JSON_FENCE_START = re.compile(r"^```(?:json)?\n?")
_HTML_FENCE_START = re.compile(r"^```(?:html)?\n?")
_FENCE_END = re.compile(r"\n?```$")

_CLASSIFY_PROMPT = """\
Analyze this HTML/CSS/JS code and return a JSON object with exactly these fields:
- "category": one of [{categories}]
- "tags": array of 2-5 short descriptive tags (e.g. "flexbox", "dark-theme", "canvas", "responsive")
- "difficulty": one of [{difficulties}]

Return ONLY valid JSON. No markdown, no explanation.

Code:
{code}"""

_IMPROVE_PROMPT = """\
Improve the following HTML/CSS code to make it look professional, modern, and aesthetic. \
Return ONLY the complete HTML code block. Do not include markdown formatting or explanations.

Code:
{code}"""


def parse_classification_payload(text: str) -> ClassificationResult:
    """Parse a model reply into a ClassificationResult.

    Markdown code fences around the JSON are tolerated. Anything else that
    is off (bad JSON, unknown category or difficulty, tags not a list)
    raises ValueError so the caller can fall back to heuristics.
    """
    cleaned = _FENCE_END.sub("", _JSON_FENCE_START.sub("", text.strip())).strip()
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        msg = f"Classification reply is not JSON: {cleaned[:80]!r}"
        raise ValueError(msg) from e
    if not isinstance(parsed, dict):
        msg = f"Classification reply is not an object: {parsed!r}"
        raise ValueError(msg)

    try:
        category = SnippetCategory(parsed.get("category"))
        difficulty = Difficulty(parsed.get("difficulty"))
    except ValueError as e:
        msg = f"Classification reply has out-of-range values: {parsed!r}"
        raise ValueError(msg) from e

    tags = parsed.get("tags", [])
    if not isinstance(tags, list):
        msg = f"Classification tags are not a list: {tags!r}"
        raise ValueError(msg)

    return ClassificationResult(
        category=category,
        tags=tuple(str(t) for t in tags[:MAX_TAGS]),
        difficulty=difficulty,
    )


def strip_html_fence(text: str) -> str:
    return _FENCE_END.sub("", _HTML_FENCE_START.sub("", text)).strip()


class GeminiApi:
    """Gemini ``generateContent`` client.

    Implements both RemoteClassifierProtocol and CodeImproverProtocol.
    """

    def __init__(self, *, model: str = GEMINI_MODEL, timeout: float = REQUEST_TIMEOUT) -> None:
        self.model = model
        self.timeout = timeout
        self.sess = requests.Session()
        self.logger = logging.getLogger("gemini")

        api_key_source: str | None = None
        for var in API_KEY_ENV_VARS:
            if os.environ.get(var):
                self.api_key = os.environ[var].strip()
                api_key_source = f"${var}"
                break
        else:
            for key_path in API_KEY_FILES:
                try:
                    self.api_key = key_path.read_text(encoding="utf-8").strip()
                    api_key_source = str(key_path)
                    break
                except FileNotFoundError:
                    pass
            else:
                msg = (
                    f"Cannot find Gemini API key, was looking at {API_KEY_ENV_VARS!r} "
                    f"and {API_KEY_FILES!r}"
                )
                raise RuntimeError(msg)

        self.logger.debug(f"Gemini ready: key from {api_key_source!r}, model {self.model!r}")

    def generate(self, prompt: str) -> str:
        """Send a single-turn prompt and return the reply text."""
        self.logger.debug(f"Making request: {self.model!r} {prompt[:32]!r}")

        r = self.sess.post(
            f"{GEMINI_ENDPOINT}/{self.model}:generateContent",
            params={"key": self.api_key},
            json={"contents": [{"parts": [{"text": prompt}]}]},
            timeout=self.timeout,
        )
        r.raise_for_status()
        rv: dict[str, Any] = r.json()

        candidates = rv.get("candidates") or []
        if not candidates:
            msg = f"Gemini returned no candidates: {rv.get('promptFeedback')!r}"
            raise RuntimeError(msg)
        parts = candidates[0].get("content", {}).get("parts", [])
        return "".join(p.get("text", "") for p in parts)

    def classify(self, code: str) -> ClassificationResult:
        """Classify a snippet. Raises on any failure."""
        prompt = _CLASSIFY_PROMPT.format(
            categories=", ".join(c.value for c in SnippetCategory),
            difficulties=", ".join(f'"{d.value}"' for d in Difficulty),
            code=code[:PROMPT_CODE_LIMIT],
        )
        return parse_classification_payload(self.generate(prompt))

    def improve(self, code: str) -> str:
        """Return a polished version of the code. Raises on any failure."""
        return strip_html_fence(self.generate(_IMPROVE_PROMPT.format(code=code)))

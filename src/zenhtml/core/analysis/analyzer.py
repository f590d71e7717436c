"""Line, tag, selector and function counts for a single HTML document."""

import re

from zenhtml.models.stats import CodeStats

_STYLE_OPEN = re.compile(r"<style[\s>]", re.IGNORECASE | re.ASCII)
_STYLE_CLOSE = re.compile(r"</style>", re.IGNORECASE | re.ASCII)
_SCRIPT_OPEN = re.compile(r"<script[\s>]", re.IGNORECASE | re.ASCII)
_SCRIPT_CLOSE = re.compile(r"</script>", re.IGNORECASE | re.ASCII)

_TAG = re.compile(r"<[a-z][a-z0-9-]*", re.IGNORECASE | re.ASCII)
_STYLE_BLOCK = re.compile(r"<style[\s\S]*?</style>", re.IGNORECASE | re.ASCII)
_SCRIPT_BLOCK = re.compile(r"<script[\s\S]*?</script>", re.IGNORECASE | re.ASCII)

# Text preceding each "{". Comma-separated selector lists count once.
_SELECTOR = re.compile(r"[^{}]+(?=\s*\{)")
_FUNCTION = re.compile(r"function\s+\w+|=>\s*[({]|\.addEventListener", re.ASCII)

_RESPONSIVE = re.compile(r"@media", re.IGNORECASE | re.ASCII)
_ANIMATION = re.compile(r"@keyframes|animation:|transition:", re.IGNORECASE | re.ASCII)
_EXTERNAL = re.compile(r"""src=["']https?:|href=["']https?:""", re.IGNORECASE | re.ASCII)


def style_blocks(code: str) -> list[str]:
    """Return every ``<style>...</style>`` block, tags included."""
    return _STYLE_BLOCK.findall(code)


def script_blocks(code: str) -> list[str]:
    """Return every ``<script>...</script>`` block, tags included."""
    return _SCRIPT_BLOCK.findall(code)


def _count_section_lines(lines: list[str]) -> tuple[int, int, int]:
    """Split lines into (html, css, js) counts.

    A line holding a closing tag belongs to the section it closes. Blank
    lines outside style and script blocks are not counted.
    """
    in_style = False
    in_script = False
    html_lines = css_lines = js_lines = 0

    for line in lines:
        trimmed = line.strip()
        if _STYLE_OPEN.search(trimmed):
            in_style = True
        if _STYLE_CLOSE.search(trimmed):
            in_style = False
            css_lines += 1
            continue
        if _SCRIPT_OPEN.search(trimmed):
            in_script = True
        if _SCRIPT_CLOSE.search(trimmed):
            in_script = False
            js_lines += 1
            continue

        if in_style:
            css_lines += 1
        elif in_script:
            js_lines += 1
        elif trimmed:
            html_lines += 1

    return html_lines, css_lines, js_lines


def analyze_code(code: str) -> CodeStats:
    """Compute approximate size and shape statistics for an HTML document.

    None of the counts come from a real parser: tags are ``<`` followed by a
    letter, selectors are the text in front of each ``{`` inside style
    blocks, functions are declarations, arrow openings and
    ``addEventListener`` call sites inside script blocks.

    Args:
        code: The document text. May be empty.

    Returns:
        CodeStats for the document. Never raises.
    """
    lines = code.split("\n")
    html_lines, css_lines, js_lines = _count_section_lines(lines)

    all_css = "\n".join(style_blocks(code))
    all_js = "\n".join(script_blocks(code))

    return CodeStats(
        total_chars=len(code),
        total_lines=len(lines),
        html_lines=html_lines,
        css_lines=css_lines,
        js_lines=js_lines,
        tag_count=len(_TAG.findall(code)),
        selector_count=len(_SELECTOR.findall(all_css)),
        function_count=len(_FUNCTION.findall(all_js)),
        has_responsive=bool(_RESPONSIVE.search(code)),
        has_animation=bool(_ANIMATION.search(code)),
        has_external_resources=bool(_EXTERNAL.search(code)),
    )

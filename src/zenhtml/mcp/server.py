"""MCP server exposing snippet analysis, classification and library statistics."""

import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

from loguru import logger
from mcp.server.fastmcp import Context, FastMCP

from zenhtml.config import DATABASE_FILENAME, resolve_data_directory
from zenhtml.core.analysis.analyzer import analyze_code
from zenhtml.core.classify.heuristic import classify_by_heuristic
from zenhtml.core.curriculum.steps import curriculum_progress, sorted_steps, step_snippet_name
from zenhtml.core.library.operations import find_snippet
from zenhtml.core.stats.aggregator import compute_library_stats
from zenhtml.protocols import StorageProtocol
from zenhtml.storage.sqlite_backend import SqliteStorage, open_storage


def _now_ms() -> int:
    return int(time.time() * 1000)


def _resolve_code(
    storage: StorageProtocol, code: str | None, snippet_id: str | None
) -> tuple[str | None, str | None]:
    """Return (code, error)."""
    if code is not None:
        return code, None
    if snippet_id is None:
        return None, "Provide either code or snippet_id."
    snippet = find_snippet(storage.load_snippets(), snippet_id)
    if snippet is None:
        return None, f"Snippet '{snippet_id}' not found."
    return snippet.code, None


# --- Core functions (testable without MCP context) ---


def snippet_analyze(
    storage: StorageProtocol, *, code: str | None = None, snippet_id: str | None = None
) -> dict[str, Any]:
    """Compute line, tag, selector and function counts for a snippet.

    Args:
        code: Raw HTML document. Takes precedence over snippet_id.
        snippet_id: ID of a saved snippet.
    """
    text, error = _resolve_code(storage, code, snippet_id)
    if text is None:
        return {"error": error}
    return {"stats": analyze_code(text).to_dict()}


def snippet_classify(
    storage: StorageProtocol, *, code: str | None = None, snippet_id: str | None = None
) -> dict[str, Any]:
    """Classify a snippet with the pattern-based classifier.

    Args:
        code: Raw HTML document. Takes precedence over snippet_id.
        snippet_id: ID of a saved snippet.
    """
    text, error = _resolve_code(storage, code, snippet_id)
    if text is None:
        return {"error": error}
    return classify_by_heuristic(text).to_dict()


def library_stats(storage: StorageProtocol, *, now: int | None = None) -> dict[str, Any]:
    """Summarize the saved library."""
    stats = compute_library_stats(
        storage.load_snippets(),
        storage.load_folders(),
        storage.load_curriculums(),
        now=_now_ms() if now is None else now,
    )
    return stats.to_dict()


def curriculum_overview(storage: StorageProtocol) -> dict[str, Any]:
    """List curriculums with progress and their steps in order."""
    snippets = storage.load_snippets()
    curriculums = storage.load_curriculums()
    return {
        "curriculums": [
            {
                "id": c.id,
                "name": c.name,
                "description": c.description,
                "progress": curriculum_progress(c),
                "steps": [
                    {
                        "id": s.id,
                        "order": s.order,
                        "snippet_id": s.snippet_id,
                        "snippet": step_snippet_name(snippets, s.snippet_id),
                        "note": s.note,
                        "is_completed": s.is_completed,
                    }
                    for s in sorted_steps(c.steps)
                ],
            }
            for c in curriculums
        ],
        "count": len(curriculums),
    }


# --- MCP wiring ---


@dataclass
class ServerContext:
    """Shared resources for the MCP server lifetime."""

    storage: SqliteStorage


@asynccontextmanager
async def server_lifespan(_server: FastMCP) -> AsyncIterator[ServerContext]:
    """Open the library database on startup, close on shutdown."""
    db_path = resolve_data_directory() / DATABASE_FILENAME
    logger.info("Opening snippet library at {}", db_path)
    storage = open_storage(db_path)
    try:
        yield ServerContext(storage=storage)
    finally:
        storage.close()


mcp_server = FastMCP(
    "zenhtml",
    instructions="""\
Tools for a library of short HTML/CSS/JS snippets.

- snippet_analyze_tool: size and shape statistics for a snippet.
- snippet_classify_tool: category, tags and difficulty for a snippet.
- library_stats_tool: distributions and recent activity over the library.
- curriculum_overview_tool: learning paths with progress.
""",
    lifespan=server_lifespan,
)


def _ctx(mcp_ctx: Context) -> ServerContext:
    return mcp_ctx.request_context.lifespan_context  # type: ignore[return-value]


@mcp_server.tool()
async def snippet_analyze_tool(
    ctx: Context, code: str | None = None, snippet_id: str | None = None
) -> dict[str, Any]:
    """Compute line, tag, selector and function counts for a snippet.

    Args:
        code: Raw HTML document. Takes precedence over snippet_id.
        snippet_id: ID of a saved snippet.
    """
    return snippet_analyze(_ctx(ctx).storage, code=code, snippet_id=snippet_id)


@mcp_server.tool()
async def snippet_classify_tool(
    ctx: Context, code: str | None = None, snippet_id: str | None = None
) -> dict[str, Any]:
    """Classify a snippet into a category with tags and a difficulty.

    Args:
        code: Raw HTML document. Takes precedence over snippet_id.
        snippet_id: ID of a saved snippet.
    """
    return snippet_classify(_ctx(ctx).storage, code=code, snippet_id=snippet_id)


@mcp_server.tool()
async def library_stats_tool(ctx: Context) -> dict[str, Any]:
    """Summarize the library: totals, distributions and 14-day activity."""
    return library_stats(_ctx(ctx).storage)


@mcp_server.tool()
async def curriculum_overview_tool(ctx: Context) -> dict[str, Any]:
    """List curriculums with completion progress and ordered steps."""
    return curriculum_overview(_ctx(ctx).storage)


def run_mcp_server() -> None:
    """Run the MCP server with stdio transport."""
    from zenhtml.logging_config import configure_logging

    configure_logging(verbose=False)
    mcp_server.run(transport="stdio")

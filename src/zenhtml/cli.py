"""CLI for the zenhtml snippet library."""

import json
import time
from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from zenhtml.ai.gemini import GeminiApi
from zenhtml.config import DATABASE_FILENAME, resolve_data_directory
from zenhtml.core.analysis.analyzer import analyze_code
from zenhtml.core.classify.heuristic import classify_by_heuristic
from zenhtml.core.classify.service import classify_all, classify_snippet, improve_code
from zenhtml.core.curriculum import steps as curriculum_ops
from zenhtml.core.importer.html_import import import_html_directory
from zenhtml.core.library import operations as library_ops
from zenhtml.core.stats.aggregator import compute_library_stats
from zenhtml.logging_config import configure_logging
from zenhtml.models.curriculum import Curriculum
from zenhtml.storage.sqlite_backend import SqliteStorage, open_storage
from zenhtml.writer import SnippetExporter

app = typer.Typer(help="zenhtml: organize, classify and analyze HTML snippets.")
folder_app = typer.Typer(help="Manage snippet folders.")
curriculum_app = typer.Typer(help="Manage curriculums (ordered learning paths).")
app.add_typer(folder_app, name="folder")
app.add_typer(curriculum_app, name="curriculum")

DataDirOption = Annotated[
    Path | None,
    typer.Option("--data-dir", "-d", help="Library database directory"),
]
JsonOption = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")]


def _now_ms() -> int:
    return int(time.time() * 1000)


def _open_library(data_dir: Path | None) -> SqliteStorage:
    dst = data_dir or resolve_data_directory()
    return open_storage(dst / DATABASE_FILENAME)


def _read_code_file(path: Path) -> str:
    if not path.is_file():
        logger.error("File not found: {}", path)
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8")


def _gemini_or_none() -> GeminiApi | None:
    """Build the Gemini client, or None when no API key is configured."""
    try:
        return GeminiApi()
    except RuntimeError as e:
        logger.warning("Remote assistant unavailable, using heuristics: {}", e)
        return None


def _find_curriculum(curriculums: list[Curriculum], curriculum_id: str) -> Curriculum:
    for c in curriculums:
        if c.id == curriculum_id:
            return c
    typer.echo(f"Curriculum '{curriculum_id}' not found.")
    raise typer.Exit(1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


# --- Snippets ---


@app.command(name="import")
def import_cmd(
    source_dir: Path = typer.Argument(..., help="Directory tree with .html files"),
    persist: bool = typer.Option(
        False, "--persist", "-p", help="Save imported snippets into the library"
    ),
    data_dir: DataDirOption = None,
    output_json: JsonOption = False,
) -> None:
    """Import .html files. Without --persist the batch is only classified and shown."""
    if not source_dir.is_dir():
        logger.error("Source directory not found: {}", source_dir)
        raise typer.Exit(1)

    result = import_html_directory(source_dir, now=_now_ms())

    if persist:
        storage = _open_library(data_dir)
        try:
            folders = [
                *storage.load_folders(),
                *(replace(f, is_local=False) for f in result.folders),
            ]
            snippets = [
                *storage.load_snippets(),
                *(replace(s, is_local=False) for s in result.snippets),
            ]
            storage.save_folders(folders)
            storage.save_snippets(snippets)
        finally:
            storage.close()

    if output_json:
        data = {
            "folders": [f.to_dict() for f in result.folders],
            "snippets": [
                {
                    "name": s.name,
                    "file_path": s.file_path,
                    **classify_by_heuristic(s.code).to_dict(),
                }
                for s in result.snippets
            ],
            "skipped": result.files_skipped,
            "persisted": persist,
        }
        typer.echo(json.dumps(data, indent=2))
        return

    typer.echo(
        f"Imported {len(result.snippets)} snippets in {len(result.folders)} folders, "
        f"skipped {result.files_skipped}" + (" (saved)" if persist else "")
    )
    for s in result.snippets:
        c = classify_by_heuristic(s.code)
        typer.echo(f"  {s.name}  [{c.category.value}, {c.difficulty.value}]  {s.file_path}")


@app.command(name="list")
def list_cmd(
    folder: Annotated[
        str | None,
        typer.Option("--folder", "-f", help="Only snippets in this folder id"),
    ] = None,
    data_dir: DataDirOption = None,
    output_json: JsonOption = False,
) -> None:
    """List saved snippets."""
    storage = _open_library(data_dir)
    try:
        snippets = storage.load_snippets()
        folders = {f.id: f.name for f in storage.load_folders()}
    finally:
        storage.close()

    if folder is not None:
        snippets = [s for s in snippets if s.folder_id == folder]

    if output_json:
        data = {
            "snippets": [
                {k: v for k, v in s.to_dict().items() if k != "code"} for s in snippets
            ],
            "count": len(snippets),
        }
        typer.echo(json.dumps(data, indent=2))
        return

    typer.echo(f"{len(snippets)} snippets:\n")
    for s in snippets:
        folder_name = folders.get(s.folder_id, "-") if s.folder_id else "-"
        category = s.category.value if s.category else "unclassified"
        typer.echo(f"  {s.name} ({folder_name}) - {category}  [id={s.id}]")


@app.command()
def new(
    name: Annotated[str | None, typer.Option("--name", "-n", help="Snippet name")] = None,
    file: Annotated[
        Path | None,
        typer.Option("--file", "-F", help="Read code from this file"),
    ] = None,
    folder: Annotated[str | None, typer.Option("--folder", "-f", help="Folder id")] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Create a snippet, from a file or from the starter document."""
    storage = _open_library(data_dir)
    try:
        if folder and library_ops.find_folder(storage.load_folders(), folder) is None:
            typer.echo(f"Folder '{folder}' not found.")
            raise typer.Exit(1)
        kwargs = {"code": _read_code_file(file)} if file else {}
        snippets = library_ops.create_snippet(
            storage.load_snippets(), now=_now_ms(), folder_id=folder, name=name, **kwargs
        )
        storage.save_snippets(snippets)
        typer.echo(f"Created {snippets[-1].name}  [id={snippets[-1].id}]")
    finally:
        storage.close()


@app.command()
def delete(
    snippet_id: str = typer.Argument(..., help="Snippet id"),
    data_dir: DataDirOption = None,
) -> None:
    """Delete a snippet. Curriculum steps pointing at it are kept."""
    storage = _open_library(data_dir)
    try:
        snippets = storage.load_snippets()
        if library_ops.find_snippet(snippets, snippet_id) is None:
            typer.echo(f"Snippet '{snippet_id}' not found.")
            raise typer.Exit(1)
        storage.save_snippets(library_ops.delete_snippet(snippets, snippet_id))
        typer.echo(f"Deleted {snippet_id}")
    finally:
        storage.close()


@app.command()
def move(
    snippet_id: str = typer.Argument(..., help="Snippet id"),
    folder: Annotated[
        str | None,
        typer.Option("--folder", "-f", help="Target folder id (omit for no folder)"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Move a snippet into a folder, or out of any folder."""
    storage = _open_library(data_dir)
    try:
        snippets = storage.load_snippets()
        if library_ops.find_snippet(snippets, snippet_id) is None:
            typer.echo(f"Snippet '{snippet_id}' not found.")
            raise typer.Exit(1)
        if folder and library_ops.find_folder(storage.load_folders(), folder) is None:
            typer.echo(f"Folder '{folder}' not found.")
            raise typer.Exit(1)
        storage.save_snippets(library_ops.move_snippet(snippets, snippet_id, folder))
        typer.echo(f"Moved {snippet_id} to {folder or 'no folder'}")
    finally:
        storage.close()


@app.command()
def edit(
    snippet_id: str = typer.Argument(..., help="Snippet id"),
    file: Path = typer.Option(..., "--file", "-F", help="Read new code from this file"),
    data_dir: DataDirOption = None,
) -> None:
    """Replace a snippet's code."""
    code = _read_code_file(file)
    storage = _open_library(data_dir)
    try:
        snippets = storage.load_snippets()
        if library_ops.find_snippet(snippets, snippet_id) is None:
            typer.echo(f"Snippet '{snippet_id}' not found.")
            raise typer.Exit(1)
        storage.save_snippets(
            library_ops.update_snippet_code(snippets, snippet_id, code, now=_now_ms())
        )
        typer.echo(f"Updated {snippet_id}")
    finally:
        storage.close()


@app.command()
def scratch(
    file: Annotated[
        Path | None,
        typer.Option("--file", "-F", help="Store this file as the scratchpad"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Print the scratchpad document, or replace it with --file."""
    storage = _open_library(data_dir)
    try:
        if file is None:
            typer.echo(storage.load_code())
        else:
            storage.save_code(_read_code_file(file))
            typer.echo("Scratchpad saved")
    finally:
        storage.close()


@app.command()
def analyze(
    file: Annotated[Path | None, typer.Argument(help="HTML file to analyze")] = None,
    snippet: Annotated[
        str | None,
        typer.Option("--snippet", "-s", help="Analyze a saved snippet instead"),
    ] = None,
    data_dir: DataDirOption = None,
    output_json: JsonOption = False,
) -> None:
    """Show line, tag, selector and function counts."""
    if file is not None:
        code = _read_code_file(file)
    elif snippet is not None:
        storage = _open_library(data_dir)
        try:
            found = library_ops.find_snippet(storage.load_snippets(), snippet)
        finally:
            storage.close()
        if found is None:
            typer.echo(f"Snippet '{snippet}' not found.")
            raise typer.Exit(1)
        code = found.code
    else:
        typer.echo("Give a FILE or --snippet.")
        raise typer.Exit(1)

    stats = analyze_code(code)
    if output_json:
        typer.echo(json.dumps(stats.to_dict(), indent=2))
        return

    typer.echo(f"  chars: {stats.total_chars}  lines: {stats.total_lines}")
    typer.echo(f"  html: {stats.html_lines}  css: {stats.css_lines}  js: {stats.js_lines}")
    typer.echo(
        f"  tags: {stats.tag_count}  selectors: {stats.selector_count}  "
        f"functions: {stats.function_count}"
    )
    flags = [
        name
        for name, on in (
            ("responsive", stats.has_responsive),
            ("animation", stats.has_animation),
            ("external resources", stats.has_external_resources),
        )
        if on
    ]
    typer.echo(f"  features: {', '.join(flags) or 'none'}")


@app.command()
def classify(
    snippet_id: Annotated[str | None, typer.Argument(help="Snippet id")] = None,
    all_snippets: bool = typer.Option(False, "--all", "-a", help="Classify every snippet"),
    remote: bool = typer.Option(
        False, "--remote", "-r", help="Ask Gemini first, fall back to heuristics"
    ),
    data_dir: DataDirOption = None,
    output_json: JsonOption = False,
) -> None:
    """Classify snippets and save category, tags and difficulty."""
    if not snippet_id and not all_snippets:
        typer.echo("Give a snippet id or --all.")
        raise typer.Exit(1)

    classifier = _gemini_or_none() if remote else None
    storage = _open_library(data_dir)
    try:
        snippets = storage.load_snippets()
        if all_snippets:
            batch = classify_all(snippets, classifier, now=_now_ms())
            storage.save_snippets(batch.snippets)
            changed = batch.snippets
            typer.echo(
                f"Classified {len(changed)} snippets "
                f"({batch.remote_count} remote, {batch.fallback_count} fallback)"
            )
        else:
            target = library_ops.find_snippet(snippets, snippet_id or "")
            if target is None:
                typer.echo(f"Snippet '{snippet_id}' not found.")
                raise typer.Exit(1)
            result = classify_snippet(target.code, classifier)
            updated = library_ops.apply_classification(target, result, now=_now_ms())
            storage.save_snippets([updated if s.id == updated.id else s for s in snippets])
            changed = [updated]
    finally:
        storage.close()

    if output_json:
        data = [
            {"id": s.id, "name": s.name, **s.classification.to_dict()}  # type: ignore[union-attr]
            for s in changed
        ]
        typer.echo(json.dumps(data, indent=2))
        return
    for s in changed:
        typer.echo(
            f"  {s.name}: {s.category.value if s.category else '-'} "
            f"({s.difficulty.value if s.difficulty else '-'}) tags={', '.join(s.tags) or '-'}"
        )


@app.command()
def stats(
    data_dir: DataDirOption = None,
    output_json: JsonOption = False,
) -> None:
    """Show library statistics and the last 14 days of activity."""
    storage = _open_library(data_dir)
    try:
        library_stats = compute_library_stats(
            storage.load_snippets(),
            storage.load_folders(),
            storage.load_curriculums(),
            now=_now_ms(),
        )
    finally:
        storage.close()

    if output_json:
        typer.echo(json.dumps(library_stats.to_dict(), indent=2))
        return

    typer.echo(
        f"{library_stats.total_snippets} snippets, {library_stats.total_folders} folders, "
        f"{library_stats.total_curriculums} curriculums"
    )
    typer.echo(
        f"Average length {library_stats.avg_code_length} chars, "
        f"{library_stats.total_code_lines} lines total\n"
    )
    typer.echo("Categories:")
    for category, count in library_stats.category_distribution.items():
        if count:
            typer.echo(f"  {category}: {count}")
    typer.echo("Difficulty:")
    for difficulty, count in library_stats.difficulty_distribution.items():
        typer.echo(f"  {difficulty}: {count}")
    typer.echo("Recent activity:")
    for bucket in library_stats.recent_activity:
        typer.echo(f"  {bucket.date}  {'#' * bucket.count}")


@app.command()
def improve(
    file: Path = typer.Argument(..., help="HTML file to improve"),
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write here instead of stdout"),
    ] = None,
) -> None:
    """Ask Gemini to polish a document. Prints the original code on failure."""
    code = _read_code_file(file)
    improved = improve_code(code, _gemini_or_none())
    if output is None:
        typer.echo(improved)
    else:
        output.write_text(improved, encoding="utf-8")
        typer.echo(f"Wrote {output}")


@app.command()
def export(
    output_dir: Path = typer.Argument(..., help="Directory for .html files"),
    clean: bool = typer.Option(False, "--clean", help="Remove stale .html files"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Do not write anything"),
    data_dir: DataDirOption = None,
) -> None:
    """Write every saved snippet to its own .html file."""
    storage = _open_library(data_dir)
    try:
        snippets = storage.load_snippets()
    finally:
        storage.close()

    exporter = SnippetExporter(output_dir, dry_run=dry_run)
    written = exporter.export_snippets(snippets)
    exporter.finalize(delete_others=clean)
    typer.echo(
        f"Exported {len(written)} snippets: {exporter.num_new} new, "
        f"{exporter.num_changed} changed, {exporter.num_same} unchanged, "
        f"{len(exporter.removed)} removed"
    )


@app.command()
def serve() -> None:
    """Start the MCP server (stdio transport)."""
    from zenhtml.mcp.server import run_mcp_server

    run_mcp_server()


# --- Folders ---


@folder_app.command(name="create")
def folder_create(
    name: Annotated[str | None, typer.Argument(help="Folder name")] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Create a folder."""
    storage = _open_library(data_dir)
    try:
        folders = library_ops.create_folder(storage.load_folders(), name=name)
        storage.save_folders(folders)
        typer.echo(f"Created {folders[-1].name}  [id={folders[-1].id}]")
    finally:
        storage.close()


@folder_app.command(name="rename")
def folder_rename(
    folder_id: str = typer.Argument(..., help="Folder id"),
    name: str = typer.Argument(..., help="New name"),
    data_dir: DataDirOption = None,
) -> None:
    """Rename a folder."""
    storage = _open_library(data_dir)
    try:
        folders = storage.load_folders()
        if library_ops.find_folder(folders, folder_id) is None:
            typer.echo(f"Folder '{folder_id}' not found.")
            raise typer.Exit(1)
        storage.save_folders(library_ops.rename_folder(folders, folder_id, name))
        typer.echo(f"Renamed {folder_id} to {name}")
    finally:
        storage.close()


@folder_app.command(name="delete")
def folder_delete(
    folder_id: str = typer.Argument(..., help="Folder id"),
    data_dir: DataDirOption = None,
) -> None:
    """Delete a folder. Its snippets move to no folder."""
    storage = _open_library(data_dir)
    try:
        folders = storage.load_folders()
        if library_ops.find_folder(folders, folder_id) is None:
            typer.echo(f"Folder '{folder_id}' not found.")
            raise typer.Exit(1)
        new_folders, new_snippets = library_ops.delete_folder(
            folders, storage.load_snippets(), folder_id
        )
        storage.save_folders(new_folders)
        storage.save_snippets(new_snippets)
        typer.echo(f"Deleted folder {folder_id}")
    finally:
        storage.close()


# --- Curriculums ---


def _print_curriculum(storage: SqliteStorage, curriculum: Curriculum) -> None:
    snippets = storage.load_snippets()
    progress = curriculum_ops.curriculum_progress(curriculum)
    typer.echo(f"{curriculum.name} - {progress}%  [id={curriculum.id}]")
    if curriculum.description:
        typer.echo(f"  {curriculum.description}")
    for step in curriculum_ops.sorted_steps(curriculum.steps):
        mark = "x" if step.is_completed else " "
        name = curriculum_ops.step_snippet_name(snippets, step.snippet_id)
        typer.echo(f"  {step.order + 1}. [{mark}] {name}  [step={step.id}]")
        if step.note:
            typer.echo(f"       note: {step.note}")


@curriculum_app.command(name="create")
def curriculum_create(
    name: str = typer.Argument(..., help="Curriculum name"),
    description: Annotated[
        str, typer.Option("--description", "-D", help="Short description")
    ] = "",
    data_dir: DataDirOption = None,
) -> None:
    """Create an empty curriculum."""
    if not name.strip():
        typer.echo("Curriculum name must not be empty.")
        raise typer.Exit(1)
    storage = _open_library(data_dir)
    try:
        curriculums = curriculum_ops.create_curriculum(
            storage.load_curriculums(), name.strip(), description.strip(), now=_now_ms()
        )
        storage.save_curriculums(curriculums)
        typer.echo(f"Created {curriculums[-1].name}  [id={curriculums[-1].id}]")
    finally:
        storage.close()


@curriculum_app.command(name="delete")
def curriculum_delete(
    curriculum_id: str = typer.Argument(..., help="Curriculum id"),
    data_dir: DataDirOption = None,
) -> None:
    """Delete a curriculum and its steps."""
    storage = _open_library(data_dir)
    try:
        curriculums = storage.load_curriculums()
        _find_curriculum(curriculums, curriculum_id)
        storage.save_curriculums(curriculum_ops.delete_curriculum(curriculums, curriculum_id))
        typer.echo(f"Deleted curriculum {curriculum_id}")
    finally:
        storage.close()


@curriculum_app.command(name="list")
def curriculum_list(
    data_dir: DataDirOption = None,
    output_json: JsonOption = False,
) -> None:
    """List curriculums with progress."""
    storage = _open_library(data_dir)
    try:
        curriculums = storage.load_curriculums()
    finally:
        storage.close()

    if output_json:
        data = {
            "curriculums": [
                {**c.to_dict(), "progress": curriculum_ops.curriculum_progress(c)}
                for c in curriculums
            ],
            "count": len(curriculums),
        }
        typer.echo(json.dumps(data, indent=2))
        return
    typer.echo(f"{len(curriculums)} curriculums:\n")
    for c in curriculums:
        typer.echo(
            f"  {c.name} - {len(c.steps)} steps, "
            f"{curriculum_ops.curriculum_progress(c)}%  [id={c.id}]"
        )


@curriculum_app.command(name="show")
def curriculum_show(
    curriculum_id: str = typer.Argument(..., help="Curriculum id"),
    data_dir: DataDirOption = None,
) -> None:
    """Show a curriculum's steps in order."""
    storage = _open_library(data_dir)
    try:
        curriculum = _find_curriculum(storage.load_curriculums(), curriculum_id)
        _print_curriculum(storage, curriculum)
    finally:
        storage.close()


@curriculum_app.command(name="add-step")
def curriculum_add_step(
    curriculum_id: str = typer.Argument(..., help="Curriculum id"),
    snippet_id: str = typer.Argument(..., help="Snippet id"),
    note: Annotated[str, typer.Option("--note", "-n", help="Note for this step")] = "",
    data_dir: DataDirOption = None,
) -> None:
    """Append a snippet as the last step of a curriculum."""
    storage = _open_library(data_dir)
    try:
        curriculums = storage.load_curriculums()
        _find_curriculum(curriculums, curriculum_id)
        if library_ops.find_snippet(storage.load_snippets(), snippet_id) is None:
            typer.echo(f"Snippet '{snippet_id}' not found.")
            raise typer.Exit(1)
        curriculums = curriculum_ops.add_step(
            curriculums, curriculum_id, snippet_id, note, now=_now_ms()
        )
        storage.save_curriculums(curriculums)
        _print_curriculum(storage, _find_curriculum(curriculums, curriculum_id))
    finally:
        storage.close()


@curriculum_app.command(name="remove-step")
def curriculum_remove_step(
    curriculum_id: str = typer.Argument(..., help="Curriculum id"),
    step_id: str = typer.Argument(..., help="Step id"),
    data_dir: DataDirOption = None,
) -> None:
    """Remove a step; later steps move up."""
    storage = _open_library(data_dir)
    try:
        curriculums = curriculum_ops.remove_step(
            storage.load_curriculums(), curriculum_id, step_id, now=_now_ms()
        )
        curriculum = _find_curriculum(curriculums, curriculum_id)
        storage.save_curriculums(curriculums)
        _print_curriculum(storage, curriculum)
    finally:
        storage.close()


@curriculum_app.command(name="toggle")
def curriculum_toggle(
    curriculum_id: str = typer.Argument(..., help="Curriculum id"),
    step_id: str = typer.Argument(..., help="Step id"),
    data_dir: DataDirOption = None,
) -> None:
    """Mark a step done, or not done again."""
    storage = _open_library(data_dir)
    try:
        curriculums = curriculum_ops.toggle_step(
            storage.load_curriculums(), curriculum_id, step_id, now=_now_ms()
        )
        curriculum = _find_curriculum(curriculums, curriculum_id)
        storage.save_curriculums(curriculums)
        _print_curriculum(storage, curriculum)
    finally:
        storage.close()


@curriculum_app.command(name="move")
def curriculum_move(
    curriculum_id: str = typer.Argument(..., help="Curriculum id"),
    step_id: str = typer.Argument(..., help="Step id"),
    direction: str = typer.Argument(..., help="'up' or 'down'"),
    data_dir: DataDirOption = None,
) -> None:
    """Move a step one position up or down."""
    if direction not in ("up", "down"):
        typer.echo(f"Direction must be 'up' or 'down', not {direction!r}.")
        raise typer.Exit(1)
    storage = _open_library(data_dir)
    try:
        curriculums = curriculum_ops.reorder_step(
            storage.load_curriculums(),
            curriculum_id,
            step_id,
            direction,
            now=_now_ms(),
        )
        curriculum = _find_curriculum(curriculums, curriculum_id)
        storage.save_curriculums(curriculums)
        _print_curriculum(storage, curriculum)
    finally:
        storage.close()

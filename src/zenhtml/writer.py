"""Export snippets as .html files, touching only files whose contents changed."""

import logging
import os
import shlex
from collections.abc import Sequence
from pathlib import Path

from zenhtml.core.importer.html_import import MAX_FILENAME_LENGTH, sanitize_file_name
from zenhtml.models.snippet import Snippet


def _raise(x: Exception) -> None:
    """Workaround for python's hate of one-liners."""
    raise x


def _fit_name(base: str, tail: str) -> str:
    """Trim base so that base + tail fits in one file name (measured in UTF-8 bytes)."""
    room = MAX_FILENAME_LENGTH - len(tail.encode("utf-8"))
    return base.encode("utf-8")[:room].decode("utf-8", errors="ignore") + tail


class SnippetExporter:
    """Write snippets into an output directory.

    - Do not rewrite files whose contents are the same.
    - Keep a list of written files; ``finalize`` can remove pre-existing
      .html files which were not written this time.

    The result is equivalent to emptying the directory and writing every
    snippet again, but unchanged files keep their mtime.
    """

    def __init__(self, output_dir: str | Path, *, dry_run: bool = False) -> None:
        self.output_dir = str(Path(output_dir).resolve())
        self.dry_run = dry_run
        self.logger = logging.getLogger("exporter")

        if not dry_run:
            Path(self.output_dir).mkdir(parents=True, exist_ok=True)

        self.logger.debug(f"Exporter ready, output_dir {output_dir!r}, dry_run {dry_run!r}")
        # Absolute paths written (or found identical) this session.
        self._files_made: set[str] = set()
        self._unique_names: set[str] = set()

        self.num_same = 0
        self.num_changed = 0
        self.num_new = 0
        self.removed: list[str] = []

    def is_possible_output(self, fname: str) -> bool:
        """Only .html files are ever written or cleaned up."""
        return fname.endswith(".html")

    def _resolve(self, fname_rel: str) -> str:
        if Path(fname_rel).is_absolute():
            msg = f"must be relative: {fname_rel!r}"
            raise ValueError(msg)
        fname = str((Path(self.output_dir) / fname_rel).resolve())
        if not fname.startswith(self.output_dir + os.sep):
            msg = f"Path escapes output dir: {fname!r}"
            raise ValueError(msg)
        return fname

    def make_unique_name(self, base: str, *, suffix: str = ".html") -> str:
        """Append ``-N`` to base until ``base + suffix`` is unused this session.

        Long bases are cut so the whole name stays within 255 bytes.
        """
        unique_str = ""
        unique_count = 0
        while True:
            name = _fit_name(base, unique_str + suffix)
            fname = self._resolve(name)
            if fname not in self._files_made and fname not in self._unique_names:
                break
            unique_count += 1
            unique_str = f"-{unique_count}"

        self._unique_names.add(fname)
        return name

    def write_file(self, fname_rel: str, contents: str) -> None:
        """Write contents to a file relative to the output directory."""
        fname = self._resolve(fname_rel)
        if not self.is_possible_output(fname):
            msg = f"Wanted to write {fname!r} but is_possible_output() returns False"
            raise ValueError(msg)

        self._files_made.add(fname)
        action = "create"
        try:
            with open(fname, encoding="utf-8") as f:
                if f.read() == contents:
                    self.num_same += 1
                    return
            action = "update"
        except (FileNotFoundError, UnicodeDecodeError):
            pass

        if action == "update":
            self.num_changed += 1
        else:
            self.num_new += 1

        if self.dry_run:
            self.logger.info(f"dry-run: would {action} {fname!r}")
        else:
            self.logger.debug(f"Writing ({action}) {fname!r}")
            with open(fname, "w", encoding="utf-8") as f:
                f.write(contents)

    def export_snippets(self, snippets: Sequence[Snippet]) -> dict[str, str]:
        """Write every snippet, returning a map of snippet id to file name."""
        written: dict[str, str] = {}
        for snippet in snippets:
            base = sanitize_file_name(snippet.name) or f"zen-{snippet.id}"
            fname_rel = self.make_unique_name(base)
            self.write_file(fname_rel, snippet.code)
            written[snippet.id] = fname_rel
        return written

    def finalize(self, *, delete_others: bool = False) -> None:
        """Log update statistics and optionally remove stale .html files.

        Any non-.html file in the output directory disables cleanup.
        """
        to_clean: list[str] = []
        suspicious: list[str] = []

        if not Path(self.output_dir).is_dir():
            self.logger.info(f"Outputs: {self.num_new} new (output dir not created)")
            return

        for dirpath, dirnames, filenames in os.walk(self.output_dir, onerror=_raise):
            dirnames.clear()
            for fname in [str(Path(dirpath) / x) for x in filenames]:
                if fname in self._files_made:
                    continue
                if self.is_possible_output(fname):
                    to_clean.append(fname)
                else:
                    suspicious.append(fname)
        to_clean.sort()

        self.logger.info(
            f"Outputs: {self.num_same} same, {self.num_changed} changed, "
            f"{self.num_new} new, {len(to_clean)} stale"
        )

        if not to_clean or not delete_others:
            return
        if suspicious:
            self.logger.warning(
                f"Found unexpected files in output dir ({len(suspicious)}), cleanup disabled: "
                f"{' '.join(map(shlex.quote, sorted(suspicious)[:10]))}"
            )
            return

        self.logger.info(f"Deleting {len(to_clean)} stale file(s)")
        for fname in to_clean:
            if self.dry_run:
                self.logger.info(f"dry-run: would remove {fname!r}")
            else:
                self.logger.debug(f"Removing file: {fname!r}")
                Path(fname).unlink()
            self.removed.append(fname)

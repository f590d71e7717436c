"""Protocols for dependency injection in the snippet library."""

from typing import Protocol, runtime_checkable

from zenhtml.models.curriculum import Curriculum
from zenhtml.models.snippet import ClassificationResult, Folder, Snippet


@runtime_checkable
class StorageProtocol(Protocol):
    """Protocol for library storage backends."""

    def load_snippets(self) -> list[Snippet]:
        """Return all saved snippets."""
        ...

    def save_snippets(self, snippets: list[Snippet]) -> None:
        """Replace the saved snippets, dropping ephemeral ones."""
        ...

    def load_folders(self) -> list[Folder]:
        """Return all saved folders."""
        ...

    def save_folders(self, folders: list[Folder]) -> None:
        """Replace the saved folders, dropping ephemeral ones."""
        ...

    def load_curriculums(self) -> list[Curriculum]:
        """Return all saved curriculums with their steps."""
        ...

    def save_curriculums(self, curriculums: list[Curriculum]) -> None:
        """Replace the saved curriculums."""
        ...

    def load_code(self) -> str:
        """Return the scratchpad document, or the starter document."""
        ...

    def save_code(self, code: str) -> None:
        """Store the scratchpad document."""
        ...


@runtime_checkable
class RemoteClassifierProtocol(Protocol):
    """Protocol for model-based snippet classifiers.

    Implementations may raise on any failure; callers fall back to the
    heuristic classifier.
    """

    def classify(self, code: str) -> ClassificationResult:
        """Classify a snippet's code."""
        ...


@runtime_checkable
class CodeImproverProtocol(Protocol):
    """Protocol for services that rewrite a snippet into a polished version."""

    def improve(self, code: str) -> str:
        """Return an improved version of the code."""
        ...

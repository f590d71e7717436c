"""Snippet library tools: analysis, classification, statistics and curriculums."""

from zenhtml.core.analysis.analyzer import analyze_code
from zenhtml.core.classify.heuristic import classify_by_heuristic
from zenhtml.core.classify.service import classify_all, classify_snippet
from zenhtml.core.stats.aggregator import compute_library_stats
from zenhtml.protocols import CodeImproverProtocol, RemoteClassifierProtocol, StorageProtocol
from zenhtml.storage.sqlite_backend import SqliteStorage, open_storage

__all__ = [
    "CodeImproverProtocol",
    "RemoteClassifierProtocol",
    "SqliteStorage",
    "StorageProtocol",
    "analyze_code",
    "classify_all",
    "classify_by_heuristic",
    "classify_snippet",
    "compute_library_stats",
    "open_storage",
]

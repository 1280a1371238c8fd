"""Data-quality diagnostics for bpax analyses."""

from .notes import DataQualityNote, NoteCollector, NoteSeverity, count_by_severity

__all__ = [
    "DataQualityNote",
    "NoteCollector",
    "NoteSeverity",
    "count_by_severity",
]
